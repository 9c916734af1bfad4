# returnlint/errors.py
"""
Error types for returnlint.

Lint findings are never exceptions; they are :class:`Diagnostic` records.
Exceptions are reserved for problems that stop a run before any tree is
analyzed:

  ReturnLintError (base)
  ├── PolicyError     - invalid return-style configuration
  └── TreeLoadError   - an S-expression tree that cannot be loaded
"""

from __future__ import annotations

from typing import Any, Optional


class ReturnLintError(Exception):
    """Base exception for all returnlint errors."""

    def __init__(self, message: str, hint: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


class PolicyError(ReturnLintError):
    """Raised when a policy configuration is rejected.

    ``key`` names the offending configuration entry, if any.
    """

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        value: Any = None,
        hint: str = "",
    ) -> None:
        super().__init__(message, hint=hint)
        self.key = key
        self.value = value


class TreeLoadError(ReturnLintError):
    """Raised when an S-expression cannot be mapped to a tree node."""

    def __init__(
        self,
        message: str,
        form: Any = None,
        filename: str = "<string>",
    ) -> None:
        super().__init__(message)
        self.form = form
        self.filename = filename

    def __str__(self) -> str:
        return f"{self.filename}: {self.message}"
