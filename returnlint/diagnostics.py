# returnlint/diagnostics.py
"""
Diagnostic model and emitter.

:func:`emit` is a pure mapping from a flagged node plus message and
severity to a positioned :class:`Diagnostic`.  It does no filtering; the
evaluator decides what gets flagged.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from returnlint.ast_nodes import Node, Span


class Severity(Enum):
    """cppcheck-compatible severity classes used by the return linter."""
    STYLE = "style"
    WARNING = "warning"


# ── Error ids and messages ───────────────────────────────────────

EXPLICIT_RETURN_NOT_NEEDED = "explicitReturnNotNeeded"
PIPE_RETURN = "pipeReturn"
EXPLICIT_RETURN_MISSING = "explicitReturnMissing"
IMPLICIT_ELSE = "implicitElse"

MESSAGES: Dict[str, str] = {
    EXPLICIT_RETURN_NOT_NEEDED:
        "Use implicit return behavior; explicit return() is not needed.",
    PIPE_RETURN:
        "Avoid return() as the final step of a pipeline; "
        "use implicit return behavior instead.",
    EXPLICIT_RETURN_MISSING:
        "All functions must have an explicit return().",
    IMPLICIT_ELSE:
        "All functions with terminal if statements must have a "
        "corresponding terminal else clause.",
}

SEVERITIES: Dict[str, Severity] = {
    EXPLICIT_RETURN_NOT_NEEDED: Severity.STYLE,
    PIPE_RETURN: Severity.STYLE,
    EXPLICIT_RETURN_MISSING: Severity.WARNING,
    IMPLICIT_ELSE: Severity.WARNING,
}


@dataclass(frozen=True)
class Diagnostic:
    """
    A single lint finding.

    Attributes
    ----------
    span     : source span of the flagged node
    message  : human-readable description
    severity : Severity
    error_id : stable identifier (e.g. "implicitElse")
    file     : file the tree was loaded from, if known
    function : name of the enclosing function definition, if named
    """
    span: Span
    message: str
    severity: Severity
    error_id: str = ""
    file: str = ""
    function: Optional[str] = None

    @property
    def line(self) -> int:
        return self.span.line1

    @property
    def column(self) -> int:
        return self.span.col1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "line": self.span.line1,
            "column": self.span.col1,
            "end_line": self.span.line2,
            "end_column": self.span.col2,
            "severity": self.severity.value,
            "message": self.message,
            "errorId": self.error_id,
            "function": self.function,
        }

    def to_json_str(self) -> str:
        """Single-line JSON string."""
        return json.dumps(self.to_dict())

    def to_gcc_format(self) -> str:
        """GCC-style diagnostic string: file:line:col: severity: message."""
        loc = f"{self.file or '<string>'}:{self.span.line1}:{self.span.col1}"
        text = f"{loc}: {self.severity.value}: {self.message}"
        if self.error_id:
            text += f" [{self.error_id}]"
        return text


def emit(
    node: Node,
    message: str,
    severity: Severity,
    error_id: str = "",
    *,
    file: str = "",
    function: Optional[str] = None,
) -> Diagnostic:
    return Diagnostic(
        span=node.span,
        message=message,
        severity=severity,
        error_id=error_id,
        file=file,
        function=function,
    )


def emit_id(node: Node, error_id: str, **kwargs: Any) -> Diagnostic:
    """:func:`emit` with the stock message and severity of *error_id*."""
    return emit(node, MESSAGES[error_id], SEVERITIES[error_id], error_id, **kwargs)
