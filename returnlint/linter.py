"""
returnlint/linter.py
════════════════════

Drives the return-style analysis over a whole tree.

Every ``function``/lambda definition found anywhere in the tree is
analyzed on its own: its body's terminal positions are enumerated by
:mod:`returnlint.terminals` and judged by :mod:`returnlint.evaluator`.
Definitions nested inside another definition are analyzed independently
of their parent, so exempting a function never exempts the functions it
defines.

Usage
-----
>>> linter = ReturnLinter(return_style="explicit")
>>> diags = linter.lint_text("(function (x) (block (expr + x 1)))")
>>> [d.error_id for d in diags]
['explicitReturnMissing']
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, ClassVar, FrozenSet, Iterator, List, Optional, Union

from returnlint.ast_nodes import Function, Node, walk
from returnlint.diagnostics import (
    EXPLICIT_RETURN_MISSING,
    EXPLICIT_RETURN_NOT_NEEDED,
    IMPLICIT_ELSE,
    PIPE_RETURN,
    Diagnostic,
    Severity,
)
from returnlint.evaluator import evaluate_all
from returnlint.parser import parse_file, parse_tree
from returnlint.policy import Policy
from returnlint.terminals import function_terminals

logger = logging.getLogger(__name__)


def iter_functions(tree: Optional[Node]) -> Iterator[Function]:
    """Yield every function/lambda definition in *tree*, in pre-order."""
    for node in walk(tree):
        if isinstance(node, Function):
            yield node


def lint_function(fn: Function, policy: Policy, *, file: str = "") -> List[Diagnostic]:
    """Diagnostics for one definition's own body."""
    terminals = function_terminals(fn, policy)
    diagnostics = evaluate_all(terminals, policy, file=file, function=fn.name)
    logger.debug(
        "%s at %s: %d terminal(s), %d diagnostic(s)",
        fn.name or "<anonymous>", fn.span, len(terminals), len(diagnostics),
    )
    return diagnostics


def lint_tree(tree: Optional[Node], policy: Policy, *, file: str = "") -> List[Diagnostic]:
    diagnostics: List[Diagnostic] = []
    count = 0
    for fn in iter_functions(tree):
        count += 1
        diagnostics.extend(lint_function(fn, policy, file=file))
    logger.info(
        "Checked %d function(s) in %s: %d diagnostic(s)",
        count, file or "<tree>", len(diagnostics),
    )
    return diagnostics


class ReturnLinter:
    """
    Checker façade for the return-style rule.

    Build it from a ready :class:`Policy` or from the configuration
    keywords accepted by :meth:`Policy.build`.
    """

    name: ClassVar[str] = "return_linter"
    description: ClassVar[str] = (
        "Checks that terminal expressions follow the configured return style"
    )
    error_ids: ClassVar[FrozenSet[str]] = frozenset({
        EXPLICIT_RETURN_NOT_NEEDED,
        PIPE_RETURN,
        EXPLICIT_RETURN_MISSING,
        IMPLICIT_ELSE,
    })
    default_severity: ClassVar[Severity] = Severity.WARNING

    def __init__(self, policy: Optional[Policy] = None, **config: Any) -> None:
        if policy is not None and config:
            raise TypeError("pass either a Policy or configuration keywords, not both")
        self.policy = policy if policy is not None else Policy.build(**config)

    def lint(self, tree: Optional[Node], file: str = "") -> List[Diagnostic]:
        return lint_tree(tree, self.policy, file=file)

    def lint_text(self, text: str, filename: str = "<string>") -> List[Diagnostic]:
        return self.lint(parse_tree(text, filename=filename), file=filename)

    def lint_file(self, path: Union[str, Path]) -> List[Diagnostic]:
        return self.lint(parse_file(path), file=str(path))

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} '{self.name}' {self.policy.style.value}>"
