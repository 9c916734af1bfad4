# returnlint/evaluator.py
"""
Policy evaluation over terminal positions.

Two independent checks run on every terminal:

  * :func:`check_return_style` - implicit vs. explicit ``return()``;
  * :func:`check_implicit_else` - terminal ``if`` without ``else``.

Neither suppresses the other, so one terminal may produce zero, one or
two diagnostics.
"""

from __future__ import annotations

from typing import Any, Iterable, List

from returnlint.ast_nodes import Block, Conditional
from returnlint.diagnostics import (
    EXPLICIT_RETURN_MISSING,
    EXPLICIT_RETURN_NOT_NEEDED,
    IMPLICIT_ELSE,
    PIPE_RETURN,
    Diagnostic,
    emit_id,
)
from returnlint.pipes import callee_name, is_pipe_terminal, resolve_call_target
from returnlint.policy import Policy
from returnlint.terminals import Terminal


def check_return_style(
    terminal: Terminal, policy: Policy, **context: Any
) -> List[Diagnostic]:
    node = terminal.node
    # Branches of a conditional carry their own terminals.
    if isinstance(node, Conditional):
        return []

    target = resolve_call_target(node)
    name = callee_name(target)

    if policy.implicit:
        if isinstance(node, Block) or name != "return":
            return []
        error_id = PIPE_RETURN if is_pipe_terminal(node) else EXPLICIT_RETURN_NOT_NEEDED
        return [emit_id(target, error_id, **context)]

    if policy.is_return_function(name):
        return []
    return [emit_id(node, EXPLICIT_RETURN_MISSING, **context)]


def check_implicit_else(terminal: Terminal, **context: Any) -> List[Diagnostic]:
    node = terminal.node
    if (
        isinstance(node, Conditional)
        and not node.has_else
        and terminal.implicit_else_applicable
    ):
        return [emit_id(node, IMPLICIT_ELSE, **context)]
    return []


def evaluate(terminal: Terminal, policy: Policy, **context: Any) -> List[Diagnostic]:
    """All diagnostics for one terminal: style first, then implicit else.

    *context* (``file``, ``function``) is passed through to the emitter.
    """
    return (
        check_return_style(terminal, policy, **context)
        + check_implicit_else(terminal, **context)
    )


def evaluate_all(
    terminals: Iterable[Terminal], policy: Policy, **context: Any
) -> List[Diagnostic]:
    diagnostics: List[Diagnostic] = []
    for terminal in terminals:
        diagnostics.extend(evaluate(terminal, policy, **context))
    return diagnostics
