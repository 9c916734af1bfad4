# returnlint/terminals.py
"""
Terminal position finder.

A terminal position is a node whose value can fall off the end of a
function and become its result:

  * the last statement of a block (an empty block is itself terminal);
  * each branch of a conditional in terminal position;
  * any other expression, call, pipe chain or function literal.

A conditional in terminal position without an ``else`` branch is recorded
as well, ahead of its branch terminals, because its missing branch
implicitly yields ``NULL``.  Enumeration order is pre-order.
"""

from __future__ import annotations

import logging
from typing import List, NamedTuple, Optional

from returnlint.ast_nodes import (
    Block,
    Call,
    Conditional,
    Expr,
    Function,
    Node,
    PipeStage,
)
from returnlint.policy import Policy

logger = logging.getLogger(__name__)


class Terminal(NamedTuple):
    """A terminal node plus whether the implicit-else check applies on its path."""
    node: Node
    implicit_else_applicable: bool


def find_terminals(
    node: Optional[Node],
    policy: Policy,
    implicit_else_applicable: Optional[bool] = None,
) -> List[Terminal]:
    """Enumerate the terminal positions of a function body *node*.

    Malformed input never raises: a missing node or an unknown node type
    contributes no terminals.
    """
    if implicit_else_applicable is None:
        implicit_else_applicable = not policy.allow_implicit_else
    out: List[Terminal] = []
    _collect(node, implicit_else_applicable, out)
    return out


def _collect(node: Optional[Node], check_else: bool, out: List[Terminal]) -> None:
    if node is None:
        return
    if isinstance(node, Block):
        if node.is_empty:
            out.append(Terminal(node, check_else))
        else:
            _collect(node.statements[-1], check_else, out)
    elif isinstance(node, Conditional):
        if not node.has_else:
            out.append(Terminal(node, check_else))
        if node.then is None:
            logger.debug("Conditional at %s has no 'then' branch", node.span)
        _collect(node.then, check_else, out)
        _collect(node.orelse, check_else, out)
    elif isinstance(node, (Call, PipeStage, Expr, Function)):
        out.append(Terminal(node, check_else))
    else:
        logger.debug("Skipping unknown node type %s", type(node).__name__)


def function_terminals(fn: Function, policy: Policy) -> List[Terminal]:
    """Terminal positions of one function definition's own body.

    Exempt functions (``except``) yield nothing when the policy consults
    the exemption set.  Functions nested in the body are not visited here.
    """
    if policy.checks_exemptions and policy.is_exempt(fn.name):
        logger.debug("Function %s is exempt; not checked", fn.name)
        return []
    if fn.body is None:
        logger.debug("Function %s has no body", fn.name or "<anonymous>")
        return []
    return find_terminals(fn.body, policy)
