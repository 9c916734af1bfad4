# returnlint/pipes.py
"""
Pipe-chain resolution.

A terminal statement such as ``x %>% f() %>% g()`` is a pipe expression,
not a call, but the value the function produces is the one computed by
the final stage ``g()``.  Policy checks must therefore look at that final
stage, never at an intermediate call of the chain.
"""

from __future__ import annotations

from typing import Optional

from returnlint.ast_nodes import Call, Expr, Node, PipeStage


def _pipe_operand(node: Node) -> Optional[PipeStage]:
    """The pipe chain *node* evaluates to, looking through one assignment."""
    if isinstance(node, PipeStage):
        return node
    if isinstance(node, Expr) and node.is_assignment:
        value = node.value
        if isinstance(value, PipeStage):
            return value
    return None


def final_stage(chain: PipeStage) -> Node:
    """Rightmost stage of a chain, whichever way it nests."""
    node: Node = chain
    while isinstance(node, PipeStage):
        node = node.rhs
    return node


def resolve_call_target(node: Node) -> Node:
    """Return the node whose callee decides the policy outcome for *node*."""
    chain = _pipe_operand(node)
    if chain is None:
        return node
    return final_stage(chain)


def is_pipe_terminal(node: Node) -> bool:
    return _pipe_operand(node) is not None


def callee_name(node: Optional[Node]) -> Optional[str]:
    if isinstance(node, Call):
        return node.callee
    return None
