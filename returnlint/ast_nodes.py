# returnlint/ast_nodes.py
"""
Function-body syntax tree consumed by the return linter.

The tree is a closed set of frozen dataclasses.  Every node carries a
source span and exposes its ordered ``children`` so generic walks do not
need to know the node kinds.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple, Union


# ── Source Span ──────────────────────────────────────────────────

@dataclass(frozen=True)
class Span:
    """Start/end line and column of a node (1-based, inclusive)."""
    line1: int = 0
    col1: int = 0
    line2: int = 0
    col2: int = 0

    def contains(self, other: Span) -> bool:
        return (self.line1, self.col1) <= (other.line1, other.col1) and (
            other.line2, other.col2) <= (self.line2, self.col2)

    def __str__(self):
        return f"{self.line1}:{self.col1}-{self.line2}:{self.col2}"


# ── Enums ────────────────────────────────────────────────────────

class NodeKind(Enum):
    BLOCK = "block"
    CONDITIONAL = "conditional"
    CALL = "call"
    PIPE_STAGE = "pipe"
    FUNCTION = "function"
    OTHER = "expr"


ASSIGN_OPS = frozenset({"<-", "=", "<<-", "->", "->>"})
PIPE_OPS = frozenset({"%>%", "|>"})


# ── Nodes ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Block:
    """A braced sequence of statements, possibly empty."""
    statements: Tuple[Node, ...] = ()
    span: Span = field(default_factory=Span)

    kind = NodeKind.BLOCK

    @property
    def children(self) -> Tuple[Node, ...]:
        return self.statements

    @property
    def is_empty(self) -> bool:
        return not self.statements


@dataclass(frozen=True)
class Conditional:
    """``if (condition) then else orelse``; ``orelse`` is optional."""
    condition: Optional[Node] = None
    then: Optional[Node] = None
    orelse: Optional[Node] = None
    span: Span = field(default_factory=Span)

    kind = NodeKind.CONDITIONAL

    @property
    def children(self) -> Tuple[Node, ...]:
        return tuple(
            c for c in (self.condition, self.then, self.orelse) if c is not None
        )

    @property
    def has_else(self) -> bool:
        return self.orelse is not None


@dataclass(frozen=True)
class Call:
    callee: str
    args: Tuple[Node, ...] = ()
    span: Span = field(default_factory=Span)

    kind = NodeKind.CALL

    @property
    def children(self) -> Tuple[Node, ...]:
        return self.args


@dataclass(frozen=True)
class PipeStage:
    """``lhs %>% rhs``: the output of ``lhs`` feeds the call ``rhs``."""
    lhs: Node
    rhs: Node
    operator: str = "%>%"
    span: Span = field(default_factory=Span)

    kind = NodeKind.PIPE_STAGE

    @property
    def children(self) -> Tuple[Node, ...]:
        return (self.lhs, self.rhs)


@dataclass(frozen=True)
class Expr:
    """Any other expression: symbols, constants, operators, assignments.

    ``text`` is the symbol/constant spelling or the operator.
    """
    text: str = ""
    operands: Tuple[Node, ...] = ()
    span: Span = field(default_factory=Span)

    kind = NodeKind.OTHER

    @property
    def children(self) -> Tuple[Node, ...]:
        return self.operands

    @property
    def is_assignment(self) -> bool:
        return self.text in ASSIGN_OPS and len(self.operands) == 2

    @property
    def value(self) -> Optional[Node]:
        """Assigned value of an assignment (``x <- value`` / ``value -> x``)."""
        if not self.is_assignment:
            return None
        if self.text in ("->", "->>"):
            return self.operands[0]
        return self.operands[1]

    @property
    def target(self) -> Optional[Node]:
        if not self.is_assignment:
            return None
        if self.text in ("->", "->>"):
            return self.operands[1]
        return self.operands[0]


@dataclass(frozen=True)
class Function:
    """A ``function(...)`` or ``\\(...)`` definition.

    ``name`` is set when the definition is directly assigned to a symbol.
    """
    params: Tuple[str, ...] = ()
    body: Optional[Node] = None
    name: Optional[str] = None
    is_lambda: bool = False
    span: Span = field(default_factory=Span)

    kind = NodeKind.FUNCTION

    @property
    def children(self) -> Tuple[Node, ...]:
        return (self.body,) if self.body is not None else ()


Node = Union[Block, Conditional, Call, PipeStage, Expr, Function]

NODE_TYPES = (Block, Conditional, Call, PipeStage, Expr, Function)


def walk(node: Optional[Node]) -> Iterator[Node]:
    """Pre-order traversal of *node* and all of its descendants."""
    if node is None:
        return
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(getattr(current, "children", ())))
