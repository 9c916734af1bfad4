"""returnlint/parser.py – S-expression → function-body tree loader.

Converts the output of ``sexpdata.loads`` into the node dataclasses of
:mod:`returnlint.ast_nodes`.  This is a serialization of already-parsed
trees (fixtures, dumps from an external R parser), not a parser of R
source text.

Design principles
-----------------
* **Head-symbol dispatch** – every list ``(tag ...)`` is dispatched on
  ``tag`` to a dedicated ``_parse_<tag>`` helper.
* **Spans are inherited** – a form without an ``(at ...)`` wrapper takes
  the span of its nearest enclosing ``at``, so every child span is
  contained in its parent's span.
* **Fail-fast** – unknown forms raise :class:`TreeLoadError` carrying the
  offending form.

Surface syntax
--------------
::

    (block <stmt> ...)                  ;; (comment "...") is dropped
    (if <cond> <then> [<else>])
    (call <name> <arg> ...)
    (pipe <lhs> <rhs> ["|>"])
    (function [<name>] (<param> ...) <body>)
    (lambda (<param> ...) <body>)
    (<- <name> <value>)                 ;; also = <<- -> ->>
    (expr <text> <operand> ...)
    (at <line1> <col1> <line2> <col2> <form>)
    <symbol> | <number> | "<string>"    ;; leaf expression
"""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import sexpdata
from sexpdata import Symbol

from returnlint.ast_nodes import (
    ASSIGN_OPS,
    PIPE_OPS,
    Block,
    Call,
    Conditional,
    Expr,
    Function,
    Node,
    PipeStage,
    Span,
)
from returnlint.errors import TreeLoadError

logger = logging.getLogger(__name__)

# Type alias for raw sexpdata output
Sexp = Any


@dataclass(frozen=True)
class _Context:
    filename: str = "<string>"
    span: Span = dataclasses.field(default_factory=Span)
    explicit: bool = False

    def error(self, message: str, form: Sexp = None) -> TreeLoadError:
        return TreeLoadError(message, form=form, filename=self.filename)


# ═══════════════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════════════

def _is_symbol(s: Sexp) -> bool:
    return isinstance(s, Symbol)


def _sym_name(s: Sexp, ctx: _Context) -> str:
    if _is_symbol(s):
        return str(s)
    raise ctx.error(f"Expected symbol, got {type(s).__name__}: {s!r}", s)


def _number_text(value: float) -> str:
    """R spelling of a number; sexpdata reads Inf and NaN as floats."""
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "NaN"
        return "Inf" if value > 0 else "-Inf"
    return repr(value)


def _as_name(s: Sexp, ctx: _Context) -> str:
    """Accept a symbol or a string literal as a name."""
    if _is_symbol(s) or isinstance(s, str):
        return str(s)
    if isinstance(s, float) and not math.isfinite(s):
        return _number_text(s)
    raise ctx.error(f"Expected name, got {type(s).__name__}: {s!r}", s)


def _as_int(s: Sexp, ctx: _Context) -> int:
    if isinstance(s, int) and not isinstance(s, bool):
        return s
    raise ctx.error(f"Expected integer, got {type(s).__name__}: {s!r}", s)


def _expect_len(s: list, ctx: _Context, low: int, high: Optional[int] = None) -> None:
    n = len(s) - 1
    if n < low or (high is not None and n > high):
        if high is None:
            bound = f"at least {low}"
        elif high == low:
            bound = f"{low}"
        else:
            bound = f"{low} to {high}"
        raise ctx.error(
            f"({_sym_name(s[0], ctx)} ...) takes {bound} argument(s), got {n}", s
        )


def _is_comment(s: Sexp) -> bool:
    return isinstance(s, list) and bool(s) and _is_symbol(s[0]) and str(s[0]) == "comment"


# ═══════════════════════════════════════════════════════════════════════
#  Dispatch registry
# ═══════════════════════════════════════════════════════════════════════

_DISPATCH: Dict[str, Callable[[list, _Context], Node]] = {}


def _register(*tags: str):
    """Decorator: register a form parser under each of *tags*."""
    def deco(fn):
        for tag in tags:
            _DISPATCH[tag] = fn
        return fn
    return deco


def parse_node(s: Sexp, ctx: Optional[_Context] = None) -> Node:
    """Parse one node from a raw S-expression."""
    ctx = ctx or _Context()
    if isinstance(s, list):
        if not s:
            raise ctx.error("Unexpected empty list", s)
        tag = _sym_name(s[0], ctx)
        parser = _DISPATCH.get(tag)
        if parser is None:
            raise ctx.error(f"Unknown form: ({tag} ...)", s)
        return parser(s, ctx)
    if _is_symbol(s):
        return Expr(text=str(s), span=ctx.span)
    if isinstance(s, str):
        return Expr(text=f'"{s}"', span=ctx.span)
    if isinstance(s, (int, float)) and not isinstance(s, bool):
        return Expr(text=_number_text(s), span=ctx.span)
    raise ctx.error(f"Cannot load {type(s).__name__}: {s!r}", s)


def _parse_optional(s: list, index: int, ctx: _Context) -> Optional[Node]:
    return parse_node(s[index], ctx) if len(s) > index else None


@_register("at")
def _parse_at(s: list, ctx: _Context) -> Node:
    _expect_len(s, ctx, 5, 5)
    line1, col1, line2, col2 = (_as_int(v, ctx) for v in s[1:5])
    span = Span(line1, col1, line2, col2)
    if (line2, col2) < (line1, col1):
        raise ctx.error(f"Span ends before it starts: {span}", s)
    if ctx.explicit and not ctx.span.contains(span):
        raise ctx.error(f"Span {span} is not contained in parent span {ctx.span}", s)
    return parse_node(s[5], dataclasses.replace(ctx, span=span, explicit=True))


@_register("block")
def _parse_block(s: list, ctx: _Context) -> Block:
    statements = tuple(parse_node(c, ctx) for c in s[1:] if not _is_comment(c))
    return Block(statements=statements, span=ctx.span)


@_register("if")
def _parse_if(s: list, ctx: _Context) -> Conditional:
    # (if <cond>) is accepted so malformed trees can be represented.
    _expect_len(s, ctx, 1, 3)
    return Conditional(
        condition=parse_node(s[1], ctx),
        then=_parse_optional(s, 2, ctx),
        orelse=_parse_optional(s, 3, ctx),
        span=ctx.span,
    )


@_register("call")
def _parse_call(s: list, ctx: _Context) -> Call:
    _expect_len(s, ctx, 1)
    callee = _as_name(s[1], ctx)
    args = tuple(parse_node(a, ctx) for a in s[2:])
    return Call(callee=callee, args=args, span=ctx.span)


@_register("pipe")
def _parse_pipe(s: list, ctx: _Context) -> PipeStage:
    _expect_len(s, ctx, 2, 3)
    operator = _as_name(s[3], ctx) if len(s) > 3 else "%>%"
    if operator not in PIPE_OPS:
        raise ctx.error(f"Unknown pipe operator: {operator!r}", s)
    return PipeStage(
        lhs=parse_node(s[1], ctx),
        rhs=parse_node(s[2], ctx),
        operator=operator,
        span=ctx.span,
    )


def _parse_params(s: Sexp, ctx: _Context) -> tuple:
    if not isinstance(s, list):
        raise ctx.error(f"Expected parameter list, got {s!r}", s)
    return tuple(_as_name(p, ctx) for p in s)


@_register("function")
def _parse_function(s: list, ctx: _Context) -> Function:
    _expect_len(s, ctx, 1, 3)
    rest = s[1:]
    name: Optional[str] = None
    if rest and not isinstance(rest[0], list):
        name = _as_name(rest[0], ctx)
        rest = rest[1:]
    if not rest:
        raise ctx.error("(function ...) requires a parameter list", s)
    if len(rest) > 2:
        raise ctx.error(
            f"(function ...) takes one body form, got {len(rest) - 1}", s
        )
    return Function(
        params=_parse_params(rest[0], ctx),
        body=parse_node(rest[1], ctx) if len(rest) > 1 else None,
        name=name,
        span=ctx.span,
    )


@_register("lambda")
def _parse_lambda(s: list, ctx: _Context) -> Function:
    _expect_len(s, ctx, 1, 2)
    return Function(
        params=_parse_params(s[1], ctx),
        body=_parse_optional(s, 2, ctx),
        is_lambda=True,
        span=ctx.span,
    )


@_register(*sorted(ASSIGN_OPS))
def _parse_assign(s: list, ctx: _Context) -> Expr:
    _expect_len(s, ctx, 2, 2)
    op = _sym_name(s[0], ctx)
    left = parse_node(s[1], ctx)
    right = parse_node(s[2], ctx)
    node = Expr(text=op, operands=(left, right), span=ctx.span)
    target, value = node.target, node.value
    if isinstance(value, Function) and value.name is None and isinstance(target, Expr) \
            and not target.operands:
        named = dataclasses.replace(value, name=target.text.strip('"`'))
        operands = (left, named) if value is right else (named, right)
        node = dataclasses.replace(node, operands=operands)
    return node


@_register("expr")
def _parse_expr(s: list, ctx: _Context) -> Expr:
    _expect_len(s, ctx, 1)
    return Expr(
        text=_as_name(s[1], ctx),
        operands=tuple(parse_node(o, ctx) for o in s[2:]),
        span=ctx.span,
    )


# ═══════════════════════════════════════════════════════════════════════
#  Public API
# ═══════════════════════════════════════════════════════════════════════

def parse_tree(text: str, *, filename: str = "<string>") -> Node:
    """Load a tree from its S-expression text.

    Raises
    ------
    TreeLoadError
        If the text is not a single well-formed S-expression or contains
        unrecognized forms.

    Example
    -------
    >>> tree = parse_tree('(<- f (function (x) (block (call return x))))')
    >>> tree.value.name
    'f'
    """
    ctx = _Context(filename=filename)
    # Keep nil/t/false as plain symbols: they are R symbols here.
    try:
        raw = sexpdata.loads(text, nil=None, true=None, false=None)
    except Exception as e:
        raise ctx.error(f"S-expression syntax error: {e}")
    tree = parse_node(raw, ctx)
    logger.debug("Loaded tree from %s", filename)
    return tree


def parse_file(path: Union[str, Path]) -> Node:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise TreeLoadError(f"Cannot read tree file: {e}", filename=str(p))
    return parse_tree(text, filename=str(p))


# ═══════════════════════════════════════════════════════════════════════
#  Roundtrip support: tree → S-expression string
# ═══════════════════════════════════════════════════════════════════════

def _quote(name: str) -> str:
    if not name or any(ch in name for ch in ' ()"\'[];'):
        return '"' + name.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return name


def unparse(node: Optional[Node], parent_span: Optional[Span] = None) -> str:
    """Write *node* back out in the loader's surface syntax."""
    if node is None:
        return ""
    body = _unparse_form(node)
    if node.span != (parent_span or Span()):
        s = node.span
        return f"(at {s.line1} {s.col1} {s.line2} {s.col2} {body})"
    return body


def _unparse_form(node: Node) -> str:
    def sub(child: Optional[Node]) -> str:
        return unparse(child, node.span)

    if isinstance(node, Block):
        return " ".join(["(block"] + [sub(c) for c in node.statements]) + ")"
    elif isinstance(node, Conditional):
        parts: List[str] = ["(if", sub(node.condition) or "TRUE"]
        if node.then is not None:
            parts.append(sub(node.then))
            if node.orelse is not None:
                parts.append(sub(node.orelse))
        return " ".join(parts) + ")"
    elif isinstance(node, Call):
        return " ".join(["(call", _quote(node.callee)] + [sub(a) for a in node.args]) + ")"
    elif isinstance(node, PipeStage):
        op = "" if node.operator == "%>%" else f' "{node.operator}"'
        return f"(pipe {sub(node.lhs)} {sub(node.rhs)}{op})"
    elif isinstance(node, Function):
        params = " ".join(_quote(p) for p in node.params)
        if node.is_lambda:
            head = "(lambda"
        elif node.name is not None:
            head = f"(function {_quote(node.name)}"
        else:
            head = "(function"
        body = f" {sub(node.body)}" if node.body is not None else ""
        return f"{head} ({params}){body})"
    elif isinstance(node, Expr):
        if node.is_assignment:
            # The assigned function's name comes back from the target.
            operands = [
                sub(dataclasses.replace(o, name=None)) if isinstance(o, Function)
                else sub(o)
                for o in node.operands
            ]
            return f"({node.text} {' '.join(operands)})"
        if node.operands:
            return " ".join(
                ["(expr", _quote(node.text)] + [sub(o) for o in node.operands]
            ) + ")"
        if node.text.startswith('"'):
            return node.text
        return _quote(node.text)
    raise TypeError(f"Cannot unparse {type(node).__name__}")
