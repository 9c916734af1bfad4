# tests/conftest.py
"""
Shared fixtures for returnlint tests: S-expression sources for the
function bodies used across test modules, plus small tree builders.
"""

import pytest

from returnlint.ast_nodes import Block, Call, Expr, Function, PipeStage, Span
from returnlint.policy import Policy


# ── Function bodies (S-expression tree syntax) ──────────────────

# function(x) { x + 1 }
IMPLICIT_VALUE = "(function (x) (block (expr + x 1)))"

# function(x) {
#   return(x + 1)
# }
EXPLICIT_RETURN = """
(at 1 1 3 1
  (function (x)
    (at 1 13 3 1
      (block
        (at 2 3 2 15 (call return (expr + x 1)))))))
"""

# function(x) { if (x > 0) 2 }
IF_WITHOUT_ELSE = """
(at 1 1 1 28
  (function (x)
    (at 1 13 1 28
      (block
        (at 1 15 1 26 (if (expr > x 0) 2))))))
"""

# function(x) { if (x > 0) 2 else NULL }
IF_WITH_ELSE = "(function (x) (block (if (expr > x 0) 2 NULL)))"

# function(x) { if (x > 0) return(2) }
IF_RETURN_WITHOUT_ELSE = "(function (x) (block (if (expr > x 0) (call return 2))))"

# pipeline <- function(x) {
#   out <- x %>%
#     filter(str > 5) %>%
#     summarize(str = sum(str)) %>%
#     return()
# }
PIPE_RETURN_ASSIGNED = """
(<- pipeline
  (function (x)
    (block
      (<- out
        (pipe
          (pipe
            (pipe x (call filter (expr > str 5)))
            (call summarize (expr = str (call sum str))))
          (at 5 5 5 12 (call return)))))))
"""

# pipeline <- function(x) {
#   x %>% filter(str > 5) %>% summarize(str = sum(str))
# }
PIPE_PLAIN = """
(<- pipeline
  (function (x)
    (block
      (pipe
        (pipe x (call filter (expr > str 5)))
        (call summarize (expr = str (call sum str)))))))
"""

# .onLoad <- function(lib, pkg) { 1 + 1 }
ON_LOAD_HOOK = "(<- .onLoad (function (lib pkg) (block (expr + 1 1))))"

# foo <- function() {
#   g <- function(y) { y * 2 }
#   g
# }
NESTED_IN_EXEMPT = """
(<- foo
  (function ()
    (block
      (<- g (function (y) (block (at 2 22 2 26 (expr * y 2)))))
      g)))
"""


@pytest.fixture
def implicit_policy():
    return Policy()


@pytest.fixture
def explicit_policy():
    return Policy.build(return_style="explicit")


@pytest.fixture
def strict_else_policy():
    return Policy.build(allow_implicit_else=False)


def make_pipe_chain(stages, final, right_nested=False):
    """``x %>% f0() %>% ... %>% f{stages-1}() %>% final``."""
    calls = [Call(callee=f"f{i}") for i in range(stages)] + [final]
    if right_nested:
        node = calls[-1]
        for call in reversed(calls[:-1]):
            node = PipeStage(lhs=call, rhs=node)
        return PipeStage(lhs=Expr(text="x"), rhs=node)
    node = Expr(text="x")
    for call in calls:
        node = PipeStage(lhs=node, rhs=call)
    return node


def make_function(*statements, name=None):
    return Function(params=("x",), body=Block(statements=statements), name=name)


FINAL_SPAN = Span(9, 5, 9, 12)
