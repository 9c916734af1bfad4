# tests/test_pipes.py
"""
Tests for pipe-chain resolution.
"""

import pytest

from returnlint.ast_nodes import Call, Expr, PipeStage
from returnlint.pipes import (
    callee_name,
    final_stage,
    is_pipe_terminal,
    resolve_call_target,
)
from tests.conftest import make_pipe_chain


class TestResolveCallTarget:

    def test_plain_call_resolves_to_itself(self):
        call = Call(callee="f")
        assert resolve_call_target(call) is call

    def test_non_call_resolves_to_itself(self):
        node = Expr(text="x")
        assert resolve_call_target(node) is node

    @pytest.mark.parametrize("stages", [0, 1, 4])
    @pytest.mark.parametrize("right_nested", [False, True])
    def test_chain_resolves_to_final_stage(self, stages, right_nested):
        final = Call(callee="summarize")
        chain = make_pipe_chain(stages, final, right_nested=right_nested)
        assert resolve_call_target(chain) is final

    def test_intermediate_return_is_not_the_target(self):
        # x %>% return() %>% f()
        chain = make_pipe_chain(0, Call(callee="return"))
        chain = PipeStage(lhs=chain, rhs=Call(callee="f"))
        assert callee_name(resolve_call_target(chain)) == "f"

    def test_assignment_of_chain(self):
        final = Call(callee="return")
        node = Expr(text="<-", operands=(Expr(text="out"), make_pipe_chain(2, final)))
        assert resolve_call_target(node) is final
        assert is_pipe_terminal(node)

    def test_right_assignment_of_chain(self):
        final = Call(callee="return")
        node = Expr(text="->", operands=(make_pipe_chain(1, final), Expr(text="out")))
        assert resolve_call_target(node) is final

    def test_assignment_of_call_is_not_resolved(self):
        node = Expr(text="<-", operands=(Expr(text="out"), Call(callee="f")))
        assert resolve_call_target(node) is node
        assert not is_pipe_terminal(node)

    def test_final_stage_need_not_be_a_call(self):
        stage = Expr(text="$", operands=(Expr(text="."), Expr(text="a")))
        chain = PipeStage(lhs=Expr(text="x"), rhs=stage)
        assert final_stage(chain) is stage
        assert callee_name(resolve_call_target(chain)) is None


class TestCalleeName:

    def test_call(self):
        assert callee_name(Call(callee="stop")) == "stop"

    def test_non_call(self):
        assert callee_name(Expr(text="return")) is None
        assert callee_name(None) is None
