# tests/test_parser.py
"""
Tests for the S-expression tree loader: text → tree nodes.
"""

import pytest

from returnlint.ast_nodes import (
    Block,
    Call,
    Conditional,
    Expr,
    Function,
    PipeStage,
    Span,
    walk,
)
from returnlint.errors import TreeLoadError
from returnlint.parser import parse_file, parse_tree, unparse
from tests.conftest import EXPLICIT_RETURN, IF_WITHOUT_ELSE, PIPE_RETURN_ASSIGNED


class TestLeaves:

    def test_symbol(self):
        assert parse_tree("x") == Expr(text="x")

    def test_number(self):
        assert parse_tree("42") == Expr(text="42")

    def test_string(self):
        assert parse_tree('"hello"') == Expr(text='"hello"')

    @pytest.mark.parametrize("token", ["Inf", "-Inf", "NaN"])
    def test_non_finite_numbers_keep_r_spelling(self, token):
        tree = parse_tree(f"(function () (block {token}))")
        assert tree.body.statements[0].text == token
        assert unparse(tree) == f"(function () (block {token}))"

    def test_non_finite_callee(self):
        assert parse_tree("(call Inf)").callee == "Inf"

    def test_r_constants_stay_symbols(self):
        assert parse_tree("NULL") == Expr(text="NULL")
        assert parse_tree("t") == Expr(text="t")


class TestForms:

    def test_block(self):
        tree = parse_tree("(block a (call f b))")
        assert isinstance(tree, Block)
        assert tree.statements == (Expr(text="a"), Call(callee="f", args=(Expr(text="b"),)))

    def test_comments_dropped(self):
        tree = parse_tree('(block (comment "first") a)')
        assert tree.statements == (Expr(text="a"),)

    def test_if_with_and_without_else(self):
        full = parse_tree("(if c 1 2)")
        assert isinstance(full, Conditional)
        assert full.has_else
        short = parse_tree("(if c 1)")
        assert not short.has_else
        assert short.then == Expr(text="1")

    def test_if_without_then_is_loadable(self):
        tree = parse_tree("(if c)")
        assert tree.then is None

    def test_pipe_default_operator(self):
        tree = parse_tree("(pipe x (call f))")
        assert isinstance(tree, PipeStage)
        assert tree.operator == "%>%"

    def test_native_pipe(self):
        tree = parse_tree('(pipe x (call f) "|>")')
        assert tree.operator == "|>"

    def test_unknown_pipe_operator(self):
        with pytest.raises(TreeLoadError):
            parse_tree('(pipe x (call f) "%<>%")')

    def test_function(self):
        tree = parse_tree("(function (x y) (block x))")
        assert isinstance(tree, Function)
        assert tree.params == ("x", "y")
        assert tree.name is None
        assert not tree.is_lambda

    def test_named_function_form(self):
        tree = parse_tree("(function helper () (block))")
        assert tree.name == "helper"

    def test_lambda(self):
        tree = parse_tree("(lambda (x) (expr + x 1))")
        assert tree.is_lambda
        assert tree.body.text == "+"

    def test_expr(self):
        tree = parse_tree("(expr + x 1)")
        assert tree == Expr(text="+", operands=(Expr(text="x"), Expr(text="1")))


class TestAssignment:

    @pytest.mark.parametrize("src", [
        "(<- f (function (x) (block x)))",
        "(= f (function (x) (block x)))",
        "(<<- f (function (x) (block x)))",
        "(-> (function (x) (block x)) f)",
    ])
    def test_assignment_names_function(self, src):
        tree = parse_tree(src)
        assert tree.is_assignment
        assert isinstance(tree.value, Function)
        assert tree.value.name == "f"
        assert tree.target == Expr(text="f")

    def test_quoted_target(self):
        tree = parse_tree('(<- ".onLoad" (function (lib pkg) (block)))')
        assert tree.value.name == ".onLoad"

    def test_lambda_assignment_named(self):
        tree = parse_tree("(<- sq (lambda (x) (expr ^ x 2)))")
        assert tree.value.name == "sq"

    def test_non_function_value(self):
        tree = parse_tree("(<- out (call f))")
        assert tree.value == Call(callee="f")


class TestSpans:

    def test_explicit_span(self):
        tree = parse_tree(EXPLICIT_RETURN)
        assert tree.span == Span(1, 1, 3, 1)
        assert tree.body.statements[0].span == Span(2, 3, 2, 15)

    def test_spans_are_inherited(self):
        tree = parse_tree(IF_WITHOUT_ELSE)
        cond = tree.body.statements[0]
        assert cond.then.span == cond.span

    def test_every_child_within_parent(self):
        for src in (EXPLICIT_RETURN, IF_WITHOUT_ELSE):
            for node in walk(parse_tree(src)):
                for child in node.children:
                    assert node.span.contains(child.span)

    def test_child_outside_parent_rejected(self):
        with pytest.raises(TreeLoadError):
            parse_tree("(at 1 1 1 10 (block (at 2 1 2 5 x)))")

    def test_inverted_span_rejected(self):
        with pytest.raises(TreeLoadError):
            parse_tree("(at 3 1 1 1 x)")


class TestErrors:

    def test_unknown_form(self):
        with pytest.raises(TreeLoadError) as exc:
            parse_tree("(while TRUE (block))")
        assert "while" in str(exc.value)

    def test_syntax_error(self):
        with pytest.raises(TreeLoadError):
            parse_tree("(block (call f)")

    def test_empty_list(self):
        with pytest.raises(TreeLoadError):
            parse_tree("()")

    @pytest.mark.parametrize("src", [
        "(if c 1 2 3)",
        "(function (x) (block 1) (call return x))",
        "(function f (x) (block 1) (call return x))",
    ])
    def test_wrong_arity(self, src):
        with pytest.raises(TreeLoadError):
            parse_tree(src)

    def test_filename_in_error(self):
        with pytest.raises(TreeLoadError) as exc:
            parse_tree("(nope)", filename="body.sexp")
        assert str(exc.value).startswith("body.sexp:")


class TestFiles:

    def test_parse_file(self, tmp_path):
        path = tmp_path / "pipeline.sexp"
        path.write_text(PIPE_RETURN_ASSIGNED, encoding="utf-8")
        tree = parse_file(path)
        assert tree.value.name == "pipeline"

    def test_missing_file(self, tmp_path):
        with pytest.raises(TreeLoadError):
            parse_file(tmp_path / "absent.sexp")


class TestUnparse:

    def test_roundtrip_without_spans(self):
        src = "(<- f (function (x) (block (if (expr > x 0) (call return x) NULL))))"
        assert unparse(parse_tree(src)) == src

    def test_roundtrip_with_spans(self):
        src = "(at 1 1 3 1 (function (x) (at 2 3 2 10 (block))))"
        assert unparse(parse_tree(src)) == src

    def test_reload_preserves_tree(self):
        tree = parse_tree(PIPE_RETURN_ASSIGNED)
        assert parse_tree(unparse(tree)) == tree
