"""returnlint - terminal return-style analysis for function bodies.

Given the syntax tree of a function body, returnlint finds every terminal
position (a point whose value can become the function's result) and checks
it against a return-style policy.

Submodules
----------
ast_nodes
    Tree model: ``Block``, ``Conditional``, ``Call``, ``PipeStage``,
    ``Expr``, ``Function`` and ``Span``.

terminals
    Terminal position finder and the ``except`` short-circuit.

pipes
    Resolution of pipe chains to their final stage.

policy
    ``Policy``, ``ReturnStyle``, fixed name sets and JSON configuration.

evaluator
    Return-style and implicit-else checks.

diagnostics
    ``Diagnostic`` records and the emitter.

parser
    S-expression tree loader (``sexpdata``).

linter
    ``ReturnLinter`` and whole-tree driving.

main
    CLI entry-point (``python -m returnlint``).

Usage
-----
Programmatic::

    from returnlint import ReturnLinter

    linter = ReturnLinter(return_style="explicit", allow_implicit_else=False)
    for diag in linter.lint_file("body.sexp"):
        print(diag.to_gcc_format())
"""

from __future__ import annotations

__version__: str = "0.1.0"

from returnlint.diagnostics import Diagnostic, Severity, emit
from returnlint.errors import PolicyError, ReturnLintError, TreeLoadError
from returnlint.linter import ReturnLinter, lint_function, lint_tree
from returnlint.policy import Policy, ReturnStyle, load_policy
from returnlint.terminals import Terminal, find_terminals

__all__: list[str] = [
    "__version__",
    "Diagnostic",
    "Policy",
    "PolicyError",
    "ReturnLintError",
    "ReturnLinter",
    "ReturnStyle",
    "Severity",
    "Terminal",
    "TreeLoadError",
    "emit",
    "find_terminals",
    "lint_function",
    "lint_tree",
    "load_policy",
]
