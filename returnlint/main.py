#!/usr/bin/env python3
"""returnlint/main.py - CLI entry-point for the return linter.

Usage examples
--------------
    # Lint tree files with the default (implicit) return style
    python -m returnlint lint body.sexp

    # Require explicit return() and an else on every terminal if
    python -m returnlint lint body.sexp --return-style explicit --no-implicit-else

    # Read the policy from a JSON file, emit JSON lines
    python -m returnlint lint body.sexp --config returnlint.json --format json

    # Load a tree file and print it back (debugging aid)
    python -m returnlint parse body.sexp

Exit codes
----------
    0   Success, no diagnostics.
    1   One or more diagnostics were emitted.
    2   Infrastructure failure (bad configuration, unreadable or
        malformed tree file).
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence, TextIO

from returnlint import __version__
from returnlint.diagnostics import Diagnostic
from returnlint.errors import PolicyError, TreeLoadError
from returnlint.linter import ReturnLinter
from returnlint.parser import parse_file, unparse
from returnlint.policy import Policy, ReturnStyle, load_policy

_log = logging.getLogger("returnlint")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_LINTS: int = 1
EXIT_INFRA: int = 2


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Point the ``returnlint`` logger at stderr.

    Any handlers already attached to the logger are replaced, so calling
    :func:`main` repeatedly in one process never duplicates output.  Child
    loggers (``returnlint.linter`` and friends) propagate to it.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    _log.setLevel(level)
    _log.handlers[:] = [handler]


def _emit_diagnostics(
    diagnostics: List[Diagnostic],
    fmt: str,
    stream: TextIO,
) -> None:
    for diag in diagnostics:
        if fmt == "json":
            stream.write(diag.to_json_str() + "\n")
        else:
            stream.write(diag.to_gcc_format() + "\n")


def _policy_from_args(args: argparse.Namespace) -> Policy:
    """Config file first, command-line flags on top."""
    config: Dict[str, Any] = {}
    if args.config:
        config.update(load_policy(args.config).to_config())
    if args.return_style is not None:
        config["return_style"] = args.return_style
    if args.allow_implicit_else is not None:
        config["allow_implicit_else"] = args.allow_implicit_else
    if args.return_functions:
        config["return_functions"] = (
            list(config.get("return_functions", [])) + args.return_functions
        )
    if args.except_functions:
        config["except"] = list(config.get("except", [])) + args.except_functions
    return Policy.from_config(config)


# ===========================================================================
# Subcommands
# ===========================================================================

def cmd_lint(args: argparse.Namespace) -> int:
    try:
        policy = _policy_from_args(args)
    except PolicyError as exc:
        _log.error("Invalid configuration: %s", exc)
        return EXIT_INFRA

    linter = ReturnLinter(policy)
    _log.info("Linting %d file(s) with %r", len(args.files), linter)

    total = 0
    for path in args.files:
        try:
            diagnostics = linter.lint_file(path)
        except TreeLoadError as exc:
            _log.error("%s", exc)
            return EXIT_INFRA
        _emit_diagnostics(diagnostics, args.format, sys.stdout)
        total += len(diagnostics)

    return EXIT_LINTS if total else EXIT_OK


def cmd_parse(args: argparse.Namespace) -> int:
    try:
        tree = parse_file(args.file)
    except TreeLoadError as exc:
        _log.error("%s", exc)
        return EXIT_INFRA
    sys.stdout.write(unparse(tree) + "\n")
    return EXIT_OK


# ===========================================================================
# Argument parser
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="returnlint",
        description="Check terminal return style in function bodies.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug).",
    )
    subparsers = parser.add_subparsers(title="commands")

    # --- lint --------------------------------------------------------------
    p_lint = subparsers.add_parser(
        "lint",
        help="Lint S-expression tree files.",
    )
    p_lint.add_argument("files", metavar="FILE", nargs="+", help="Tree file(s).")
    p_lint.add_argument(
        "--config",
        metavar="JSON",
        default=None,
        help="JSON policy configuration file.",
    )
    p_lint.add_argument(
        "--return-style",
        choices=[s.value for s in ReturnStyle],
        default=None,
        help="Return style to enforce (default: implicit).",
    )
    p_lint.add_argument(
        "--no-implicit-else",
        dest="allow_implicit_else",
        action="store_false",
        default=None,
        help="Require an else clause on terminal if statements.",
    )
    p_lint.add_argument(
        "--return-function",
        dest="return_functions",
        action="append",
        default=[],
        metavar="NAME",
        help="Extra callee accepted as an explicit exit (repeatable).",
    )
    p_lint.add_argument(
        "--except",
        dest="except_functions",
        action="append",
        default=[],
        metavar="NAME",
        help="Function name that is never checked (repeatable).",
    )
    p_lint.add_argument(
        "-f", "--format",
        choices=["gcc", "json"],
        default="gcc",
        help="Diagnostic format (default: gcc).",
    )
    p_lint.set_defaults(func=cmd_lint)

    # --- parse -------------------------------------------------------------
    p_parse = subparsers.add_parser(
        "parse",
        help="Load a tree file and print it back.",
    )
    p_parse.add_argument("file", metavar="FILE", help="Tree file.")
    p_parse.set_defaults(func=cmd_parse)

    return parser


# ===========================================================================
# Main entry point
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the returnlint CLI and return its exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help(sys.stderr)
        return EXIT_INFRA

    try:
        return args.func(args)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
