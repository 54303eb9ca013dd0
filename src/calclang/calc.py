"""calc: evaluate calclang statements from the command line, a file, or a REPL."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from termcolor import colored

from .errors import CalcError
from .evaluator import DEFAULT_RECURSION_LIMIT, Evaluator, format_result
from .repl import ERROR_COLOR, Shell
from .session import CACHE_POLICIES

VERBOSE = False
COLOR = True


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description=(
            "Arithmetic expressions with constants and pattern-matched functions"
        )
    )
    ap.add_argument(
        "input",
        type=Path,
        nargs="?",
        help="File of statements, one per line (default: interactive shell)",
    )
    ap.add_argument(
        "-e",
        "--eval",
        dest="statements",
        action="append",
        default=[],
        metavar="STATEMENT",
        help="Evaluate STATEMENT and exit (repeatable, evaluated in order)",
    )
    ap.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    ap.add_argument(
        "--no-defaults",
        action="store_true",
        help="Start without the default builtin functions and constants",
    )
    ap.add_argument(
        "--cache-policy",
        choices=CACHE_POLICIES,
        default="session",
        help="'session' keeps call results forever; 'redefine' drops a "
        "function's results when a clause is added to it (default: session)",
    )
    ap.add_argument(
        "--recursion-limit",
        type=int,
        default=DEFAULT_RECURSION_LIMIT,
        metavar="N",
        help=f"Interpreter stack limit while a statement runs "
        f"(default: {DEFAULT_RECURSION_LIMIT})",
    )
    ap.add_argument(
        "--verbose",
        action="store_true",
        help="Print progress steps",
    )
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    global VERBOSE, COLOR
    args = build_arg_parser().parse_args(argv)
    VERBOSE = args.verbose
    COLOR = not args.no_color

    options = dict(
        cache_policy=args.cache_policy, recursion_limit=args.recursion_limit
    )
    if args.no_defaults:
        evaluator = Evaluator(builtins={}, constants={}, **options)
    else:
        evaluator = Evaluator(**options)
    log_step(f"session started (cache policy: {args.cache_policy})")

    if args.statements:
        return run_statements(evaluator, args.statements)

    if args.input is not None:
        try:
            src = args.input.read_text(encoding="utf-8")
        except FileNotFoundError:
            log_error(f"file not found: {args.input}")
            return 1
        log_step(f"running {args.input}")
        lines = [ln for ln in src.splitlines() if ln.strip()]
        return run_statements(evaluator, lines)

    log_step("starting shell")
    Shell(evaluator, color=COLOR).cmdloop()
    return 0


def run_statements(evaluator: Evaluator, statements: Iterable[str]) -> int:
    for text in statements:
        log_step(f"statement {evaluator.statement_count + 1}: {text.strip()}")
        try:
            result = evaluator.feed_statement(text)
        except CalcError as e:
            log_error(str(e))
            return 1
        print(format_result(result))
    return 0


def log_step(msg: str) -> None:
    if VERBOSE:
        print(f"[calc] {msg}...")


def log_error(msg: str) -> None:
    line = f"[calc:error] {msg}"
    print(colored(line, ERROR_COLOR) if COLOR else line, file=sys.stderr)


if __name__ == "__main__":
    raise SystemExit(main())
