"""
PHC CLI: Command-Line Interface for the PHC Engine
==================================================

Usage:
    # Evaluate an expression, optionally binding variables
    python -m phc eval "x ^ 2 + 1" --var x=3

    # Truth predicate of an expression
    python -m phc truth "x - 3" --var x=3

    # Evaluate a proposition
    python -m phc prop "true -> (false or not false)"

    # Run a script of commands, one per line
    python -m phc run session.phc

    # List registered functions
    python -m phc funcs

    # Interactive session
    python -m phc repl
"""

from __future__ import annotations

import argparse
import os
import sys

from .config import EngineConfig
from .errors import ParseError, PHCError
from .functions import default_registry, describe_all
from .reporter import ConsoleReporter, Reporter
from .repl import run_repl
from .session import Session, format_value


# ─────────────────────────────────────────────────────────────
#  Helpers
# ─────────────────────────────────────────────────────────────

def build_config(args) -> EngineConfig:
    """Environment defaults, overridden by --max-depth / --epsilon."""
    return EngineConfig.from_env().with_overrides(
        max_depth=getattr(args, "max_depth", None),
        truth_epsilon=getattr(args, "epsilon", None),
    )


def build_reporter(args) -> Reporter | None:
    if getattr(args, "verbose", False):
        return ConsoleReporter(output_fn=lambda s: print(s, file=sys.stderr), min_level="DEBUG")
    return None


def build_session(args) -> Session:
    session = Session(config=build_config(args), reporter=build_reporter(args))
    for binding in getattr(args, "var", None) or []:
        name, sep, value = binding.partition("=")
        if not sep:
            raise ValueError(f"Expected NAME=VALUE, got {binding!r}")
        try:
            session.scope.assign(name.strip(), float(value))
        except ValueError:
            # Not a plain number; evaluate it as an expression
            session.assign(name.strip(), value)
    return session


def report_error(error: Exception) -> int:
    if isinstance(error, ParseError):
        print(f"⚠ Syntax Error: {error}")
    elif isinstance(error, PHCError):
        print(f"⚠ {error.kind.name}: {error}")
    else:
        print(f"⚠ Error: {type(error).__name__}: {error}")
    return 1


# ─────────────────────────────────────────────────────────────
#  Commands
# ─────────────────────────────────────────────────────────────

def cmd_eval(args) -> int:
    """Evaluate one expression."""
    try:
        session = build_session(args)
        print(format_value(session.evaluate(args.expression)))
    except (PHCError, ValueError) as e:
        return report_error(e)
    return 0


def cmd_truth(args) -> int:
    """Print the truth value of an expression. Never fails on evaluation errors."""
    try:
        session = build_session(args)
        print(format_value(session.is_true(args.expression)))
    except (PHCError, ValueError) as e:
        return report_error(e)
    return 0


def cmd_prop(args) -> int:
    """Evaluate one proposition."""
    try:
        session = build_session(args)
        print(format_value(session.evaluate_proposition(args.proposition)))
    except (PHCError, ValueError) as e:
        return report_error(e)
    return 0


def cmd_run(args) -> int:
    """Execute a script of session commands, stopping at the first error."""
    if not os.path.exists(args.file):
        print(f"Error: File not found: {args.file}")
        return 1

    with open(args.file, "r", encoding="utf-8") as f:
        lines = f.read().splitlines()

    try:
        session = build_session(args)
        for number, line in enumerate(lines, start=1):
            try:
                result = session.execute(line)
            except (PHCError, ValueError) as e:
                print(f"L{number}: {line.strip()}")
                return report_error(e)
            if result is not None:
                print(f"⟹ {format_value(result)}")
    except (PHCError, ValueError) as e:
        return report_error(e)
    return 0


def cmd_funcs(args) -> int:
    """Print the function table."""
    try:
        registry = default_registry(build_config(args))
    except ValueError as e:
        return report_error(e)
    print(describe_all(registry))
    return 0


def cmd_repl(args) -> int:
    """Start the interactive REPL."""
    try:
        config = build_config(args)
    except ValueError as e:
        return report_error(e)
    run_repl(config=config)
    return 0


# ─────────────────────────────────────────────────────────────
#  Entry Point
# ─────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="phc",
        description="PHC: symbolic expression and proposition engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  phc eval \"2 + 3 * 4\"\n"
            "  phc eval \"sqrt(x) ^ 2\" --var x=9\n"
            "  phc prop \"true -> false\"\n"
            "  phc run session.phc\n"
        ),
    )
    parser.add_argument("--max-depth", type=int, default=None,
                        help="Maximum nesting depth (default: 100 or $PHC_MAX_DEPTH)")
    parser.add_argument("--epsilon", type=float, default=None,
                        help="Truth threshold for |value| (default: 1e-9 or $PHC_TRUTH_EPSILON)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Print diagnostic messages to stderr")

    subparsers = parser.add_subparsers(dest="command")

    p_eval = subparsers.add_parser("eval", help="Evaluate an expression")
    p_eval.add_argument("expression", help="Expression text, e.g. \"2 * sin(x)\"")
    p_eval.add_argument("--var", action="append", metavar="NAME=VALUE",
                        help="Bind a variable (repeatable)")

    p_truth = subparsers.add_parser("truth", help="Truth value of an expression")
    p_truth.add_argument("expression", help="Expression text")
    p_truth.add_argument("--var", action="append", metavar="NAME=VALUE",
                         help="Bind a variable (repeatable)")

    p_prop = subparsers.add_parser("prop", help="Evaluate a proposition")
    p_prop.add_argument("proposition", help="Proposition text, e.g. \"true and not false\"")

    p_run = subparsers.add_parser("run", help="Run a script of commands")
    p_run.add_argument("file", help="Path to the script")
    p_run.add_argument("--var", action="append", metavar="NAME=VALUE",
                       help="Bind a variable before running (repeatable)")

    subparsers.add_parser("funcs", help="List registered functions")
    subparsers.add_parser("repl", help="Start an interactive session")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    commands = {
        "eval": cmd_eval,
        "truth": cmd_truth,
        "prop": cmd_prop,
        "run": cmd_run,
        "funcs": cmd_funcs,
        "repl": cmd_repl,
    }

    if args.command in commands:
        return commands[args.command](args)
    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
