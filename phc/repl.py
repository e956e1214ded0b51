"""
PHC REPL
========
Interactive Read-Eval-Print Loop for the PHC engine.
Type expressions, assignments and propositions and see them evaluate.
"""
from typing import Callable

from .config import DEFAULT_CONFIG, EngineConfig
from .errors import ParseError, PHCError
from .functions import describe_all
from .reporter import RecordingReporter
from .session import Session, format_value


BANNER = r"""
╔══════════════════════════════════════════════════════════════╗
║                                                              ║
║     Ω ─── PRIME HARMONICS CALCULUS ─── Ω                     ║
║                                                              ║
║     Symbolic expression and proposition engine               ║
║     Type 'help' for commands, 'funcs' for functions          ║
║     Type 'exit' or Ctrl+C to quit                            ║
║                                                              ║
╚══════════════════════════════════════════════════════════════╝
"""

HELP_TEXT = """
╔══════════════════════════════════════════════════════════════╗
║                      PHC COMMANDS                            ║
╠══════════════════════╦═══════════════════════════════════════╣
║ <expression>         ║ Evaluate: 2 + 3 * x, sqrt(x) ^ 2      ║
║ let x = <expression> ║ Bind a variable                       ║
║ truth <expression>   ║ Is |value| > epsilon (false on error) ║
║ prop <proposition>   ║ true -> (false or not false)          ║
║ vars                 ║ Show bindings                         ║
║ funcs                ║ Show registered functions             ║
║ log                  ║ Show diagnostic messages              ║
║ clear                ║ Drop bindings and messages            ║
║ exit                 ║ Quit                                  ║
╚══════════════════════╩═══════════════════════════════════════╝

Operators: +  -  *  /  ^   (all left-associative, ^ binds tightest)
"""


def run_repl(config: EngineConfig = DEFAULT_CONFIG,
             input_fn: Callable[[str], str] = input,
             output_fn: Callable[[str], None] = print) -> None:
    """Run the interactive PHC REPL until exit or end of input."""
    output_fn(BANNER)

    reporter = RecordingReporter()
    session = Session(config=config, reporter=reporter)

    while True:
        try:
            line = input_fn("  PHC> ")
        except (EOFError, KeyboardInterrupt):
            output_fn("\n  Ω Goodbye.")
            break

        line = line.strip()
        if not line:
            continue

        command = line.lower()

        if command in ("exit", "quit"):
            output_fn("  Ω Goodbye.")
            break

        if command == "help":
            output_fn(HELP_TEXT)
            continue

        if command == "funcs":
            output_fn(describe_all(session.registry))
            continue

        if command == "log":
            if reporter.entries:
                output_fn("  ─── Log ───")
                for level, message in reporter.entries:
                    output_fn(f"    [{level}] {message}")
            else:
                output_fn("  (no messages)")
            continue

        if command == "clear":
            session.reset()
            reporter.clear()
            output_fn("  ∅ State cleared.")
            continue

        try:
            result = session.execute(line)
            if result is not None:
                output_fn(f"  ⟹ {format_value(result)}")
        except ParseError as e:
            output_fn(f"  ⚠ Syntax Error: {e}")
        except PHCError as e:
            output_fn(f"  ⚠ {e.kind.name.replace('_', ' ').title()}: {e}")
        except ValueError as e:
            output_fn(f"  ⚠ Error: {e}")


if __name__ == "__main__":
    run_repl()
