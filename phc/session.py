"""
PHC Session
===========
A command interpreter that owns one Scope and evaluates PHC input lines.

Commands:
    let x = 2 * 3      bind a variable (the `let` is optional)
    prop true -> false evaluate a proposition
    truth x - 6        truth predicate of an expression
    vars               current bindings
    funcs              registered function names
    <expression>       numeric evaluation
"""
from __future__ import annotations

import re
from typing import Any, Iterable

from .config import DEFAULT_CONFIG, EngineConfig
from .evaluator import Evaluator, Scope
from .functions import FunctionRegistry, default_registry
from .logic import PropositionEvaluator, parse_proposition
from .parser import ASTNode, format_number, parse
from .reporter import NULL_REPORTER, Reporter


ASSIGNMENT_RE = re.compile(r"^(?:let\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)$")


class Session:
    """
    One interactive PHC session.

    Usage:
        session = Session()
        session.execute("let x = 3")
        session.execute("x ^ 2")     # 9.0
    """

    def __init__(self, config: EngineConfig = DEFAULT_CONFIG,
                 registry: FunctionRegistry | None = None,
                 reporter: Reporter | None = None):
        self.config = config
        self.reporter = reporter or NULL_REPORTER
        self.registry = registry if registry is not None else default_registry(config)
        self.scope = Scope()
        self.evaluator = Evaluator(self.registry, config, self.reporter)
        self.logic = PropositionEvaluator(self.reporter, config.max_depth)

    # ─────────────────────────────────────────────────────────
    #  Core Operations
    # ─────────────────────────────────────────────────────────

    def parse(self, text: str) -> ASTNode:
        return parse(
            text, max_depth=self.config.max_depth,
            reporter=self.reporter, function_names=self.registry.names(),
        )

    def evaluate(self, text: str) -> float:
        return self.evaluator.evaluate(self.parse(text), self.scope)

    def assign(self, name: str, text: str) -> float:
        value = self.evaluate(text)
        self.scope.assign(name, value)
        self.reporter.info(f"Assigned variable {name} = {format_number(value)}")
        return value

    def is_true(self, text: str) -> bool:
        return self.evaluator.is_true(self.parse(text), self.scope)

    def evaluate_proposition(self, text: str) -> bool:
        return self.logic.evaluate(parse_proposition(text, self.config.max_depth))

    # ─────────────────────────────────────────────────────────
    #  Command Dispatch
    # ─────────────────────────────────────────────────────────

    def execute(self, line: str) -> Any:
        """Execute one command line and return its result (None for blanks)."""
        line = line.strip()
        if not line or line.startswith("#"):
            return None

        match = ASSIGNMENT_RE.match(line)
        if match:
            return self.assign(match.group(1), match.group(2))

        word, _, rest = line.partition(" ")
        command = word.lower()

        if command == "prop":
            result = self.evaluate_proposition(rest)
            self.reporter.success(f"Proposition evaluated: {format_value(result)}")
            return result

        if command == "truth":
            result = self.is_true(rest)
            self.reporter.success(f"Truth of {rest.strip()}: {format_value(result)}")
            return result

        if line.lower() == "vars":
            return dict(self.scope.items())

        if line.lower() == "funcs":
            return self.registry.names()

        value = self.evaluate(line)
        self.reporter.success(f"{line} = {format_number(value)}")
        return value

    def run_script(self, lines: Iterable[str]) -> list[Any]:
        """Execute lines in order, stopping at the first error."""
        results = []
        for line in lines:
            result = self.execute(line)
            if result is not None:
                results.append(result)
        return results

    def reset(self) -> None:
        self.scope.clear()


def format_value(value: Any) -> str:
    """Format a command result for display."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, dict):
        items = [f"{k} = {format_value(v)}" for k, v in value.items()]
        return ", ".join(items) if items else "(no bindings)"
    if isinstance(value, list):
        return ", ".join(format_value(v) for v in value)
    if value is None:
        return "∅"
    return str(value)
