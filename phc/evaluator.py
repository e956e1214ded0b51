"""
PHC Evaluator
=============
Tree-walking numeric evaluator for the AST produced by the Parser.

Every operand and argument is evaluated eagerly, left to right, before
its operator or function is applied. Failures surface as PHCError
subclasses; only `is_true` turns a failure into False.
"""
from __future__ import annotations

import math
from typing import Iterator, Sequence

from .config import DEFAULT_CONFIG, EngineConfig
from .errors import (
    ArgumentCountError, DepthExceeded, DivisionByZero, DomainError,
    InternalError, PHCError, UndefinedVariable, UnknownFunction,
)
from .functions import FunctionRegistry, default_registry
from .parser import (
    ASTNode, BinaryOperator, BinaryOpNode, CallNode, IDENTIFIER_RE,
    LiteralNode, VariableNode,
)
from .reporter import NULL_REPORTER, Reporter


class Scope:
    """
    Variable bindings for one session.

    There is no default value: looking up an unbound name raises
    UndefinedVariable. The only way in is `assign`.
    """

    def __init__(self, bindings: dict[str, float] | None = None):
        self._values: dict[str, float] = {}
        for name, value in (bindings or {}).items():
            self.assign(name, value)

    def assign(self, name: str, value: float) -> None:
        if not IDENTIFIER_RE.fullmatch(name):
            raise ValueError(f"Invalid variable name: {name!r}")
        self._values[name] = float(value)

    def unassign(self, name: str) -> None:
        self._values.pop(name, None)

    def lookup(self, name: str) -> float:
        if name not in self._values:
            raise UndefinedVariable(name)
        return self._values[name]

    def names(self) -> list[str]:
        return list(self._values)

    def items(self) -> list[tuple[str, float]]:
        return list(self._values.items())

    def clear(self) -> None:
        self._values.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Scope({self._values!r})"


class Evaluator:
    """
    Numeric evaluator over PHC expression trees.

    Usage:
        evaluator = Evaluator()
        scope = Scope({"x": 2})
        value = evaluator.evaluate(parse("x ^ 2 + 1"), scope)

    The evaluator keeps no per-call state, so a kernel may call back into
    the same instance.
    """

    def __init__(self, registry: FunctionRegistry | None = None,
                 config: EngineConfig = DEFAULT_CONFIG,
                 reporter: Reporter | None = None):
        self.config = config
        self.registry = registry if registry is not None else default_registry(config)
        self.reporter = reporter or NULL_REPORTER

    def evaluate(self, node: ASTNode, scope: Scope) -> float:
        """Evaluate `node` against `scope`. Raises PHCError on failure."""
        try:
            return self._eval(node, scope, 1)
        except PHCError as e:
            self.reporter.error(f"Evaluation error at node [{describe_node(node)}]: {e}")
            raise

    def evaluate_function(self, name: str, args: Sequence[ASTNode],
                          scope: Scope | None = None) -> float:
        """Apply a registered function to argument subtrees."""
        scope = scope if scope is not None else Scope()
        return self._call(name, args, scope, 0)

    def is_true(self, node: ASTNode, scope: Scope) -> bool:
        """True when evaluation succeeds and |value| > truth_epsilon.

        Any evaluation failure yields False. Use `evaluate` to tell a
        false value apart from a failed one.
        """
        try:
            value = self._eval(node, scope, 1)
        except PHCError as e:
            self.reporter.warn(f"Evaluation failed: {e}")
            return False
        return abs(value) > self.config.truth_epsilon

    # ─────────────────────────────────────────────────────────
    #  Dispatch
    # ─────────────────────────────────────────────────────────

    def _eval(self, node: ASTNode, scope: Scope, depth: int) -> float:
        method = f"_eval_{getattr(node, 'node_type', '').lower()}"
        executor = getattr(self, method, None)
        if executor is None or not node.node_type:
            raise InternalError(f"Unsupported node structure: {describe_node(node)}")
        if depth > self.config.max_depth:
            raise DepthExceeded(self.config.max_depth)
        return executor(node, scope, depth)

    def _eval_literal(self, node: LiteralNode, scope: Scope, depth: int) -> float:
        return node.value

    def _eval_variable(self, node: VariableNode, scope: Scope, depth: int) -> float:
        return scope.lookup(node.name)

    def _eval_binaryop(self, node: BinaryOpNode, scope: Scope, depth: int) -> float:
        # Walk the left spine iteratively so long left-associative chains
        # like 1+1+...+1 do not count against max_depth. Operands are still
        # evaluated strictly left to right.
        chain = []
        while isinstance(node, BinaryOpNode):
            chain.append(node)
            node = node.left
        value = self._eval(node, scope, depth + 1)
        for op_node in reversed(chain):
            right = self._eval(op_node.right, scope, depth + 1)
            value = apply_operator(op_node.operator, value, right)
        return value

    def _eval_call(self, node: CallNode, scope: Scope, depth: int) -> float:
        return self._call(node.func_name, node.args, scope, depth)

    # ─────────────────────────────────────────────────────────
    #  Function Calls
    # ─────────────────────────────────────────────────────────

    def _call(self, name: str, args: Sequence[ASTNode], scope: Scope, depth: int) -> float:
        values = [self._eval(arg, scope, depth + 1) for arg in args]

        info = self.registry.get(name)
        if info is None:
            raise UnknownFunction(name)
        if len(values) < info.arity:
            raise ArgumentCountError(info.name, info.arity, len(values))
        if info.domain is not None and values and not info.domain(values[0]):
            raise DomainError(info.name, values[0], info.domain_message)

        try:
            return float(info.kernel(*values[:info.arity]))
        except PHCError:
            raise
        except (ValueError, OverflowError, ZeroDivisionError) as e:
            raise DomainError(info.name, values[0] if values else math.nan,
                              f"{info.name} failed: {e}") from e
        except Exception as e:
            raise InternalError(f"Function {info.name} raised {type(e).__name__}: {e}") from e


def describe_node(node: object) -> str:
    """Short label for diagnostics: the node type and its column, never the subtree."""
    node_type = getattr(node, "node_type", "") or type(node).__name__
    return f"{node_type} at column {getattr(node, 'col', 0)}"


def apply_operator(op: BinaryOperator, left: float, right: float) -> float:
    """Apply a binary operator to two evaluated operands.

    DIV by exactly zero raises DivisionByZero. POW is real-valued
    exponentiation: results outside the reals (negative base with a
    fractional exponent, zero to a negative power) and non-finite results
    (overflow, or an infinite operand) raise DomainError, so POW never
    yields NaN or infinity. ADD, SUB and MUL follow IEEE float arithmetic
    and may overflow to infinity.
    """
    match op:
        case BinaryOperator.ADD:
            return left + right
        case BinaryOperator.SUB:
            return left - right
        case BinaryOperator.MUL:
            return left * right
        case BinaryOperator.DIV:
            if right == 0:
                raise DivisionByZero()
            return left / right
        case BinaryOperator.POW:
            try:
                result = math.pow(left, right)
            except (ValueError, OverflowError) as e:
                raise DomainError("pow", left, f"pow domain error for {left!r} ^ {right!r}") from e
            if not math.isfinite(result):
                raise DomainError("pow", left, f"pow domain error for {left!r} ^ {right!r}")
            return result
        case _:
            raise InternalError(f"Unsupported operator: {op!r}")


# ─────────────────────────────────────────────────────────────
#  Module-Level Helpers
# ─────────────────────────────────────────────────────────────

_default_evaluator: Evaluator | None = None


def _get_default_evaluator() -> Evaluator:
    global _default_evaluator
    if _default_evaluator is None:
        _default_evaluator = Evaluator()
    return _default_evaluator


def evaluate(node: ASTNode, scope: Scope | None = None) -> float:
    """Evaluate with the default registry and config."""
    return _get_default_evaluator().evaluate(node, scope if scope is not None else Scope())


def evaluate_function(name: str, args: Sequence[ASTNode], scope: Scope | None = None) -> float:
    return _get_default_evaluator().evaluate_function(name, args, scope)


def is_true(node: ASTNode, scope: Scope | None = None) -> bool:
    return _get_default_evaluator().is_true(node, scope if scope is not None else Scope())


def assign(scope: Scope, name: str, value: float) -> None:
    """Bind `name` to `value` in `scope`."""
    scope.assign(name, value)
