"""
PHC Evaluator Tests
===================
Numeric evaluation, scopes, function calls, failure kinds and the truth
predicate.

Usage:
    python -m unittest tests.test_evaluator -v
"""
import sys
import os
import math
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from phc.config import EngineConfig
from phc.errors import (
    ArgumentCountError, DepthExceeded, DivisionByZero, DomainError, ErrorKind,
    InternalError, UndefinedVariable, UnknownFunction,
)
from phc.evaluator import (
    Evaluator, Scope, apply_operator, assign, evaluate, evaluate_function, is_true,
)
from phc.functions import FunctionRegistry, default_registry
from phc.parser import (
    ASTNode, BinaryOperator, BinaryOpNode, CallNode, LiteralNode, VariableNode, parse,
)
from phc.reporter import RecordingReporter


def run(text, **bindings):
    return Evaluator().evaluate(parse(text), Scope(bindings))


# ─────────────────────────────────────────────
#  Arithmetic
# ─────────────────────────────────────────────

class TestArithmetic(unittest.TestCase):

    def test_precedence(self):
        self.assertEqual(run("2+3*4"), 14.0)
        self.assertEqual(run("(2+3)*4"), 20.0)

    def test_power_is_left_associative(self):
        self.assertEqual(run("2^3^2"), 64.0)
        self.assertEqual(run("2*3^2"), 18.0)

    def test_division(self):
        self.assertEqual(run("5/2"), 2.5)

    def test_subtraction_is_left_associative(self):
        self.assertEqual(run("8-3-2"), 3.0)
        self.assertEqual(run("8/2/2"), 2.0)

    def test_result_is_float(self):
        self.assertIsInstance(run("1+1"), float)

    def test_long_chain(self):
        """Flat left-associative chains do not count as nesting."""
        self.assertEqual(run("+".join(["1"] * 500)), 500.0)

    def test_apply_operator(self):
        self.assertEqual(apply_operator(BinaryOperator.SUB, 1.0, 3.0), -2.0)
        self.assertEqual(apply_operator(BinaryOperator.POW, 9.0, 0.5), 3.0)


# ─────────────────────────────────────────────
#  Variables
# ─────────────────────────────────────────────

class TestVariables(unittest.TestCase):

    def test_bound_variable(self):
        self.assertEqual(run("x * 3 + 2", x=4), 14.0)

    def test_undefined_variable(self):
        with self.assertRaises(UndefinedVariable) as ctx:
            run("y + 1")
        self.assertEqual(ctx.exception.name, "y")
        self.assertEqual(ctx.exception.kind, ErrorKind.UNDEFINED_VARIABLE)
        self.assertIn("Undefined variable: y", str(ctx.exception))

    def test_no_implicit_zero(self):
        with self.assertRaises(UndefinedVariable):
            run("0 * y")

    def test_scope(self):
        scope = Scope()
        assign(scope, "x", 2)
        self.assertIn("x", scope)
        self.assertEqual(scope.lookup("x"), 2.0)
        assign(scope, "x", 5)
        self.assertEqual(scope.lookup("x"), 5.0)
        self.assertEqual(len(scope), 1)
        scope.unassign("x")
        self.assertNotIn("x", scope)
        scope.unassign("missing")

    def test_scope_rejects_bad_names(self):
        with self.assertRaises(ValueError):
            Scope().assign("2x", 1)

    def test_scope_items_and_clear(self):
        scope = Scope({"a": 1, "b": 2})
        self.assertEqual(scope.items(), [("a", 1.0), ("b", 2.0)])
        self.assertEqual(list(scope), ["a", "b"])
        scope.clear()
        self.assertEqual(scope.names(), [])


# ─────────────────────────────────────────────
#  Failure Kinds
# ─────────────────────────────────────────────

class TestArithmeticFailures(unittest.TestCase):

    def test_division_by_zero(self):
        for text in ("1/0", "1/(2-2)"):
            with self.assertRaises(DivisionByZero) as ctx:
                run(text)
            self.assertEqual(ctx.exception.kind, ErrorKind.DIVISION_BY_ZERO)

    def test_built_division_node(self):
        node = BinaryOpNode(BinaryOperator.DIV, VariableNode("a"), LiteralNode(0))
        with self.assertRaises(DivisionByZero):
            Evaluator().evaluate(node, Scope({"a": 5}))

    def test_literal_ignores_scope(self):
        self.assertEqual(evaluate(LiteralNode(3.5), Scope({"x": 1})), 3.5)

    def test_zero_numerator_still_fails(self):
        with self.assertRaises(DivisionByZero):
            run("0/0")

    def test_power_outside_reals(self):
        with self.assertRaises(DomainError):
            run("(0-8)^0.5")

    def test_power_zero_to_negative(self):
        with self.assertRaises(DomainError):
            run("0^(0-1)")

    def test_power_overflow(self):
        with self.assertRaises(DomainError):
            run("10^400")

    def test_power_never_returns_infinity(self):
        self.assertTrue(math.isinf(run("10^300*10^300")))
        with self.assertRaises(DomainError):
            run("(10^300*10^300)^1")
        with self.assertRaises(DomainError):
            run("2^(10^300*10^300)")


class TestFunctionCalls(unittest.TestCase):

    def test_builtin_values(self):
        self.assertEqual(run("sqrt(16)"), 4.0)
        self.assertEqual(run("log(1)"), 0.0)
        self.assertEqual(run("abs(3-5)"), 2.0)
        self.assertAlmostEqual(run("sin(0) + cos(0)"), 1.0)
        self.assertEqual(run("hypot(3, 4)"), 5.0)
        self.assertAlmostEqual(run("phase(0, 1)"), math.pi / 2)

    def test_case_insensitive_names(self):
        self.assertEqual(run("SQRT(16)"), 4.0)
        self.assertEqual(run("Abs(0-2)"), 2.0)

    def test_domain_errors(self):
        with self.assertRaises(DomainError) as ctx:
            run("log(0-1)")
        self.assertIn("log domain error", str(ctx.exception))
        self.assertEqual(ctx.exception.value, -1.0)
        with self.assertRaises(DomainError):
            run("log(0)")
        with self.assertRaises(DomainError) as ctx:
            run("sqrt(0-4)")
        self.assertIn("sqrt domain error", str(ctx.exception))

    def test_kernel_overflow_becomes_domain_error(self):
        with self.assertRaises(DomainError):
            run("exp(1000)")

    def test_unknown_function(self):
        with self.assertRaises(UnknownFunction) as ctx:
            run("foo(1)")
        self.assertEqual(ctx.exception.name, "foo")

    def test_too_few_arguments(self):
        with self.assertRaises(ArgumentCountError) as ctx:
            run("sqrt()")
        self.assertEqual(ctx.exception.expected, 1)
        self.assertEqual(ctx.exception.given, 0)
        self.assertIn("Insufficient arguments", str(ctx.exception))
        with self.assertRaises(ArgumentCountError):
            run("hypot(3)")

    def test_extra_arguments_are_ignored(self):
        self.assertEqual(run("sqrt(16, 99)"), 4.0)

    def test_arguments_evaluated_before_lookup(self):
        with self.assertRaises(UndefinedVariable):
            run("foo(y)")

    def test_primeharm(self):
        registry = default_registry(EngineConfig(prime_count=3))
        value = Evaluator(registry).evaluate(parse("primeharm(0)"), Scope())
        expected = 1 / math.sqrt(2) + 1 / math.sqrt(3) + 1 / math.sqrt(5)
        self.assertAlmostEqual(value, expected)

    def test_left_to_right_order(self):
        calls = []
        registry = FunctionRegistry()
        registry.register_function("trace", lambda x: calls.append(x) or x)
        evaluator = Evaluator(registry)
        evaluator.evaluate(parse("trace(1) + trace(2) * trace(3)"), Scope())
        self.assertEqual(calls, [1.0, 2.0, 3.0])

    def test_misbehaving_kernel_is_wrapped(self):
        registry = FunctionRegistry()
        registry.register_function("pair", lambda x, y: x + y, arity=1)
        evaluator = Evaluator(registry)
        with self.assertRaises(InternalError) as ctx:
            evaluator.evaluate(parse("pair(1)"), Scope())
        self.assertIsInstance(ctx.exception.__cause__, TypeError)
        self.assertFalse(evaluator.is_true(parse("pair(1)"), Scope()))

    def test_non_numeric_kernel_result(self):
        registry = FunctionRegistry()
        registry.register_function("nothing", lambda x: None)
        with self.assertRaises(InternalError):
            Evaluator(registry).evaluate(parse("nothing(1)"), Scope())

    def test_injected_registry(self):
        evaluator = Evaluator(FunctionRegistry())
        with self.assertRaises(UnknownFunction):
            evaluator.evaluate(parse("sin(0)"), Scope())

    def test_evaluate_function(self):
        self.assertEqual(evaluate_function("sqrt", [LiteralNode(9)]), 3.0)
        self.assertEqual(evaluate_function("log", [LiteralNode(1)]), 0.0)
        with self.assertRaises(DomainError):
            evaluate_function("log", [LiteralNode(-1)])
        scope = Scope({"x": 3})
        self.assertEqual(evaluate_function("hypot", parse("f(x, 4)").args, scope), 5.0)


# ─────────────────────────────────────────────
#  Depth, Defects and Reporting
# ─────────────────────────────────────────────

class TestEvaluatorLimits(unittest.TestCase):

    def test_depth_limit(self):
        evaluator = Evaluator(config=EngineConfig(max_depth=5))
        node = parse("abs(abs(abs(abs(abs(abs(1))))))")
        with self.assertRaises(DepthExceeded):
            evaluator.evaluate(node, Scope())

    def test_depth_resets_between_calls(self):
        evaluator = Evaluator(config=EngineConfig(max_depth=5))
        node = parse("abs(abs(1))")
        for _ in range(10):
            self.assertEqual(evaluator.evaluate(node, Scope()), 1.0)

    def test_long_chain_failure_keeps_its_kind(self):
        reporter = RecordingReporter()
        node = parse("+".join(["1"] * 3000) + "+y")
        with self.assertRaises(UndefinedVariable):
            Evaluator(reporter=reporter).evaluate(node, Scope())
        self.assertIn("BinaryOp at column", reporter.messages("ERROR")[0])
        self.assertFalse(Evaluator().is_true(node, Scope()))

    def test_deep_built_tree(self):
        node = LiteralNode(1)
        for _ in range(5000):
            node = CallNode("abs", (node,))
        with self.assertRaises(DepthExceeded):
            Evaluator().evaluate(node, Scope())
        self.assertFalse(Evaluator().is_true(node, Scope()))

    def test_reentrant_kernel_keeps_depth(self):
        registry = default_registry()
        evaluator = Evaluator(registry, EngineConfig(max_depth=4))
        registry.register_function(
            "inner", lambda x: evaluator.evaluate(LiteralNode(x), Scope())
        )
        self.assertEqual(evaluator.evaluate(parse("abs(inner(0) + abs(1))"), Scope()), 1.0)
        with self.assertRaises(DepthExceeded):
            evaluator.evaluate(parse("abs(inner(0) + abs(abs(abs(1))))"), Scope())

    def test_unknown_node(self):
        with self.assertRaises(InternalError):
            Evaluator().evaluate(ASTNode(), Scope())

    def test_failure_is_reported(self):
        reporter = RecordingReporter()
        with self.assertRaises(DivisionByZero):
            Evaluator(reporter=reporter).evaluate(parse("1/0"), Scope())
        errors = reporter.messages("ERROR")
        self.assertEqual(len(errors), 1)
        self.assertIn("Evaluation error at node", errors[0])


# ─────────────────────────────────────────────
#  Truth Predicate
# ─────────────────────────────────────────────

class TestIsTrue(unittest.TestCase):

    def test_values(self):
        evaluator = Evaluator()
        self.assertFalse(evaluator.is_true(parse("0"), Scope()))
        self.assertFalse(evaluator.is_true(parse("x"), Scope({"x": 1e-10})))
        self.assertTrue(evaluator.is_true(parse("2"), Scope()))
        self.assertTrue(evaluator.is_true(parse("0-2"), Scope()))

    def test_failures_are_false(self):
        evaluator = Evaluator()
        self.assertFalse(evaluator.is_true(parse("y"), Scope()))
        self.assertFalse(evaluator.is_true(parse("1/0"), Scope()))
        self.assertFalse(evaluator.is_true(parse("log(0)"), Scope()))

    def test_failure_is_warned(self):
        reporter = RecordingReporter()
        Evaluator(reporter=reporter).is_true(parse("y"), Scope())
        self.assertEqual(len(reporter.messages("WARN")), 1)
        self.assertIn("Undefined variable", reporter.messages("WARN")[0])

    def test_epsilon_is_configurable(self):
        evaluator = Evaluator(config=EngineConfig(truth_epsilon=0.5))
        self.assertFalse(evaluator.is_true(parse("0.4"), Scope()))
        self.assertTrue(evaluator.is_true(parse("0.6"), Scope()))


class TestModuleHelpers(unittest.TestCase):

    def test_evaluate(self):
        self.assertEqual(evaluate(parse("1+2")), 3.0)
        self.assertEqual(evaluate(parse("x"), Scope({"x": 7})), 7.0)

    def test_is_true(self):
        self.assertTrue(is_true(parse("1")))
        self.assertFalse(is_true(parse("missing")))


if __name__ == "__main__":
    unittest.main()
