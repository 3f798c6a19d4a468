"""
Tree-walking evaluator for exprcalc.

Computes the double-precision value of an expression tree. Evaluation is a
pure function of the tree. An optional observer receives every step of the
walk for tracing; it never influences the result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from exprcalc.compiler.ast_nodes import (
    BinaryExpression,
    BinaryOperator,
    Expression,
    FloatLiteral,
    Grouping,
    IntegerLiteral,
    UnaryExpression,
    UnaryOperator,
)
from exprcalc.utils.errors import DivisionByZeroError, line_at

TRACE_LOGGER_NAME = "exprcalc.trace"


@dataclass(frozen=True, slots=True)
class EvalStep:
    """
    One step of the tree walk, as seen by an observer.

    Attributes:
        depth: Nesting depth of the node (root is 0)
        node: The node being evaluated
        phase: "enter", "exit" or "error"
        value: The node's value on "exit", None otherwise
    """

    depth: int
    node: Expression
    phase: str
    value: Optional[float] = None


EvalObserver = Callable[[EvalStep], None]


class Evaluator:
    """
    Evaluates expression trees to floats.

    Integers widen to float (exact up to 2**53). Division checks its right
    operand for exact zero and raises DivisionByZeroError instead of
    producing inf or nan. Left operands are evaluated before right ones.

    Usage:
        evaluator = Evaluator()
        value = evaluator.evaluate(tree)
    """

    def __init__(
        self,
        observer: Optional[EvalObserver] = None,
        source: Optional[str] = None,
    ) -> None:
        """
        Args:
            observer: Called with an EvalStep on entering and leaving each node
            source: Input text, used to point at errors
        """
        self.observer = observer
        self.source = source

    def evaluate(self, expr: Expression) -> float:
        """
        Evaluate an expression tree.

        Raises:
            DivisionByZeroError: If a divisor evaluates to exactly zero.
        """
        return self._evaluate(expr, 0)

    def _notify(self, depth: int, node: Expression, phase: str,
                value: Optional[float] = None) -> None:
        if self.observer is not None:
            self.observer(EvalStep(depth, node, phase, value))

    def _evaluate(self, expr: Expression, depth: int) -> float:
        self._notify(depth, expr, "enter")

        if isinstance(expr, (IntegerLiteral, FloatLiteral)):
            result = float(expr.value)
        elif isinstance(expr, UnaryExpression):
            result = self._evaluate_unary(expr, depth)
        elif isinstance(expr, BinaryExpression):
            result = self._evaluate_binary(expr, depth)
        elif isinstance(expr, Grouping):
            result = self._evaluate(expr.expression, depth + 1)
        else:
            # Cannot happen by construction: the parser only builds the nodes above
            raise AssertionError(f"unreachable: unknown node {type(expr).__name__}")

        self._notify(depth, expr, "exit", result)
        return result

    def _evaluate_unary(self, expr: UnaryExpression, depth: int) -> float:
        operand = self._evaluate(expr.operand, depth + 1)

        if expr.operator == UnaryOperator.NEG:
            return -operand

        raise AssertionError(f"unreachable: unary operator {expr.operator}")

    def _evaluate_binary(self, expr: BinaryExpression, depth: int) -> float:
        left = self._evaluate(expr.left, depth + 1)
        right = self._evaluate(expr.right, depth + 1)

        op = expr.operator

        if op == BinaryOperator.ADD:
            return left + right
        if op == BinaryOperator.SUB:
            return left - right
        if op == BinaryOperator.MUL:
            return left * right
        if op == BinaryOperator.DIV:
            if right == 0.0:
                self._notify(depth, expr, "error")
                raise DivisionByZeroError(
                    expr.location, line_at(self.source, expr.location)
                )
            return left / right

        raise AssertionError(f"unreachable: binary operator {op}")


def _describe_node(node: Expression) -> str:
    if isinstance(node, IntegerLiteral):
        return f"Integer: {node.value}"
    if isinstance(node, FloatLiteral):
        return f"Float: {node.value!r}"
    if isinstance(node, UnaryExpression):
        return f"Unary {node.operator.symbol}"
    if isinstance(node, BinaryExpression):
        return f"Binary {node.operator.symbol}"
    return "Group ( )"


def logging_observer(logger: Optional[logging.Logger] = None) -> EvalObserver:
    """
    Build an observer that writes an indented evaluation trace.

    Each step is logged at DEBUG level, indented two spaces per depth:

        -> Binary +
          -> Integer: 1
          -> Integer: 2
           = 3.0
    """
    trace_logger = logger or logging.getLogger(TRACE_LOGGER_NAME)

    def observe(step: EvalStep) -> None:
        indent = "  " * step.depth
        if step.phase == "enter":
            trace_logger.debug("%s-> %s", indent, _describe_node(step.node))
        elif step.phase == "exit":
            # Leaves are fully described on entry
            if not isinstance(step.node, (IntegerLiteral, FloatLiteral)):
                trace_logger.debug("%s   = %r", indent, step.value)
        else:
            trace_logger.debug("%s   ! division by zero", indent)

    return observe


def evaluate(expr: Expression, observer: Optional[EvalObserver] = None) -> float:
    """
    Convenience function to evaluate an expression tree.

    Args:
        expr: Root of the tree
        observer: Optional trace observer

    Returns:
        The value as a float
    """
    return Evaluator(observer).evaluate(expr)
