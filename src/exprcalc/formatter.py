"""
exprcalc Formatter.

Renders expression trees back to canonical source text, dumps trees for
inspection, and formats numeric results for display.

Usage:
    exprcalc ast "2(3+4)"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

import numpy as np

from exprcalc.compiler.ast_nodes import (
    ASTVisitor,
    BinaryExpression,
    Expression,
    FloatLiteral,
    Grouping,
    IntegerLiteral,
    UnaryExpression,
)
from exprcalc.compiler.parser import parse


# =============================================================================
# Result Formatting
# =============================================================================


def format_number(value: float) -> str:
    """
    Format a result as a plain decimal number.

    Uses the shortest digits that round-trip, never an exponent, and drops a
    trailing ".0": 7.0 -> "7", 0.1 + 0.2 -> "0.30000000000000004".
    """
    return np.format_float_positional(value, trim="-")


def format_float_literal(value: float) -> str:
    """Format a float so it scans back as a FLOAT token (keeps one decimal)."""
    return np.format_float_positional(value, trim="0")


# =============================================================================
# Formatter Configuration
# =============================================================================


@dataclass
class FormatConfig:
    """Configuration for the expression formatter."""

    space_around_operators: bool = True


# =============================================================================
# Source Formatter
# =============================================================================


class Formatter:
    """
    Tree-based formatter for expressions.

    Every parenthesis in the output comes from a Grouping node, so formatting
    a parsed tree and parsing the result gives back an equal tree. Implicit
    multiplication is written out with an explicit '*'.
    """

    def __init__(self, config: FormatConfig | None = None) -> None:
        """Initialize the formatter with optional configuration."""
        self.config = config or FormatConfig()

    def format_expression(self, expr: Expression) -> str:
        """Format an expression to a string."""
        if isinstance(expr, IntegerLiteral):
            return str(expr.value)
        elif isinstance(expr, FloatLiteral):
            return format_float_literal(expr.value)
        elif isinstance(expr, UnaryExpression):
            return f"{expr.operator.symbol}{self.format_expression(expr.operand)}"
        elif isinstance(expr, BinaryExpression):
            return self._format_binary_expression(expr)
        elif isinstance(expr, Grouping):
            return f"({self.format_expression(expr.expression)})"
        else:
            return f"<unknown: {type(expr).__name__}>"

    def _format_binary_expression(self, expr: BinaryExpression) -> str:
        """Format a binary expression."""
        left = self.format_expression(expr.left)
        right = self.format_expression(expr.right)
        op = expr.operator.symbol

        if self.config.space_around_operators:
            return f"{left} {op} {right}"
        return f"{left}{op}{right}"


# =============================================================================
# Tree Printer
# =============================================================================


class TreePrinter(ASTVisitor):
    """
    Renders a tree as an indented outline, one node per line.

    Example for "2(3 + 4)":

        BinaryExpression *
          IntegerLiteral 2
          Grouping
            BinaryExpression +
              IntegerLiteral 3
              IntegerLiteral 4
    """

    def __init__(self, indent: str = "  ") -> None:
        self.indent = indent
        self._depth = 0
        self._lines: list[str] = []

    def render(self, expr: Expression) -> str:
        self._depth = 0
        self._lines = []
        self.visit(expr)
        return "\n".join(self._lines)

    def _emit(self, text: str) -> None:
        self._lines.append(f"{self.indent * self._depth}{text}")

    def _visit_child(self, node: Expression) -> None:
        self._depth += 1
        self.visit(node)
        self._depth -= 1

    def visit_integer_literal(self, node: IntegerLiteral) -> Any:
        self._emit(f"IntegerLiteral {node.value}")

    def visit_float_literal(self, node: FloatLiteral) -> Any:
        self._emit(f"FloatLiteral {format_float_literal(node.value)}")

    def visit_unary_expression(self, node: UnaryExpression) -> Any:
        self._emit(f"UnaryExpression {node.operator.symbol}")
        self._visit_child(node.operand)

    def visit_binary_expression(self, node: BinaryExpression) -> Any:
        self._emit(f"BinaryExpression {node.operator.symbol}")
        self._visit_child(node.left)
        self._visit_child(node.right)

    def visit_grouping(self, node: Grouping) -> Any:
        self._emit("Grouping")
        self._visit_child(node.expression)


# =============================================================================
# Convenience Functions
# =============================================================================


def format_expression(expr: Expression, config: FormatConfig | None = None) -> str:
    """Format an expression tree as canonical source text."""
    return Formatter(config).format_expression(expr)


def format_source(source: Union[str, bytes], config: FormatConfig | None = None) -> str:
    """
    Parse and re-format expression text.

    Raises:
        ExprCalcError: If the source cannot be parsed
    """
    return format_expression(parse(source), config)


def format_tree(expr: Expression) -> str:
    """Render an expression tree as an indented outline."""
    return TreePrinter().render(expr)
