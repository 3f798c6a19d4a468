"""
Expression tree node definitions for exprcalc.

Each node is immutable, exclusively owns its children and carries source
location information for error reporting. Locations do not take part in
equality, so two trees compare equal when their structure does.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from exprcalc.utils.errors import SourceLocation


class ASTNode(ABC):
    """Base class for all tree nodes."""

    location: Optional[SourceLocation]

    @abstractmethod
    def accept(self, visitor: "ASTVisitor") -> Any:
        """Accept a visitor for tree traversal."""
        pass


class ASTVisitor(ABC):
    """
    Visitor pattern base class for tree traversal.

    Implement this to create custom tree processors (printers, formatters,
    evaluators, etc.).
    """

    def visit(self, node: ASTNode) -> Any:
        """Dispatch to the appropriate visit method."""
        return node.accept(self)


# -----------------------------------------------------------------------------
# Operators
# -----------------------------------------------------------------------------


class BinaryOperator(Enum):
    """Binary operator types, valued by their source symbol."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    @property
    def symbol(self) -> str:
        return self.value


class UnaryOperator(Enum):
    """Unary operator types."""

    NEG = "-"

    @property
    def symbol(self) -> str:
        return self.value


# -----------------------------------------------------------------------------
# Expressions
# -----------------------------------------------------------------------------


class Expression(ASTNode):
    """Base class for all expressions."""

    pass


@dataclass(frozen=True, slots=True)
class IntegerLiteral(Expression):
    """An integer literal."""

    value: int
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_integer_literal(self)


@dataclass(frozen=True, slots=True)
class FloatLiteral(Expression):
    """A floating-point literal."""

    value: float
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_float_literal(self)


@dataclass(frozen=True, slots=True)
class UnaryExpression(Expression):
    """
    A unary operation expression.

    Example:
        -5, -(2 + 3)
    """

    operator: UnaryOperator
    operand: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_unary_expression(self)


@dataclass(frozen=True, slots=True)
class BinaryExpression(Expression):
    """
    A binary operation expression.

    Example:
        a + b, 2 * (3 + 4), 2(3 + 4)
    """

    left: Expression
    operator: BinaryOperator
    right: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_binary_expression(self)


@dataclass(frozen=True, slots=True)
class Grouping(Expression):
    """
    A parenthesized sub-expression.

    Kept as its own node so the tree mirrors the source; evaluation passes
    straight through it.
    """

    expression: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_grouping(self)

