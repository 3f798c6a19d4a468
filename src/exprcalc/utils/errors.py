"""
Error types and source location tracking for exprcalc.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from exprcalc.compiler.tokens import Token, TokenType


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """
    Represents a location in the input text.

    Attributes:
        line: 1-indexed line number
        column: 1-indexed column number
        offset: 0-indexed byte offset from start of input
    """

    line: int
    column: int
    offset: int = 0

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


def line_at(text: Optional[str], location: Optional[SourceLocation]) -> Optional[str]:
    """Return the line of ``text`` containing ``location``, if there is one."""
    if text is None or location is None:
        return None
    lines = text.split("\n")
    if 0 < location.line <= len(lines):
        return lines[location.line - 1]
    return None


class ExprCalcError(Exception):
    """Base exception for all exprcalc errors."""

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> None:
        self.message = message
        self.location = location
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []

        if self.location:
            parts.append(f"[{self.location}]")

        parts.append(self.message)

        if self.source_line is not None and self.location:
            parts.append(f"\n    {self.source_line}")
            # Columns count bytes; the caret is placed by characters
            before = self.source_line.encode("utf-8")[: self.location.column - 1]
            width = len(before.decode("utf-8", errors="ignore"))
            parts.append(f"\n{' ' * (4 + width)}^")
            return parts[0] + " " + "".join(parts[1:])

        return " ".join(parts)


# -----------------------------------------------------------------------------
# Lexical errors
# -----------------------------------------------------------------------------


class LexerError(ExprCalcError):
    """Raised when a numeric literal cannot be represented."""

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        literal: Optional[str] = None,
    ) -> None:
        self.literal = literal
        super().__init__(message, location, source_line)


# -----------------------------------------------------------------------------
# Parse errors
# -----------------------------------------------------------------------------


class ParserError(ExprCalcError):
    """Raised when the parser encounters a syntax error."""

    pass


class UnexpectedTokenError(ParserError):
    """A required token did not match the current token's kind."""

    def __init__(
        self,
        expected: TokenType,
        found: Token,
        source_line: Optional[str] = None,
    ) -> None:
        self.expected = expected
        self.found = found
        super().__init__(
            f"Expected {expected.describe()}, found {found.describe()}",
            found.location,
            source_line,
        )


class MissingClosingParenthesisError(ParserError):
    """A parenthesized group did not find its ')'."""

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        open_location: Optional[SourceLocation] = None,
    ) -> None:
        self.open_location = open_location
        super().__init__("Missing closing parenthesis", location, source_line)


class InvalidExpressionError(ParserError):
    """The current token cannot start an expression."""

    def __init__(self, found: Token, source_line: Optional[str] = None) -> None:
        self.found = found
        super().__init__(
            f"Invalid expression: unexpected {found.describe()}",
            found.location,
            source_line,
        )


class InvalidTokenError(ParserError):
    """An illegal byte was reached where an operand was expected."""

    def __init__(self, token: Token, source_line: Optional[str] = None) -> None:
        self.token = token
        self.char: int = token.value
        super().__init__(
            f"Invalid character {token.lexeme!r}",
            token.location,
            source_line,
        )


class EmptyInputError(ParserError):
    """The input contained no tokens at all."""

    def __init__(self, location: Optional[SourceLocation] = None) -> None:
        super().__init__("Empty input", location)


# -----------------------------------------------------------------------------
# Evaluation errors
# -----------------------------------------------------------------------------


class EvaluationError(ExprCalcError):
    """Raised when an expression tree cannot be evaluated."""

    pass


class DivisionByZeroError(EvaluationError):
    """The right operand of '/' evaluated to exactly zero."""

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> None:
        super().__init__("Division by zero", location, source_line)
