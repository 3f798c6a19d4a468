"""
Token definitions for the exprcalc lexer.

This module defines the token types recognized by the scanner: integer and
float literals, the six single-character operators and delimiters, the
end-of-input marker, and the illegal-byte marker.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

import numpy as np

from exprcalc.utils.errors import SourceLocation


# Integer literals must fit a signed 64-bit value
INT64_MAX = int(np.iinfo(np.int64).max)


class TokenType(Enum):
    """Enumeration of all token types."""

    # End of input
    EOF = auto()

    # Literals
    INTEGER = auto()
    FLOAT = auto()

    # Arithmetic operators
    PLUS = auto()          # +
    MINUS = auto()         # -
    STAR = auto()          # *
    SLASH = auto()         # /

    # Delimiters
    LPAREN = auto()        # (
    RPAREN = auto()        # )

    # Any byte the scanner does not recognize
    ILLEGAL = auto()

    def describe(self) -> str:
        """Human-readable name used in error messages."""
        return _TYPE_DESCRIPTIONS[self]


_TYPE_DESCRIPTIONS: dict[TokenType, str] = {
    TokenType.EOF: "end of input",
    TokenType.INTEGER: "integer literal",
    TokenType.FLOAT: "float literal",
    TokenType.PLUS: "'+'",
    TokenType.MINUS: "'-'",
    TokenType.STAR: "'*'",
    TokenType.SLASH: "'/'",
    TokenType.LPAREN: "'('",
    TokenType.RPAREN: "')'",
    TokenType.ILLEGAL: "illegal character",
}


# Single character operators and delimiters, keyed by byte value
SINGLE_CHAR_TOKENS: dict[int, TokenType] = {
    ord("+"): TokenType.PLUS,
    ord("-"): TokenType.MINUS,
    ord("*"): TokenType.STAR,
    ord("/"): TokenType.SLASH,
    ord("("): TokenType.LPAREN,
    ord(")"): TokenType.RPAREN,
}

_TOKEN_LEXEMES: dict[TokenType, str] = {
    token_type: chr(byte) for byte, token_type in SINGLE_CHAR_TOKENS.items()
}


@dataclass(frozen=True, slots=True)
class Token:
    """
    Represents a single token from the input.

    Attributes:
        type: The type of this token
        value: int for INTEGER, float for FLOAT, the offending byte (int)
            for ILLEGAL, None otherwise
        location: Source location of this token
    """

    type: TokenType
    value: Any
    location: SourceLocation

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.location})"
        return f"Token({self.type.name}, {self.location})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Token):
            return self.type == other.type and self.value == other.value
        if isinstance(other, TokenType):
            return self.type == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.type, self.value))

    @property
    def is_literal(self) -> bool:
        """Check if this token is a numeric literal."""
        return self.type in {TokenType.INTEGER, TokenType.FLOAT}

    @property
    def is_operator(self) -> bool:
        """Check if this token is an arithmetic operator."""
        return self.type in {
            TokenType.PLUS,
            TokenType.MINUS,
            TokenType.STAR,
            TokenType.SLASH,
        }

    @property
    def lexeme(self) -> str:
        """Render the token back to input text."""
        if self.type == TokenType.INTEGER:
            return str(self.value)
        if self.type == TokenType.FLOAT:
            # Positional notation keeps the lexeme scannable (no exponent)
            return np.format_float_positional(self.value, trim="0")
        if self.type == TokenType.ILLEGAL:
            if 0x20 <= self.value < 0x7F:
                return chr(self.value)
            return f"\\x{self.value:02x}"
        if self.type == TokenType.EOF:
            return ""
        return _TOKEN_LEXEMES[self.type]

    def describe(self) -> str:
        """Human-readable description used in error messages."""
        if self.type == TokenType.INTEGER:
            return f"integer {self.lexeme}"
        if self.type == TokenType.FLOAT:
            return f"float {self.lexeme}"
        if self.type == TokenType.ILLEGAL:
            return f"illegal character {self.lexeme!r}"
        return self.type.describe()
