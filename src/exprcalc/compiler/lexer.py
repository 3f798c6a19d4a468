"""
exprcalc Lexer (Scanner).

Transforms a line of arithmetic text into tokens, one token per call to
``next_token``. The scanner works on raw bytes: text input is encoded as
UTF-8, so a non-ASCII character produces one ILLEGAL token per byte.
"""

import math
from typing import Iterator, Optional, Union

from exprcalc.compiler.tokens import (
    INT64_MAX,
    SINGLE_CHAR_TOKENS,
    Token,
    TokenType,
)
from exprcalc.utils.errors import LexerError, SourceLocation

_DOT = ord(".")
_NEWLINE = ord("\n")
# bytes.isspace() semantics: space, \t, \n, \v, \f, \r
_WHITESPACE = frozenset(b" \t\n\x0b\x0c\r")
_INT64_MAX_DIGITS = len(str(INT64_MAX))


def _is_digit(byte: Optional[int]) -> bool:
    return byte is not None and 0x30 <= byte <= 0x39


class Lexer:
    """
    Pull-based scanner for arithmetic expressions.

    The lexer recognizes:
    - Integer literals (signed 64-bit range): 42
    - Float literals with exactly one dot between digits: 3.14
    - The operators and delimiters + - * / ( )

    Any other byte becomes an ILLEGAL token so scanning can continue past it.
    Once the input is exhausted every call returns an EOF token.

    Usage:
        lexer = Lexer("1 + 2")
        token = lexer.next_token()
        # or all at once: tokens = lexer.tokenize()
    """

    def __init__(self, source: Union[str, bytes]) -> None:
        """
        Initialize the lexer with input text.

        Args:
            source: The expression text (str is encoded as UTF-8)
        """
        if isinstance(source, str):
            source = source.encode("utf-8")
        self.source: bytes = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

        # Track the start of the current line for error reporting
        self._line_start = 0

    @property
    def _current_byte(self) -> Optional[int]:
        """Return the current byte or None if at end."""
        if self.pos >= len(self.source):
            return None
        return self.source[self.pos]

    @property
    def _peek_byte(self) -> Optional[int]:
        """Return the next byte without consuming it."""
        peek_pos = self.pos + 1
        if peek_pos >= len(self.source):
            return None
        return self.source[peek_pos]

    def _location(self) -> SourceLocation:
        """Create a SourceLocation for the current position."""
        return SourceLocation(line=self.line, column=self.column, offset=self.pos)

    def current_line_text(self) -> str:
        """Extract the current line of input for error messages."""
        end = self.source.find(b"\n", self._line_start)
        if end == -1:
            end = len(self.source)
        return self.source[self._line_start:end].decode("utf-8", errors="replace")

    def _advance(self) -> int:
        """Consume and return the current byte."""
        byte = self.source[self.pos]
        self.pos += 1

        if byte == _NEWLINE:
            self.line += 1
            self.column = 1
            self._line_start = self.pos
        else:
            self.column += 1

        return byte

    def _skip_whitespace(self) -> None:
        """Skip ASCII whitespace, newlines included."""
        while self._current_byte is not None and self._current_byte in _WHITESPACE:
            self._advance()

    def _read_number(self) -> Token:
        """
        Read a numeric literal (integer or float).

        A single '.' extends the literal only when a digit follows it, so
        "2." leaves the dot for the next call. A second '.' ends the literal.

        Returns:
            An INTEGER or FLOAT token.

        Raises:
            LexerError: If an integer literal exceeds the signed 64-bit range,
                or a float literal overflows to infinity.
        """
        start_loc = self._location()
        start = self.pos
        has_dot = False

        while self._current_byte is not None:
            if _is_digit(self._current_byte):
                self._advance()
            elif self._current_byte == _DOT and not has_dot and _is_digit(self._peek_byte):
                has_dot = True
                self._advance()
            else:
                break

        text = self.source[start:self.pos].decode("ascii")

        if has_dot:
            value = float(text)
            if math.isinf(value):
                raise self._out_of_range("Float", text, start_loc)
            return Token(TokenType.FLOAT, value, start_loc)

        # Length check first: int() refuses very long digit strings
        digits = text.lstrip("0") or "0"
        if len(digits) > _INT64_MAX_DIGITS or int(digits) > INT64_MAX:
            raise self._out_of_range("Integer", text, start_loc)
        return Token(TokenType.INTEGER, int(digits), start_loc)

    def _out_of_range(self, kind: str, text: str, location: SourceLocation) -> LexerError:
        return LexerError(
            f"{kind} literal out of range: {text}",
            location,
            self.current_line_text(),
            literal=text,
        )

    def next_token(self) -> Token:
        """
        Extract the next token from the input.

        Returns:
            The next token; EOF forever once the input is exhausted.
        """
        self._skip_whitespace()

        byte = self._current_byte
        if byte is None:
            return Token(TokenType.EOF, None, self._location())

        if _is_digit(byte):
            return self._read_number()

        loc = self._location()
        self._advance()

        token_type = SINGLE_CHAR_TOKENS.get(byte)
        if token_type is not None:
            return Token(token_type, None, loc)

        return Token(TokenType.ILLEGAL, byte, loc)

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire input.

        Returns:
            A list of all tokens including the final EOF token.
        """
        self.tokens = []
        self.pos = 0
        self.line = 1
        self.column = 1
        self._line_start = 0

        while True:
            token = self.next_token()
            self.tokens.append(token)
            if token.type == TokenType.EOF:
                break

        return self.tokens

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens (tokenizes if necessary)."""
        if not self.tokens:
            self.tokenize()
        return iter(self.tokens)


def tokenize(source: Union[str, bytes]) -> list[Token]:
    """
    Convenience function to tokenize input text.

    Args:
        source: Expression text

    Returns:
        List of tokens ending with EOF
    """
    return Lexer(source).tokenize()
