"""
exprcalc Parser.

A recursive descent parser that pulls tokens from the lexer one at a time
and builds an expression tree. Each precedence level has its own method:

    primary        := INTEGER | FLOAT | '(' addition ')'
    unary          := '-' primary | primary
    multiplicative := unary ( ('*' | '/' | implicit-'(') unary )*
    addition       := multiplicative ( ('+' | '-') multiplicative )*
    expression     := addition

One token of lookahead is always enough; the parser never backtracks.
"""

from typing import Optional, Union

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
from exprcalc.compiler.lexer import Lexer
from exprcalc.compiler.tokens import Token, TokenType
from exprcalc.utils.errors import (
    EmptyInputError,
    InvalidExpressionError,
    InvalidTokenError,
    MissingClosingParenthesisError,
    SourceLocation,
    UnexpectedTokenError,
    line_at,
)


# Map token types to binary operators
BINARY_OP_MAP: dict[TokenType, BinaryOperator] = {
    TokenType.PLUS: BinaryOperator.ADD,
    TokenType.MINUS: BinaryOperator.SUB,
    TokenType.STAR: BinaryOperator.MUL,
    TokenType.SLASH: BinaryOperator.DIV,
}

ADDITIVE_TOKENS = (TokenType.PLUS, TokenType.MINUS)
MULTIPLICATIVE_TOKENS = (TokenType.STAR, TokenType.SLASH, TokenType.LPAREN)


class Parser:
    """
    Recursive descent parser for arithmetic expressions.

    Holds the lexer and exactly one lookahead token. Construction pulls the
    first token, so ``current_token`` always holds the next unconsumed token
    (or EOF).

    Usage:
        parser = Parser(Lexer("2(3 + 4)"))
        tree = parser.parse()
    """

    def __init__(self, lexer: Lexer) -> None:
        """
        Initialize the parser and prime the lookahead.

        Args:
            lexer: The token source
        """
        self.lexer = lexer
        self._source = lexer.source.decode("utf-8", errors="replace")
        self.current_token: Token = lexer.next_token()

    # -------------------------------------------------------------------------
    # Token handling
    # -------------------------------------------------------------------------

    def _check(self, *types: TokenType) -> bool:
        """Check if the current token is one of the given types."""
        return self.current_token.type in types

    def _advance(self) -> Token:
        """Pull the next token from the lexer, returning the consumed one."""
        token = self.current_token
        self.current_token = self.lexer.next_token()
        return token

    def _consume(self, expected: TokenType) -> Token:
        """
        Consume the current token if its kind matches.

        Only the kind is compared, never the payload.

        Raises:
            UnexpectedTokenError: If the current token is of another kind.
        """
        if self._check(expected):
            return self._advance()
        raise UnexpectedTokenError(
            expected, self.current_token, self._line_text(self.current_token.location)
        )

    def _line_text(self, location: SourceLocation) -> Optional[str]:
        """Return the input line containing a location."""
        return line_at(self._source, location)

    def _error_invalid_operand(self) -> Union[InvalidTokenError, InvalidExpressionError]:
        """Create the error for a token that cannot start an operand."""
        token = self.current_token
        source_line = self._line_text(token.location)
        if token.type == TokenType.ILLEGAL:
            return InvalidTokenError(token, source_line)
        return InvalidExpressionError(token, source_line)

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    def parse(self) -> Expression:
        """
        Parse one complete expression.

        Returns:
            The root of the expression tree.

        Raises:
            EmptyInputError: If the input holds no tokens.
            ParserError: For any other syntax error.
            LexerError: If the lexer rejects a numeric literal.
        """
        if self._check(TokenType.EOF):
            raise EmptyInputError(self.current_token.location)

        expr = self._parse_addition()

        if not self._check(TokenType.EOF):
            # Unmatched ')' or garbage cannot start anything
            if self._check(TokenType.ILLEGAL, TokenType.RPAREN):
                raise self._error_invalid_operand()
            self._consume(TokenType.EOF)

        return expr

    # -------------------------------------------------------------------------
    # Precedence levels
    # -------------------------------------------------------------------------

    def _parse_addition(self) -> Expression:
        """Parse '+' and '-' chains, folding left."""
        left = self._parse_multiplicative()

        while self._check(*ADDITIVE_TOKENS):
            operator = self._advance()
            right = self._parse_multiplicative()
            left = BinaryExpression(
                left=left,
                operator=BINARY_OP_MAP[operator.type],
                right=right,
                location=operator.location,
            )

        return left

    def _parse_multiplicative(self) -> Expression:
        """
        Parse '*' and '/' chains, folding left.

        A '(' directly after an operand is an implicit multiplication. The
        '(' is left in place for the right operand's primary to consume.
        """
        left = self._parse_unary()

        while self._check(*MULTIPLICATIVE_TOKENS):
            if self._check(TokenType.LPAREN):
                operator = BinaryOperator.MUL
                location = self.current_token.location
            else:
                token = self._advance()
                operator = BINARY_OP_MAP[token.type]
                location = token.location

            right = self._parse_unary()
            left = BinaryExpression(
                left=left,
                operator=operator,
                right=right,
                location=location,
            )

        return left

    def _parse_unary(self) -> Expression:
        """Parse an optional single leading '-' before a primary."""
        if self._check(TokenType.MINUS):
            operator = self._advance()
            operand = self._parse_primary()
            return UnaryExpression(
                operator=UnaryOperator.NEG,
                operand=operand,
                location=operator.location,
            )

        return self._parse_primary()

    def _parse_primary(self) -> Expression:
        """Parse a literal or a parenthesized expression."""
        token = self.current_token

        if self._check(TokenType.INTEGER):
            self._advance()
            return IntegerLiteral(value=token.value, location=token.location)

        if self._check(TokenType.FLOAT):
            self._advance()
            return FloatLiteral(value=token.value, location=token.location)

        if self._check(TokenType.LPAREN):
            self._advance()
            inner = self._parse_addition()
            if not self._check(TokenType.RPAREN):
                raise MissingClosingParenthesisError(
                    self.current_token.location,
                    self._line_text(self.current_token.location),
                    open_location=token.location,
                )
            self._consume(TokenType.RPAREN)
            return Grouping(expression=inner, location=token.location)

        raise self._error_invalid_operand()


def parse(source: Union[str, bytes]) -> Expression:
    """
    Convenience function to parse input text into an expression tree.

    Args:
        source: Expression text

    Returns:
        The root of the expression tree
    """
    return Parser(Lexer(source)).parse()
