"""
Unit tests for the exprcalc Parser.
"""

import pytest

from exprcalc.compiler.ast_nodes import (
    BinaryExpression,
    BinaryOperator,
    FloatLiteral,
    Grouping,
    IntegerLiteral,
    UnaryExpression,
    UnaryOperator,
)
from exprcalc.compiler.lexer import Lexer
from exprcalc.compiler.parser import Parser, parse
from exprcalc.compiler.tokens import Token, TokenType
from exprcalc.utils.errors import (
    EmptyInputError,
    InvalidExpressionError,
    InvalidTokenError,
    LexerError,
    MissingClosingParenthesisError,
    ParserError,
    SourceLocation,
    UnexpectedTokenError,
)


def _int(value: int) -> IntegerLiteral:
    return IntegerLiteral(value)


def _bin(left, op: BinaryOperator, right) -> BinaryExpression:
    return BinaryExpression(left=left, operator=op, right=right)


class TestParserBasics:
    """Basic parser functionality tests."""

    def test_integer_literal(self, parse):
        """A lone integer parses to a leaf."""
        assert parse("42") == IntegerLiteral(42)

    def test_float_literal(self, parse):
        """A lone float parses to a leaf."""
        expr = parse("3.5")
        assert isinstance(expr, FloatLiteral)
        assert expr.value == 3.5

    def test_lookahead_primed_on_construction(self):
        """Construction pulls the first token into current_token."""
        parser = Parser(Lexer("7 + 1"))
        assert parser.current_token == Token(TokenType.INTEGER, 7, SourceLocation(1, 1))

    def test_grouping_preserved(self, parse):
        """Parentheses produce a Grouping node around the inner tree."""
        assert parse("(1)") == Grouping(_int(1))
        assert parse("((1))") == Grouping(Grouping(_int(1)))

    def test_module_level_parse(self):
        """The convenience function matches Parser.parse."""
        assert parse("1 + 2") == Parser(Lexer("1 + 2")).parse()

    def test_node_locations(self, parse):
        """Binary nodes are located at their operator."""
        expr = parse("1 + 2")
        assert expr.location == SourceLocation(1, 3, 2)
        assert expr.left.location == SourceLocation(1, 1, 0)


class TestParserPrecedence:
    """Tests for operator precedence and associativity."""

    def test_multiplication_binds_tighter(self, parse):
        """'1 + 2 * 3' has '+' at the root and '*' on the right."""
        expr = parse("1 + 2 * 3")
        assert isinstance(expr, BinaryExpression)
        assert expr.operator == BinaryOperator.ADD
        assert expr.left == _int(1)
        assert expr.right == _bin(_int(2), BinaryOperator.MUL, _int(3))

    def test_subtraction_is_left_associative(self, parse):
        """'10 - 2 - 3' folds to (10 - 2) - 3."""
        expr = parse("10 - 2 - 3")
        assert expr == _bin(
            _bin(_int(10), BinaryOperator.SUB, _int(2)),
            BinaryOperator.SUB,
            _int(3),
        )

    def test_division_is_left_associative(self, parse):
        """'8 / 4 / 2' folds to (8 / 4) / 2."""
        expr = parse("8 / 4 / 2")
        assert expr.operator == BinaryOperator.DIV
        assert expr.left == _bin(_int(8), BinaryOperator.DIV, _int(4))

    def test_parentheses_override_precedence(self, parse):
        """'(1 + 2) * 3' has '*' at the root."""
        expr = parse("(1 + 2) * 3")
        assert expr.operator == BinaryOperator.MUL
        assert expr.left == Grouping(_bin(_int(1), BinaryOperator.ADD, _int(2)))


class TestParserImplicitMultiplication:
    """Tests for multiplication inferred from '('."""

    def test_number_before_paren(self, parse):
        """'2(3 + 4)' is a multiplication with the group on the right."""
        expr = parse("2(3 + 4)")
        assert expr == _bin(
            _int(2),
            BinaryOperator.MUL,
            Grouping(_bin(_int(3), BinaryOperator.ADD, _int(4))),
        )

    def test_same_tree_as_explicit(self, parse):
        """Implicit and explicit multiplication build identical trees."""
        assert parse("2(3 + 4)") == parse("2*(3+4)")

    def test_group_before_group(self, parse):
        """'(1)(2)' multiplies two groups."""
        assert parse("(1)(2)") == _bin(Grouping(_int(1)), BinaryOperator.MUL, Grouping(_int(2)))

    def test_chained_implicit_multiplication(self, parse):
        """'2(3)(4)' folds left like explicit multiplication."""
        expr = parse("2(3)(4)")
        assert expr == _bin(
            _bin(_int(2), BinaryOperator.MUL, Grouping(_int(3))),
            BinaryOperator.MUL,
            Grouping(_int(4)),
        )

    def test_implicit_binds_like_multiplication(self, parse):
        """'1 + 2(3)' keeps '+' at the root."""
        expr = parse("1 + 2(3)")
        assert expr.operator == BinaryOperator.ADD
        assert expr.right == _bin(_int(2), BinaryOperator.MUL, Grouping(_int(3)))

    def test_implicit_location_is_paren(self, parse):
        """The synthetic '*' is located at the '('."""
        assert parse("2(3)").location == SourceLocation(1, 2, 1)


class TestParserUnary:
    """Tests for unary negation."""

    def test_negative_literal(self, parse):
        """'-5' is a negation of 5."""
        assert parse("-5") == UnaryExpression(UnaryOperator.NEG, _int(5))

    def test_negated_group(self, parse):
        """'-(2+3)' negates a grouping."""
        expr = parse("-(2+3)")
        assert isinstance(expr, UnaryExpression)
        assert expr.operand == Grouping(_bin(_int(2), BinaryOperator.ADD, _int(3)))

    def test_negation_binds_tighter_than_multiplication(self, parse):
        """'-2 * 3' negates only the 2."""
        expr = parse("-2 * 3")
        assert expr == _bin(UnaryExpression(UnaryOperator.NEG, _int(2)), BinaryOperator.MUL, _int(3))

    def test_negation_after_binary_operator(self, parse):
        """'1 - -2' subtracts a negated operand."""
        expr = parse("1 - -2")
        assert expr == _bin(_int(1), BinaryOperator.SUB, UnaryExpression(UnaryOperator.NEG, _int(2)))

    def test_double_negation_not_supported(self, parse):
        """Known boundary: only one leading minus per operand."""
        with pytest.raises(InvalidExpressionError) as exc_info:
            parse("--5")
        assert exc_info.value.found.type == TokenType.MINUS

    def test_unary_plus_not_supported(self, parse):
        """Known boundary: there is no unary plus."""
        with pytest.raises(InvalidExpressionError):
            parse("+5")


class TestParserErrors:
    """Tests for each parse error kind."""

    @pytest.mark.parametrize("source", ["", "   ", "\t\n"])
    def test_empty_input(self, parse, source):
        """Input with no tokens is its own error kind."""
        with pytest.raises(EmptyInputError) as exc_info:
            parse(source)
        assert str(exc_info.value).endswith("Empty input")

    def test_missing_closing_parenthesis(self, parse):
        """An unclosed group raises MissingClosingParenthesisError."""
        with pytest.raises(MissingClosingParenthesisError) as exc_info:
            parse("(1 + 2")
        error = exc_info.value
        assert error.open_location == SourceLocation(1, 1, 0)
        assert "Missing closing parenthesis" in str(error)

    def test_missing_parenthesis_nested(self, parse):
        """The innermost unclosed group is reported."""
        with pytest.raises(MissingClosingParenthesisError) as exc_info:
            parse("((1 + 2)")
        assert exc_info.value.open_location == SourceLocation(1, 1, 0)

    def test_illegal_inside_group(self, parse):
        """A group interrupted by garbage fails to find its ')'."""
        with pytest.raises(MissingClosingParenthesisError):
            parse("(1 & 2)")

    @pytest.mark.parametrize("source", ["1 +", "2 * * 3", ")", "()", "(1+2))", "1 / )"])
    def test_invalid_expression(self, parse, source):
        """Tokens that cannot start an operand raise InvalidExpressionError."""
        with pytest.raises(InvalidExpressionError):
            parse(source)

    def test_trailing_operator_reports_eof(self, parse):
        """A dangling operator fails on end of input."""
        with pytest.raises(InvalidExpressionError) as exc_info:
            parse("1 +")
        assert exc_info.value.found.type == TokenType.EOF
        assert "unexpected end of input" in str(exc_info.value)

    def test_invalid_token(self, parse):
        """'1 & 2' fails when the parser reaches '&'."""
        with pytest.raises(InvalidTokenError) as exc_info:
            parse("1 & 2")
        error = exc_info.value
        assert error.char == ord("&")
        assert error.token.type == TokenType.ILLEGAL
        assert error.location == SourceLocation(1, 3, 2)
        assert "Invalid character '&'" in str(error)

    def test_invalid_token_in_operand_position(self, parse):
        """An illegal byte where an operand belongs is an InvalidTokenError."""
        with pytest.raises(InvalidTokenError):
            parse("1 + $")

    def test_unexpected_trailing_token(self, parse):
        """Two operands with no operator between them are rejected."""
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse("1 2")
        error = exc_info.value
        assert error.expected == TokenType.EOF
        assert error.found == Token(TokenType.INTEGER, 2, SourceLocation(1, 3))
        assert "Expected end of input, found integer 2" in str(error)

    def test_errors_share_base_class(self, parse):
        """Every parse error derives from ParserError."""
        for source in ["", "(1", "1 +", "&", "1 2"]:
            with pytest.raises(ParserError):
                parse(source)

    def test_lexer_error_propagates(self, parse):
        """Out-of-range literals surface as LexerError through the parser."""
        with pytest.raises(LexerError):
            parse("1 + 99999999999999999999")

    def test_error_points_at_source(self, parse):
        """The rendered error shows the input line and a caret."""
        with pytest.raises(InvalidTokenError) as exc_info:
            parse("1 & 2")
        assert str(exc_info.value) == "[1:3] Invalid character '&'\n    1 & 2\n      ^"


class TestParserConsume:
    """Tests for kind-based token consumption."""

    def test_consume_ignores_payload(self, parser_factory):
        """Expecting INTEGER accepts any integer value."""
        parser = parser_factory("42 )")
        token = parser._consume(TokenType.INTEGER)
        assert token.value == 42
        assert parser.current_token.type == TokenType.RPAREN

    def test_consume_mismatch(self, parser_factory):
        """A kind mismatch raises UnexpectedTokenError and keeps the lookahead."""
        parser = parser_factory("42")
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parser._consume(TokenType.RPAREN)
        assert exc_info.value.expected == TokenType.RPAREN
        assert parser.current_token.type == TokenType.INTEGER
