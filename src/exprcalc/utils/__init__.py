"""
exprcalc Utilities Package.

Error types and source locations.
"""

from exprcalc.utils.errors import (
    DivisionByZeroError,
    EmptyInputError,
    EvaluationError,
    ExprCalcError,
    InvalidExpressionError,
    InvalidTokenError,
    LexerError,
    MissingClosingParenthesisError,
    ParserError,
    SourceLocation,
    UnexpectedTokenError,
    line_at,
)

__all__ = [
    # Base
    "ExprCalcError",
    "SourceLocation",
    "line_at",
    # Lexing
    "LexerError",
    # Parsing
    "ParserError",
    "UnexpectedTokenError",
    "MissingClosingParenthesisError",
    "InvalidExpressionError",
    "InvalidTokenError",
    "EmptyInputError",
    # Evaluation
    "EvaluationError",
    "DivisionByZeroError",
]
