"""
exprcalc Compiler Package.

This package contains the evaluation pipeline:
- Lexer: Scans input bytes into tokens, one per call
- Parser: Builds an expression tree with recursive descent
- AST: Node definitions for the expression tree
- Evaluator: Walks the tree to a double-precision value
"""

from __future__ import annotations

import logging
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
from exprcalc.compiler.evaluator import (
    EvalObserver,
    EvalStep,
    Evaluator,
    evaluate,
    logging_observer,
)
from exprcalc.compiler.lexer import Lexer, tokenize
from exprcalc.compiler.parser import Parser, parse
from exprcalc.compiler.tokens import Token, TokenType

logger = logging.getLogger(__name__)


def evaluate_source(
    source: Union[str, bytes],
    observer: Optional[EvalObserver] = None,
) -> float:
    """
    Run one line of input through scan, parse and evaluate.

    Each call owns its own lexer, parser and tree; nothing is shared between
    calls.

    Args:
        source: One line of expression text (trailing newline already stripped)
        observer: Optional evaluation trace observer

    Returns:
        The numeric result

    Raises:
        LexerError: If an integer literal is out of range
        ParserError: If the input is not a valid expression
        EvaluationError: If evaluation fails (division by zero)
    """
    lexer = Lexer(source)
    tree = Parser(lexer).parse()
    logger.debug("Parsed %r into %r", source, tree)

    text = lexer.source.decode("utf-8", errors="replace")
    result = Evaluator(observer, source=text).evaluate(tree)
    logger.debug("Evaluated %r to %r", source, result)
    return result


__all__ = [
    # Pipeline
    "evaluate_source",
    "Lexer",
    "Parser",
    "Evaluator",
    "tokenize",
    "parse",
    "evaluate",
    # Tokens
    "Token",
    "TokenType",
    # Tree
    "Expression",
    "IntegerLiteral",
    "FloatLiteral",
    "UnaryExpression",
    "BinaryExpression",
    "Grouping",
    "BinaryOperator",
    "UnaryOperator",
    # Tracing
    "EvalStep",
    "EvalObserver",
    "logging_observer",
]
