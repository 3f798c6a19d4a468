"""
Pytest configuration and shared fixtures for exprcalc tests.
"""

import pytest

from exprcalc.compiler import evaluate_source
from exprcalc.compiler.ast_nodes import Expression
from exprcalc.compiler.evaluator import Evaluator
from exprcalc.compiler.lexer import Lexer
from exprcalc.compiler.parser import Parser
from exprcalc.compiler.tokens import Token


@pytest.fixture
def lexer_factory():
    """Factory fixture for creating lexers."""

    def _create_lexer(source: str) -> Lexer:
        return Lexer(source)

    return _create_lexer


@pytest.fixture
def parser_factory(lexer_factory):
    """Factory fixture for creating parsers from source."""

    def _create_parser(source: str) -> Parser:
        return Parser(lexer_factory(source))

    return _create_parser


@pytest.fixture
def tokenize(lexer_factory):
    """Fixture to tokenize source text."""

    def _tokenize(source: str) -> list[Token]:
        return lexer_factory(source).tokenize()

    return _tokenize


@pytest.fixture
def parse(parser_factory):
    """Fixture to parse source text into an expression tree."""

    def _parse(source: str) -> Expression:
        return parser_factory(source).parse()

    return _parse


@pytest.fixture
def evaluate():
    """Fixture to evaluate an expression tree."""

    def _evaluate(expr: Expression, observer=None) -> float:
        return Evaluator(observer).evaluate(expr)

    return _evaluate


@pytest.fixture
def run():
    """Fixture to run source text through the whole pipeline."""

    def _run(source: str, observer=None) -> float:
        return evaluate_source(source, observer)

    return _run
