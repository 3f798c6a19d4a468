"""
exprcalc - A line-oriented arithmetic expression calculator.

Scans a line of text into tokens, parses it with recursive descent into an
expression tree, and evaluates the tree to a double-precision number.
Supports + - * /, unary negation, parentheses and implicit multiplication
before a parenthesis (2(3 + 4) is 2 * (3 + 4)).
"""

__version__ = "0.1.0"

from exprcalc.compiler import evaluate_source
from exprcalc.compiler.evaluator import Evaluator
from exprcalc.compiler.lexer import Lexer
from exprcalc.compiler.parser import Parser

__all__ = [
    "evaluate_source",
    "Lexer",
    "Parser",
    "Evaluator",
]
