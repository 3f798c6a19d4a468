"""
exprcalc Command-Line Interface.

Provides commands to evaluate expressions and inspect the pipeline stages.

Usage:
    exprcalc eval "1 + 2 * 3" "2(3 + 4)"
    exprcalc eval -                 # One expression per stdin line
    exprcalc eval --trace -- "-(2 + 3)"  # "--" before a leading minus
    exprcalc tokens "1 & 2"         # Dump tokens
    exprcalc ast "2(3 + 4)"         # Dump expression tree
    exprcalc repl                   # Interactive mode
"""

import argparse
import logging
import sys
from typing import Iterable, Optional

from exprcalc import __version__
from exprcalc.compiler import evaluate_source
from exprcalc.compiler.evaluator import TRACE_LOGGER_NAME, logging_observer
from exprcalc.compiler.lexer import Lexer
from exprcalc.compiler.parser import parse
from exprcalc.formatter import format_number, format_tree
from exprcalc.repl import Colors, REPLSession
from exprcalc.utils.errors import ExprCalcError

logger = logging.getLogger("exprcalc")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="exprcalc",
        description="exprcalc - Evaluate arithmetic expressions",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="warning",
        help="Logging level (default: warning)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Eval command
    eval_parser = subparsers.add_parser(
        "eval",
        aliases=["e"],
        help="Evaluate one or more expressions",
    )
    eval_parser.add_argument(
        "expressions",
        nargs="+",
        metavar="EXPR",
        help="Expressions to evaluate ('-' reads one expression per line from stdin)",
    )
    eval_parser.add_argument(
        "--trace",
        action="store_true",
        help="Log each evaluation step at debug level",
    )

    # Tokens command (debug)
    tokens_parser = subparsers.add_parser(
        "tokens",
        help="Show the tokens of an expression",
    )
    tokens_parser.add_argument(
        "expression",
        metavar="EXPR",
        help="Expression to scan",
    )

    # AST command (debug)
    ast_parser = subparsers.add_parser(
        "ast",
        help="Show the expression tree of an expression",
    )
    ast_parser.add_argument(
        "expression",
        metavar="EXPR",
        help="Expression to parse",
    )

    # REPL command
    subparsers.add_parser(
        "repl",
        aliases=["i"],
        help="Start interactive mode",
    )

    return parser


def configure_logging(level_name: str, trace: bool = False) -> None:
    """Configure the root logger and, when tracing, the trace logger."""
    logging.basicConfig(format=LOG_FORMAT, level=getattr(logging, level_name.upper()))
    if trace:
        logging.getLogger(TRACE_LOGGER_NAME).setLevel(logging.DEBUG)


def _iter_expressions(expressions: list[str]) -> Iterable[str]:
    """Expand '-' into the lines of stdin."""
    for expression in expressions:
        if expression == "-":
            for line in sys.stdin:
                line = line.rstrip("\n")
                if line.strip():
                    yield line
        else:
            yield expression


def cmd_eval(args: argparse.Namespace) -> int:
    """Handle the eval command."""
    observer = logging_observer() if args.trace else None
    exit_code = 0

    for expression in _iter_expressions(args.expressions):
        try:
            result = evaluate_source(expression, observer)
            print(format_number(result))
        except ExprCalcError as e:
            print(f"{Colors.RED}Error: {e}{Colors.RESET}", file=sys.stderr)
            exit_code = 1
        except RecursionError:
            print(
                f"{Colors.RED}Error: Expression is nested too deeply{Colors.RESET}",
                file=sys.stderr,
            )
            exit_code = 1

    return exit_code


def cmd_tokens(args: argparse.Namespace) -> int:
    """Handle the tokens command (debug)."""
    try:
        for token in Lexer(args.expression).tokenize():
            print(repr(token))
        return 0

    except ExprCalcError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_ast(args: argparse.Namespace) -> int:
    """Handle the ast command (debug)."""
    try:
        print(format_tree(parse(args.expression)))
        return 0

    except ExprCalcError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_repl(args: argparse.Namespace) -> int:
    """Handle the repl command - start interactive mode."""
    session = REPLSession()
    session.run()
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.no_color:
        Colors.disable()

    configure_logging(args.log_level, trace=getattr(args, "trace", False))

    if args.command is None:
        parser.print_help()
        return 0

    command_handlers = {
        "eval": cmd_eval,
        "e": cmd_eval,
        "tokens": cmd_tokens,
        "ast": cmd_ast,
        "repl": cmd_repl,
        "i": cmd_repl,
    }

    handler = command_handlers.get(args.command)
    if handler:
        logger.debug("Running command %s", args.command)
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
