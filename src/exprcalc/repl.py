"""
exprcalc Interactive REPL (Read-Eval-Print Loop).

Reads one line at a time, runs it through the scan/parse/evaluate pipeline
and prints the result or the error. Errors never end the session.

Usage:
    exprcalc repl
    exprcalc i

Example session:
    >>> 1 + 2 * 3
    7

    >>> 2(3 + 4)
    14

    >>> 1 / 0
    Error: [1:3] Division by zero
        1 / 0
          ^

    >>> :ast -(2 + 3)
    UnaryExpression -
      Grouping
        ...
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

try:
    import readline

    HAS_READLINE = True
except ImportError:
    # readline not available on some platforms (e.g., Windows without pyreadline)
    HAS_READLINE = False

from exprcalc import __version__
from exprcalc.compiler import evaluate_source
from exprcalc.compiler.evaluator import TRACE_LOGGER_NAME, logging_observer
from exprcalc.compiler.lexer import Lexer
from exprcalc.compiler.parser import parse
from exprcalc.formatter import format_number, format_tree
from exprcalc.utils.errors import ExprCalcError

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_FILE = Path.home() / ".exprcalc_history"


# =============================================================================
# ANSI Color Codes
# =============================================================================


class Colors:
    """ANSI escape codes for colored terminal output."""

    RED = "\033[91m"
    GREEN = "\033[92m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RESET = "\033[0m"

    @classmethod
    def disable(cls) -> None:
        """Disable all colors."""
        for attr in ["RED", "GREEN", "CYAN", "GRAY", "BOLD", "DIM", "RESET"]:
            setattr(cls, attr, "")


def _init_colors() -> None:
    """Initialize colors based on terminal capabilities."""
    if not sys.stdout.isatty() or os.environ.get("NO_COLOR"):
        Colors.disable()


_init_colors()


def history_file_path() -> Path:
    """Return the history file, honoring EXPRCALC_HISTORY."""
    override = os.environ.get("EXPRCALC_HISTORY")
    if override:
        return Path(override).expanduser()
    return DEFAULT_HISTORY_FILE


# =============================================================================
# REPL Commands
# =============================================================================


@dataclass
class REPLCommand:
    """A REPL command definition."""

    name: str
    handler: Callable[["REPLSession", str], Optional[str]]
    aliases: tuple[str, ...] = ()
    args: str = ""
    help_text: str = ""


# =============================================================================
# REPL Session
# =============================================================================


class REPLSession:
    """
    Interactive REPL session.

    Each input line is an independent pipeline run; the session only keeps
    the input history and the trace setting.
    """

    def __init__(self) -> None:
        """Initialize a new REPL session."""
        self.history: list[str] = []
        self.trace = False
        self._trace_handler: Optional[logging.Handler] = None

        self._commands = self._setup_commands()

        self.prompt = ">>> "

    def _setup_commands(self) -> dict[str, REPLCommand]:
        """Setup REPL commands."""
        commands = {
            "help": REPLCommand(
                name="help",
                aliases=("h", "?"),
                help_text="Show this help message",
                handler=self._cmd_help,
            ),
            "quit": REPLCommand(
                name="quit",
                aliases=("q", "exit"),
                help_text="Exit the REPL",
                handler=self._cmd_quit,
            ),
            "ast": REPLCommand(
                name="ast",
                aliases=(),
                args="<expr>",
                help_text="Show the expression tree of an expression",
                handler=self._cmd_ast,
            ),
            "tokens": REPLCommand(
                name="tokens",
                aliases=("tok",),
                args="<expr>",
                help_text="Show the tokens of an expression",
                handler=self._cmd_tokens,
            ),
            "trace": REPLCommand(
                name="trace",
                aliases=(),
                help_text="Toggle the evaluation trace",
                handler=self._cmd_trace,
            ),
            "history": REPLCommand(
                name="history",
                aliases=("hist",),
                help_text="Show the input history",
                handler=self._cmd_history,
            ),
        }

        # Build alias lookup
        alias_map = {}
        for cmd in commands.values():
            alias_map[cmd.name] = cmd
            for alias in cmd.aliases:
                alias_map[alias] = cmd

        return alias_map

    # -------------------------------------------------------------------------
    # Command Handlers
    # -------------------------------------------------------------------------

    def _cmd_help(self, session: "REPLSession", args: str) -> str:
        """Show help message."""
        lines = [f"{Colors.BOLD}Commands:{Colors.RESET}"]

        # The lookup holds each command once per alias
        listed: set[str] = set()
        for cmd in self._commands.values():
            if cmd.name in listed:
                continue
            listed.add(cmd.name)
            usage = ", ".join(f":{name}" for name in (cmd.name, *cmd.aliases))
            if cmd.args:
                usage = f"{usage} {cmd.args}"
            lines.append(f"  {Colors.CYAN}{usage:<22}{Colors.RESET}{cmd.help_text}")

        lines += [
            "",
            f"{Colors.BOLD}Syntax:{Colors.RESET}",
            f"  {Colors.GREEN}1 + 2 * 3{Colors.RESET}       Operators + - * /",
            f"  {Colors.GREEN}-(2 + 3){Colors.RESET}        Unary negation",
            f"  {Colors.GREEN}2(3 + 4){Colors.RESET}        Implicit multiplication",
        ]
        return "\n".join(lines)

    def _cmd_quit(self, session: "REPLSession", args: str) -> str:
        """Exit the REPL."""
        print(f"{Colors.DIM}Goodbye!{Colors.RESET}")
        sys.exit(0)

    def _cmd_ast(self, session: "REPLSession", args: str) -> str:
        """Show the expression tree."""
        if not args.strip():
            return f"{Colors.RED}Error: :ast requires an expression{Colors.RESET}"

        try:
            return format_tree(parse(args))
        except ExprCalcError as e:
            return f"{Colors.RED}Error: {e}{Colors.RESET}"

    def _cmd_tokens(self, session: "REPLSession", args: str) -> str:
        """Show the token stream."""
        if not args.strip():
            return f"{Colors.RED}Error: :tokens requires an expression{Colors.RESET}"

        try:
            return "\n".join(repr(token) for token in Lexer(args).tokenize())
        except ExprCalcError as e:
            return f"{Colors.RED}Error: {e}{Colors.RESET}"

    def _cmd_trace(self, session: "REPLSession", args: str) -> str:
        """Toggle the evaluation trace."""
        self.set_trace(not self.trace)
        state = "on" if self.trace else "off"
        return f"{Colors.GREEN}Trace {state}{Colors.RESET}"

    def _cmd_history(self, session: "REPLSession", args: str) -> str:
        """Show input history."""
        if not self.history:
            return f"{Colors.DIM}No history{Colors.RESET}"
        return "\n".join(f"{i:4d}  {line}" for i, line in enumerate(self.history, 1))

    # -------------------------------------------------------------------------
    # Tracing
    # -------------------------------------------------------------------------

    def set_trace(self, enabled: bool) -> None:
        """Route the evaluation trace to stdout, or stop doing so."""
        trace_logger = logging.getLogger(TRACE_LOGGER_NAME)

        if enabled and self._trace_handler is None:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(f"{Colors.GRAY}%(message)s{Colors.RESET}"))
            trace_logger.addHandler(handler)
            trace_logger.setLevel(logging.DEBUG)
            trace_logger.propagate = False
            self._trace_handler = handler
        elif not enabled and self._trace_handler is not None:
            trace_logger.removeHandler(self._trace_handler)
            trace_logger.setLevel(logging.NOTSET)
            trace_logger.propagate = True
            self._trace_handler = None

        self.trace = enabled

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def eval_line(self, line: str) -> Optional[str]:
        """
        Evaluate a single line of input.

        Returns the result string or None if no output.
        """
        line = line.strip()
        if not line:
            return None

        # Handle commands
        if line.startswith(":"):
            return self._handle_command(line)

        observer = logging_observer() if self.trace else None
        try:
            return format_number(evaluate_source(line, observer))
        except ExprCalcError as e:
            return f"{Colors.RED}Error: {e}{Colors.RESET}"
        except RecursionError:
            logger.debug("Recursion limit reached for %r", line)
            return f"{Colors.RED}Error: Expression is nested too deeply{Colors.RESET}"

    def _handle_command(self, cmd: str) -> str:
        """Handle a REPL command."""
        parts = cmd[1:].split(maxsplit=1)
        command_name = parts[0].lower() if parts else ""
        args = parts[1] if len(parts) > 1 else ""

        if command_name in self._commands:
            return self._commands[command_name].handler(self, args) or ""

        return f"{Colors.RED}Unknown command: :{command_name}{Colors.RESET}\nType :help for available commands"

    # -------------------------------------------------------------------------
    # Main Loop
    # -------------------------------------------------------------------------

    def run(self) -> None:
        """Main REPL loop."""
        print(f"{Colors.BOLD}exprcalc {__version__}{Colors.RESET} - Interactive Mode")
        print(
            f"Type {Colors.CYAN}:help{Colors.RESET} for help, {Colors.CYAN}:quit{Colors.RESET} to exit"
        )
        print()

        history_file = history_file_path()

        # Setup readline if available
        if HAS_READLINE:
            completer = REPLCompleter(self)
            readline.set_completer(completer.complete)
            readline.parse_and_bind("tab: complete")

            try:
                if history_file.exists():
                    readline.read_history_file(str(history_file))
            except OSError as e:
                logger.warning("Could not read history file %s: %s", history_file, e)

        try:
            while True:
                try:
                    line = input(self.prompt)

                    if line.strip():
                        self.history.append(line.strip())

                    result = self.eval_line(line)
                    if result:
                        print(result)

                except KeyboardInterrupt:
                    print(f"\n{Colors.DIM}Use :quit to exit{Colors.RESET}")
                except EOFError:
                    print(f"\n{Colors.DIM}Goodbye!{Colors.RESET}")
                    break

        finally:
            self.set_trace(False)
            if HAS_READLINE:
                try:
                    readline.set_history_length(1000)
                    readline.write_history_file(str(history_file))
                except OSError as e:
                    logger.warning("Could not write history file %s: %s", history_file, e)


# =============================================================================
# Tab Completion
# =============================================================================


class REPLCompleter:
    """Tab completion for REPL commands."""

    def __init__(self, session: REPLSession) -> None:
        self.session = session
        self.commands = sorted(f":{name}" for name in session._commands)
        self._completions: list[str] = []

    def complete(self, text: str, state: int) -> Optional[str]:
        """Get completions for the given text."""
        if state == 0:
            # Build completions on first call
            self._completions = self._get_completions(text)
        try:
            return self._completions[state]
        except IndexError:
            return None

    def _get_completions(self, text: str) -> list[str]:
        """Get all command completions for the given text prefix."""
        if not text.startswith(":"):
            return []
        return [c for c in self.commands if c.startswith(text)]

