# Interactive shell for rpncalc.
#
# Reads one line per iteration, forwards it to parse/evaluate and prints either
# "Result: <value>" or the error message. A line reading "exit" ends the session,
# as do Ctrl-D and ":exit"/"quit". History is kept with prompt_toolkit's FileHistory.

from __future__ import annotations

import logging
from typing import Optional, Tuple

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import FileHistory

from .config import Settings
from .expression import CalculatorError, format_number, parse, render

logger = logging.getLogger(__name__)

EXIT_COMMANDS = {"exit", "quit", ":exit", ":quit"}

HELP_TEXT = (
    "rpncalc help:\n"
    "Tokens must be separated by single spaces.\n"
    "Operators (high -> low precedence):\n"
    "  ^      power (right-assoc)\n"
    "  * /    multiply, divide\n"
    "  + -    add, subtract\n"
    "  ( )    grouping\n"
    "Negative numbers are written without a space: -5 - 3\n"
    "Examples:\n"
    "  1 + 2 * 3       -> 7\n"
    "  2 ^ 3 ^ 2       -> 512\n"
    "  ( 1 + 2 ) * 3   -> 9\n"
    "  1 / 0           -> inf\n"
    "Commands:\n"
    "  help            show this help\n"
    "  rpn <expr>      show the postfix form of an expression\n"
    "  exit            leave the calculator\n"
)


class REPL:
    """Read-Eval-Print Loop for the calculator."""

    def __init__(self, settings: Optional[Settings] = None, session: Optional[PromptSession] = None):
        self.settings = settings or Settings()
        self._session = session

    @property
    def session(self) -> PromptSession:
        # Created on first use so that evaluate_line works without a terminal.
        if self._session is None:
            self._session = PromptSession(history=FileHistory(self.settings.history_file))
        return self._session

    def is_exit(self, line: str) -> bool:
        return line.strip().lower() in EXIT_COMMANDS

    def evaluate_line(self, line: str) -> Tuple[bool, str]:
        """Evaluate a single line (either command or expression). Returns (ok, output)."""
        # Commands are matched loosely; expressions go to parse() untouched.
        command = line.strip().lower()
        if command == "help":
            return True, HELP_TEXT

        text = line
        show_rpn = command.startswith("rpn ")
        if show_rpn:
            text = line.lstrip()[4:]

        try:
            expression = parse(text)
            if show_rpn:
                return True, f"RPN: {render(expression.to_rpn())}"
            result = expression.evaluate()
        except CalculatorError as e:
            logger.debug("Rejected %r: %s", text, e)
            return False, str(e)
        return True, f"Result: {format_number(result)}"

    def repl_loop(self) -> None:
        """Interactive loop; Ctrl-C discards the current line, Ctrl-D or 'exit' quits."""
        completer = WordCompleter(["help", "rpn", "exit"], ignore_case=True)
        while True:
            try:
                line = self.session.prompt(self.settings.prompt, completer=completer)
            except KeyboardInterrupt:
                print("^C")
                continue
            except EOFError:
                print("Exiting.")
                break
            if self.is_exit(line):
                break
            if not line.strip():
                continue
            ok, out = self.evaluate_line(line)
            print(out)
            print()
