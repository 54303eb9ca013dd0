"""Interactive shell for calclang. Uses cmd as backend and termcolor for output."""

from __future__ import annotations

import cmd
from typing import Optional

from termcolor import colored

from .errors import CalcError
from .evaluator import Evaluator, format_result
from .stdlib import reference

NUMBER_COLOR = "yellow"
TEXT_COLOR = "light_blue"
ERROR_COLOR = "red"

COMMANDS = ("help", "exit", "EOF")


class Shell(cmd.Cmd):
    """calclang interpreter shell."""

    intro = (
        "calclang :: arithmetic with pattern-matched functions\n"
        "Type 'help' for more information."
    )
    prompt = "> "

    def __init__(
        self, evaluator: Optional[Evaluator] = None, color: bool = True, *args, **kwargs
    ):
        super().__init__(*args, **kwargs)
        self.evaluator = evaluator if evaluator is not None else Evaluator()
        self.color = color

    def onecmd(self, line: str):
        # only the shell commands go through cmd's dispatch; "let f(0) = 1"
        # would otherwise be looked up as do_let
        if line.strip().split(" ", 1)[0] in COMMANDS:
            return super().onecmd(line)
        return self.default(line)

    def default(self, line: str):
        """Evaluates one statement and prints its result."""
        try:
            result = self.evaluator.feed_statement(line)
        except CalcError as e:
            self._print(self._paint(str(e), ERROR_COLOR))
            return False
        except Exception as e:
            # cmd.Cmd would leave the loop on an uncaught exception
            self._print(self._paint(f"[internal] {type(e).__name__}: {e}", ERROR_COLOR))
            return False
        color = TEXT_COLOR if isinstance(result, str) else NUMBER_COLOR
        self._print(self._paint(format_result(result), color))
        return False

    def completedefault(self, text, line, begidx, endidx):
        return [name for name in self.evaluator.names() if name.startswith(text)]

    def completenames(self, text, *ignored):
        return super().completenames(text, *ignored) + self.completedefault(
            text, "", 0, 0
        )

    def do_help(self, arg):
        """Doesn't return docs, but rather a short intro and the builtin list."""
        self._print(
            "Statements:\n"
            "  1 + 2 * 3                 evaluate an expression\n"
            "  const x = 5               bind a global constant\n"
            "  let f(0) = 1              add a clause matching the literal 0\n"
            "  let f(n) = n * f(n - 1)   add a clause binding n\n"
            "Clauses are tried in the order they were defined; results of\n"
            "calls are cached for the rest of the session.\n"
            "\n"
            "Builtins:\n" + reference()
        )

    def do_EOF(self, arg):
        """Exits interpreter."""
        self._print("")
        return True

    def do_exit(self, arg):
        """Exits interpreter."""
        return True

    def _paint(self, text: str, color: str) -> str:
        if not self.color:
            return text
        return colored(text, color)

    def _print(self, text: str) -> None:
        self.stdout.write(text + "\n")


__all__ = ["Shell"]
