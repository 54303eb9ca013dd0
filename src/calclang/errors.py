"""Error taxonomy for calclang.

Every failure inside lexing, parsing or evaluation surfaces as a CalcError
with a single human-readable message. ``Evaluator.feed_statement`` wraps
whatever was raised in a StatementError carrying the statement index.
"""

from __future__ import annotations


class CalcError(Exception):
    pass


class UndefinedNameError(CalcError):
    """Undefined variable or function."""


class ArityError(CalcError):
    """Builtin called with the wrong number of arguments."""


class MatchError(CalcError):
    """No clause of a user function accepts the call."""


class ScopeError(CalcError):
    """Attempt to leave the global scope."""


class RecursionLimitError(CalcError):
    """A user function recursed past the interpreter's stack limit."""


class StatementError(CalcError):
    def __init__(self, index: int, cause: CalcError):
        self.index = index
        self.cause = cause
        super().__init__(f"(Statement {index}) {cause}")


__all__ = [
    "CalcError",
    "UndefinedNameError",
    "ArityError",
    "MatchError",
    "ScopeError",
    "RecursionLimitError",
    "StatementError",
]
