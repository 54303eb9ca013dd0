from .lexer import Lexer, Token, TokenCursor, TokenKind
from .parser import Parser, ParseError, parse_one
from .errors import (
    ArityError,
    CalcError,
    MatchError,
    RecursionLimitError,
    ScopeError,
    StatementError,
    UndefinedNameError,
)
from .evaluator import Evaluator, format_result
from .stdlib import Builtin, DEFAULT_BUILTINS, DEFAULT_CONSTANTS

__all__ = [
    "Lexer",
    "Token",
    "TokenCursor",
    "TokenKind",
    "Parser",
    "ParseError",
    "parse_one",
    "ArityError",
    "CalcError",
    "MatchError",
    "RecursionLimitError",
    "ScopeError",
    "StatementError",
    "UndefinedNameError",
    "Evaluator",
    "format_result",
    "Builtin",
    "DEFAULT_BUILTINS",
    "DEFAULT_CONSTANTS",
]
