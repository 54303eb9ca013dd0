"""
calclang lexer.

Pulls characters from a Buffer and emits one Token per ``next_token`` call.
Unknown characters never raise here; they become INVALID tokens and the
parser reports them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional


class TokenKind(Enum):
    NUMBER = "number"
    OPERATOR = "operator"
    PUNCTUATION = "punctuation"
    KEYWORD = "keyword"
    WORD = "word"
    INVALID = "invalid"
    EOF = "eof"


OPERATORS = {"+", "-", "*", "/", "^"}
PUNCTUATION = {"=", "(", ")", ","}
KEYWORDS = {"let", "const"}

DIGITS = "0123456789"
LETTERS = "_abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    pos: int = 0


class Buffer:
    """Character cursor over the raw source."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0

    @property
    def current(self) -> str:
        if self.finished:
            return ""
        return self.source[self.pos]

    @property
    def finished(self) -> bool:
        return self.pos >= len(self.source)

    def next(self) -> str:
        ch = self.current
        self.pos += 1
        return ch


def is_digit(ch: str) -> bool:
    return ch != "" and ch in DIGITS


def is_letter(ch: str) -> bool:
    return ch != "" and ch in LETTERS


def is_alnum(ch: str) -> bool:
    return is_letter(ch) or is_digit(ch)


def is_space(ch: str) -> bool:
    # any Unicode space, so a pasted no-break space is not INVALID
    return ch.isspace()


class Lexer:
    def __init__(self, source: str):
        self.buf = Buffer(source)

    def next_token(self) -> Token:
        self._read_while(is_space)
        start = self.buf.pos
        if self.buf.finished:
            return Token(TokenKind.EOF, "", start)

        c = self.buf.current
        if c in OPERATORS:
            return Token(TokenKind.OPERATOR, self.buf.next(), start)
        if c in PUNCTUATION:
            return Token(TokenKind.PUNCTUATION, self.buf.next(), start)
        if is_digit(c):
            return self._number(start)
        if is_letter(c):
            return self._word(start)
        return Token(TokenKind.INVALID, self.buf.next(), start)

    def scan(self) -> List[Token]:
        """Lex the whole source; the last token is always EOF."""
        tokens: List[Token] = []
        while True:
            tok = self.next_token()
            tokens.append(tok)
            if tok.kind == TokenKind.EOF:
                return tokens

    def _read_while(self, predicate: Callable[[str], bool]) -> str:
        start = self.buf.pos
        while not self.buf.finished and predicate(self.buf.current):
            self.buf.next()
        return self.buf.source[start : self.buf.pos]

    def _number(self, start: int) -> Token:
        text = self._read_while(is_digit)
        # "12." is accepted as a number
        if self.buf.current == ".":
            text += self.buf.next()
            text += self._read_while(is_digit)
        return Token(TokenKind.NUMBER, text, start)

    def _word(self, start: int) -> Token:
        text = self._read_while(is_alnum)
        if text in KEYWORDS:
            return Token(TokenKind.KEYWORD, text, start)
        return Token(TokenKind.WORD, text, start)


class TokenCursor:
    """One token of lookahead over a Lexer."""

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self._current: Optional[Token] = None

    def peek(self) -> Token:
        if self._current is None:
            self._current = self.lexer.next_token()
        return self._current

    def advance(self) -> Token:
        tok = self.peek()
        self._current = self.lexer.next_token()
        return tok


__all__ = [
    "Buffer",
    "Lexer",
    "Token",
    "TokenCursor",
    "TokenKind",
    "KEYWORDS",
    "OPERATORS",
    "PUNCTUATION",
]
