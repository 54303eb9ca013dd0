"""Recursive-descent parser for calclang.

Expressions are parsed by precedence climbing over ``LEVELS``, loosest
first. The operand parser for ``^`` is the unary level, so unary minus binds
tighter than exponentiation: ``-2^2`` is ``(-2)^2``.
"""

from __future__ import annotations

from typing import List, Optional

from . import lexer
from .ast import Binary, Call, Const, Expr, Let, Number, Statement, Unary, Var
from .errors import CalcError


class ParseError(CalcError):
    pass


LEFT = "left"
RIGHT = "right"
PREFIX = "prefix"

LEVELS = [
    (LEFT, ("+", "-")),
    (LEFT, ("*", "/")),
    (RIGHT, ("^",)),
    (PREFIX, ("-",)),
]


class Parser:
    def __init__(self, source: str):
        self.tokens = lexer.TokenCursor(lexer.Lexer(source))

    def parse_one(self) -> Optional[Statement]:
        if self._check_kind(lexer.TokenKind.EOF):
            return None
        stmt = self._statement()
        if not self._check_kind(lexer.TokenKind.EOF):
            tok = self.tokens.advance()
            raise ParseError(
                f'unexpected token "{tok.text}" of type <{tok.kind.value}> '
                "at the end of the statement"
            )
        return stmt

    # --- statements ---
    def _statement(self) -> Statement:
        text = self.tokens.peek().text
        if text == "let":
            return self._let_statement()
        if text == "const":
            return self._const_statement()
        return self._expression()

    def _let_statement(self) -> Let:
        start = self._expect("let")
        name_tok = self._consume_kind(lexer.TokenKind.WORD)
        params = self._arguments()
        self._expect("=")
        body = self._expression()
        return Let(name=name_tok.text, params=params, body=body, pos=start.pos)

    def _const_statement(self) -> Const:
        start = self._expect("const")
        name_tok = self._consume_kind(lexer.TokenKind.WORD)
        self._expect("=")
        value = self._expression()
        return Const(name=name_tok.text, value=value, pos=start.pos)

    def _arguments(self) -> List[Expr]:
        self._expect("(")
        if self._match(")"):
            return []
        args: List[Expr] = []
        while True:
            args.append(self._expression())
            if not self._match(","):
                break
        self._expect(")")
        return args

    # --- expressions ---
    def _expression(self) -> Expr:
        return self._level(0)

    def _level(self, index: int) -> Expr:
        if index == len(LEVELS):
            return self._primary()
        assoc, ops = LEVELS[index]
        if assoc == LEFT:
            return self._binary_left(index, ops)
        if assoc == RIGHT:
            return self._binary_right(index, ops)
        return self._prefix(index, ops)

    def _binary_left(self, index: int, ops) -> Expr:
        expr = self._level(index + 1)
        while self._check_operator(ops):
            op_tok = self.tokens.advance()
            right = self._level(index + 1)
            expr = Binary(expr, op_tok.text, right, pos=op_tok.pos)
        return expr

    def _binary_right(self, index: int, ops) -> Expr:
        left = self._level(index + 1)
        if self._check_operator(ops):
            op_tok = self.tokens.advance()
            right = self._binary_right(index, ops)
            return Binary(left, op_tok.text, right, pos=op_tok.pos)
        return left

    def _prefix(self, index: int, ops) -> Expr:
        if self._check_operator(ops):
            op_tok = self.tokens.advance()
            return Unary(op_tok.text, self._prefix(index, ops), pos=op_tok.pos)
        return self._level(index + 1)

    def _primary(self) -> Expr:
        tok = self.tokens.peek()
        if tok.kind == lexer.TokenKind.NUMBER:
            self.tokens.advance()
            return Number(float(tok.text), pos=tok.pos)
        if tok.kind == lexer.TokenKind.WORD:
            self.tokens.advance()
            if self.tokens.peek().text == "(":
                return Call(tok.text, self._arguments(), pos=tok.pos)
            return Var(tok.text, pos=tok.pos)
        if self._match("("):
            expr = self._expression()
            self._expect(")")
            return expr
        tok = self.tokens.advance()
        raise ParseError(
            f'expected <number>, <word> or "(", '
            f'found "{tok.text}" of type <{tok.kind.value}>'
        )

    # --- helpers ---
    def _check_kind(self, kind: lexer.TokenKind) -> bool:
        return self.tokens.peek().kind == kind

    def _check_operator(self, ops) -> bool:
        tok = self.tokens.peek()
        return tok.kind == lexer.TokenKind.OPERATOR and tok.text in ops

    def _match(self, text: str) -> bool:
        if self.tokens.peek().text == text:
            self.tokens.advance()
            return True
        return False

    def _expect(self, text: str) -> lexer.Token:
        tok = self.tokens.advance()
        if tok.text != text:
            raise ParseError(f'expected "{text}", found "{tok.text}"')
        return tok

    def _consume_kind(self, kind: lexer.TokenKind) -> lexer.Token:
        tok = self.tokens.advance()
        if tok.kind != kind:
            raise ParseError(
                f"expected token of type <{kind.value}>, "
                f'found "{tok.text}" of type <{tok.kind.value}>'
            )
        return tok


def parse_one(source: str) -> Optional[Statement]:
    return Parser(source).parse_one()


__all__ = ["Parser", "ParseError", "parse_one", "LEVELS"]
