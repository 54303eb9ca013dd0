"""Syntax highlighting for calclang, driven by the real lexer."""

from __future__ import annotations

from PySide6 import QtGui

from calclang.lexer import Lexer, TokenKind


def token_styles(text: str) -> list[tuple[int, int, str]]:
    """(start, length, category) for every token in text, EOF excluded."""
    spans = []
    for tok in Lexer(text).scan():
        if tok.kind == TokenKind.EOF:
            break
        spans.append((tok.pos, len(tok.text), tok.kind.value))
    return spans


class CalcHighlighter(QtGui.QSyntaxHighlighter):
    def __init__(self, parent=None, colors: dict[str, str] | None = None):
        super().__init__(parent)
        self.formats: dict[str, QtGui.QTextCharFormat] = {}
        self.set_colors(colors or {})

    def set_colors(self, colors: dict[str, str]) -> None:
        self.formats = {}
        for category, color in colors.items():
            fmt = QtGui.QTextCharFormat()
            fmt.setForeground(QtGui.QColor(color))
            if category == "keyword":
                fmt.setFontWeight(QtGui.QFont.Bold)
            if category == "invalid":
                fmt.setFontUnderline(True)
            self.formats[category] = fmt
        self.rehighlight()

    def highlightBlock(self, text: str):
        for start, length, category in token_styles(text):
            fmt = self.formats.get(category)
            if fmt is not None:
                self.setFormat(start, length, fmt)
