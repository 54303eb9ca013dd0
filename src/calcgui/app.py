"""PySide6 console window for calclang."""

from __future__ import annotations

import sys

from PySide6 import QtCore, QtGui, QtWidgets

from calclang.errors import CalcError
from calclang.evaluator import Evaluator, format_result

from .highlighter import CalcHighlighter
from .theme import ThemeManager, ThemeMode


class HistoryLineEdit(QtWidgets.QLineEdit):
    """Line edit that walks previously submitted lines with Up/Down."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.history: list[str] = []
        self._index = 0

    def remember(self, line: str) -> None:
        if line and (not self.history or self.history[-1] != line):
            self.history.append(line)
        self._index = len(self.history)

    def keyPressEvent(self, event: QtGui.QKeyEvent):
        if event.key() == QtCore.Qt.Key_Up and self.history:
            self._index = max(0, self._index - 1)
            self.setText(self.history[self._index])
            return
        if event.key() == QtCore.Qt.Key_Down and self.history:
            self._index = min(len(self.history), self._index + 1)
            if self._index == len(self.history):
                self.clear()
            else:
                self.setText(self.history[self._index])
            return
        super().keyPressEvent(event)


class ConsoleWindow(QtWidgets.QMainWindow):
    def __init__(
        self, evaluator: Evaluator | None = None, theme: ThemeManager | None = None
    ):
        super().__init__()
        self.setWindowTitle("calclang console")
        self.evaluator = evaluator or Evaluator()
        self.theme_manager = theme or ThemeManager()
        self._build_ui()
        self._setup_menu()
        self._apply_theme()

    def _build_ui(self):
        mono_font = QtGui.QFont("Consolas", 13)

        self.transcript = QtWidgets.QTextEdit()
        self.transcript.setReadOnly(True)
        self.transcript.setFont(mono_font)
        self.transcript.setPlaceholderText("Results appear here…")

        self.input = HistoryLineEdit()
        self.input.setFont(mono_font)
        self.input.setPlaceholderText("let f(0) = 1   const x = 5   f(0) + x")
        self.input.returnPressed.connect(self.submit)

        # QLineEdit has no document; highlight a one-line mirror of the input
        self.preview = QtWidgets.QPlainTextEdit()
        self.preview.setReadOnly(True)
        self.preview.setFont(mono_font)
        self.preview.setMaximumHeight(self.preview.fontMetrics().height() * 2)
        self.highlighter = CalcHighlighter(self.preview.document())
        self.input.textChanged.connect(self.preview.setPlainText)

        run_btn = QtWidgets.QPushButton("Run")
        run_btn.clicked.connect(self.submit)
        clear_btn = QtWidgets.QPushButton("Clear")
        clear_btn.clicked.connect(self.transcript.clear)
        reset_btn = QtWidgets.QPushButton("Reset Session")
        reset_btn.clicked.connect(self.reset_session)

        input_bar = QtWidgets.QHBoxLayout()
        input_bar.addWidget(QtWidgets.QLabel(">"))
        input_bar.addWidget(self.input, 1)
        input_bar.addWidget(run_btn)

        buttons = QtWidgets.QHBoxLayout()
        buttons.addWidget(clear_btn)
        buttons.addWidget(reset_btn)
        buttons.addStretch(1)

        central = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(central)
        layout.addLayout(buttons)
        layout.addWidget(self.transcript, 1)
        layout.addWidget(self.preview)
        layout.addLayout(input_bar)
        self.setCentralWidget(central)

    def _setup_menu(self):
        view_menu = self.menuBar().addMenu("View")
        for label, mode in (
            ("Light Theme", ThemeMode.LIGHT),
            ("Dark Theme", ThemeMode.DARK),
            ("System Theme", ThemeMode.SYSTEM),
        ):
            action = QtGui.QAction(label, self)
            action.triggered.connect(lambda checked=False, m=mode: self.set_theme(m))
            view_menu.addAction(action)

    # --- actions ---
    def submit(self):
        line = self.input.text()
        self.input.remember(line)
        self.input.clear()
        self._append(f"> {line}", None)
        try:
            result = self.evaluator.feed_statement(line)
        except CalcError as e:
            self._append(str(e), "error")
            return
        except Exception as e:
            # e.g. a custom builtin raising ZeroDivisionError
            self._append(f"[internal] {type(e).__name__}: {e}", "error")
            return
        role = "text" if isinstance(result, str) else "number"
        self._append(format_result(result), role)

    def reset_session(self):
        self.evaluator = Evaluator(
            builtins=self.evaluator.builtins,
            constants=self.evaluator.constants,
            cache_policy=self.evaluator.session.cache.policy,
            recursion_limit=self.evaluator.recursion_limit,
        )
        self._append("<session reset>", "text")

    def set_theme(self, mode: ThemeMode):
        self.theme_manager.save_theme_mode(mode)
        self._apply_theme()

    # --- helpers ---
    def _apply_theme(self):
        app = QtWidgets.QApplication.instance()
        if app is not None:
            self.theme_manager.apply_theme(app)
        self.highlighter.set_colors(self.theme_manager.get_syntax_colors())
        self._output_colors = self.theme_manager.get_output_colors()

    def _append(self, text: str, role: str | None):
        color = self._output_colors.get(role) if role else None
        fmt = QtGui.QTextCharFormat()
        if color:
            fmt.setForeground(QtGui.QColor(color))
        cursor = self.transcript.textCursor()
        cursor.movePosition(QtGui.QTextCursor.End)
        if not self.transcript.document().isEmpty():
            cursor.insertBlock()
        cursor.insertText(text, fmt)
        self.transcript.setTextCursor(cursor)

    def transcript_lines(self) -> list[str]:
        return self.transcript.toPlainText().splitlines()


def main():
    app = QtWidgets.QApplication(sys.argv)
    window = ConsoleWindow()
    window.resize(720, 520)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
