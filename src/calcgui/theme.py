"""Theme management for the calclang console with light/dark/system modes."""

from __future__ import annotations

from enum import Enum

from PySide6 import QtCore, QtGui, QtWidgets


class ThemeMode(Enum):
    """Theme mode enumeration."""

    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


SYNTAX_LIGHT = {
    "number": "#b71c1c",
    "operator": "#6a1b9a",
    "punctuation": "#424242",
    "keyword": "#0057b7",
    "word": "#000000",
    "invalid": "#d50000",
}
SYNTAX_DARK = {
    "number": "#ce9178",
    "operator": "#c586c0",
    "punctuation": "#a0a0a0",
    "keyword": "#569cd6",
    "word": "#d4d4d4",
    "invalid": "#f44747",
}

# same roles as the terminal shell: numbers yellow, confirmations blue
OUTPUT_LIGHT = {"number": "#8d6e00", "text": "#1565c0", "error": "#c62828"}
OUTPUT_DARK = {"number": "#dcdcaa", "text": "#4fc1ff", "error": "#f48771"}


class ThemeManager:
    """Manages application theme with persistence."""

    BG_LIGHT = "#ffffff"
    BG_DARK = "#1e1e1e"
    FG_LIGHT = "#000000"
    FG_DARK = "#e0e0e0"
    EDITOR_BG_LIGHT = "#ffffff"
    EDITOR_BG_DARK = "#252526"

    def __init__(self, settings: QtCore.QSettings | None = None):
        self.settings = settings or QtCore.QSettings("CalcLang", "calclang")
        self.current_mode = self._load_theme_mode()

    def _load_theme_mode(self) -> ThemeMode:
        saved = self.settings.value("theme_mode", "system")
        try:
            return ThemeMode(saved)
        except ValueError:
            return ThemeMode.SYSTEM

    def save_theme_mode(self, mode: ThemeMode) -> None:
        self.current_mode = mode
        self.settings.setValue("theme_mode", mode.value)

    def get_active_mode(self) -> ThemeMode:
        """Resolve SYSTEM to LIGHT or DARK from the running application's palette."""
        if self.current_mode == ThemeMode.SYSTEM:
            app = QtWidgets.QApplication.instance()
            if app and self._is_dark_palette(app.palette()):
                return ThemeMode.DARK
            return ThemeMode.LIGHT
        return self.current_mode

    def get_palette(self) -> QtGui.QPalette:
        if self.get_active_mode() == ThemeMode.DARK:
            return self._create_palette(self.BG_DARK, self.FG_DARK, self.EDITOR_BG_DARK)
        return self._create_palette(self.BG_LIGHT, self.FG_LIGHT, self.EDITOR_BG_LIGHT)

    def apply_theme(self, app: QtWidgets.QApplication) -> None:
        app.setPalette(self.get_palette())

    @staticmethod
    def _create_palette(bg: str, fg: str, base: str) -> QtGui.QPalette:
        palette = QtGui.QPalette()
        palette.setColor(QtGui.QPalette.Window, QtGui.QColor(bg))
        palette.setColor(QtGui.QPalette.WindowText, QtGui.QColor(fg))
        palette.setColor(QtGui.QPalette.Base, QtGui.QColor(base))
        palette.setColor(QtGui.QPalette.Text, QtGui.QColor(fg))
        palette.setColor(QtGui.QPalette.Button, QtGui.QColor(base))
        palette.setColor(QtGui.QPalette.ButtonText, QtGui.QColor(fg))
        return palette

    @staticmethod
    def _is_dark_palette(palette: QtGui.QPalette) -> bool:
        bg = palette.color(QtGui.QPalette.Window)
        return bg.lightness() < 128

    def get_syntax_colors(self) -> dict[str, str]:
        """Token category -> color for the current theme."""
        if self.get_active_mode() == ThemeMode.DARK:
            return dict(SYNTAX_DARK)
        return dict(SYNTAX_LIGHT)

    def get_output_colors(self) -> dict[str, str]:
        """Transcript role (number/text/error) -> color for the current theme."""
        if self.get_active_mode() == ThemeMode.DARK:
            return dict(OUTPUT_DARK)
        return dict(OUTPUT_LIGHT)
