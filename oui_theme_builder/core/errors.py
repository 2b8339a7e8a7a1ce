from __future__ import annotations

__all__ = [
    "ThemeEngineError",
    "InvalidSelectorError",
    "StylesheetAccessError",
    "SettingsError",
]


class ThemeEngineError(Exception):
    """Base class for errors raised by the theme engine and its hosts."""


class InvalidSelectorError(ThemeEngineError):
    """A host could not evaluate a selector (syntax it does not support)."""

    def __init__(self, selector: str, reason: str = "") -> None:
        self.selector = selector
        self.reason = reason
        message = f"Invalid selector '{selector}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class StylesheetAccessError(ThemeEngineError):
    """Rules of a stylesheet cannot be read (e.g. a cross-origin sheet)."""


class SettingsError(ThemeEngineError):
    """Engine settings file is missing or does not validate."""
