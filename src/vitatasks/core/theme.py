# src/vitatasks/core/theme.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .session import atomic_write_json, load_json_object

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Palette:
    """ANSI styles the console uses for each kind of line."""

    accent: str
    muted: str
    alert: str
    success: str
    reset: str = "\033[0m"

    def paint(self, style: str, text: str) -> str:
        return f"{style}{text}{self.reset}" if style else text


DARK = Palette(accent="\033[94m", muted="\033[90m", alert="\033[91m", success="\033[92m")
LIGHT = Palette(accent="\033[34m", muted="\033[37m", alert="\033[31m", success="\033[32m")
PLAIN = Palette(accent="", muted="", alert="", success="", reset="")


class ThemeStore:
    """
    Dark/light preference, persisted as {"theme": "dark"|"light"}.

    With no stored choice the default comes from settings (VITA_THEME).
    """

    def __init__(self, path: str | Path, *, default_dark: bool = False) -> None:
        self._path = Path(path)
        self._default_dark = bool(default_dark)
        self._is_dark = self._default_dark

    @property
    def is_dark(self) -> bool:
        return self._is_dark

    @property
    def name(self) -> str:
        return "dark" if self._is_dark else "light"

    def hydrate(self) -> None:
        self._is_dark = self._default_dark
        if not self._path.exists():
            return
        try:
            data = load_json_object(self._path)
        except Exception as e:
            logger.warning("Ignoring unreadable theme file %s: %r", self._path, e)
            return
        theme = data.get("theme")
        if theme in ("dark", "light"):
            self._is_dark = theme == "dark"

    def set_theme(self, is_dark: bool) -> None:
        self._is_dark = bool(is_dark)
        try:
            atomic_write_json(self._path, {"theme": self.name})
        except Exception:
            logger.exception("Failed to persist theme to %s", self._path)

    def toggle(self) -> bool:
        self.set_theme(not self._is_dark)
        return self._is_dark

    def palette(self, *, color: bool = True) -> Palette:
        if not color:
            return PLAIN
        return DARK if self._is_dark else LIGHT
