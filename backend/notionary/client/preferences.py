from __future__ import annotations

import json
import logging
from pathlib import Path

from notionary.storage.records import _atomic_write_json

logger = logging.getLogger(__name__)

LIGHT = "light"
DARK = "dark"
THEMES = (LIGHT, DARK)


class Preferences:
    """Local UI preferences, kept in a small JSON file."""

    def __init__(self, path: Path):
        self.path = path

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable preferences %s: %s", self.path, exc)
            return {}
        return raw if isinstance(raw, dict) else {}

    @property
    def theme(self) -> str:
        theme = self._read().get("theme")
        return theme if theme in THEMES else LIGHT

    @theme.setter
    def theme(self, value: str) -> None:
        if value not in THEMES:
            raise ValueError(f"Unknown theme {value!r}")
        data = self._read()
        data["theme"] = value
        _atomic_write_json(self.path, data)
