from __future__ import annotations

from collections.abc import Mapping
from typing import Any

DEFAULT_LEVELS: dict[int, str] = {
    10: "TRACE",
    20: "DEBUG",
    30: "INFO",
    40: "WARN",
    50: "ERROR",
    60: "FATAL",
}

# Label for numeric levels nobody registered.
FALLBACK_LABEL = "USERLVL"


class LevelTable:
    """Numeric severity -> display label, with caller overrides."""

    def __init__(self, custom: Mapping[int, str] | None = None):
        self._labels = dict(DEFAULT_LEVELS)
        if custom:
            self._labels.update(custom)

    def label(self, level: Any) -> str:
        if isinstance(level, bool):
            return str(level).lower()
        if isinstance(level, float) and level.is_integer():
            level = int(level)
        if isinstance(level, int):
            return self._labels.get(level, FALLBACK_LABEL)
        if isinstance(level, str):
            # Some producers emit names instead of numbers.
            return level.upper()
        return str(level)
