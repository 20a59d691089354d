"""Persistent JSON config helpers.

Holds color mode, theme name, size style, and date/time patterns.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "lsgit"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

COLOR_MODES = ("auto", "always", "never")
DEFAULT_DATE_FORMAT_RECENT = "%b %d"
DEFAULT_DATE_FORMAT_DISTANT = "%b %d %Y"
DEFAULT_TIME_FORMAT_RECENT = "%H:%M"
DEFAULT_TIME_FORMAT_DISTANT = "%H:%M"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def load_color_mode(config: dict[str, object] | None = None) -> str:
    """Return ``auto``/``always``/``never``; anything else means ``auto``."""
    data = load_config() if config is None else config
    value = data.get("color")
    if isinstance(value, bool):
        return "always" if value else "never"
    if isinstance(value, str) and value.strip().lower() in COLOR_MODES:
        return value.strip().lower()
    return "auto"


def load_theme_name(config: dict[str, object] | None = None) -> str | None:
    """Load persisted theme name, returning ``None`` when unset/invalid."""
    data = load_config() if config is None else config
    value = data.get("theme")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def load_compact_sizes(config: dict[str, object] | None = None) -> bool:
    """Return whether human-readable sizes use the integer form.

    Only explicit boolean values are accepted; any other type falls back to
    ``False``.
    """
    data = load_config() if config is None else config
    value = data.get("compact_sizes")
    return value if isinstance(value, bool) else False


def _load_pattern(data: dict[str, object], key: str, default: str) -> str:
    value = data.get(key)
    if isinstance(value, str) and value:
        return value
    return default


def load_date_patterns(config: dict[str, object] | None = None) -> tuple[str, str]:
    """Return ``(recent, distant)`` strftime patterns for the date column."""
    data = load_config() if config is None else config
    return (
        _load_pattern(data, "date_format_recent", DEFAULT_DATE_FORMAT_RECENT),
        _load_pattern(data, "date_format_distant", DEFAULT_DATE_FORMAT_DISTANT),
    )


def load_time_patterns(config: dict[str, object] | None = None) -> tuple[str, str]:
    """Return ``(recent, distant)`` strftime patterns for the time column."""
    data = load_config() if config is None else config
    return (
        _load_pattern(data, "time_format_recent", DEFAULT_TIME_FORMAT_RECENT),
        _load_pattern(data, "time_format_distant", DEFAULT_TIME_FORMAT_DISTANT),
    )


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "COLOR_MODES",
    "load_config",
    "load_color_mode",
    "load_theme_name",
    "load_compact_sizes",
    "load_date_patterns",
    "load_time_patterns",
]
