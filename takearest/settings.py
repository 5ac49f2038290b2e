"""Application preferences with JSON persistence.

Preferences are stored at:
    ~/Library/Application Support/TakeARest/settings.json

Set ``TAKEAREST_HOME`` to use another data directory.

Usage::

    settings = load_settings()
    settings.lock_screen_on_rest_start = True
    save_settings(settings)

Timer durations are *not* kept here; they live in the settings store's
session state so they survive alongside the presets they came from.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, get_args, get_type_hints

logger = logging.getLogger(__name__)


def _default_app_dir() -> Path:
    override = os.environ.get("TAKEAREST_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / "Library" / "Application Support" / "TakeARest"


APP_SUPPORT_DIR = _default_app_dir()
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"
DB_PATH = APP_SUPPORT_DIR / "takearest.db"
LOG_PATH = APP_SUPPORT_DIR / "takearest.log"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── storage / diagnostics ─────────────────────────────────────────
    database_url: str | None = None        # None → SQLite file in APP_SUPPORT_DIR
    log_level: str = "INFO"

    # ── rest ──────────────────────────────────────────────────────────
    rest_extension_seconds: int = 5 * 60
    lock_screen_on_rest_start: bool = False

    # ── window ────────────────────────────────────────────────────────
    minimize_to_tray: bool = True
    always_on_top: bool = False
    window_x: int | None = None
    window_y: int | None = None
    window_width: int = 420
    window_height: int = 560

    def resolved_database_url(self) -> str:
        return self.database_url or f"sqlite:///{DB_PATH}"


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            return Settings(**_usable_fields(data))
    except (OSError, ValueError, TypeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", SETTINGS_PATH, exc)
    return Settings()


def _accepts(hint: Any, value: Any) -> bool:
    allowed = get_args(hint) or (hint,)
    # bool is an int subclass; only accept it where bool is declared
    if isinstance(value, bool) and bool not in allowed:
        return False
    return isinstance(value, allowed)


def _usable_fields(data: dict) -> dict:
    """Known keys whose values match the field type; the rest keep defaults."""
    if not isinstance(data, dict):
        raise TypeError(f"expected a JSON object, got {type(data).__name__}")
    hints = get_type_hints(Settings)
    usable = {}
    for f in fields(Settings):
        if f.name not in data:
            continue
        value = data[f.name]
        if _accepts(hints[f.name], value):
            usable[f.name] = value
        else:
            logger.warning("Ignoring setting %s=%r (wrong type)", f.name, value)
    return usable


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
