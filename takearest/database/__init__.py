"""Database package."""

from .db import SettingsStore, SYSTEM_PRESETS, Preset, create_db_engine
from .models import TimingConfiguration, SessionState

__all__ = [
    "SettingsStore",
    "SYSTEM_PRESETS",
    "Preset",
    "create_db_engine",
    "TimingConfiguration",
    "SessionState",
]
