"""Timer package."""

from .engine import (
    TimerEngine,
    TimerSnapshot,
    Mode,
    DEFAULT_WORK_SECONDS,
    DEFAULT_REST_SECONDS,
    REST_EXTENSION_SECONDS,
    format_seconds,
)

__all__ = [
    "TimerEngine",
    "TimerSnapshot",
    "Mode",
    "DEFAULT_WORK_SECONDS",
    "DEFAULT_REST_SECONDS",
    "REST_EXTENSION_SECONDS",
    "format_seconds",
]
