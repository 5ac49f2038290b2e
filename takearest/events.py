"""Process-wide pause channel.

Lets a decoupled surface (the tray menu) mirror the timer's pause state
and ask for a toggle without holding a reference to the engine.

Signals
-------
pause_state_changed(is_paused: bool)
    Published by the engine at construction and on every pause change.
toggle_pause_requested()
    Any surface may ask the engine to toggle pause.
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, pyqtSignal

logger = logging.getLogger(__name__)


class EventBus(QObject):
    """Signal hub shared by the engine and the tray.

    The last published pause state is kept so a late subscriber can
    render the current label straight away.
    """

    pause_state_changed = pyqtSignal(bool)
    toggle_pause_requested = pyqtSignal()

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._last_pause_state: bool | None = None

    @property
    def last_pause_state(self) -> bool | None:
        """The most recent published pause state, or ``None``."""
        return self._last_pause_state

    def publish_pause_state(self, is_paused: bool) -> None:
        self._last_pause_state = is_paused
        logger.debug("pause state -> %s", is_paused)
        self.pause_state_changed.emit(is_paused)

    def request_toggle_pause(self) -> None:
        self.toggle_pause_requested.emit()
