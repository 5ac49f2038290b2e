"""Work/rest timer state machine for TakeARest.

States
------
WORKING   Work countdown.  ``paused`` may be set on top.
RESTING   Rest countdown, rest overlay shown unless dismissed early.

Transitions
-----------
WORKING → RESTING     (countdown expires, or switch_mode)
RESTING → WORKING     (countdown expires, switch_mode, or reset_timer)

``paused`` is orthogonal to the mode.  A pause caused by the session
locking is tracked separately (``auto_paused_by_lock``) so unlocking
only undoes what locking did and never resumes a manual pause.

Startup is two-phase: the engine is inert after construction and the
clock only starts from ``load_user_settings()``, which the host calls
once per process.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..database.db import SettingsStore
from ..database.models import TimingConfiguration
from ..errors import StorageError
from ..events import EventBus

logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class Mode(Enum):
    WORKING = "working"
    RESTING = "resting"


# ── constants ─────────────────────────────────────────────────────────────

DEFAULT_WORK_SECONDS = 45 * 60
DEFAULT_REST_SECONDS = 5 * 60
REST_EXTENSION_SECONDS = 5 * 60
TICK_INTERVAL_MS = 1000


@dataclass(frozen=True)
class TimerSnapshot:
    mode: Mode
    remaining_seconds: int
    paused: bool
    rest_overlay_visible: bool
    auto_paused_by_lock: bool
    work_seconds: int
    rest_seconds: int


def format_seconds(seconds: int) -> str:
    """``125`` → ``"02:05"``.  Minutes are not wrapped at an hour."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Qt-based work/rest timer.

    Signals
    -------
    changed()
        Emitted after every state mutation.
    tick(remaining_seconds: int)
        Emitted on every countdown decrement.
    mode_changed(mode: Mode)
        Emitted once per mode transition (expiry, switch or reset).
    pause_changed(paused: bool)
    rest_overlay_changed(visible: bool)
    durations_changed(work_seconds: int, rest_seconds: int)
    """

    changed = pyqtSignal()
    tick = pyqtSignal(int)
    mode_changed = pyqtSignal(object)
    pause_changed = pyqtSignal(bool)
    rest_overlay_changed = pyqtSignal(bool)
    durations_changed = pyqtSignal(int, int)

    def __init__(
        self,
        store: SettingsStore | None = None,
        bus: EventBus | None = None,
        parent: QObject | None = None,
        *,
        default_work_seconds: int = DEFAULT_WORK_SECONDS,
        default_rest_seconds: int = DEFAULT_REST_SECONDS,
    ) -> None:
        super().__init__(parent)

        self._store = store
        self._bus = bus

        # ── configuration ─────────────────────────────────────────────
        self._default_work: int = default_work_seconds
        self._default_rest: int = default_rest_seconds
        self._work_seconds: int = default_work_seconds
        self._rest_seconds: int = default_rest_seconds

        # ── runtime state ─────────────────────────────────────────────
        self._mode: Mode = Mode.WORKING
        self._remaining: int = default_work_seconds
        self._paused: bool = False
        self._rest_overlay_visible: bool = False
        self._auto_paused_by_lock: bool = False
        self._switching: bool = False

        # ── Qt timer ──────────────────────────────────────────────────
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(TICK_INTERVAL_MS)
        self._qt_timer.timeout.connect(self._on_tick)

        if self._bus is not None:
            self._bus.toggle_pause_requested.connect(self.toggle_pause)
            self._broadcast_pause()

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def is_working(self) -> bool:
        return self._mode == Mode.WORKING

    @property
    def remaining(self) -> int:
        """Seconds left in the current mode."""
        return self._remaining

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def rest_overlay_visible(self) -> bool:
        return self._rest_overlay_visible

    @property
    def auto_paused_by_lock(self) -> bool:
        return self._auto_paused_by_lock

    @property
    def is_transitioning(self) -> bool:
        return self._switching

    @property
    def is_clock_running(self) -> bool:
        return self._qt_timer.isActive()

    @property
    def work_seconds(self) -> int:
        return self._work_seconds

    @property
    def rest_seconds(self) -> int:
        return self._rest_seconds

    @property
    def total_duration(self) -> int:
        """Configured length of the current mode."""
        return self._work_seconds if self._mode == Mode.WORKING else self._rest_seconds

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress through the current mode."""
        total = self.total_duration
        if total <= 0:
            return 1.0
        return max(0.0, min(1.0, (total - self._remaining) / total))

    def formatted_time(self) -> str:
        return format_seconds(self._remaining)

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            mode=self._mode,
            remaining_seconds=self._remaining,
            paused=self._paused,
            rest_overlay_visible=self._rest_overlay_visible,
            auto_paused_by_lock=self._auto_paused_by_lock,
            work_seconds=self._work_seconds,
            rest_seconds=self._rest_seconds,
        )

    # ══════════════════════════════════════════════════════════════════
    #  STARTUP
    # ══════════════════════════════════════════════════════════════════

    def load_user_settings(self) -> None:
        """Adopt persisted durations and start the clock.

        Last-used durations win; otherwise the last selected preset;
        otherwise the built-in defaults, which are then written back so
        the next launch takes the first path.
        """
        self._stop_clock()

        state = None
        if self._store is not None:
            try:
                state = self._store.get_session_state()
            except StorageError as exc:
                logger.warning("Could not read session state, using defaults: %s", exc)

        if state is not None and state.last_used_durations is not None:
            work, rest = state.last_used_durations
            self._adopt(work, rest)
            logger.info("Restored last used durations %ss/%ss", work, rest)
            self._start_clock()
            return

        work, rest = self._default_work, self._default_rest
        if state is not None and state.last_selected_configuration_id is not None:
            config = self._find_configuration(state.last_selected_configuration_id)
            if config is not None:
                work, rest = config.work_seconds, config.rest_seconds
                logger.info("Using last selected preset %r", config.name)

        self._adopt(work, rest)
        self._persist_durations()
        self._start_clock()

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def toggle_pause(self) -> None:
        self._paused = not self._paused
        if not self._paused:
            self._auto_paused_by_lock = False
        self.pause_changed.emit(self._paused)
        self._broadcast_pause()
        self.changed.emit()

    def reset_timer(self) -> None:
        """Back to a fresh work countdown.  Durations are left alone."""
        previous = self._mode
        self._mode = Mode.WORKING
        self._paused = False
        self._auto_paused_by_lock = False
        self._remaining = self._work_seconds
        self._set_overlay(False)
        if previous != Mode.WORKING:
            self.mode_changed.emit(Mode.WORKING)
        self.pause_changed.emit(False)
        self._broadcast_pause()
        self.changed.emit()

    def switch_mode(self) -> None:
        """Skip to rest, or end rest early."""
        if self._switching:
            return
        self._switching = True
        try:
            was_running = self._qt_timer.isActive()
            self._flip_mode()
            if was_running:
                self._start_clock()
        finally:
            self._switching = False

    def set_work_seconds(self, seconds: int) -> None:
        self._work_seconds = max(0, int(seconds))
        if self._mode == Mode.WORKING:
            self._remaining = self._work_seconds
        self._durations_updated()

    def set_rest_seconds(self, seconds: int) -> None:
        self._rest_seconds = max(0, int(seconds))
        if self._mode == Mode.RESTING:
            self._remaining = self._rest_seconds
        self._durations_updated()

    def extend_rest(self, extra_seconds: int = REST_EXTENSION_SECONDS) -> None:
        """Lengthen the rest and restart its countdown.  Rest mode only."""
        if self._mode != Mode.RESTING:
            return
        self._rest_seconds += max(0, int(extra_seconds))
        self._remaining = self._rest_seconds
        self._durations_updated()

    def apply_configuration(self, config: TimingConfiguration) -> None:
        """Use a preset's durations, restart the work countdown and
        remember the preset as the last selection."""
        self._work_seconds = config.work_seconds
        self._rest_seconds = config.rest_seconds
        if self._store is not None:
            self._persist(self._store.set_last_selected_id, config.id)
        self._durations_updated()
        self.reset_timer()

    def dismiss_rest_overlay(self) -> None:
        """Hide the overlay early; the rest countdown carries on."""
        if self._set_overlay(False):
            self.changed.emit()

    def stop(self) -> None:
        """Stop the clock, e.g. on shutdown."""
        self._stop_clock()

    # ══════════════════════════════════════════════════════════════════
    #  SYSTEM SESSION EVENTS
    # ══════════════════════════════════════════════════════════════════

    def on_system_lock(self) -> None:
        if self._mode == Mode.WORKING and not self._paused:
            self._paused = True
            self._auto_paused_by_lock = True
            logger.info("Paused for screen lock")
            self.pause_changed.emit(True)
            self._broadcast_pause()
            self.changed.emit()

    def on_system_unlock(self) -> None:
        if self._auto_paused_by_lock:
            self._paused = False
            self._auto_paused_by_lock = False
            logger.info("Resumed after screen unlock")
            self.pause_changed.emit(False)
            self._broadcast_pause()
            self.changed.emit()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: TIMER MECHANICS
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self) -> None:
        if self._switching or self._paused:
            return
        if self._remaining > 0:
            self._remaining -= 1
            self.tick.emit(self._remaining)
            if self._remaining > 0:
                self.changed.emit()
                return

        # Expired on this tick (or a duration was set to 0): switch once.
        self._switching = True
        try:
            self._stop_clock()
            self._flip_mode()
            self._start_clock()
        finally:
            self._switching = False

    def _flip_mode(self) -> None:
        if self._mode == Mode.WORKING:
            self._mode = Mode.RESTING
            self._remaining = max(self._rest_seconds, 1)
            self._set_overlay(True)
        else:
            self._mode = Mode.WORKING
            self._remaining = max(self._work_seconds, 1)
            self._set_overlay(False)
        logger.info("Switched to %s (%ss)", self._mode.value, self._remaining)
        self.mode_changed.emit(self._mode)
        self.changed.emit()

    def _adopt(self, work: int, rest: int) -> None:
        self._work_seconds = work
        self._rest_seconds = rest
        self._mode = Mode.WORKING
        self._remaining = work
        self._paused = False
        self._auto_paused_by_lock = False
        self._set_overlay(False)
        self.durations_changed.emit(work, rest)
        self.mode_changed.emit(Mode.WORKING)
        self.pause_changed.emit(False)
        self.changed.emit()

    def _set_overlay(self, visible: bool) -> bool:
        if self._rest_overlay_visible == visible:
            return False
        self._rest_overlay_visible = visible
        self.rest_overlay_changed.emit(visible)
        return True

    def _durations_updated(self) -> None:
        self._persist_durations()
        self.durations_changed.emit(self._work_seconds, self._rest_seconds)
        self.changed.emit()

    def _start_clock(self) -> None:
        self._qt_timer.start()

    def _stop_clock(self) -> None:
        self._qt_timer.stop()

    def _broadcast_pause(self) -> None:
        if self._bus is not None:
            self._bus.publish_pause_state(self._paused)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: PERSISTENCE
    # ══════════════════════════════════════════════════════════════════

    def _persist_durations(self) -> None:
        if self._store is None:
            return
        self._persist(
            self._store.set_last_used_durations, self._work_seconds, self._rest_seconds,
        )

    def _persist(self, write, *args) -> None:
        """Run a store write; a failure leaves memory ahead of disk."""
        try:
            write(*args)
        except StorageError as exc:
            logger.warning("Not saved (%s); keeping in-memory state", exc)

    def _find_configuration(self, configuration_id: int) -> TimingConfiguration | None:
        try:
            configs = self._store.list_all()
        except StorageError as exc:
            logger.warning("Could not list presets: %s", exc)
            return None
        for config in configs:
            if config.id == configuration_id:
                return config
        return None
