"""Main application window for TakeARest."""

from __future__ import annotations

import logging
from typing import Callable

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import QApplication, QMainWindow, QWidget, QVBoxLayout, QMessageBox

from .database.db import SettingsStore
from .errors import StorageError
from .events import EventBus
from .settings import Settings, save_settings
from .system.lock import lock_screen_in_background
from .timer.engine import TimerEngine, Mode
from .ui.preset_panel import PresetPanel
from .ui.rest_overlay import RestOverlay
from .ui.styles import build_stylesheet
from .ui.timer_widget import TimerWidget
from .ui.tray import TrayController

logger = logging.getLogger(__name__)


class TakeARestApp(QMainWindow):
    """Composes the timer card, preset panel, rest overlay and tray.

    Every collaborator is passed in; the window owns none of the state
    it displays.
    """

    def __init__(
        self,
        engine: TimerEngine,
        store: SettingsStore | None,
        bus: EventBus,
        settings: Settings,
        parent: QWidget | None = None,
        *,
        lock_action: Callable[[], object] = lock_screen_in_background,
    ) -> None:
        super().__init__(parent)
        self._engine = engine
        self._lock_action = lock_action
        self._store = store
        self._bus = bus
        self._settings = settings
        # load_user_settings() must run exactly once per process
        self._settings_loaded = False

        # Debounced geometry save; move/resize events restart it.
        self._geometry_save_timer = QTimer(self)
        self._geometry_save_timer.setSingleShot(True)
        self._geometry_save_timer.setInterval(500)
        self._geometry_save_timer.timeout.connect(self._save_geometry)

        self.setWindowTitle("TakeARest")
        self.setMinimumSize(360, 480)
        self.setStyleSheet(build_stylesheet())

        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(14)
        self._timer_widget = TimerWidget(engine, central)
        layout.addWidget(self._timer_widget)
        self._preset_panel = PresetPanel(engine, store, central)
        layout.addWidget(self._preset_panel, 1)
        self.setCentralWidget(central)

        self._overlay = RestOverlay(
            engine,
            extension_seconds=settings.rest_extension_seconds,
            lock_action=lock_action,
        )
        self._tray = TrayController(bus, self, self)
        self._tray.show()

        self._build_menu_bar()

        # ── wire signals ──────────────────────────────────────────────
        self._preset_panel.error_occurred.connect(self._show_warning)
        self._preset_panel.name_required.connect(
            lambda: self.statusBar().showMessage(
                "Built-in presets can't be overwritten. Enter a name to save a copy.", 5000,
            )
        )
        # Queued so a rest transition finishes before the lock is launched.
        self._engine.mode_changed.connect(
            self._on_mode_changed, Qt.ConnectionType.QueuedConnection,
        )

        # ── restore window state ───────────────────────────────────────
        self._restore_geometry()
        if settings.always_on_top:
            self._apply_always_on_top(True)

    @property
    def settings_loaded(self) -> bool:
        return self._settings_loaded

    # ══════════════════════════════════════════════════════════════════
    #  MENU BAR
    # ══════════════════════════════════════════════════════════════════

    def _build_menu_bar(self) -> None:
        menu_bar = self.menuBar()

        timer_menu = menu_bar.addMenu("Timer")
        pause_action = QAction("Pause / Resume", self)
        pause_action.setShortcut(QKeySequence("Ctrl+P"))
        pause_action.triggered.connect(self._engine.toggle_pause)
        timer_menu.addAction(pause_action)

        reset_action = QAction("Reset", self)
        reset_action.setShortcut(QKeySequence("Ctrl+R"))
        reset_action.triggered.connect(self._engine.reset_timer)
        timer_menu.addAction(reset_action)

        switch_action = QAction("Switch Work/Rest", self)
        switch_action.triggered.connect(self._engine.switch_mode)
        timer_menu.addAction(switch_action)

        timer_menu.addSeparator()
        lock_action = QAction("Lock Screen", self)
        lock_action.triggered.connect(lambda: self._lock_action())
        timer_menu.addAction(lock_action)

        presets_menu = menu_bar.addMenu("Presets")
        reset_presets = QAction("Restore Built-in Presets…", self)
        reset_presets.triggered.connect(self._confirm_reset_presets)
        presets_menu.addAction(reset_presets)

        view_menu = menu_bar.addMenu("View")
        self._aot_action = QAction("Always on Top", self)
        self._aot_action.setCheckable(True)
        self._aot_action.setChecked(self._settings.always_on_top)
        self._aot_action.triggered.connect(self._toggle_always_on_top)
        view_menu.addAction(self._aot_action)

    # ══════════════════════════════════════════════════════════════════
    #  SLOTS
    # ══════════════════════════════════════════════════════════════════

    def _on_mode_changed(self, mode: Mode) -> None:
        if mode == Mode.RESTING and self._settings.lock_screen_on_rest_start:
            self._lock_action()

    def _show_warning(self, message: str) -> None:
        QMessageBox.warning(self, "TakeARest", message)

    def _confirm_reset_presets(self) -> None:
        reply = QMessageBox.question(
            self,
            "Restore presets?",
            "This removes your own presets and restores the built-in ones.",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        if reply == QMessageBox.StandardButton.Yes:
            self.reset_presets()

    def reset_presets(self) -> bool:
        if self._store is None:
            return False
        try:
            self._store.reset_all()
        except StorageError as exc:
            logger.warning("Preset reset failed: %s", exc)
            self._show_warning("The presets could not be restored.")
            return False
        self._preset_panel.reload(forget_selection=True)
        return True

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW STATE
    # ══════════════════════════════════════════════════════════════════

    def _restore_geometry(self) -> None:
        s = self._settings
        if s.window_x is not None and s.window_y is not None:
            self.move(s.window_x, s.window_y)
        if s.window_width and s.window_height:
            self.resize(s.window_width, s.window_height)

    def _save_geometry(self) -> None:
        if not self.isVisible():
            return
        pos = self.pos()
        size = self.size()
        self._settings.window_x = pos.x()
        self._settings.window_y = pos.y()
        self._settings.window_width = size.width()
        self._settings.window_height = size.height()
        self._write_settings()

    def _toggle_always_on_top(self) -> None:
        new_val = not self._settings.always_on_top
        self._settings.always_on_top = new_val
        self._write_settings()
        self._aot_action.setChecked(new_val)
        self._apply_always_on_top(new_val)

    def _apply_always_on_top(self, on_top: bool) -> None:
        flags = self.windowFlags()
        if on_top:
            flags |= Qt.WindowType.WindowStaysOnTopHint
        else:
            flags &= ~Qt.WindowType.WindowStaysOnTopHint
        self.setWindowFlags(flags)
        self.show()  # setWindowFlags hides the window

    def _write_settings(self) -> None:
        try:
            save_settings(self._settings)
        except OSError as exc:
            logger.warning("Could not save preferences: %s", exc)

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def showEvent(self, event) -> None:  # type: ignore[override]
        super().showEvent(event)
        if not self._settings_loaded:
            self._settings_loaded = True
            self._engine.load_user_settings()

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Minimize to tray instead of quitting (if enabled)."""
        self._save_geometry()
        if self._settings.minimize_to_tray and self._tray.is_visible:
            event.ignore()
            self.hide()
        else:
            self._tray.hide()
            self._overlay.hide()
            self._engine.stop()
            event.accept()
            # quit-on-last-window is off so the tray can keep the app alive
            QApplication.instance().quit()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._geometry_save_timer.start()

    def moveEvent(self, event) -> None:  # type: ignore[override]
        super().moveEvent(event)
        self._geometry_save_timer.start()
