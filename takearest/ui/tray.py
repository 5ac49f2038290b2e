"""System tray icon and menu.

The tray never touches the engine: it mirrors the pause broadcast and
asks for a toggle over the event bus signals.
"""

from __future__ import annotations

from PyQt6.QtCore import QObject, Qt
from PyQt6.QtGui import QIcon, QPixmap, QPainter, QColor
from PyQt6.QtWidgets import QSystemTrayIcon, QMenu, QWidget, QApplication

from ..events import EventBus
from ..timer.engine import Mode
from .styles import PAUSED_COLORS, MODE_COLORS


def _make_tray_icon(paused: bool) -> QIcon:
    """A filled circle: coral while running, gray while paused."""
    color = QColor(PAUSED_COLORS[0] if paused else MODE_COLORS[Mode.WORKING][0])
    pix = QPixmap(64, 64)
    pix.fill(QColor(0, 0, 0, 0))
    p = QPainter(pix)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    p.setBrush(color)
    p.setPen(Qt.PenStyle.NoPen)
    p.drawEllipse(8, 8, 48, 48)
    p.end()
    return QIcon(pix)


class TrayController(QObject):
    def __init__(self, bus: EventBus, window: QWidget, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._bus = bus
        self._window = window

        self._menu = QMenu()
        self._toggle_action = self._menu.addAction("Pause")
        self._toggle_action.triggered.connect(self.request_toggle)
        self._menu.addSeparator()
        show_action = self._menu.addAction("Show TakeARest")
        show_action.triggered.connect(self._show_window)
        self._menu.addSeparator()
        quit_action = self._menu.addAction("Quit")
        quit_action.triggered.connect(self._quit_app)

        self._icon = QSystemTrayIcon(self)
        self._icon.setIcon(_make_tray_icon(False))
        self._icon.setToolTip("TakeARest")
        self._icon.setContextMenu(self._menu)
        self._icon.activated.connect(self._on_activated)

        bus.pause_state_changed.connect(self._on_pause_state)
        if bus.last_pause_state is not None:
            self._on_pause_state(bus.last_pause_state)

    @property
    def toggle_label(self) -> str:
        return self._toggle_action.text()

    @property
    def is_visible(self) -> bool:
        return self._icon.isVisible()

    def show(self) -> None:
        if QSystemTrayIcon.isSystemTrayAvailable():
            self._icon.show()

    def hide(self) -> None:
        self._icon.hide()

    def request_toggle(self) -> None:
        self._bus.request_toggle_pause()

    def _on_pause_state(self, is_paused: bool) -> None:
        self._toggle_action.setText("Resume" if is_paused else "Pause")
        self._icon.setIcon(_make_tray_icon(is_paused))

    def _on_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        if reason == QSystemTrayIcon.ActivationReason.Trigger:
            self._show_window()

    def _show_window(self) -> None:
        self._window.show()
        self._window.raise_()
        self._window.activateWindow()

    def _quit_app(self) -> None:
        self._icon.hide()
        QApplication.instance().quit()
