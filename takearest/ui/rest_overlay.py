"""Full-screen rest overlay.

Shown while the engine reports ``rest_overlay_visible``.  It only
covers the primary screen.
"""

from __future__ import annotations

from typing import Callable

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QGuiApplication
from PyQt6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton

from ..system.lock import lock_screen_in_background
from ..timer.engine import TimerEngine, REST_EXTENSION_SECONDS, format_seconds
from .styles import overlay_stylesheet


class RestOverlay(QWidget):
    """Frameless, always-on-top rest screen with rest controls."""

    def __init__(
        self,
        engine: TimerEngine,
        parent: QWidget | None = None,
        *,
        extension_seconds: int = REST_EXTENSION_SECONDS,
        lock_action: Callable[[], object] = lock_screen_in_background,
    ) -> None:
        super().__init__(parent)
        self._engine = engine
        self._extension = extension_seconds
        self._lock_action = lock_action

        self.setObjectName("restOverlay")
        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnTopHint
            | Qt.WindowType.Tool
        )
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setStyleSheet(overlay_stylesheet())

        self._build_ui()
        self._engine.changed.connect(self._refresh)
        self._engine.rest_overlay_changed.connect(self._on_visibility_changed)
        self._refresh()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.setSpacing(24)

        title = QLabel("Time to rest", self)
        title.setObjectName("overlayTitle")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(title)

        self._time_label = QLabel(self)
        self._time_label.setObjectName("overlayTime")
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._time_label)

        row = QHBoxLayout()
        row.setSpacing(16)
        self._extend_btn = QPushButton(f"+{self._extension // 60} min", self)
        self._extend_btn.clicked.connect(self._extend)
        self._end_btn = QPushButton("End rest", self)
        self._end_btn.clicked.connect(self._engine.switch_mode)
        self._lock_btn = QPushButton("Lock screen", self)
        self._lock_btn.clicked.connect(self._lock)
        self._hide_btn = QPushButton("Hide", self)
        self._hide_btn.clicked.connect(self._engine.dismiss_rest_overlay)
        for btn in (self._extend_btn, self._end_btn, self._lock_btn, self._hide_btn):
            btn.setCursor(Qt.CursorShape.PointingHandCursor)
            row.addWidget(btn)
        layout.addLayout(row)

    def _refresh(self) -> None:
        self._time_label.setText(format_seconds(self._engine.remaining))

    def _extend(self) -> None:
        self._engine.extend_rest(self._extension)

    def _lock(self) -> None:
        self._lock_action()

    def _on_visibility_changed(self, visible: bool) -> None:
        if visible:
            screen = QGuiApplication.primaryScreen()
            if screen is not None:
                self.setGeometry(screen.geometry())
            self.show()
            self.raise_()
            self.activateWindow()
        else:
            self.hide()
