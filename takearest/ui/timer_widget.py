"""Main timer card: countdown, controls and duration steppers.

Layout (top → bottom):
    - Mode label ("WORK" / "REST", "PAUSED" on top of either)
    - Large MM:SS countdown
    - Progress bar through the current mode
    - Pause/Resume · Reset · Skip to rest / End rest
    - Work and rest steppers (minutes)
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QPushButton, QFrame, QProgressBar, QSpinBox,
)

from ..timer.engine import TimerEngine, Mode, format_seconds
from .styles import mode_color

MODE_LABELS: dict[Mode, str] = {
    Mode.WORKING: "WORK",
    Mode.RESTING: "REST",
}

WORK_MINUTES_RANGE = (1, 60)
REST_MINUTES_RANGE = (1, 10)


class TimerWidget(QWidget):
    """Renders the engine's state and forwards button presses to it."""

    def __init__(self, engine: TimerEngine, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._engine = engine
        self._build_ui()
        self._connect_signals()
        self._sync_steppers(engine.work_seconds, engine.rest_seconds)
        self.refresh()

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(28, 20, 28, 22)
        layout.setSpacing(10)

        self._mode_label = QLabel(card)
        self._mode_label.setObjectName("modeLabel")
        self._mode_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._mode_label)

        self._time_label = QLabel(card)
        self._time_label.setObjectName("timeLabel")
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._time_label)

        self._progress = QProgressBar(card)
        self._progress.setRange(0, 1000)
        self._progress.setTextVisible(False)
        layout.addWidget(self._progress)

        buttons = QHBoxLayout()
        self._pause_btn = QPushButton("Pause", card)
        self._pause_btn.setObjectName("primary")
        self._reset_btn = QPushButton("Reset", card)
        self._switch_btn = QPushButton(card)
        for btn in (self._pause_btn, self._reset_btn, self._switch_btn):
            btn.setCursor(Qt.CursorShape.PointingHandCursor)
            buttons.addWidget(btn)
        layout.addLayout(buttons)

        form = QFormLayout()
        form.setHorizontalSpacing(20)
        self._work_spin = QSpinBox(card)
        self._work_spin.setRange(*WORK_MINUTES_RANGE)
        self._work_spin.setSuffix(" min")
        form.addRow("Work:", self._work_spin)

        self._rest_spin = QSpinBox(card)
        self._rest_spin.setRange(*REST_MINUTES_RANGE)
        self._rest_spin.setSuffix(" min")
        form.addRow("Rest:", self._rest_spin)
        layout.addLayout(form)

    def _connect_signals(self) -> None:
        self._pause_btn.clicked.connect(self._engine.toggle_pause)
        self._reset_btn.clicked.connect(self._engine.reset_timer)
        self._switch_btn.clicked.connect(self._engine.switch_mode)
        self._work_spin.valueChanged.connect(self._on_work_spin)
        self._rest_spin.valueChanged.connect(self._on_rest_spin)
        self._engine.changed.connect(self.refresh)
        self._engine.durations_changed.connect(self._sync_steppers)

    # ── slots ─────────────────────────────────────────────────────────────

    def refresh(self) -> None:
        engine = self._engine
        label = MODE_LABELS[engine.mode]
        if engine.paused:
            label += " · PAUSED"
        self._mode_label.setText(label)
        self._time_label.setText(format_seconds(engine.remaining))
        self._time_label.setStyleSheet(f"color: {mode_color(engine.mode, engine.paused)};")
        self._progress.setValue(int(engine.percent_complete * 1000))
        self._pause_btn.setText("Resume" if engine.paused else "Pause")
        self._switch_btn.setText("End rest" if engine.mode == Mode.RESTING else "Skip to rest")

    def _sync_steppers(self, work_seconds: int, rest_seconds: int) -> None:
        # Programmatic updates must not echo back into the engine.
        for spin, seconds in ((self._work_spin, work_seconds), (self._rest_spin, rest_seconds)):
            spin.blockSignals(True)
            spin.setValue(max(1, seconds // 60))
            spin.blockSignals(False)

    def _on_work_spin(self, minutes: int) -> None:
        self._engine.set_work_seconds(minutes * 60)

    def _on_rest_spin(self, minutes: int) -> None:
        self._engine.set_rest_seconds(minutes * 60)
