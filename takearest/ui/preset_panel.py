"""Preset list with "save as new" and "overwrite".

System presets are read-only by convention: overwriting one is turned
into a "save as new" request instead of mutating the seeded row.
"""

from __future__ import annotations

import logging
from typing import Iterable

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit,
    QListWidget, QListWidgetItem, QPushButton, QFrame,
)

from ..database.db import SettingsStore
from ..database.models import TimingConfiguration
from ..errors import DuplicateNameError, StorageError
from ..timer.engine import TimerEngine, format_seconds

logger = logging.getLogger(__name__)


def sort_for_display(configs: Iterable[TimingConfiguration]) -> list[TimingConfiguration]:
    """System presets first, then longest total (work + rest) first."""
    return sorted(configs, key=lambda c: (not c.is_system_preset, -c.total_seconds))


class PresetPanel(QWidget):
    """Lists presets from the store and applies them to the engine.

    Signals
    -------
    error_occurred(message: str)
        A save was rejected or the store failed; the host decides how
        to tell the user.
    name_required()
        "Overwrite" was pressed on a system preset; the user must pick
        a new name.
    """

    error_occurred = pyqtSignal(str)
    name_required = pyqtSignal()

    def __init__(
        self,
        engine: TimerEngine,
        store: SettingsStore | None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._engine = engine
        self._store = store
        self._configs: list[TimingConfiguration] = []
        self._selected_id: int | None = None
        self._build_ui()
        self.reload()

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(20, 16, 20, 16)
        layout.setSpacing(8)

        title = QLabel("PRESETS", card)
        title.setObjectName("sectionLabel")
        layout.addWidget(title)

        self._list = QListWidget(card)
        self._list.itemClicked.connect(self._on_item_clicked)
        layout.addWidget(self._list)

        row = QHBoxLayout()
        self._name_input = QLineEdit(card)
        self._name_input.setPlaceholderText("New preset name")
        self._name_input.setMaxLength(64)
        row.addWidget(self._name_input)

        save_btn = QPushButton("Save as new", card)
        save_btn.clicked.connect(lambda: self.save_as_new(self._name_input.text()))
        row.addWidget(save_btn)

        overwrite_btn = QPushButton("Overwrite", card)
        overwrite_btn.clicked.connect(self.overwrite_selected)
        row.addWidget(overwrite_btn)
        layout.addLayout(row)

    # ── public API ────────────────────────────────────────────────────────

    @property
    def configurations(self) -> list[TimingConfiguration]:
        return list(self._configs)

    @property
    def selected_id(self) -> int | None:
        return self._selected_id

    def reload(self, *, forget_selection: bool = False) -> None:
        """Re-read the store and rebuild the list.

        With *forget_selection* the current selection is dropped and
        re-read from the store's session state (e.g. after a reset).
        """
        if forget_selection:
            self._selected_id = None
        configs: list[TimingConfiguration] = []
        if self._store is not None:
            try:
                configs = self._store.list_all()
                if self._selected_id is None:
                    self._selected_id = self._store.get_session_state().last_selected_configuration_id
            except StorageError as exc:
                logger.warning("Could not load presets: %s", exc)
        self._configs = sort_for_display(configs)

        self._list.clear()
        for config in self._configs:
            text = (
                f"{config.name}  ·  {format_seconds(config.work_seconds)} / "
                f"{format_seconds(config.rest_seconds)}"
            )
            item = QListWidgetItem(text)
            item.setData(Qt.ItemDataRole.UserRole, config.id)
            self._list.addItem(item)
            if config.id == self._selected_id:
                item.setSelected(True)

    def select(self, config_id: int) -> None:
        config = self._find(config_id)
        if config is None:
            return
        self._selected_id = config.id
        self._engine.apply_configuration(config)

    def save_as_new(self, name: str) -> bool:
        name = name.strip()
        if not name:
            self.error_occurred.emit("Please enter a name for the preset.")
            return False
        if self._store is None:
            self.error_occurred.emit("Presets are unavailable right now.")
            return False
        try:
            new_id = self._store.save(
                None, name, self._engine.work_seconds, self._engine.rest_seconds, False,
            )
            self._store.set_last_selected_id(new_id)
        except DuplicateNameError:
            self.error_occurred.emit(f"A preset named “{name}” already exists. Pick another name.")
            return False
        except (StorageError, ValueError) as exc:
            logger.warning("Could not save preset %r: %s", name, exc)
            self.error_occurred.emit("The preset could not be saved.")
            return False
        self._selected_id = new_id
        self._name_input.clear()
        self.reload()
        return True

    def overwrite_selected(self) -> bool:
        config = self._find(self._selected_id) if self._selected_id is not None else None
        if config is None or config.is_system_preset:
            self.name_required.emit()
            self._name_input.setFocus()
            return False
        if self._store is None:
            return False
        try:
            self._store.save(
                config.id, config.name,
                self._engine.work_seconds, self._engine.rest_seconds,
                config.is_system_preset,
            )
        except (StorageError, ValueError) as exc:
            logger.warning("Could not overwrite preset %r: %s", config.name, exc)
            self.error_occurred.emit("The preset could not be saved.")
            return False
        self.reload()
        return True

    # ── internal ──────────────────────────────────────────────────────────

    def _find(self, config_id: int | None) -> TimingConfiguration | None:
        for config in self._configs:
            if config.id == config_id:
                return config
        return None

    def _on_item_clicked(self, item: QListWidgetItem) -> None:
        self.select(item.data(Qt.ItemDataRole.UserRole))
