"""Smoke tests for the host UI: timer card, presets, overlay, tray, window."""

from __future__ import annotations

from datetime import datetime

from takearest.__main__ import open_store
from takearest.app import TakeARestApp
from takearest.database.db import SYSTEM_PRESETS
from takearest.database.models import TimingConfiguration
from takearest.settings import Settings
from takearest.timer.engine import Mode
from takearest.ui.preset_panel import PresetPanel, sort_for_display
from takearest.ui.rest_overlay import RestOverlay
from takearest.ui.timer_widget import TimerWidget
from takearest.ui.tray import TrayController

from helpers import SignalCollector


def _config(id, name, work, rest, system):
    now = datetime.now()
    return TimingConfiguration(id, name, work, rest, system, now, now)


# ═══════════════════════════════════════════════════════════════════════
#  ORDERING
# ═══════════════════════════════════════════════════════════════════════


def test_sort_for_display_puts_system_presets_first():
    configs = [
        _config(1, "Mine long", 5000, 600, False),
        _config(2, "Short", 900, 300, True),
        _config(3, "Deep", 5400, 600, True),
        _config(4, "Mine short", 600, 60, False),
    ]
    assert [c.name for c in sort_for_display(configs)] == [
        "Deep", "Short", "Mine long", "Mine short",
    ]


# ═══════════════════════════════════════════════════════════════════════
#  TIMER WIDGET
# ═══════════════════════════════════════════════════════════════════════


class TestTimerWidget:

    def test_labels_follow_engine(self, engine):
        w = TimerWidget(engine)
        assert w._pause_btn.text() == "Pause"
        assert w._switch_btn.text() == "Skip to rest"

        engine.toggle_pause()
        engine.switch_mode()
        assert w._pause_btn.text() == "Resume"
        assert w._switch_btn.text() == "End rest"
        assert "PAUSED" in w._mode_label.text()

    def test_time_label_updates_on_tick(self, engine):
        w = TimerWidget(engine)
        engine.set_work_seconds(125)
        assert w._time_label.text() == "02:05"
        engine._on_tick()
        assert w._time_label.text() == "02:04"

    def test_stepper_sets_duration(self, engine):
        w = TimerWidget(engine)
        w._work_spin.setValue(30)
        assert engine.work_seconds == 30 * 60
        w._rest_spin.setValue(7)
        assert engine.rest_seconds == 7 * 60

    def test_engine_changes_move_steppers_without_echo(self, engine):
        w = TimerWidget(engine)
        c = SignalCollector()
        engine.durations_changed.connect(c)
        engine.set_work_seconds(20 * 60)
        assert w._work_spin.value() == 20
        assert len(c) == 1

    def test_buttons_drive_engine(self, engine):
        w = TimerWidget(engine)
        w._pause_btn.click()
        assert engine.paused is True
        w._reset_btn.click()
        assert engine.paused is False
        w._switch_btn.click()
        assert engine.mode == Mode.RESTING


# ═══════════════════════════════════════════════════════════════════════
#  PRESET PANEL
# ═══════════════════════════════════════════════════════════════════════


class TestPresetPanel:

    def test_lists_sorted_presets(self, engine, store):
        panel = PresetPanel(engine, store)
        names = [c.name for c in panel.configurations]
        assert names[0] == "Deep work"
        assert names[-1] == "Test mode"
        assert panel._list.count() == len(SYSTEM_PRESETS)

    def test_select_applies_configuration(self, engine, store):
        panel = PresetPanel(engine, store)
        long_cycle = store.get_by_name("Long cycle")
        panel.select(long_cycle.id)
        assert (engine.work_seconds, engine.rest_seconds) == (2700, 600)
        assert engine.remaining == 2700
        assert panel.selected_id == long_cycle.id
        assert store.get_session_state().last_selected_configuration_id == long_cycle.id

    def test_save_as_new(self, engine, store):
        panel = PresetPanel(engine, store)
        engine.set_work_seconds(1200)
        assert panel.save_as_new("  Evening  ") is True
        mine = store.get_by_name("Evening")
        assert mine.work_seconds == 1200
        assert mine.is_system_preset is False
        assert panel.selected_id == mine.id
        assert panel.configurations[-1].name == "Evening"

    def test_save_as_new_rejects_duplicate(self, engine, store):
        panel = PresetPanel(engine, store)
        errors = SignalCollector()
        panel.error_occurred.connect(errors)
        assert panel.save_as_new("Pomodoro") is False
        assert len(errors) == 1
        assert len(store.list_all()) == len(SYSTEM_PRESETS)

    def test_save_as_new_requires_name(self, engine, store):
        panel = PresetPanel(engine, store)
        errors = SignalCollector()
        panel.error_occurred.connect(errors)
        assert panel.save_as_new("   ") is False
        assert len(errors) == 1

    def test_overwrite_system_preset_asks_for_name(self, engine, store):
        panel = PresetPanel(engine, store)
        pomodoro = store.get_by_name("Pomodoro")
        panel.select(pomodoro.id)
        engine.set_work_seconds(60)

        asked = SignalCollector()
        panel.name_required.connect(asked)
        assert panel.overwrite_selected() is False
        assert len(asked) == 1
        assert store.get_by_name("Pomodoro").work_seconds == 1500

    def test_overwrite_user_preset(self, engine, store):
        panel = PresetPanel(engine, store)
        panel.save_as_new("Mine")
        engine.set_rest_seconds(480)
        assert panel.overwrite_selected() is True
        assert store.get_by_name("Mine").rest_seconds == 480

    def test_without_store_list_is_empty(self, engine_no_store):
        panel = PresetPanel(engine_no_store, None)
        assert panel.configurations == []
        assert panel.save_as_new("x") is False


# ═══════════════════════════════════════════════════════════════════════
#  REST OVERLAY
# ═══════════════════════════════════════════════════════════════════════


class TestRestOverlay:

    def test_visibility_follows_engine(self, engine):
        overlay = RestOverlay(engine, lock_action=lambda: True)
        engine.switch_mode()
        assert overlay.isVisible() is True
        engine.switch_mode()
        assert overlay.isVisible() is False

    def test_buttons(self, engine):
        locks = []
        overlay = RestOverlay(engine, extension_seconds=120, lock_action=lambda: locks.append(1) or True)
        engine.set_rest_seconds(300)
        engine.switch_mode()

        overlay._extend_btn.click()
        assert engine.rest_seconds == 420
        assert engine.remaining == 420

        overlay._lock_btn.click()
        assert locks == [1]

        overlay._hide_btn.click()
        assert engine.mode == Mode.RESTING
        assert overlay.isVisible() is False

    def test_end_rest_button(self, engine):
        overlay = RestOverlay(engine, lock_action=lambda: True)
        engine.switch_mode()
        overlay._end_btn.click()
        assert engine.mode == Mode.WORKING


# ═══════════════════════════════════════════════════════════════════════
#  TRAY
# ═══════════════════════════════════════════════════════════════════════


class TestTray:

    def test_label_mirrors_pause_broadcast(self, engine, bus):
        from PyQt6.QtWidgets import QWidget
        tray = TrayController(bus, QWidget())
        assert tray.toggle_label == "Pause"
        engine.toggle_pause()
        assert tray.toggle_label == "Resume"
        engine.reset_timer()
        assert tray.toggle_label == "Pause"

    def test_menu_toggle_reaches_engine(self, engine, bus):
        from PyQt6.QtWidgets import QWidget
        tray = TrayController(bus, QWidget())
        tray.request_toggle()
        assert engine.paused is True
        assert tray.toggle_label == "Resume"


# ═══════════════════════════════════════════════════════════════════════
#  MAIN WINDOW / ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════


class TestMainWindow:

    def test_settings_load_exactly_once(self, engine, store, bus):
        calls = []
        engine.load_user_settings = lambda: calls.append(1)
        window = TakeARestApp(engine, store, bus, Settings())
        window.show()
        window.hide()
        window.show()
        assert calls == [1]
        assert window.settings_loaded is True
        window.hide()

    def test_reset_presets(self, engine, store, bus):
        store.save(None, "Mine", 600, 60, False)
        window = TakeARestApp(engine, store, bus, Settings())
        assert window.reset_presets() is True
        assert store.get_by_name("Mine") is None

    def test_reset_presets_forgets_deleted_selection(self, engine, store, bus):
        window = TakeARestApp(engine, store, bus, Settings())
        panel = window._preset_panel
        assert panel.save_as_new("Mine") is True
        assert panel.selected_id is not None

        assert window.reset_presets() is True

        assert panel.selected_id is None
        assert panel.overwrite_selected() is False
        assert store.get_by_name("Mine") is None

    def test_lock_on_rest_start_runs_after_transition(self, qapp, engine, store, bus):
        seen = []
        window = TakeARestApp(
            engine, store, bus, Settings(lock_screen_on_rest_start=True),
            lock_action=lambda: seen.append((engine.mode, engine.is_transitioning)),
        )
        engine.switch_mode()
        assert seen == []

        qapp.processEvents()
        assert seen == [(Mode.RESTING, False)]
        window.hide()

    def test_no_lock_when_setting_is_off(self, qapp, engine, store, bus):
        seen = []
        window = TakeARestApp(engine, store, bus, Settings(), lock_action=lambda: seen.append(1))
        engine.switch_mode()
        qapp.processEvents()
        assert seen == []

    def test_runs_without_store(self, engine_no_store, bus):
        window = TakeARestApp(engine_no_store, None, bus, Settings())
        assert window.reset_presets() is False


class TestOpenStore:

    def test_seeds_a_fresh_store(self, db_url):
        store = open_store(db_url)
        assert len(store.list_all()) == len(SYSTEM_PRESETS)
        store.close()

    def test_unusable_storage_returns_none(self, tmp_path):
        path = tmp_path / "broken.db"
        path.write_bytes(b"garbage" * 500)
        assert open_store(f"sqlite:///{path}") is None
