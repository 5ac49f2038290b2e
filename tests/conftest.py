"""Shared pytest fixtures for TakeARest tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from takearest.database.db import SettingsStore
from takearest.events import EventBus
from takearest.timer.engine import TimerEngine


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep preference writes out of the real home directory."""
    monkeypatch.setattr("takearest.settings.SETTINGS_PATH", tmp_path / "settings.json")
    monkeypatch.setattr("takearest.settings.APP_SUPPORT_DIR", tmp_path)


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'takearest.db'}"


@pytest.fixture
def empty_store(db_url):
    """A store with tables but no presets."""
    store = SettingsStore(db_url)
    yield store
    store.close()


@pytest.fixture
def store(empty_store):
    """A store seeded with the built-in presets."""
    empty_store.seed_system_presets()
    return empty_store


@pytest.fixture
def bus(qapp):
    return EventBus()


@pytest.fixture
def engine(qapp, store, bus):
    """Fresh TimerEngine wired to a seeded store and a bus."""
    eng = TimerEngine(store, bus)
    yield eng
    eng.stop()


@pytest.fixture
def engine_no_store(qapp):
    """Fresh TimerEngine with no persistence (pure state-machine tests)."""
    eng = TimerEngine()
    yield eng
    eng.stop()
