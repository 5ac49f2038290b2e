"""Tests for JSON-backed preferences and logging setup."""

import json
import logging

import pytest

from takearest import settings as settings_mod
from takearest.log import setup_logging
from takearest.settings import Settings, load_settings, save_settings


class TestSettings:

    def test_defaults(self):
        s = Settings()
        assert s.database_url is None
        assert s.rest_extension_seconds == 300
        assert s.lock_screen_on_rest_start is False
        assert s.minimize_to_tray is True

    def test_round_trip(self):
        save_settings(Settings(rest_extension_seconds=600, always_on_top=True, window_x=10))
        loaded = load_settings()
        assert loaded.rest_extension_seconds == 600
        assert loaded.always_on_top is True
        assert loaded.window_x == 10

    def test_missing_file_gives_defaults(self):
        assert load_settings() == Settings()

    def test_corrupt_file_gives_defaults(self):
        settings_mod.SETTINGS_PATH.write_text("{not json", encoding="utf-8")
        assert load_settings() == Settings()

    def test_unknown_keys_are_ignored(self):
        settings_mod.SETTINGS_PATH.write_text(
            json.dumps({"log_level": "DEBUG", "theme": "neon"}), encoding="utf-8",
        )
        loaded = load_settings()
        assert loaded.log_level == "DEBUG"

    def test_wrong_types_fall_back_per_field(self):
        settings_mod.SETTINGS_PATH.write_text(
            json.dumps({
                "rest_extension_seconds": "x",
                "window_width": True,
                "window_x": None,
                "log_level": "DEBUG",
                "always_on_top": True,
            }),
            encoding="utf-8",
        )
        loaded = load_settings()
        assert loaded.rest_extension_seconds == 300
        assert loaded.window_width == 420
        assert loaded.window_x is None
        assert loaded.log_level == "DEBUG"
        assert loaded.always_on_top is True

    def test_non_object_file_gives_defaults(self):
        settings_mod.SETTINGS_PATH.write_text("[1, 2]", encoding="utf-8")
        assert load_settings() == Settings()

    def test_resolved_database_url(self):
        assert Settings(database_url="sqlite://").resolved_database_url() == "sqlite://"
        assert Settings().resolved_database_url().startswith("sqlite:///")


@pytest.fixture
def clean_logger():
    yield
    root = logging.getLogger("takearest")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


@pytest.mark.usefixtures("clean_logger")
class TestLogging:

    def test_setup_logging_writes_file(self, tmp_path):
        log_path = tmp_path / "logs" / "takearest.log"
        setup_logging("DEBUG", log_path)
        logging.getLogger("takearest.test").debug("hello from test")
        for handler in logging.getLogger("takearest").handlers:
            handler.flush()
        assert "hello from test" in log_path.read_text(encoding="utf-8")

    def test_setup_logging_is_repeatable(self, tmp_path):
        setup_logging("INFO", tmp_path / "a.log")
        setup_logging("INFO", tmp_path / "a.log")
        assert len(logging.getLogger("takearest").handlers) == 2
