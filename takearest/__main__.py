"""Allow running TakeARest as a module: python -m takearest."""

from __future__ import annotations

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .app import TakeARestApp
from .database.db import SettingsStore
from .errors import StorageError
from .events import EventBus
from .log import setup_logging
from .settings import LOG_PATH, load_settings
from .system.session import SessionLockMonitor
from .timer.engine import TimerEngine

logger = logging.getLogger(__name__)


def open_store(url: str) -> SettingsStore | None:
    """Open and seed the store, resetting it once if it looks corrupt.

    Returns ``None`` when storage is unusable; the timer then runs on
    built-in defaults for this session.
    """
    try:
        store = SettingsStore(url)
    except StorageError as exc:
        logger.error("Settings storage unavailable, running without it: %s", exc)
        return None
    try:
        store.seed_system_presets()
    except StorageError as exc:
        logger.warning("Seeding presets failed (%s); resetting the store", exc)
        try:
            store.reset_all()
        except StorageError as reset_exc:
            logger.error("Store reset failed, running without it: %s", reset_exc)
            store.close()
            return None
    return store


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level, LOG_PATH)

    store = open_store(settings.resolved_database_url())
    logger.info("TakeARest ready")

    app = QApplication(sys.argv)
    app.setApplicationName("TakeARest")
    app.setOrganizationName("TakeARest")
    app.setQuitOnLastWindowClosed(False)

    bus = EventBus()
    engine = TimerEngine(store, bus)
    monitor = SessionLockMonitor(app)
    monitor.attach(engine)
    monitor.start()
    window = TakeARestApp(engine, store, bus, settings)
    window.show()

    code = app.exec()
    monitor.stop()
    engine.stop()
    if store is not None:
        store.close()
    sys.exit(code)


if __name__ == "__main__":
    main()
