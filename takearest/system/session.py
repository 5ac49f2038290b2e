"""Screen lock detection.

Turns the platform's session notifications into ``locked`` and
``unlocked`` signals that drive :meth:`TimerEngine.on_system_lock` and
:meth:`TimerEngine.on_system_unlock`.

macOS
    NSWorkspace session resign/become-active notifications (PyObjC).
Linux
    The ``ActiveChanged`` D-Bus signal of the freedesktop and GNOME
    screensaver services (QtDBus).

Anywhere else the monitor stays idle and the timer simply keeps running
while the screen is locked.
"""

from __future__ import annotations

import logging
import sys

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

logger = logging.getLogger(__name__)

# (service, path, interface) of screensavers that emit ActiveChanged(bool)
_SCREENSAVER_SERVICES = (
    ("org.freedesktop.ScreenSaver", "/org/freedesktop/ScreenSaver", "org.freedesktop.ScreenSaver"),
    ("org.gnome.ScreenSaver", "/org/gnome/ScreenSaver", "org.gnome.ScreenSaver"),
)

_observer_class = None


def _macos_observer_class():
    """NSObject subclass forwarding session notifications to a callback.

    Built lazily (and once) so importing this module never needs PyObjC.
    """
    global _observer_class
    if _observer_class is None:
        import objc
        from Foundation import NSObject

        class TakeARestSessionObserver(NSObject):

            def init(self):
                self = objc.super(TakeARestSessionObserver, self).init()
                if self is None:
                    return None
                self.on_change = None
                return self

            def sessionResigned_(self, notification):
                if self.on_change:
                    self.on_change(True)

            def sessionActivated_(self, notification):
                if self.on_change:
                    self.on_change(False)

        _observer_class = TakeARestSessionObserver
    return _observer_class


class SessionLockMonitor(QObject):
    """Emits ``locked``/``unlocked`` once per change of the session state.

    Several sources may report the same lock (two screensaver services,
    for instance); repeats are dropped so the engine sees one event.
    """

    locked = pyqtSignal()
    unlocked = pyqtSignal()

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._is_locked = False
        self._active = False
        self._observer = None

    @property
    def is_locked(self) -> bool:
        return self._is_locked

    @property
    def is_active(self) -> bool:
        """True once a platform source is feeding the monitor."""
        return self._active

    def attach(self, engine) -> None:
        self.locked.connect(engine.on_system_lock)
        self.unlocked.connect(engine.on_system_unlock)

    def start(self, platform: str | None = None) -> bool:
        platform = platform or sys.platform
        if platform == "darwin":
            self._active = self._start_macos()
        elif platform.startswith("linux"):
            self._active = self._start_dbus()
        else:
            self._active = False
        if self._active:
            logger.info("Watching for screen lock on %s", platform)
        else:
            logger.info("Screen lock detection unavailable on %s", platform)
        return self._active

    def stop(self) -> None:
        if self._observer is not None:
            from AppKit import NSWorkspace

            NSWorkspace.sharedWorkspace().notificationCenter().removeObserver_(self._observer)
            self._observer = None
        self._active = False

    @pyqtSlot(bool)
    def set_locked(self, locked: bool) -> None:
        locked = bool(locked)
        if locked == self._is_locked:
            return
        self._is_locked = locked
        logger.info("Session %s", "locked" if locked else "unlocked")
        if locked:
            self.locked.emit()
        else:
            self.unlocked.emit()

    # ── platform sources ──────────────────────────────────────────────────

    def _start_dbus(self) -> bool:
        from PyQt6.QtDBus import QDBusConnection

        bus = QDBusConnection.sessionBus()
        if not bus.isConnected():
            logger.debug("No D-Bus session bus")
            return False
        connected = False
        for service, path, interface in _SCREENSAVER_SERVICES:
            if bus.connect(service, path, interface, "ActiveChanged", self.set_locked):
                logger.debug("Subscribed to %s.ActiveChanged", interface)
                connected = True
        return connected

    def _start_macos(self) -> bool:
        try:
            from AppKit import NSWorkspace
            observer_class = _macos_observer_class()
        except ImportError:
            logger.debug("PyObjC not available; screen lock detection disabled")
            return False
        observer = observer_class.alloc().init()
        observer.on_change = self.set_locked
        nc = NSWorkspace.sharedWorkspace().notificationCenter()
        nc.addObserver_selector_name_object_(
            observer, "sessionResigned:",
            "NSWorkspaceSessionDidResignActiveNotification", None)
        nc.addObserver_selector_name_object_(
            observer, "sessionActivated:",
            "NSWorkspaceSessionDidBecomeActiveNotification", None)
        self._observer = observer
        return True
