"""OS integration helpers."""

from .lock import LockCommand, lock_screen, lock_screen_in_background, lock_commands
from .session import SessionLockMonitor

__all__ = [
    "LockCommand",
    "lock_screen",
    "lock_screen_in_background",
    "lock_commands",
    "SessionLockMonitor",
]
