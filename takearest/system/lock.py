"""Best-effort screen locking.

Tries each platform command in order and stops at the first one that
launches.  Never raises: a machine without any of the tools simply
doesn't lock.  GUI code calls :func:`lock_screen_in_background` so a
slow command never stalls the event loop.
"""

from __future__ import annotations

import logging
import subprocess
import sys
import threading
from typing import NamedTuple, Sequence

logger = logging.getLogger(__name__)

_WAIT_TIMEOUT = 5  # seconds


class LockCommand(NamedTuple):
    argv: tuple[str, ...]
    # Wait for the exit status when a successful launch can still fail
    # (AppleScript without Accessibility permission, for example).
    wait: bool = False


_MAC_COMMANDS = (
    LockCommand(
        ("osascript", "-e",
         'tell application "System Events" to keystroke "q" '
         "using {control down, command down}"),
        wait=True,
    ),
    LockCommand(("launchctl", "start", "com.apple.screensaver.engine"), wait=True),
    LockCommand(("pmset", "displaysleepnow")),
)

_LINUX_COMMANDS = (
    LockCommand(("loginctl", "lock-session"), wait=True),
    LockCommand(("xdg-screensaver", "lock")),
    LockCommand(("gnome-screensaver-command", "-l")),
    LockCommand(("dm-tool", "lock")),
)

_WINDOWS_COMMANDS = (
    LockCommand(("rundll32.exe", "user32.dll,LockWorkStation")),
)


def lock_commands(platform: str | None = None) -> tuple[LockCommand, ...]:
    """The fallback chain for *platform* (defaults to ``sys.platform``)."""
    platform = platform or sys.platform
    if platform == "darwin":
        return _MAC_COMMANDS
    if platform.startswith("win"):
        return _WINDOWS_COMMANDS
    return _LINUX_COMMANDS


def lock_screen(commands: Sequence[LockCommand] | None = None) -> bool:
    """Lock or blank the display.  Returns True once a command succeeds."""
    for command in commands if commands is not None else lock_commands():
        try:
            if command.wait:
                subprocess.run(
                    command.argv,
                    check=True,
                    timeout=_WAIT_TIMEOUT,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                )
            else:
                subprocess.Popen(
                    command.argv,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("Lock command %s failed: %s", command.argv[0], exc)
            continue
        logger.info("Screen lock requested via %s", command.argv[0])
        return True

    logger.debug("No screen lock method available")
    return False


def lock_screen_in_background(commands: Sequence[LockCommand] | None = None) -> threading.Thread:
    """Run :func:`lock_screen` on a daemon thread and return immediately."""
    worker = threading.Thread(
        target=lock_screen, args=(commands,), name="takearest-lock", daemon=True,
    )
    worker.start()
    return worker
