"""Tests for the best-effort screen lock fallback chain."""

import subprocess
import threading

import pytest

from takearest.system import lock
from takearest.system.lock import (
    LockCommand, lock_commands, lock_screen, lock_screen_in_background,
)


@pytest.fixture
def launches(monkeypatch):
    """Record launches; argv[0] values listed in ``failing`` raise."""
    record = {"run": [], "popen": [], "failing": set()}

    def fake_run(argv, **kwargs):
        record["run"].append(argv[0])
        if argv[0] in record["failing"]:
            raise subprocess.CalledProcessError(1, argv)

    def fake_popen(argv, **kwargs):
        record["popen"].append(argv[0])
        if argv[0] in record["failing"]:
            raise FileNotFoundError(argv[0])

    monkeypatch.setattr(lock.subprocess, "run", fake_run)
    monkeypatch.setattr(lock.subprocess, "Popen", fake_popen)
    return record


class TestLockCommands:

    def test_platform_chains(self):
        assert lock_commands("darwin")[0].argv[0] == "osascript"
        assert lock_commands("win32")[0].argv[0] == "rundll32.exe"
        assert lock_commands("linux")[0].argv[0] == "loginctl"

    def test_every_platform_has_a_fallback(self):
        for platform in ("darwin", "linux"):
            assert len(lock_commands(platform)) > 1


class TestLockScreen:

    def test_first_success_stops_the_chain(self, launches):
        commands = (LockCommand(("first",)), LockCommand(("second",)))
        assert lock_screen(commands) is True
        assert launches["popen"] == ["first"]

    def test_falls_through_failures(self, launches):
        launches["failing"].update({"first", "second"})
        commands = (
            LockCommand(("first",), wait=True),
            LockCommand(("second",)),
            LockCommand(("third",)),
        )
        assert lock_screen(commands) is True
        assert launches["run"] == ["first"]
        assert launches["popen"] == ["second", "third"]

    def test_exhausted_chain_returns_false(self, launches):
        launches["failing"].update({"a", "b"})
        assert lock_screen((LockCommand(("a",)), LockCommand(("b",), wait=True))) is False

    def test_timeout_counts_as_failure(self, monkeypatch):
        def slow_run(argv, **kwargs):
            raise subprocess.TimeoutExpired(argv, kwargs.get("timeout"))

        monkeypatch.setattr(lock.subprocess, "run", slow_run)
        assert lock_screen((LockCommand(("slow",), wait=True),)) is False


class TestBackgroundLock:

    def test_returns_before_slow_command_finishes(self, monkeypatch):
        release = threading.Event()
        ran = []

        def slow_run(argv, **kwargs):
            release.wait(5)
            ran.append(argv[0])

        monkeypatch.setattr(lock.subprocess, "run", slow_run)
        worker = lock_screen_in_background((LockCommand(("slow",), wait=True),))

        assert worker.is_alive()
        assert ran == []

        release.set()
        worker.join(5)
        assert not worker.is_alive()
        assert ran == ["slow"]

    def test_failures_stay_on_the_worker(self, launches):
        launches["failing"].add("broken")
        worker = lock_screen_in_background((LockCommand(("broken",)),))
        worker.join(5)
        assert launches["popen"] == ["broken"]
