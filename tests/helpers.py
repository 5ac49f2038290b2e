"""Shared test helpers for TakeARest."""

from takearest.errors import StorageError
from takearest.timer.engine import TimerEngine


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


def run_ticks(engine: TimerEngine, count: int) -> None:
    for _ in range(count):
        engine._on_tick()


def expire(engine: TimerEngine) -> None:
    """Fast-forward to the last second of the current mode and tick once."""
    engine._remaining = 1
    engine._on_tick()


class FailingStore:
    """Stand-in store whose every call fails like a broken disk."""

    def __init__(self):
        self.calls: list[str] = []

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            self.calls.append(name)
            raise StorageError(name, OSError("disk I/O error"))
        return fail


def corrupt_row(db_path, name: str, **columns) -> None:
    """Overwrite columns of a stored preset behind the store's back."""
    import sqlite3

    assignments = ", ".join(f"{col} = ?" for col in columns)
    conn = sqlite3.connect(db_path)
    try:
        conn.execute(
            f"UPDATE timing_configurations SET {assignments} WHERE name = ?",
            (*columns.values(), name),
        )
        conn.commit()
    finally:
        conn.close()
