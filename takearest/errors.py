"""Exception types shared across TakeARest."""

from __future__ import annotations


class TakeARestError(Exception):
    """Base class for every error raised by this package."""


class StorageError(TakeARestError):
    """A persistence operation failed (I/O, corruption, permissions).

    ``operation`` names the store method that failed so log lines say
    what was being attempted, not just what went wrong.
    """

    def __init__(self, operation: str, cause: BaseException | None = None) -> None:
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"storage operation '{operation}' failed{detail}")


class DuplicateNameError(TakeARestError):
    """A configuration with this exact name already exists."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"a configuration named {name!r} already exists")
