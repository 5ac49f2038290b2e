"""Logging setup for the desktop app.

Modules log through ``logging.getLogger(__name__)``; only the entry
point calls :func:`setup_logging`.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "INFO", log_path: Path | None = None) -> None:
    """Attach a console handler and, if *log_path* is given, a file handler
    to the ``takearest`` logger."""
    root = logging.getLogger("takearest")
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    # Calling twice (tests, re-entry from __main__) must not double-log.
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    root.addHandler(stream)

    if log_path is not None:
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
        except OSError as exc:
            root.warning("File logging disabled (%s)", exc)
        else:
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
