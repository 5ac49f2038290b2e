"""Settings store: named timing presets plus the session state.

The store is an explicitly constructed object bound to one database URL.
Every public call runs in its own SQLAlchemy session that commits on
success and rolls back on error, under a re-entrant lock, so callers on
any thread see whole writes or nothing.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterator, NamedTuple

from sqlalchemy import create_engine, func
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session as OrmSession
from sqlalchemy.pool import StaticPool

from ..errors import DuplicateNameError, StorageError
from .models import (
    Base, ConfigurationRow, SessionStateRow, SessionState, TimingConfiguration,
)

logger = logging.getLogger(__name__)


class Preset(NamedTuple):
    name: str
    work_seconds: int
    rest_seconds: int


# ── seeded presets ────────────────────────────────────────────────────────

SYSTEM_PRESETS: tuple[Preset, ...] = (
    Preset("Pomodoro", 25 * 60, 5 * 60),
    Preset("Long cycle", 45 * 60, 10 * 60),
    Preset("Short cycle", 15 * 60, 5 * 60),
    Preset("Deep work", 90 * 60, 10 * 60),
    Preset("Test mode", 10, 10),
)

_TIMESTAMP_STEP = timedelta(microseconds=1)


def create_db_engine(url: str) -> Engine:
    """Build a SQLAlchemy engine for *url*.

    File-backed SQLite gets its parent directory created; in-memory
    SQLite is pinned to one connection so every session sees the same
    database.
    """
    parsed = make_url(url)
    kwargs: dict = {"echo": False}
    if parsed.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        database = parsed.database
        if not database or database == ":memory:":
            kwargs["poolclass"] = StaticPool
        else:
            Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, **kwargs)


class SettingsStore:
    """Durable CRUD for :class:`TimingConfiguration` plus session state."""

    def __init__(self, url: str, presets: tuple[Preset, ...] = SYSTEM_PRESETS) -> None:
        self._url = url
        self._presets = presets
        self._lock = threading.RLock()
        try:
            self._engine = create_db_engine(url)
            Base.metadata.create_all(self._engine)
        except (SQLAlchemyError, OSError) as exc:
            raise StorageError("open", exc) from exc
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)

    @property
    def url(self) -> str:
        return self._url

    def close(self) -> None:
        self._engine.dispose()

    # ══════════════════════════════════════════════════════════════════
    #  CONFIGURATIONS
    # ══════════════════════════════════════════════════════════════════

    def seed_system_presets(self) -> int:
        """Insert the built-in presets unless any system preset exists.

        Safe to call on every start.  Returns the number of rows added.
        """
        with self._transaction("seed_system_presets") as db:
            return self._seed(db)

    def list_all(self) -> list[TimingConfiguration]:
        with self._transaction("list_all") as db:
            return _valid_records(db.query(ConfigurationRow).all())

    def get_most_recently_updated(self) -> TimingConfiguration | None:
        with self._transaction("get_most_recently_updated") as db:
            row = (
                db.query(ConfigurationRow)
                .order_by(ConfigurationRow.updated_at.desc(), ConfigurationRow.id.desc())
                .first()
            )
            return TimingConfiguration.from_row(row) if row else None

    def get_by_name(self, name: str) -> TimingConfiguration | None:
        with self._transaction("get_by_name") as db:
            row = db.query(ConfigurationRow).filter(ConfigurationRow.name == name).first()
            return TimingConfiguration.from_row(row) if row else None

    def save(
        self,
        id: int | None,
        name: str,
        work_seconds: int,
        rest_seconds: int,
        is_system_preset: bool = False,
    ) -> int:
        """Update the row with *id*, or insert a new one.

        An unknown *id* is treated like ``None``.  Raises
        :class:`DuplicateNameError` when *name* belongs to another row.
        """
        _validate(name, work_seconds, rest_seconds)
        with self._transaction("save") as db:
            row = db.get(ConfigurationRow, id) if id is not None else None

            clash = db.query(ConfigurationRow).filter(ConfigurationRow.name == name).first()
            if clash is not None and (row is None or clash.id != row.id):
                raise DuplicateNameError(name)

            stamp = self._next_timestamp(db)
            if row is None:
                row = ConfigurationRow(
                    name=name,
                    work_seconds=work_seconds,
                    rest_seconds=rest_seconds,
                    is_system_preset=is_system_preset,
                    created_at=stamp,
                    updated_at=stamp,
                )
                db.add(row)
            else:
                row.name = name
                row.work_seconds = work_seconds
                row.rest_seconds = rest_seconds
                row.is_system_preset = is_system_preset
                row.updated_at = stamp

            try:
                db.flush()
            except IntegrityError as exc:
                # Another process won the race for this name.
                raise DuplicateNameError(name) from exc
            logger.debug("Saved configuration %r (id=%s)", name, row.id)
            return row.id

    def reset_all(self) -> None:
        """Wipe every configuration and the session state, then re-seed."""
        with self._transaction("reset_all") as db:
            db.query(ConfigurationRow).delete()
            db.query(SessionStateRow).delete()
            self._seed(db)
        logger.info("Settings store reset to factory presets")

    # ══════════════════════════════════════════════════════════════════
    #  SESSION STATE
    # ══════════════════════════════════════════════════════════════════

    def get_session_state(self) -> SessionState:
        with self._transaction("get_session_state") as db:
            row = db.query(SessionStateRow).first()
            if row is None:
                return SessionState()
            return SessionState(
                last_selected_configuration_id=row.last_selected_configuration_id,
                last_used_work_seconds=row.last_used_work_seconds,
                last_used_rest_seconds=row.last_used_rest_seconds,
            )

    def set_last_selected_id(self, configuration_id: int | None) -> None:
        with self._transaction("set_last_selected_id") as db:
            self._session_row(db).last_selected_configuration_id = configuration_id

    def set_last_used_durations(self, work_seconds: int, rest_seconds: int) -> None:
        for label, value in (("work_seconds", work_seconds), ("rest_seconds", rest_seconds)):
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"{label} must be a non-negative integer, got {value!r}")
        with self._transaction("set_last_used_durations") as db:
            row = self._session_row(db)
            row.last_used_work_seconds = work_seconds
            row.last_used_rest_seconds = rest_seconds

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[OrmSession]:
        """Yield a session; commit on success, rollback on error.

        Driver and filesystem failures, and stored rows that no longer
        pass record validation, are re-raised as :class:`StorageError`
        tagged with *operation*.
        """
        with self._lock:
            session: OrmSession = self._session_factory()
            try:
                yield session
                session.commit()
            except (SQLAlchemyError, OSError, ValueError) as exc:
                session.rollback()
                raise StorageError(operation, exc) from exc
            except Exception:
                session.rollback()
                raise
            finally:
                session.close()

    def _seed(self, db: OrmSession) -> int:
        exists = (
            db.query(ConfigurationRow.id)
            .filter(ConfigurationRow.is_system_preset.is_(True))
            .first()
        )
        if exists is not None:
            return 0
        stamp = self._next_timestamp(db)
        for preset in self._presets:
            db.add(ConfigurationRow(
                name=preset.name,
                work_seconds=preset.work_seconds,
                rest_seconds=preset.rest_seconds,
                is_system_preset=True,
                created_at=stamp,
                updated_at=stamp,
            ))
        logger.info("Seeded %d system presets", len(self._presets))
        return len(self._presets)

    @staticmethod
    def _next_timestamp(db: OrmSession) -> datetime:
        """Now, nudged past the newest ``updated_at`` so saves always order."""
        now = datetime.now()
        latest = db.query(func.max(ConfigurationRow.updated_at)).scalar()
        if latest is not None and now <= latest:
            now = latest + _TIMESTAMP_STEP
        return now

    @staticmethod
    def _session_row(db: OrmSession) -> SessionStateRow:
        row = db.query(SessionStateRow).first()
        if row is None:
            row = SessionStateRow()
            db.add(row)
        return row


def _valid_records(rows: list[ConfigurationRow]) -> list[TimingConfiguration]:
    """Convert rows, skipping any that were corrupted outside the store."""
    records = []
    for row in rows:
        try:
            records.append(TimingConfiguration.from_row(row))
        except ValueError as exc:
            logger.warning("Skipping invalid configuration row %r: %s", row, exc)
    return records


def _validate(name: str, work_seconds: int, rest_seconds: int) -> None:
    if not name:
        raise ValueError("configuration name must not be empty")
    for label, value in (("work_seconds", work_seconds), ("rest_seconds", rest_seconds)):
        if not isinstance(value, int) or value <= 0:
            raise ValueError(f"{label} must be a positive integer, got {value!r}")
