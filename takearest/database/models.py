"""SQLAlchemy ORM models and the plain records handed to callers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# ── ORM rows ──────────────────────────────────────────────────────────────


class ConfigurationRow(Base):
    """A named work/rest preset."""

    __tablename__ = "timing_configurations"
    # AUTOINCREMENT so ids are never handed out twice, even after reset_all
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)
    work_seconds = Column(Integer, nullable=False)
    rest_seconds = Column(Integer, nullable=False)
    is_system_preset = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<ConfigurationRow id={self.id} name={self.name!r} "
            f"work={self.work_seconds} rest={self.rest_seconds}>"
        )


class SessionStateRow(Base):
    """Single-row table holding the lightweight session state."""

    __tablename__ = "session_state"

    id = Column(Integer, primary_key=True, autoincrement=True)
    last_selected_configuration_id = Column(Integer, nullable=True)
    last_used_work_seconds = Column(Integer, nullable=True)
    last_used_rest_seconds = Column(Integer, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<SessionStateRow selected={self.last_selected_configuration_id} "
            f"work={self.last_used_work_seconds} rest={self.last_used_rest_seconds}>"
        )


# ── records ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TimingConfiguration:
    """Detached, validated snapshot of a :class:`ConfigurationRow`."""

    id: int
    name: str
    work_seconds: int
    rest_seconds: int
    is_system_preset: bool
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("configuration name must not be empty")
        for label, value in (("work_seconds", self.work_seconds),
                             ("rest_seconds", self.rest_seconds)):
            if not isinstance(value, int) or value <= 0:
                raise ValueError(f"{label} must be a positive integer, got {value!r}")

    @property
    def total_seconds(self) -> int:
        return self.work_seconds + self.rest_seconds

    @classmethod
    def from_row(cls, row: ConfigurationRow) -> TimingConfiguration:
        return cls(
            id=row.id,
            name=row.name,
            work_seconds=row.work_seconds,
            rest_seconds=row.rest_seconds,
            is_system_preset=bool(row.is_system_preset),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


@dataclass(frozen=True)
class SessionState:
    last_selected_configuration_id: int | None = None
    last_used_work_seconds: int | None = None
    last_used_rest_seconds: int | None = None

    @property
    def last_used_durations(self) -> tuple[int, int] | None:
        """``(work, rest)`` when both halves were saved, else ``None``."""
        if self.last_used_work_seconds is None or self.last_used_rest_seconds is None:
            return None
        return (self.last_used_work_seconds, self.last_used_rest_seconds)
