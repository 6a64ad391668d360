"""Core data models for rotated log segments."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import IntEnum
from pathlib import Path
from typing import Any, BinaryIO

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def to_unix_nanos(dt: datetime) -> int:
    """Return nanoseconds since the epoch. Naive datetimes are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return (dt - _EPOCH) // timedelta(microseconds=1) * 1000


def from_unix_nanos(nanos: int) -> datetime:
    """Return a UTC datetime for nanoseconds since the epoch (microsecond precision)."""
    return _EPOCH + timedelta(microseconds=nanos // 1000)


class Severity(IntEnum):
    """Ordered severity levels; a higher value is more severe."""

    INFO = 0
    WARNING = 1
    ERROR = 2
    FATAL = 3

    @classmethod
    def from_name(cls, name: str) -> Severity | None:
        """Case-sensitive lookup by name, None when unknown."""
        return cls.__members__.get(name)


@dataclass(frozen=True, slots=True)
class FileDetails:
    """Everything that can be decoded from a segment filename."""

    program: str
    host: str
    user_name: str
    severity: Severity
    time: datetime  # UTC, second precision
    pid: int

    @property
    def time_nanos(self) -> int:
        return to_unix_nanos(self.time)


@dataclass(frozen=True, slots=True)
class FileInfo:
    """A verified segment found while listing a log directory."""

    name: str
    path: Path
    size_bytes: int
    mod_time_nanos: int
    details: FileDetails


@dataclass(frozen=True, slots=True)
class LogEntry:
    """A single decoded log record."""

    time_nanos: int
    severity: Severity
    message: str
    file: str | None = None
    line: int | None = None
    meta: dict[str, Any] | None = None  # structured extras carried through unchanged

    @property
    def timestamp(self) -> datetime:
        return from_unix_nanos(self.time_nanos)


@dataclass(frozen=True, slots=True)
class CreatedSegment:
    """A freshly opened segment.

    ``symlink_updated`` reports whether the per-severity "latest" link now
    points at this segment. Callers are free to ignore it.
    """

    stream: BinaryIO
    path: Path
    symlink_updated: bool
