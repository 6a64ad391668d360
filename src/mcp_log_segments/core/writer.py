"""Append entries to per-severity segments, rolling over by size."""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path

from .config import LogConfig
from .entries import encode_entry
from .files import create_segment
from .models import CreatedSegment, LogEntry, Severity, from_unix_nanos

logger = logging.getLogger(__name__)

# Maximum size of a segment in bytes before a new one is started.
MAX_SIZE = 1024 * 1024 * 1800


@dataclass(slots=True)
class _ActiveSegment:
    segment: CreatedSegment
    nbytes: int


class SegmentWriter:
    """Write entries the way a leveled logger does.

    An entry goes to the segment of its own severity and of every lower
    severity, so the INFO stream holds everything and the ERROR stream holds
    ERROR and FATAL. Each stream starts a new segment once ``max_size``
    bytes have been written to the current one. A new segment is stamped
    with the time of the entry that opened it.
    """

    def __init__(self, config: LogConfig, *, max_size: int = MAX_SIZE) -> None:
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        self._config = config
        self._max_size = max_size
        self._active: dict[Severity, _ActiveSegment] = {}
        self._lock = threading.Lock()
        self._closed = False

    def current_path(self, severity: Severity) -> Path | None:
        active = self._active.get(severity)
        return active.segment.path if active else None

    def write(self, entry: LogEntry) -> None:
        data = encode_entry(entry)
        with self._lock:
            if self._closed:
                raise ValueError("write to closed SegmentWriter")
            for severity in Severity:
                if severity > entry.severity:
                    break
                self._append(severity, data, entry.time_nanos)

    def _append(self, severity: Severity, data: bytes, time_nanos: int) -> None:
        active = self._active.get(severity)
        if active is not None and active.nbytes >= self._max_size:
            logger.debug("Rotating %s segment %s", severity.name, active.segment.path)
            active.segment.stream.close()
            active = None

        if active is None:
            segment = create_segment(self._config, severity, from_unix_nanos(time_nanos))
            # The name is second-granular, so a segment may already hold data.
            # Rotating twice within one second reopens the same file and lets
            # it grow past max_size.
            size = os.fstat(segment.stream.fileno()).st_size
            active = _ActiveSegment(segment=segment, nbytes=size)
            self._active[severity] = active

        active.segment.stream.write(data)
        active.nbytes += len(data)

    def flush(self) -> None:
        with self._lock:
            for active in self._active.values():
                active.segment.stream.flush()

    def close(self) -> None:
        with self._lock:
            self._closed = True
            for active in self._active.values():
                active.segment.stream.close()
            self._active.clear()

    def __enter__(self) -> SegmentWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
