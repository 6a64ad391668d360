"""Reconstruct a time-ordered view of log entries from rotated segments."""

from __future__ import annotations

import logging
from collections import deque

from .config import LogConfig
from .entries import DecoderFactory, JsonLinesEntryDecoder
from .errors import EntryDecodeError, SegmentReadError
from .files import list_log_files
from .models import FileInfo, LogEntry, Severity

logger = logging.getLogger(__name__)

# Stop opening older segments once this many entries have been collected.
ENTRIES_CUTOFF = 100_000


def _select_segments(
    log_files: list[FileInfo],
    severity: Severity,
    start_nanos: int,
    end_nanos: int,
) -> list[FileInfo]:
    """Return the segments that may hold entries in the window, newest first.

    A segment's creation time is a lower bound for every entry in it, so
    anything created after ``end_nanos`` is skipped. Of the segments created
    at or before ``start_nanos``, only the newest (the boundary) can still
    hold entries at or after the start; older ones are dropped.
    """
    candidates = [
        f
        for f in log_files
        if f.details.severity == severity and f.details.time_nanos <= end_nanos
    ]

    boundary_nanos: int | None = None
    for f in candidates:
        nanos = f.details.time_nanos
        if nanos <= start_nanos and (boundary_nanos is None or nanos > boundary_nanos):
            boundary_nanos = nanos

    if boundary_nanos is not None:
        candidates = [f for f in candidates if f.details.time_nanos >= boundary_nanos]

    candidates.sort(key=lambda f: (f.details.time_nanos, f.name), reverse=True)
    return candidates


def _read_segment(
    info: FileInfo,
    start_nanos: int,
    end_nanos: int,
    decoder: DecoderFactory,
) -> list[LogEntry]:
    """Return the in-window entries of one segment, newest first."""
    try:
        stream = open(info.path, "rb")
    except OSError as exc:
        raise SegmentReadError(f"cannot open log segment {info.name}: {exc}") from exc

    entries: deque[LogEntry] = deque()
    with stream:
        try:
            for entry in decoder(stream):
                if start_nanos <= entry.time_nanos <= end_nanos:
                    entries.appendleft(entry)
        except EntryDecodeError as exc:
            raise EntryDecodeError(f"{info.name}: {exc}") from exc
        except OSError as exc:
            raise SegmentReadError(f"cannot read log segment {info.name}: {exc}") from exc
    return list(entries)


def fetch_entries(
    config: LogConfig,
    severity: Severity,
    start_nanos: int,
    end_nanos: int,
    *,
    cutoff: int = ENTRIES_CUTOFF,
    decoder: DecoderFactory = JsonLinesEntryDecoder,
) -> list[LogEntry]:
    """Return entries from ``severity`` segments with ``start_nanos <= time <= end_nanos``.

    Only segments recorded at exactly ``severity`` are read. Segments are read
    newest first and reading stops once ``cutoff`` entries are collected or
    the boundary segment has been drained. The result holds at most
    ``cutoff`` of the most recent entries, oldest first.

    Any listing, open or decode failure aborts the fetch; partial results are
    never returned. An empty window (``start_nanos > end_nanos``) matches
    nothing and returns ``[]`` without touching the disk.
    """
    if cutoff < 1:
        raise ValueError("cutoff must be >= 1")
    if start_nanos > end_nanos:
        return []

    segments = _select_segments(list_log_files(config), severity, start_nanos, end_nanos)
    if not segments:
        return []

    newest_first: list[LogEntry] = []
    for info in segments:
        newest_first.extend(_read_segment(info, start_nanos, end_nanos, decoder))
        logger.debug("Read %s, %d entries so far", info.name, len(newest_first))
        if len(newest_first) >= cutoff:
            break

    # Segments of different processes may overlap in time.
    newest_first.sort(key=lambda e: e.time_nanos, reverse=True)
    entries = newest_first[:cutoff]
    entries.reverse()
    return entries
