"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

import os
from typing import Any

from mcp_log_segments.core.config import LogConfig, default_config
from mcp_log_segments.core.fetch import ENTRIES_CUTOFF, fetch_entries
from mcp_log_segments.core.files import list_log_files
from mcp_log_segments.core.models import FileInfo, LogEntry, Severity
from mcp_log_segments.core.time_window import resolve_time_window, window_to_nanos

CUTOFF_ENV = "LOG_SEGMENTS_CUTOFF"
DEFAULT_LIMIT = 200
ALL_SEVERITIES = [s.name for s in Severity]


def resolve_cutoff() -> int:
    """Return the fetch cutoff, honoring the environment override."""
    env = os.getenv(CUTOFF_ENV)
    if not env:
        return ENTRIES_CUTOFF
    try:
        value = int(env)
    except ValueError as exc:
        raise ValueError(f"{CUTOFF_ENV} must be an integer") from exc
    if value < 1:
        raise ValueError(f"{CUTOFF_ENV} must be >= 1")
    return value


def parse_severity(name: str) -> Severity:
    """Parse a user-supplied severity name (case-insensitive)."""
    severity = Severity.from_name(name.strip().upper())
    if severity is None:
        valid = ", ".join(ALL_SEVERITIES)
        raise ValueError(
            f"Unknown severity '{name}'. Valid values: {valid}. "
            "Tip: severity is case-insensitive (e.g., 'error', 'WARNING')."
        )
    return severity


def _entry_to_dict(entry: LogEntry) -> dict[str, Any]:
    """Convert a LogEntry into a JSON-serializable dict."""
    d: dict[str, Any] = {
        "timestamp": entry.timestamp.isoformat(),
        "time_nanos": entry.time_nanos,
        "severity": entry.severity.name.lower(),
        "message": entry.message,
    }
    if entry.file is not None:
        d["file"] = entry.file
    if entry.line is not None:
        d["line"] = entry.line
    if entry.meta:
        d["meta"] = entry.meta
    return d


def _file_to_dict(info: FileInfo) -> dict[str, Any]:
    details = info.details
    return {
        "name": info.name,
        "size_bytes": info.size_bytes,
        "mod_time_nanos": info.mod_time_nanos,
        "program": details.program,
        "host": details.host,
        "user_name": details.user_name,
        "severity": details.severity.name,
        "time": details.time.isoformat(),
        "pid": details.pid,
    }


def list_log_files_impl(*, config: LogConfig | None = None) -> dict[str, Any]:
    """Implementation for the `list_log_files` MCP tool (newest segments first)."""
    files = list_log_files(config or default_config())
    files.sort(key=lambda f: (f.details.time_nanos, f.name), reverse=True)
    return {"count": len(files), "files": [_file_to_dict(f) for f in files]}


def fetch_log_entries_impl(
    *,
    severity: str = "INFO",
    since: str | None = None,
    until: str | None = None,
    date: str | None = None,
    hour: str | None = None,
    hours_lookback: int | None = None,
    limit: int | None = None,
    config: LogConfig | None = None,
) -> dict[str, Any]:
    """Implementation for the `fetch_log_entries` MCP tool.

    Notes
    -----
    - Time window precedence: date/hour selectors, then since/until, then
      the last ``hours_lookback`` hours (24 by default).
    - ``until`` is exclusive.
    - ``limit`` keeps the most recent entries; it can never exceed the
      fetch cutoff.
    """
    sev = parse_severity(severity)
    cutoff = resolve_cutoff()
    if limit is None:
        limit = DEFAULT_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    limit = min(limit, cutoff)

    window_since, window_until = resolve_time_window(
        since=since,
        until=until,
        date_=date,
        hour=hour,
        hours_lookback=hours_lookback,
    )
    start_nanos, end_nanos = window_to_nanos(window_since, window_until)

    entries = fetch_entries(
        config or default_config(),
        sev,
        start_nanos,
        end_nanos,
        cutoff=limit,
    )
    return {
        "count": len(entries),
        "since": window_since.isoformat(),
        "until": window_until.isoformat(),
        "entries": [_entry_to_dict(e) for e in entries],
    }
