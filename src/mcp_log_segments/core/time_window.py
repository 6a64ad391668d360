"""Time-window parsing helpers.

Turns user-facing selectors into a UTC ``[since, until)`` range and then
into the inclusive nanosecond bounds the fetcher works with.
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime, timedelta

from .models import to_unix_nanos

_HOUR_RE = re.compile(r"^(?P<d>\d{4}-\d{2}-\d{2})T(?P<h>\d{2})$")


def parse_iso_dt(s: str) -> datetime:
    """Parse ISO8601 datetime. If tz is missing, assume UTC."""
    dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def range_for_date(s: str) -> tuple[datetime, datetime]:
    """Return the UTC day window for an ISO date string."""
    d = date.fromisoformat(s)
    start = datetime(d.year, d.month, d.day, tzinfo=UTC)
    return start, start + timedelta(days=1)


def range_for_hour(s: str) -> tuple[datetime, datetime]:
    """Return the UTC hour window for a YYYY-MM-DDTHH selector."""
    m = _HOUR_RE.match(s)
    if not m:
        raise ValueError("hour must look like YYYY-MM-DDTHH (e.g., 2025-12-29T10)")
    d = date.fromisoformat(m.group("d"))
    start = datetime(d.year, d.month, d.day, int(m.group("h")), tzinfo=UTC)
    return start, start + timedelta(hours=1)


def resolve_time_window(
    *,
    since: str | None = None,
    until: str | None = None,
    date_: str | None = None,
    hour: str | None = None,
    hours_lookback: int | None = None,
    now: datetime | None = None,
) -> tuple[datetime, datetime]:
    """Resolve a UTC ``[since, until)`` window.

    Priority: date/hour > since/until > lookback. A missing ``until`` means
    now; a missing ``since`` falls back to ``hours_lookback`` before
    ``until`` (24 hours when that is not given either).
    """
    if date_ and hour:
        raise ValueError("Use either date or hour, not both.")
    if date_:
        return range_for_date(date_)
    if hour:
        return range_for_hour(hour)

    if hours_lookback is not None and hours_lookback < 0:
        raise ValueError("hours_lookback must be >= 0")

    now = now or datetime.now(UTC)
    u = parse_iso_dt(until) if until else now
    if since:
        s = parse_iso_dt(since)
    else:
        s = u - timedelta(hours=24 if hours_lookback is None else hours_lookback)

    if s >= u:
        raise ValueError("since must be < until")
    return s, u


def window_to_nanos(since: datetime, until: datetime) -> tuple[int, int]:
    """Convert a half-open ``[since, until)`` window into inclusive nanosecond bounds."""
    return to_unix_nanos(since), to_unix_nanos(until) - 1
