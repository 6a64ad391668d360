"""Segment filename codec.

Grammar::

    {program}.{host}.{user}.log.{SEVERITY}.{time}.{pid}

Identity fields are escaped so they never contain a period, the time is
UTC RFC 3339 to the second with colons replaced by underscores, and the pid
is a decimal integer. The companion symlink is ``{program}.{SEVERITY}``.
"""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime

from .config import LogConfig
from .models import FileDetails, Severity

logger = logging.getLogger(__name__)

_LOG_FILE_RE = re.compile(
    r"(?P<program>[^.]+)\.(?P<host>[^.]+)\.(?P<user>[^.]+)\.log\."
    r"(?P<severity>[^.]+)\."
    r"(?P<time>\d{4}-\d{2}-\d{2}T\d{2}_\d{2}_\d{2}(?:Z|[+-]\d{2}_\d{2}))\."
    r"(?P<pid>\d+)",
    re.ASCII,
)
_TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
_PARSE_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def escape_for_filename(s: str) -> str:
    """Double every underscore, then turn every period into an underscore."""
    return s.replace("_", "__").replace(".", "_")


def unescape_for_filename(s: str) -> str:
    """Undo ``escape_for_filename`` (periods first, then collapse doubled underscores)."""
    return s.replace("_", ".").replace("..", "_")


def format_log_time(t: datetime) -> str:
    """Render a filesystem-safe, sortable UTC timestamp."""
    if t.tzinfo is None:
        t = t.replace(tzinfo=UTC)
    return t.astimezone(UTC).strftime(_TIME_FORMAT).replace(":", "_")


def log_name(config: LogConfig, severity: Severity, t: datetime) -> tuple[str, str]:
    """Return the segment filename for ``severity`` started at ``t`` and its symlink name."""
    name = ".".join(
        [
            escape_for_filename(config.program),
            escape_for_filename(config.host),
            escape_for_filename(config.user_name),
            "log",
            severity.name,
            format_log_time(t),
            str(config.pid),
        ]
    )
    return name, f"{config.program}.{severity.name}"


def parse_log_filename(filename: str) -> FileDetails | None:
    """Decode a segment filename, or return None when it is not one."""
    m = _LOG_FILE_RE.fullmatch(filename)
    if m is None:
        return None

    severity = Severity.from_name(m.group("severity"))
    if severity is None:
        logger.debug("Not a log file, unknown severity: %s", filename)
        return None

    try:
        t = datetime.strptime(m.group("time").replace("_", ":"), _PARSE_TIME_FORMAT)
    except ValueError:
        logger.debug("Not a log file, bad timestamp: %s", filename)
        return None

    return FileDetails(
        program=unescape_for_filename(m.group("program")),
        host=unescape_for_filename(m.group("host")),
        user_name=unescape_for_filename(m.group("user")),
        severity=severity,
        time=t.astimezone(UTC),
        pid=int(m.group("pid")),
    )
