"""Process identity and candidate log directories.

A ``LogConfig`` is built once at startup and passed to every operation that
names, lists, creates or reads segments.
"""

from __future__ import annotations

import getpass
import logging
import os
import socket
import sys
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

LOG_DIRS_ENV = "LOG_SEGMENTS_DIRS"


def short_hostname(hostname: str) -> str:
    """Truncate a hostname at its first period ("www.example.com" -> "www")."""
    head, _, _ = hostname.partition(".")
    return head


def _program_name() -> str:
    name = Path(sys.argv[0]).name if sys.argv and sys.argv[0] else ""
    return name or "python"


def _host_name() -> str:
    try:
        host = short_hostname(socket.gethostname())
    except OSError:
        host = ""
    return host or "unknownhost"


def _user_name() -> str:
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        # No passwd entry and none of LOGNAME/USER/LNAME/USERNAME set.
        return "unknownuser"
    # Windows user names may carry a domain separator.
    return user.replace("\\", "_") or "unknownuser"


def _log_dirs_from_env() -> tuple[Path, ...]:
    raw = os.getenv(LOG_DIRS_ENV)
    if raw:
        dirs = tuple(Path(p).expanduser() for p in raw.split(os.pathsep) if p.strip())
        if dirs:
            return dirs
    return (Path(tempfile.gettempdir()),)


@dataclass(frozen=True, slots=True)
class LogConfig:
    """Identity embedded in segment names plus the directories that hold them.

    ``log_dirs`` is in preference order: new segments go to the first
    directory that accepts them, and all of them are searched when listing.
    """

    program: str
    host: str
    user_name: str
    pid: int
    log_dirs: tuple[Path, ...]

    @classmethod
    def from_env(cls) -> LogConfig:
        return cls(
            program=_program_name(),
            host=_host_name(),
            user_name=_user_name(),
            pid=os.getpid(),
            log_dirs=_log_dirs_from_env(),
        )


_default_config: LogConfig | None = None
_default_lock = threading.Lock()


def default_config() -> LogConfig:
    """Return the process-wide config, computing it on first use."""
    global _default_config
    if _default_config is None:
        with _default_lock:
            if _default_config is None:
                _default_config = LogConfig.from_env()
                logger.debug(
                    "Log segment dirs: %s",
                    ", ".join(str(d) for d in _default_config.log_dirs),
                )
    return _default_config
