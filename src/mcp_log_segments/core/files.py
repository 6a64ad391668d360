"""Segment files on disk: verification, listing, creation and guarded reads."""

from __future__ import annotations

import logging
import os
import stat
from datetime import UTC, datetime
from pathlib import Path
from typing import BinaryIO

from .config import LogConfig
from .errors import LogAccessError, LogDirectoryError, SegmentCreateError
from .models import CreatedSegment, FileDetails, FileInfo, Severity
from .naming import log_name, parse_log_filename

logger = logging.getLogger(__name__)

SEGMENT_FILE_MODE = 0o664


def verify_dir_entry(entry: os.DirEntry[str]) -> FileDetails | None:
    """Return the decoded details if ``entry`` is a regular file with a segment name."""
    try:
        if not entry.is_file(follow_symlinks=False):
            return None
    except OSError:
        return None
    return parse_log_filename(entry.name)


def verify_file(path: str | Path) -> FileDetails | None:
    """Like ``verify_dir_entry`` for a path. Symlinks and missing paths do not verify."""
    p = Path(path)
    try:
        st = p.lstat()
    except (OSError, ValueError):
        return None
    if not stat.S_ISREG(st.st_mode):
        return None
    return parse_log_filename(p.name)


def list_log_files(config: LogConfig) -> list[FileInfo]:
    """Return every verified segment across the configured directories, unordered.

    A directory that cannot be read fails the whole listing.
    """
    results: list[FileInfo] = []
    for log_dir in config.log_dirs:
        try:
            with os.scandir(log_dir) as it:
                for entry in it:
                    details = verify_dir_entry(entry)
                    if details is None:
                        continue
                    st = entry.stat(follow_symlinks=False)
                    results.append(
                        FileInfo(
                            name=entry.name,
                            path=Path(entry.path),
                            size_bytes=st.st_size,
                            mod_time_nanos=st.st_mtime_ns,
                            details=details,
                        )
                    )
        except OSError as exc:
            raise LogDirectoryError(f"cannot list log directory {log_dir}: {exc}") from exc
    return results


def _update_symlink(log_dir: Path, name: str, link: str) -> bool:
    """Point ``log_dir/link`` at ``name``. Failures are logged and reported as False."""
    symlink = log_dir / link
    try:
        symlink.unlink(missing_ok=True)
        os.symlink(name, symlink)
    except OSError as exc:
        logger.warning("Could not update log symlink %s -> %s: %s", symlink, name, exc)
        return False
    return True


def create_segment(
    config: LogConfig,
    severity: Severity,
    t: datetime | None = None,
) -> CreatedSegment:
    """Open a new append-only segment for ``severity`` started at ``t`` (default: now).

    Directories are tried in preference order and the first one that opens
    the file wins.
    """
    if not config.log_dirs:
        raise SegmentCreateError("no log directories configured")

    name, link = log_name(config, severity, t or datetime.now(UTC))
    last_exc: OSError | None = None
    for log_dir in config.log_dirs:
        path = Path(log_dir) / name
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, SEGMENT_FILE_MODE)
        except OSError as exc:
            logger.warning("Cannot create log segment in %s: %s", log_dir, exc)
            last_exc = exc
            continue

        stream = os.fdopen(fd, "ab")
        linked = _update_symlink(Path(log_dir), name, link)
        logger.debug("Created log segment %s", path)
        return CreatedSegment(stream=stream, path=path, symlink_updated=linked)

    raise SegmentCreateError(f"cannot create log segment {name}: {last_exc}") from last_exc


def _is_bare_name(filename: str) -> bool:
    if filename in ("", ".", ".."):
        return False
    if "/" in filename or os.sep in filename or "\x00" in filename:
        return False
    return not (os.altsep and os.altsep in filename)


def open_log_file(
    config: LogConfig,
    filename: str,
    *,
    allow_absolute: bool = False,
) -> BinaryIO:
    """Open a segment for reading after checking it against the access policy.

    Untrusted callers (anything reachable remotely) must leave
    ``allow_absolute`` false so only segment names inside the configured
    directories can be read. Absolute paths are meant for local tooling
    that inspects an arbitrary segment file.
    """
    if os.path.isabs(filename):
        if not allow_absolute:
            raise LogAccessError(f"absolute pathnames are forbidden: {filename}")
        if verify_file(filename) is None:
            raise LogAccessError(f"not a log file: {filename}")
        return open(filename, "rb")

    if not _is_bare_name(filename):
        raise LogAccessError(f"pathnames must be basenames only: {filename}")
    if parse_log_filename(filename) is None:
        raise LogAccessError(f"filename is not a log file: {filename}")

    for log_dir in config.log_dirs:
        path = Path(log_dir) / filename
        if verify_file(path) is not None:
            return open(path, "rb")
    raise FileNotFoundError(f"Log file not found: {filename}")
