"""Exceptions raised by the segment store.

Filenames that are not log files are not errors: the codec and verifier
return None for them.
"""

from __future__ import annotations


class LogSegmentError(Exception):
    """Base class for segment store failures."""


class LogDirectoryError(LogSegmentError, OSError):
    """A candidate log directory could not be listed."""


class SegmentReadError(LogSegmentError, OSError):
    """A segment could not be opened for reading."""


class EntryDecodeError(SegmentReadError):
    """A segment holds data that does not decode as log entries."""


class SegmentCreateError(LogSegmentError, OSError):
    """No candidate directory accepted a new segment."""


class LogAccessError(LogSegmentError, PermissionError):
    """A requested log path violates the access policy."""
