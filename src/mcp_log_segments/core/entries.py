"""Per-entry encoding inside a segment.

The fetcher only needs something that turns an open binary stream into a
forward-only sequence of ``LogEntry``. The default is JSON lines.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator
from typing import Any, BinaryIO, Protocol

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import EntryDecodeError
from .models import LogEntry, Severity

logger = logging.getLogger(__name__)


class EntryDecoder(Protocol):
    """Decoder interface: iterate entries until end of data.

    End of data ends iteration. Corrupt data raises ``EntryDecodeError``.
    """

    def __iter__(self) -> Iterator[LogEntry]: ...


# Anything that wraps an open segment stream in a decoder, usually the class itself.
DecoderFactory = Callable[[BinaryIO], EntryDecoder]


class EntryRecord(BaseModel):
    """On-disk shape of one JSON-lines entry."""

    time: int = Field(ge=0, description="Nanoseconds since the Unix epoch.")
    severity: str = Field(description="Severity name, e.g. INFO or ERROR.")
    message: str
    file: str | None = None
    line: int | None = None
    meta: dict[str, Any] | None = None

    @field_validator("severity")
    @classmethod
    def _known_severity(cls, v: str) -> str:
        if Severity.from_name(v) is None:
            raise ValueError(f"unknown severity {v!r}")
        return v

    def to_entry(self) -> LogEntry:
        return LogEntry(
            time_nanos=self.time,
            severity=Severity[self.severity],
            message=self.message,
            file=self.file,
            line=self.line,
            meta=self.meta,
        )


class JsonLinesEntryDecoder:
    """Decode one JSON object per line.

    A final line with no trailing newline is a record the writer has not
    finished yet; if it does not validate, iteration simply stops there.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def __iter__(self) -> Iterator[LogEntry]:
        for line_no, raw in enumerate(self._stream, start=1):
            if not raw.strip():
                continue
            try:
                record = EntryRecord.model_validate_json(raw.strip())
            except ValidationError as exc:
                if not raw.endswith(b"\n"):
                    logger.debug("Ignoring partial trailing record at line %d", line_no)
                    return
                raise EntryDecodeError(f"line {line_no}: invalid log entry: {exc}") from exc
            yield record.to_entry()


def encode_entry(entry: LogEntry) -> bytes:
    """Encode an entry as one newline-terminated JSON line."""
    record = EntryRecord(
        time=entry.time_nanos,
        severity=entry.severity.name,
        message=entry.message,
        file=entry.file,
        line=entry.line,
        meta=entry.meta,
    )
    payload = record.model_dump(exclude_none=True)
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8") + b"\n"
