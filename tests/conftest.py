from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from pathlib import Path

import pytest

from mcp_log_segments.core import config as config_module
from mcp_log_segments.core.config import LogConfig
from mcp_log_segments.core.entries import encode_entry
from mcp_log_segments.core.models import LogEntry, Severity
from mcp_log_segments.core.naming import log_name

NANOS = 1_000_000_000


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    d = tmp_path / "logs"
    d.mkdir()
    return d


@pytest.fixture
def log_config(log_dir: Path) -> LogConfig:
    return LogConfig(
        program="app",
        host="host",
        user_name="user",
        pid=4242,
        log_dirs=(log_dir,),
    )


@pytest.fixture(autouse=True)
def reset_default_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module, "_default_config", None)


@pytest.fixture
def make_entry() -> Callable[..., LogEntry]:
    def _make(seconds: int, severity: Severity = Severity.INFO, message: str | None = None) -> LogEntry:
        return LogEntry(
            time_nanos=seconds * NANOS,
            severity=severity,
            message=message or f"entry at {seconds}",
        )

    return _make


@pytest.fixture
def write_segment(log_config: LogConfig, make_entry) -> Callable[..., Path]:
    """Write a segment created at ``seconds`` holding entries at ``entry_seconds``.

    ``raw`` replaces the encoded entries, e.g. to plant a corrupt segment.
    """

    def _write(
        severity: Severity,
        seconds: int,
        entry_seconds: Sequence[int] = (),
        *,
        raw: bytes | None = None,
        config: LogConfig | None = None,
    ) -> Path:
        cfg = config or log_config
        name, _ = log_name(cfg, severity, datetime.fromtimestamp(seconds, UTC))
        path = cfg.log_dirs[0] / name
        if raw is None:
            raw = b"".join(encode_entry(make_entry(s, severity)) for s in entry_seconds)
        path.write_bytes(raw)
        return path

    return _write
