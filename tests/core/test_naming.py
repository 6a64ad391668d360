from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta, timezone

import pytest

from mcp_log_segments.core.config import LogConfig
from mcp_log_segments.core.models import Severity
from mcp_log_segments.core.naming import (
    escape_for_filename,
    format_log_time,
    log_name,
    parse_log_filename,
    unescape_for_filename,
)

T0 = datetime(2025, 12, 30, 8, 12, 1, tzinfo=UTC)


def test_log_name_layout(log_config: LogConfig) -> None:
    name, link = log_name(log_config, Severity.INFO, T0)
    assert name == "app.host.user.log.INFO.2025-12-30T08_12_01Z.4242"
    assert link == "app.INFO"


@pytest.mark.parametrize(
    ("severity", "t"),
    [
        (Severity.INFO, datetime.now(UTC)),
        (Severity.WARNING, datetime.now(UTC) - timedelta(days=3650)),
        (Severity.ERROR, datetime.now(UTC) - timedelta(days=1)),
        (Severity.FATAL, T0),
    ],
)
def test_parse_recovers_severity_and_time(log_config: LogConfig, severity: Severity, t: datetime) -> None:
    name, _ = log_name(log_config, severity, t)
    details = parse_log_filename(name)

    assert details is not None
    assert details.severity == severity
    assert details.time == t.replace(microsecond=0)
    assert details.pid == 4242


def test_identity_with_periods_and_underscores(log_config: LogConfig) -> None:
    cfg = replace(log_config, program="my_app.v2", host="db.internal", user_name="a_.b")
    name, link = log_name(cfg, Severity.ERROR, T0)

    assert name.startswith("my__app_v2.db_internal.a___b.log.ERROR.")
    assert link == "my_app.v2.ERROR"

    details = parse_log_filename(name)
    assert details is not None
    assert (details.program, details.host, details.user_name) == ("my_app.v2", "db.internal", "a_.b")


def test_encode_of_decoded_name_is_identical(log_config: LogConfig) -> None:
    cfg = replace(log_config, program="svc_1", host="h.x", pid=7)
    name, _ = log_name(cfg, Severity.WARNING, T0)
    d = parse_log_filename(name)
    assert d is not None

    again, _ = log_name(
        LogConfig(program=d.program, host=d.host, user_name=d.user_name, pid=d.pid, log_dirs=()),
        d.severity,
        d.time,
    )
    assert again == name


def test_unescape_restores_periods_before_underscores() -> None:
    assert escape_for_filename("a_.b") == "a___b"
    assert unescape_for_filename("a___b") == "a_.b"
    assert unescape_for_filename(escape_for_filename("x__y")) == "x__y"


def test_format_log_time_is_utc_and_colon_free() -> None:
    local = datetime(2025, 12, 30, 10, 12, 1, tzinfo=timezone(timedelta(hours=2)))
    assert format_log_time(local) == "2025-12-30T08_12_01Z"
    assert format_log_time(datetime(2025, 12, 30, 8, 12, 1)) == "2025-12-30T08_12_01Z"


def test_parse_accepts_numeric_offset() -> None:
    details = parse_log_filename("app.host.user.log.INFO.2025-12-30T10_12_01+02_00.1")
    assert details is not None
    assert details.time == T0


@pytest.mark.parametrize(
    "filename",
    [
        "",
        "app.INFO",
        "notes.txt",
        "app.host.user.log.INFO.2025-12-30T08_12_01Z",
        "x.app.host.user.log.INFO.2025-12-30T08_12_01Z.1",
        "app.host.user.log.INFO.2025-12-30T08_12_01Z.1.gz",
        "app.host.user.log.DEBUG.2025-12-30T08_12_01Z.1",
        "app.host.user.log.info.2025-12-30T08_12_01Z.1",
        "app.host.user.log.INFO.2025-12-30T08_12_01Z.12a",
        "app.host.user.log.INFO.yesterday.1",
        "app.host.user.log.INFO.2025-1-3T1_2_3Z.1",
        "app.host.user.log.INFO.20251230T081201Z.1",
        "app.host.user.txt.INFO.2025-12-30T08_12_01Z.1",
    ],
)
def test_parse_rejects_non_log_names(filename: str) -> None:
    assert parse_log_filename(filename) is None
