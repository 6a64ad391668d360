from __future__ import annotations

from pathlib import Path

import pytest

from mcp_log_segments.cli import main
from mcp_log_segments.core.config import LOG_DIRS_ENV
from mcp_log_segments.core.models import Severity


@pytest.fixture(autouse=True)
def log_dirs_env(log_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_DIRS_ENV, str(log_dir))


def test_ls(write_segment, capsys: pytest.CaptureFixture[str]) -> None:
    seg = write_segment(Severity.ERROR, 100, [100])

    main(["ls"])

    out = capsys.readouterr().out
    assert seg.name in out
    assert "ERROR" in out


def test_fetch(write_segment, capsys: pytest.CaptureFixture[str]) -> None:
    write_segment(Severity.INFO, 100, [100, 150, 300])

    main(["fetch", "--severity", "info", "--since", "1970-01-01T00:01:00Z", "--until", "1970-01-01T00:05:00Z"])

    out = capsys.readouterr().out
    assert "[INFO] entry at 100" in out
    assert "entry at 300" not in out
    assert "Found 2 matching entries." in out


def test_cat_accepts_absolute_path(write_segment, capsys: pytest.CaptureFixture[str]) -> None:
    seg = write_segment(Severity.WARNING, 100, [100])

    main(["cat", str(seg)])

    assert "[WARNING] entry at 100" in capsys.readouterr().out


def test_errors_exit_with_code_2(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    stray = tmp_path / "notes.txt"
    stray.write_text("x\n")

    with pytest.raises(SystemExit) as exc:
        main(["cat", str(stray)])
    assert exc.value.code == 2
    assert "not a log file" in capsys.readouterr().err

    with pytest.raises(SystemExit) as exc:
        main(["cat", "app.host.user.log.INFO.1970-01-01T00_01_40Z.1"])
    assert exc.value.code == 2


def test_invalid_severity_is_usage_error() -> None:
    with pytest.raises(SystemExit) as exc:
        main(["fetch", "--severity", "debug"])
    assert exc.value.code == 2
