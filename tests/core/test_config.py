from __future__ import annotations

import getpass
import os
import tempfile
from pathlib import Path

import pytest

from mcp_log_segments.core import config as config_module
from mcp_log_segments.core.config import LOG_DIRS_ENV, LogConfig, default_config, short_hostname


def test_short_hostname() -> None:
    assert short_hostname("www.example.com") == "www"
    assert short_hostname("localhost") == "localhost"


def test_from_env_reads_log_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    a, b = tmp_path / "a", tmp_path / "b"
    monkeypatch.setenv(LOG_DIRS_ENV, os.pathsep.join([str(a), str(b)]))

    cfg = LogConfig.from_env()

    assert cfg.log_dirs == (a, b)
    assert cfg.pid == os.getpid()
    assert cfg.program
    assert "." not in cfg.host


def test_from_env_defaults_to_temp_dir(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(LOG_DIRS_ENV, raising=False)
    assert LogConfig.from_env().log_dirs == (Path(tempfile.gettempdir()),)


def test_unknown_user_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    def no_user() -> str:
        raise OSError("no login name")

    monkeypatch.setattr(getpass, "getuser", no_user)
    assert LogConfig.from_env().user_name == "unknownuser"


def test_user_name_backslash_is_sanitized(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(getpass, "getuser", lambda: "CORP\\alice")
    assert LogConfig.from_env().user_name == "CORP_alice"


def test_default_config_is_computed_once(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    real = LogConfig.from_env

    def counting() -> LogConfig:
        calls.append(1)
        return real()

    monkeypatch.setattr(config_module.LogConfig, "from_env", staticmethod(counting))

    first = default_config()
    assert default_config() is first
    assert len(calls) == 1
