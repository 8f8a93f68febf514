from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from curator import __version__
from curator.cli.app import app
from curator.cli.context import ROOT_ENV, build_context, working_root
from curator.core.config import CONFIG_FILE_NAME
from curator.core.errors import ErrorCode

runner = CliRunner()


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_unknown_target_is_user_error() -> None:
    result = runner.invoke(app, ["build", "weekly"])
    assert result.exit_code == int(ErrorCode.USER_ERROR)


def test_root_must_be_directory(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--root", str(tmp_path / "missing"), "check"])
    assert result.exit_code == int(ErrorCode.ENV_ERROR)


def test_working_root_prefers_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv(ROOT_ENV, str(tmp_path))
    assert working_root() == tmp_path.resolve()


def test_build_context_uses_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILE_NAME).write_text('[engines]\nbuild = ["my-builder"]\n')
    monkeypatch.setenv(ROOT_ENV, str(tmp_path))

    ctx = build_context()

    assert ctx.root == tmp_path.resolve()
    assert ctx.config.engines.build == ("my-builder",)


def test_broken_config_is_env_error(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILE_NAME).write_text("[engines\n")
    monkeypatch.setenv(ROOT_ENV, str(tmp_path))

    result = runner.invoke(app, ["check"])
    assert result.exit_code == int(ErrorCode.ENV_ERROR)


def test_zero_heartbeat_is_env_error(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILE_NAME).write_text("[build]\nheartbeat_seconds = 0\n")
    monkeypatch.setenv(ROOT_ENV, str(tmp_path))

    result = runner.invoke(app, ["check"])
    assert result.exit_code == int(ErrorCode.ENV_ERROR)
