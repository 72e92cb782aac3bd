# tests/integration/cli/conftest.py
"""为 CLI 集成测试提供 Fixtures。"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from locale_hub.presentation.cli import app

from tests.helpers.factories import catalogue_document, sqlite_url


@pytest.fixture
def cli_runner() -> CliRunner:
    """提供一个 Typer CliRunner 实例用于模拟命令行调用。"""
    return CliRunner()


@pytest.fixture
def cli_env(tmp_path: Path) -> dict[str, str]:
    """每个测试一个独立的 SQLite 文件库，日志降到 WARNING。"""
    return {
        "LOCALEHUB_ENV": "test",
        "LOCALEHUB_DATABASE__URL": sqlite_url(tmp_path / "cli.db"),
        "LOCALEHUB_LOGGING__LEVEL": "WARNING",
        "LOCALEHUB_LOGGING__FORMAT": "json",
    }


@pytest.fixture
def initialized_db(cli_runner: CliRunner, cli_env: dict[str, str]) -> dict[str, str]:
    result = cli_runner.invoke(app, ["db", "init"], env=cli_env)
    assert result.exit_code == 0, result.output
    return cli_env


@pytest.fixture
def catalogue_file(tmp_path: Path) -> Path:
    path = tmp_path / "catalogue.json"
    path.write_text(json.dumps(catalogue_document()), encoding="utf-8")
    return path
