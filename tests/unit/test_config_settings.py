# tests/unit/test_config_settings.py
"""测试配置模型的默认值、环境变量加载与校验。"""

import pytest
from pydantic import ValidationError

from locale_hub.bootstrap import (
    _load_dotenv_files,
    create_app_config,
    resolve_env_mode,
)
from locale_hub.config import LocaleHubConfig
from locale_hub.core.exceptions import ConfigurationError


def test_defaults():
    cfg = LocaleHubConfig()
    assert cfg.database.url.startswith("sqlite+aiosqlite://")
    assert cfg.cache.ttl_seconds == 86400
    assert cfg.cache.store == "database"
    assert cfg.locales.default_locale == "en"
    assert cfg.locales.supported == ["en", "fr", "th"]
    assert cfg.usage.record_on_resolve is True
    assert cfg.search.default_limit == 50
    assert cfg.search.max_limit == 500


def test_nested_env_vars(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("LOCALEHUB_CACHE__TTL_SECONDS", "60")
    monkeypatch.setenv("LOCALEHUB_CACHE__STORE", "memory")
    monkeypatch.setenv("LOCALEHUB_LOCALES__SUPPORTED", '["en", "de"]')
    cfg = LocaleHubConfig()
    assert cfg.cache.ttl_seconds == 60
    assert cfg.cache.store == "memory"
    assert cfg.locales.supported == ["en", "de"]


@pytest.mark.parametrize(
    "url",
    ["postgresql://u:p@localhost/db", "sqlite:///x.db", "not a url"],
)
def test_rejects_sync_or_invalid_drivers(url: str):
    with pytest.raises(ValidationError):
        LocaleHubConfig(database={"url": url})


def test_accepts_asyncpg():
    cfg = LocaleHubConfig(database={"url": "postgresql+asyncpg://u:p@localhost/db"})
    assert cfg.database.url.startswith("postgresql+asyncpg")


def test_default_locale_must_be_supported():
    with pytest.raises(ValidationError):
        LocaleHubConfig(locales={"default_locale": "de", "supported": ["en", "fr"]})


def test_invalid_language_code_rejected():
    with pytest.raises(ValidationError):
        LocaleHubConfig(locales={"default_locale": "en", "supported": ["en", "english"]})


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("prod", "prod"), ("TEST", "test"), ("dev", "dev"), ("staging", "dev")],
)
def test_resolve_env_mode(raw: str, expected: str):
    assert resolve_env_mode(raw) == expected


def test_dotenv_files_do_not_override_environment(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text(
        "# comment\nLOCALEHUB_CACHE__TTL_SECONDS=120\nLOCALEHUB_DEBUG='true'\n",
        encoding="utf-8",
    )
    (tmp_path / ".env.test").write_text(
        "LOCALEHUB_SEARCH__MAX_LIMIT=7\n", encoding="utf-8"
    )
    monkeypatch.setenv("LOCALEHUB_CACHE__TTL_SECONDS", "30")
    monkeypatch.delenv("LOCALEHUB_DEBUG", raising=False)
    monkeypatch.delenv("LOCALEHUB_SEARCH__MAX_LIMIT", raising=False)

    loaded = _load_dotenv_files("test", root=tmp_path)
    try:
        assert [p.name for p in loaded] == [".env", ".env.test"]
        cfg = LocaleHubConfig()
        assert cfg.cache.ttl_seconds == 30
        assert cfg.debug is True
        assert cfg.search.max_limit == 7
    finally:
        monkeypatch.delenv("LOCALEHUB_DEBUG", raising=False)
        monkeypatch.delenv("LOCALEHUB_SEARCH__MAX_LIMIT", raising=False)


def test_prod_mode_skips_dev_and_test_files(tmp_path):
    (tmp_path / ".env.dev").write_text("X=1\n", encoding="utf-8")
    (tmp_path / ".env.test").write_text("Y=1\n", encoding="utf-8")
    assert _load_dotenv_files("prod", root=tmp_path) == []


def test_create_app_config_wraps_validation_errors(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("LOCALEHUB_DATABASE__URL", "mysql://u:p@localhost/db")
    with pytest.raises(ConfigurationError, match="配置校验失败"):
        create_app_config("prod")
