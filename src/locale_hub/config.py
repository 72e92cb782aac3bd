# src/locale_hub/config.py
"""
Locale-Hub 配置（Pydantic v2）

特性:
- 所有子配置使用 `default_factory`，加载器 (bootstrap.py) 负责准备环境变量。
- 保持纯粹数据模型的职责，校验器只做格式与约束检查。
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine.url import make_url

from locale_hub.utils import validate_lang_codes

# ===================== 子模型 =====================


class DatabaseSettings(BaseModel):
    """主库（运行期异步驱动）"""

    url: str = Field(
        default="sqlite+aiosqlite:///localehub.db",
        description="异步 DSN（sqlite+aiosqlite / postgresql+asyncpg）",
    )
    echo: bool = Field(default=False, description="SQLAlchemy echo（调试）")
    pool_size: Optional[int] = Field(default=None, ge=1)
    max_overflow: Optional[int] = Field(default=None, ge=0)
    pool_timeout: int = Field(default=30, ge=1)
    pool_recycle: Optional[int] = Field(default=None)
    pool_pre_ping: bool = True

    @field_validator("url")
    @classmethod
    def _validate_async_driver(cls, v: str) -> str:
        allowed = {"sqlite+aiosqlite", "postgresql+asyncpg"}
        try:
            drv = make_url(v).drivername.lower()
        except Exception as e:
            raise ValueError(f"非法数据库 URL：{v!r}（{e}）") from e
        if drv not in allowed:
            raise ValueError(
                f"不支持的运行期数据库驱动：{drv!r}，仅允许 {', '.join(sorted(allowed))}"
            )
        return v


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    format: Literal["console", "json"] = Field(default="console")


class CacheSettings(BaseModel):
    """语言包缓存（bundle cache）配置。"""

    ttl_seconds: int = Field(default=24 * 60 * 60, ge=1)
    store: Literal["database", "memory"] = Field(default="database")


class LocaleSettings(BaseModel):
    default_locale: str = Field(default="en")
    supported: list[str] = Field(default_factory=lambda: ["en", "fr", "th"])

    @field_validator("supported")
    @classmethod
    def _validate_supported(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("至少需要配置一种受支持的语言")
        validate_lang_codes(v)
        return v

    @model_validator(mode="after")
    def _default_must_be_supported(self) -> "LocaleSettings":
        validate_lang_codes([self.default_locale])
        if self.default_locale not in self.supported:
            raise ValueError(
                f"默认语言 {self.default_locale!r} 不在受支持语言列表 {self.supported} 中"
            )
        return self


class UsageSettings(BaseModel):
    record_on_resolve: bool = True
    key_cache_ttl: int = Field(default=300, ge=1)
    key_cache_maxsize: int = Field(default=4096, ge=1)


class WorkflowSettings(BaseModel):
    lock_pool_size: int = Field(
        default=256, gt=0, description="发布操作使用的分段锁池大小"
    )


class SearchSettings(BaseModel):
    default_limit: int = Field(default=50, ge=1)
    max_limit: int = Field(default=500, ge=1)


# ===================== 顶层配置 =====================
class LocaleHubConfig(BaseSettings):
    """
    Locale-Hub 核心配置模型。
    """

    debug: bool = False

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    locales: LocaleSettings = Field(default_factory=LocaleSettings)
    usage: UsageSettings = Field(default_factory=UsageSettings)
    workflow: WorkflowSettings = Field(default_factory=WorkflowSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_prefix="LOCALEHUB_",
        case_sensitive=False,
        extra="ignore",
        env_file_encoding="utf-8",
    )
