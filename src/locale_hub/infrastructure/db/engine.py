# src/locale_hub/infrastructure/db/engine.py
"""
异步引擎工厂

- PostgreSQL：映射连接池参数（QueuePool）
- SQLite：文件库使用 NullPool；内存库使用 StaticPool 以共享唯一连接
"""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from locale_hub.config import LocaleHubConfig

logger = structlog.get_logger(__name__)


def _is_sqlite(url: str) -> bool:
    return make_url(url).get_backend_name() == "sqlite"


def _is_memory_sqlite(url: str) -> bool:
    database = make_url(url).database
    return database in (None, "", ":memory:")


def create_async_db_engine(cfg: LocaleHubConfig) -> AsyncEngine:
    """根据配置创建 AsyncEngine。"""
    url = cfg.database.url
    kwargs: dict[str, Any] = {"echo": cfg.database.echo}

    if _is_sqlite(url):
        if _is_memory_sqlite(url):
            # 内存库只存在于单个连接中，所有会话必须共享它
            kwargs["poolclass"] = StaticPool
            kwargs["connect_args"] = {"check_same_thread": False}
        else:
            kwargs["poolclass"] = NullPool
    else:
        db = cfg.database
        kwargs["pool_pre_ping"] = db.pool_pre_ping
        kwargs["pool_timeout"] = db.pool_timeout
        if db.pool_size is not None:
            kwargs["pool_size"] = db.pool_size
        if db.max_overflow is not None:
            kwargs["max_overflow"] = db.max_overflow
        if db.pool_recycle is not None:
            kwargs["pool_recycle"] = db.pool_recycle

    logger.debug(
        "创建数据库引擎",
        url=make_url(url).render_as_string(hide_password=True),
        poolclass=getattr(kwargs.get("poolclass"), "__name__", "QueuePool"),
    )
    return create_async_engine(url, **kwargs)
