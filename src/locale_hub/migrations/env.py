# src/locale_hub/migrations/env.py
"""
Alembic 环境配置。

元数据优先使用从 `context.config.attributes` 注入的 `target_metadata`，
否则从 `locale_hub.infrastructure.db` 导入。数据库 URL 优先取
alembic 配置中的 `sqlalchemy.url`，其次取应用配置 (`LOCALEHUB_DATABASE__URL`)。
迁移通过应用自身的异步驱动执行。
"""

from __future__ import annotations

import asyncio
from logging.config import fileConfig

import structlog
from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

logger = structlog.get_logger(__name__)

config = context.config

if config.config_file_name is not None and config.attributes.get(
    "configure_logger", True
):
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = config.attributes.get("target_metadata")
if target_metadata is None:
    from locale_hub.infrastructure.db import _schema  # noqa: F401
    from locale_hub.infrastructure.db import metadata as target_metadata


def _database_url() -> str:
    url = config.get_main_option("sqlalchemy.url")
    if url and url.strip():
        return url
    from locale_hub.bootstrap import create_app_config, resolve_env_mode

    app_config = create_app_config(resolve_env_mode())
    logger.debug("未配置 sqlalchemy.url，使用应用配置中的数据库地址")
    return app_config.database.url


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        # SQLite 不支持大部分 ALTER，统一走批量模式
        render_as_batch=True,
        compare_type=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """在“离线”模式下生成 SQL。"""
    _configure(
        url=_database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_sync_migrations(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """在“在线”模式下通过异步引擎执行迁移。"""
    connectable = create_async_engine(_database_url(), poolclass=pool.NullPool)
    try:
        async with connectable.connect() as connection:
            await connection.run_sync(_run_sync_migrations)
    finally:
        await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
