# src/locale_hub/management/migrate_db.py
"""
数据库迁移管理。

迁移脚本随包一起分发 (`locale_hub:migrations`)，因此不依赖当前工作目录下的
`alembic.ini`；所有入口都以显式的数据库 URL 构造 Alembic 配置。
"""

from __future__ import annotations

from typing import Union

import structlog
from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from sqlalchemy.engine.url import URL, make_url
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

logger = structlog.get_logger(__name__)

SCRIPT_LOCATION = "locale_hub:migrations"


def mask_db_url(url: Union[str, URL, None]) -> str:
    """安全地脱敏一个数据库连接 URL，将其密码替换为 '***'。"""
    if url is None:
        return "[未配置]"
    try:
        return make_url(url).render_as_string(hide_password=True)
    except Exception:
        return "[无法解析的数据库 URL]"


def build_alembic_config(db_url: str) -> Config:
    """构造一个指向包内迁移脚本的 Alembic 配置。"""
    cfg = Config()
    cfg.set_main_option("script_location", SCRIPT_LOCATION)
    # ConfigParser 会把 % 当作插值符号
    cfg.set_main_option("sqlalchemy.url", db_url.replace("%", "%%"))
    cfg.attributes["configure_logger"] = False
    return cfg


def upgrade(db_url: str, revision: str = "head") -> None:
    """将 Schema 升级到指定版本（默认最新）。不能在运行中的事件循环里调用。"""
    logger.info("开始数据库迁移", url=mask_db_url(db_url), revision=revision)
    command.upgrade(build_alembic_config(db_url), revision)
    logger.info("数据库迁移完成", revision=revision)


def downgrade(db_url: str, revision: str) -> None:
    """回滚到指定版本；`base` 表示删除全部表。"""
    logger.info("开始数据库回滚", url=mask_db_url(db_url), revision=revision)
    command.downgrade(build_alembic_config(db_url), revision)
    logger.info("数据库回滚完成", revision=revision)


async def get_current_revision(db_url: str) -> str | None:
    """返回数据库当前的迁移版本；尚未迁移时返回 None。"""
    engine = create_async_engine(db_url, poolclass=NullPool)
    try:
        async with engine.connect() as conn:
            return await conn.run_sync(
                lambda sync_conn: MigrationContext.configure(
                    sync_conn
                ).get_current_revision()
            )
    finally:
        await engine.dispose()
