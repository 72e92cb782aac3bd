# src/locale_hub/infrastructure/cache/database.py
"""
基于数据库表 `lh_translation_cache` 的缓存存储，生产环境默认使用。
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import structlog

from locale_hub.core.types import CacheEntry

if TYPE_CHECKING:
    from locale_hub.core.uow import IUnitOfWork
    from locale_hub.infrastructure.uow import UowFactory

logger = structlog.get_logger(__name__)


class DatabaseCacheStore:
    """所有读写都经由 UoW；作废操作可加入调用方已开启的事务。"""

    def __init__(self, uow_factory: UowFactory):
        self._uow_factory = uow_factory

    async def get(self, locale: str, namespace: str | None) -> CacheEntry | None:
        async with self._uow_factory() as uow:
            return await uow.cache.get(locale, namespace)

    async def save(
        self, entry: CacheEntry, generation_started_at: datetime
    ) -> CacheEntry:
        async with self._uow_factory() as uow:
            saved = await uow.cache.save(entry, generation_started_at)
        if not saved.is_valid:
            logger.info(
                "生成期间缓存被作废，新条目以无效状态写入",
                locale=entry.locale,
                namespace=entry.namespace,
                invalidated_at=saved.invalidated_at,
            )
        return saved

    async def invalidate(
        self,
        locale: str | None,
        namespace: str | None,
        reason: str,
        at: datetime,
        uow: IUnitOfWork | None = None,
    ) -> int:
        if uow is not None:
            return await uow.cache.invalidate(locale, namespace, reason, at)
        async with self._uow_factory() as own_uow:
            return await own_uow.cache.invalidate(locale, namespace, reason, at)
