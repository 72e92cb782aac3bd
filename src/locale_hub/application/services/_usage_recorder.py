"""按 (key, locale, 日) 聚合使用统计的应用服务。"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from typing import TYPE_CHECKING

import structlog
from cachetools import TTLCache

from locale_hub.core.types import UsageStat
from locale_hub.utils import utc_now, utc_today

if TYPE_CHECKING:
    from locale_hub.config import LocaleHubConfig
    from locale_hub.core.uow import IUnitOfWork
    from locale_hub.infrastructure.uow import UowFactory

logger = structlog.get_logger(__name__)


class UsageRecorderService:
    """
    记录使用事件。统计与查找的正确性无关：未知的键直接忽略。

    key_name -> key_id 的映射缓存在一个 TTLCache 中，避免每次记录都查键表。
    """

    def __init__(
        self,
        uow_factory: UowFactory,
        config: LocaleHubConfig,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._uow_factory = uow_factory
        self._clock = clock
        self._key_ids: TTLCache[str, str] = TTLCache(
            maxsize=config.usage.key_cache_maxsize, ttl=config.usage.key_cache_ttl
        )

    async def _key_id(self, uow: IUnitOfWork, key_name: str) -> str | None:
        cached = self._key_ids.get(key_name)
        if cached is not None:
            return cached
        key = await uow.keys.get_by_name(key_name)
        if key is None:
            return None
        self._key_ids[key_name] = key.id
        return key.id

    async def record_usage(
        self, key_name: str, locale: str, load_time_ms: float | None = None
    ) -> None:
        """
        合并一次使用事件：浏览数与请求数加一，并在提供耗时样本时更新平均耗时。
        """
        if load_time_ms is not None and load_time_ms < 0:
            raise ValueError(f"load_time_ms 不能为负数: {load_time_ms}")

        now = self._clock()
        async with self._uow_factory() as uow:
            key_id = await self._key_id(uow, key_name)
            if key_id is None:
                logger.debug("未知翻译键，忽略使用记录", key_name=key_name)
                return
            await uow.usage.merge(key_id, locale, utc_today(now), now, load_time_ms)

    async def get_usage(
        self, key_name: str, locale: str, day: date | None = None
    ) -> UsageStat | None:
        """读取某个键在某一天（默认今天，UTC）的统计。"""
        async with self._uow_factory() as uow:
            key_id = await self._key_id(uow, key_name)
            if key_id is None:
                return None
            return await uow.usage.get(key_id, locale, day or utc_today(self._clock()))
