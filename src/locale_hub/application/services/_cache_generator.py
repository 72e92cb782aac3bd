"""从已发布的翻译生成语言包缓存条目的应用服务。"""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

import structlog

from locale_hub.core.types import CacheEntry
from locale_hub.domain.bundle import build_bundle
from locale_hub.utils import utc_now

if TYPE_CHECKING:
    from locale_hub.config import LocaleHubConfig
    from locale_hub.core.interfaces import CacheStore
    from locale_hub.infrastructure.uow import UowFactory

logger = structlog.get_logger(__name__)


class CacheGeneratorService:
    def __init__(
        self,
        uow_factory: UowFactory,
        cache_store: CacheStore,
        config: LocaleHubConfig,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._uow_factory = uow_factory
        self._cache_store = cache_store
        self._ttl = timedelta(seconds=config.cache.ttl_seconds)
        self._clock = clock

    async def generate(
        self,
        locale: str,
        namespace: str | None = None,
        previous: CacheEntry | None = None,
    ) -> CacheEntry:
        """
        为 (locale, namespace) 构建语言包并写入缓存存储，返回持久化后的条目。

        `previous` 为调用方已读到的旧条目；未提供时从存储中读取。
        生成时间总是晚于旧条目的作废时间，version 总是大于旧条目。
        """
        if previous is None:
            previous = await self._cache_store.get(locale, namespace)

        started_at = self._clock()
        t0 = time.perf_counter()
        async with self._uow_factory() as uow:
            rows = await uow.translations.list_published(locale, namespace)
        payload = build_bundle(rows)
        generation_time_ms = (time.perf_counter() - t0) * 1000

        generated_at = self._clock()
        if previous is not None and previous.invalidated_at is not None:
            if generated_at <= previous.invalidated_at:
                generated_at = previous.invalidated_at + timedelta(microseconds=1)

        version = time.time_ns()
        if previous is not None and previous.version >= version:
            version = previous.version + 1

        entry = CacheEntry(
            locale=locale,
            namespace=namespace,
            payload=payload,
            version=version,
            generated_at=generated_at,
            expires_at=generated_at + self._ttl,
            generation_time_ms=round(generation_time_ms, 3),
        )
        saved = await self._cache_store.save(entry, started_at)

        logger.info(
            "语言包已生成",
            locale=locale,
            namespace=namespace,
            sections=len(payload),
            keys=len(rows),
            version=saved.version,
            generation_time_ms=saved.generation_time_ms,
        )
        return saved
