"""语言包缓存的读取路径：命中检查、按需重建与手动作废。"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime
from typing import TYPE_CHECKING

import structlog

from locale_hub.core.types import CacheEntry
from locale_hub.utils import utc_now

from ..single_flight import SingleFlight

if TYPE_CHECKING:
    from locale_hub.config import LocaleHubConfig
    from locale_hub.core.interfaces import CacheStore

    from ._cache_generator import CacheGeneratorService

logger = structlog.get_logger(__name__)

MANUAL_INVALIDATION_REASON = "manual invalidation"


class BundleCacheService:
    """
    命中条件：条目存在、`is_valid` 为真且 `expires_at` 晚于当前时间。
    未命中时同步重建（同一进程内对同一 (locale, namespace) 的并发未命中只重建一次）。
    """

    def __init__(
        self,
        cache_store: CacheStore,
        generator: CacheGeneratorService,
        config: LocaleHubConfig,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._cache_store = cache_store
        self._generator = generator
        self._config = config
        self._clock = clock
        self._flights: SingleFlight[CacheEntry] = SingleFlight()

    async def get_cached_bundle(
        self, locale: str, namespace: str | None = None
    ) -> dict[str, dict[str, str]]:
        entry = await self.get_entry(locale, namespace)
        return entry.payload

    async def get_entry(self, locale: str, namespace: str | None = None) -> CacheEntry:
        """返回 (locale, namespace) 的有效条目，必要时重建。"""
        entry = await self._cache_store.get(locale, namespace)
        if entry is not None and entry.is_hit(self._clock()):
            logger.debug("语言包缓存命中", locale=locale, namespace=namespace)
            return entry

        logger.debug(
            "语言包缓存未命中",
            locale=locale,
            namespace=namespace,
            cause="absent" if entry is None else ("invalid" if not entry.is_valid else "expired"),
        )
        return await self._regenerate(locale, namespace, entry)

    async def _regenerate(
        self, locale: str, namespace: str | None, previous: CacheEntry | None
    ) -> CacheEntry:
        return await self._flights.run(
            (locale, namespace),
            lambda: self._generator.generate(locale, namespace, previous=previous),
        )

    async def invalidate(
        self,
        locale: str | None = None,
        namespace: str | None = None,
        reason: str = MANUAL_INVALIDATION_REASON,
    ) -> int:
        """作废匹配的条目（不删除、不立即重建），返回受影响条数。"""
        affected = await self._cache_store.invalidate(
            locale, namespace, reason, self._clock()
        )
        logger.info(
            "语言包缓存已作废",
            locale=locale or "*",
            namespace=namespace or "*",
            reason=reason,
            affected=affected,
        )
        return affected

    async def warm(
        self, locales: Iterable[str] | None = None, namespace: str | None = None
    ) -> list[CacheEntry]:
        """为给定语言（默认全部受支持语言）预先生成语言包。"""
        targets = list(locales) if locales else list(self._config.locales.supported)
        entries = []
        for locale in targets:
            previous = await self._cache_store.get(locale, namespace)
            entries.append(await self._regenerate(locale, namespace, previous))
        return entries
