# src/locale_hub/infrastructure/cache/memory.py
"""
内存缓存存储，用于测试环境或单进程部署。
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from locale_hub.core.types import ALL_NAMESPACES, CacheEntry

if TYPE_CHECKING:
    from locale_hub.core.uow import IUnitOfWork


def _scope(locale: str, namespace: str | None) -> tuple[str, str]:
    return locale, ALL_NAMESPACES if namespace is None else namespace


class MemoryCacheStore:
    """
    基于字典的缓存存储，语义与数据库实现一致。

    所有方法内部都没有 await 点，在单个事件循环内天然是原子的。
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], CacheEntry] = {}

    async def get(self, locale: str, namespace: str | None) -> CacheEntry | None:
        entry = self._entries.get(_scope(locale, namespace))
        return entry.model_copy(deep=True) if entry else None

    async def save(
        self, entry: CacheEntry, generation_started_at: datetime
    ) -> CacheEntry:
        scope = _scope(entry.locale, entry.namespace)
        previous = self._entries.get(scope)
        stored = entry.model_copy(
            update={"is_valid": True, "invalidated_at": None, "invalidation_reason": None},
            deep=True,
        )
        if previous is not None:
            if previous.version >= stored.version:
                stored.version = previous.version + 1
            if (
                previous.invalidated_at is not None
                and previous.invalidated_at > generation_started_at
            ):
                stored.is_valid = False
                stored.invalidated_at = previous.invalidated_at
                stored.invalidation_reason = previous.invalidation_reason
        self._entries[scope] = stored
        return stored.model_copy(deep=True)

    async def invalidate(
        self,
        locale: str | None,
        namespace: str | None,
        reason: str,
        at: datetime,
        uow: IUnitOfWork | None = None,
    ) -> int:
        affected = 0
        for (entry_locale, entry_ns), entry in self._entries.items():
            if locale is not None and entry_locale != locale:
                continue
            if namespace is not None and entry_ns not in (namespace, ALL_NAMESPACES):
                continue
            entry.is_valid = False
            entry.invalidated_at = at
            entry.invalidation_reason = reason
            affected += 1
        return affected

    def clear(self) -> None:
        """清空所有缓存。"""
        self._entries.clear()
