# src/locale_hub/core/uow.py
"""
定义了工作单元 (Unit of Work) 与各仓库的抽象契约。

应用层只依赖这些协议；具体实现位于 `locale_hub.infrastructure`。
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import Any, Protocol

from .types import (
    CacheEntry,
    HistoryRecord,
    PublishedTranslation,
    Translation,
    TranslationKey,
    TranslationStatus,
    UsageStat,
)


class IKeyRepository(Protocol):
    async def get_by_name(self, key_name: str) -> TranslationKey | None: ...

    async def get_by_id(self, key_id: str) -> TranslationKey | None: ...

    async def upsert(self, key_name: str, **fields: Any) -> str: ...

    async def find_existing(self, key_names: Iterable[str]) -> list[str]: ...

    async def count_active(self) -> int: ...


class ITranslationRepository(Protocol):
    async def get_by_id(self, translation_id: str) -> Translation | None: ...

    async def get_latest(self, key_id: str, locale: str) -> Translation | None: ...

    async def get_published(self, key_id: str, locale: str) -> Translation | None: ...

    async def add(self, **data: Any) -> str: ...

    async def transition(
        self,
        translation_id: str,
        allowed_from: Iterable[TranslationStatus],
        to_status: TranslationStatus,
        **values: Any,
    ) -> bool: ...

    async def supersede_published(
        self, key_id: str, locale: str, *, exclude_id: str, at: datetime, actor: str
    ) -> list[Translation]: ...

    async def find_published(
        self, key_name: str, locale: str
    ) -> PublishedTranslation | None: ...

    async def list_published(
        self, locale: str, namespace: str | None = None
    ) -> list[PublishedTranslation]: ...

    async def list_by_category(
        self, category: str, locale: str
    ) -> list[PublishedTranslation]: ...

    async def search_candidates(
        self,
        locale: str,
        terms: Sequence[str],
        phrase: str,
        categories: Sequence[str] | None = None,
    ) -> list[PublishedTranslation]: ...

    async def count_by_status(
        self, locale: str | None = None
    ) -> dict[str, dict[str, int]]: ...


class ICacheRepository(Protocol):
    async def get(self, locale: str, namespace: str | None) -> CacheEntry | None: ...

    async def save(
        self, entry: CacheEntry, generation_started_at: datetime
    ) -> CacheEntry: ...

    async def invalidate(
        self,
        locale: str | None,
        namespace: str | None,
        reason: str,
        at: datetime,
    ) -> int: ...


class IUsageRepository(Protocol):
    async def merge(
        self,
        key_id: str,
        locale: str,
        day: date,
        now: datetime,
        load_time_ms: float | None,
    ) -> None: ...

    async def get(self, key_id: str, locale: str, day: date) -> UsageStat | None: ...

    async def aggregate(
        self, locale: str | None, since: date
    ) -> dict[str, tuple[int, float | None]]: ...


class IHistoryRepository(Protocol):
    async def add(self, **data: Any) -> None: ...

    async def list_for_translation(
        self, translation_id: str
    ) -> list[HistoryRecord]: ...


class IUnitOfWork(Protocol):
    """一个业务事务的边界：进入时开启会话，正常退出提交，异常退出回滚。"""

    keys: IKeyRepository
    translations: ITranslationRepository
    cache: ICacheRepository
    usage: IUsageRepository
    history: IHistoryRepository

    async def __aenter__(self) -> "IUnitOfWork": ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...
