"""语言包缓存条目仓库的 SQLAlchemy 实现。"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import and_, case, select, update

from locale_hub.core.types import ALL_NAMESPACES, CacheEntry
from locale_hub.infrastructure.db._schema import LhTranslationCache
from locale_hub.utils import ensure_utc

from ._base_repo import BaseRepository


def namespace_key(namespace: str | None) -> str:
    return ALL_NAMESPACES if namespace is None else namespace


def _to_entry(row: LhTranslationCache) -> CacheEntry:
    return CacheEntry(
        locale=row.locale,
        namespace=None if row.namespace == ALL_NAMESPACES else row.namespace,
        payload=row.payload or {},
        version=row.version,
        generated_at=ensure_utc(row.generated_at),
        expires_at=ensure_utc(row.expires_at),
        generation_time_ms=row.generation_time_ms or 0.0,
        is_valid=row.is_valid,
        invalidated_at=ensure_utc(row.invalidated_at),
        invalidation_reason=row.invalidation_reason,
    )


class SqlAlchemyCacheRepository(BaseRepository):
    """缓存条目仓库实现。"""

    async def get(self, locale: str, namespace: str | None) -> CacheEntry | None:
        stmt = (
            select(LhTranslationCache)
            .where(
                LhTranslationCache.locale == locale,
                LhTranslationCache.namespace == namespace_key(namespace),
            )
            .execution_options(populate_existing=True)
        )
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        return _to_entry(row) if row else None

    async def save(
        self, entry: CacheEntry, generation_started_at: datetime
    ) -> CacheEntry:
        """
        单语句 upsert 一个缓存条目。

        - version 在 SQL 中保证单调递增：新值不大于旧值时取旧值 + 1；
        - 旧条目在本次生成开始之后被作废过时，保留作废标记并以无效状态写入。
        """
        table = LhTranslationCache
        insert = self._get_insert_stmt()
        stmt = insert(table).values(
            locale=entry.locale,
            namespace=namespace_key(entry.namespace),
            payload=entry.payload,
            version=entry.version,
            generated_at=entry.generated_at,
            expires_at=entry.expires_at,
            generation_time_ms=entry.generation_time_ms,
            is_valid=True,
            invalidated_at=None,
            invalidation_reason=None,
        )
        raced = and_(
            table.invalidated_at.is_not(None),
            table.invalidated_at > generation_started_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["locale", "namespace"],
            set_={
                "payload": stmt.excluded.payload,
                "version": case(
                    (table.version >= stmt.excluded.version, table.version + 1),
                    else_=stmt.excluded.version,
                ),
                "generated_at": stmt.excluded.generated_at,
                "expires_at": stmt.excluded.expires_at,
                "generation_time_ms": stmt.excluded.generation_time_ms,
                "is_valid": case((raced, False), else_=True),
                "invalidated_at": case((raced, table.invalidated_at), else_=None),
                "invalidation_reason": case(
                    (raced, table.invalidation_reason), else_=None
                ),
            },
        )
        await self._session.execute(stmt)

        saved = await self.get(entry.locale, entry.namespace)
        if saved is None:  # pragma: no cover
            raise RuntimeError("缓存条目写入后无法读回")
        return saved

    async def invalidate(
        self,
        locale: str | None,
        namespace: str | None,
        reason: str,
        at: datetime,
    ) -> int:
        """
        作废匹配的条目。

        locale 为 None 匹配全部语言；namespace 为 None 匹配全部命名空间，
        具体命名空间同时匹配“全部命名空间”条目（它包含该命名空间的键）。
        已作废的条目也会被重新打上时间戳，供并发生成的竞态检查使用。
        """
        stmt = update(LhTranslationCache)
        if locale is not None:
            stmt = stmt.where(LhTranslationCache.locale == locale)
        if namespace is not None:
            stmt = stmt.where(
                LhTranslationCache.namespace.in_([namespace, ALL_NAMESPACES])
            )
        stmt = stmt.values(
            is_valid=False, invalidated_at=at, invalidation_reason=reason
        ).execution_options(synchronize_session=False)
        result = await self._session.execute(stmt)
        return int(result.rowcount or 0)
