"""翻译记录仓库的 SQLAlchemy 实现。"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import Select, func, or_, select, update

from locale_hub.core.types import PublishedTranslation, Translation, TranslationStatus
from locale_hub.domain.search import fold
from locale_hub.infrastructure.db._schema import LhTranslation, LhTranslationKey

from ._base_repo import BaseRepository


def _published_view() -> Select[Any]:
    """已发布且键处于激活状态的翻译，连同键的元数据。"""
    return (
        select(
            LhTranslation.id.label("translation_id"),
            LhTranslation.key_id,
            LhTranslationKey.key_name,
            LhTranslationKey.category,
            LhTranslationKey.namespace,
            LhTranslationKey.description,
            LhTranslation.locale,
            LhTranslation.value,
            LhTranslation.icu_message,
            LhTranslationKey.interpolation_vars,
            LhTranslationKey.supports_pluralization,
        )
        .join(LhTranslationKey, LhTranslation.key_id == LhTranslationKey.id)
        .where(
            LhTranslation.status == TranslationStatus.PUBLISHED.value,
            LhTranslationKey.is_active.is_(True),
        )
    )


def _to_published(row: Any) -> PublishedTranslation:
    data = dict(row._mapping)
    data["interpolation_vars"] = list(data.get("interpolation_vars") or [])
    return PublishedTranslation.model_validate(data)


class SqlAlchemyTranslationRepository(BaseRepository):
    """翻译仓库实现。"""

    async def get_by_id(self, translation_id: str) -> Translation | None:
        stmt = (
            select(LhTranslation)
            .where(LhTranslation.id == translation_id)
            .execution_options(populate_existing=True)
        )
        result = (await self._session.execute(stmt)).scalar_one_or_none()
        return Translation.from_orm_model(result) if result else None

    async def get_latest(self, key_id: str, locale: str) -> Translation | None:
        """返回 (key, locale) 版本号最大的一条记录。"""
        stmt = (
            select(LhTranslation)
            .where(LhTranslation.key_id == key_id, LhTranslation.locale == locale)
            .order_by(LhTranslation.version.desc())
            .limit(1)
        )
        result = (await self._session.execute(stmt)).scalar_one_or_none()
        return Translation.from_orm_model(result) if result else None

    async def get_published(self, key_id: str, locale: str) -> Translation | None:
        stmt = select(LhTranslation).where(
            LhTranslation.key_id == key_id,
            LhTranslation.locale == locale,
            LhTranslation.status == TranslationStatus.PUBLISHED.value,
        )
        result = (await self._session.execute(stmt)).scalar_one_or_none()
        return Translation.from_orm_model(result) if result else None

    async def add(self, **data: Any) -> str:
        """新增一条翻译记录，返回其 ID。"""
        row = LhTranslation(**data, search_value=fold(data["value"]))
        self._session.add(row)
        await self._session.flush()
        return row.id

    async def transition(
        self,
        translation_id: str,
        allowed_from: Iterable[TranslationStatus],
        to_status: TranslationStatus,
        **values: Any,
    ) -> bool:
        """
        比较并交换 (CAS) 式状态迁移。

        只有当前状态仍在 `allowed_from` 中时才会更新；返回是否更新成功。
        并发的另一个写入者先完成迁移时，本次更新影响 0 行。
        """
        stmt = (
            update(LhTranslation)
            .where(
                LhTranslation.id == translation_id,
                LhTranslation.status.in_([s.value for s in allowed_from]),
            )
            .values(status=to_status.value, **values)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def supersede_published(
        self, key_id: str, locale: str, *, exclude_id: str, at: datetime, actor: str
    ) -> list[Translation]:
        """把 (key, locale) 当前已发布的记录标记为 superseded，返回被替换前的快照。"""
        stmt = select(LhTranslation).where(
            LhTranslation.key_id == key_id,
            LhTranslation.locale == locale,
            LhTranslation.status == TranslationStatus.PUBLISHED.value,
            LhTranslation.id != exclude_id,
        )
        current = [
            Translation.from_orm_model(r)
            for r in (await self._session.execute(stmt)).scalars().all()
        ]
        if not current:
            return []

        await self._session.execute(
            update(LhTranslation)
            .where(LhTranslation.id.in_([t.id for t in current]))
            .values(
                status=TranslationStatus.SUPERSEDED.value,
                superseded_at=at,
                updated_by=actor,
                updated_at=at,
            )
            .execution_options(synchronize_session=False)
        )
        return current

    async def find_published(
        self, key_name: str, locale: str
    ) -> PublishedTranslation | None:
        stmt = _published_view().where(
            LhTranslationKey.key_name == key_name, LhTranslation.locale == locale
        )
        row = (await self._session.execute(stmt)).first()
        return _to_published(row) if row else None

    async def list_published(
        self, locale: str, namespace: str | None = None
    ) -> list[PublishedTranslation]:
        stmt = _published_view().where(LhTranslation.locale == locale)
        if namespace is not None:
            stmt = stmt.where(LhTranslationKey.namespace == namespace)
        stmt = stmt.order_by(LhTranslationKey.key_name)
        rows = (await self._session.execute(stmt)).all()
        return [_to_published(r) for r in rows]

    async def list_by_category(
        self, category: str, locale: str
    ) -> list[PublishedTranslation]:
        stmt = (
            _published_view()
            .where(
                LhTranslationKey.category == category, LhTranslation.locale == locale
            )
            .order_by(LhTranslationKey.key_name)
        )
        rows = (await self._session.execute(stmt)).all()
        return [_to_published(r) for r in rows]

    async def search_candidates(
        self,
        locale: str,
        terms: Sequence[str],
        phrase: str,
        categories: Sequence[str] | None = None,
    ) -> list[PublishedTranslation]:
        """
        检索的 SQL 预筛：任一查询词或整个查询作为子串出现在折叠后的
        value 或 key_name/description 中。精确打分与过滤在应用层完成。

        `terms` 应已折叠大小写（见 `domain.search.tokenize`）。
        """
        needles = list(dict.fromkeys([*terms, fold(phrase)]))
        conditions = []
        for needle in filter(None, needles):
            conditions.append(LhTranslation.search_value.contains(needle, autoescape=True))
            conditions.append(
                LhTranslationKey.search_text.contains(needle, autoescape=True)
            )
        if not conditions:
            return []

        stmt = _published_view().where(LhTranslation.locale == locale, or_(*conditions))
        if categories:
            stmt = stmt.where(LhTranslationKey.category.in_(list(categories)))
        stmt = stmt.order_by(LhTranslationKey.key_name)
        rows = (await self._session.execute(stmt)).all()
        return [_to_published(r) for r in rows]

    async def count_by_status(
        self, locale: str | None = None
    ) -> dict[str, dict[str, int]]:
        """按语言统计各状态的记录数（只统计激活的键）。"""
        stmt = (
            select(LhTranslation.locale, LhTranslation.status, func.count())
            .join(LhTranslationKey, LhTranslation.key_id == LhTranslationKey.id)
            .where(LhTranslationKey.is_active.is_(True))
            .group_by(LhTranslation.locale, LhTranslation.status)
        )
        if locale is not None:
            stmt = stmt.where(LhTranslation.locale == locale)
        counts: dict[str, dict[str, int]] = {}
        for loc, status, count in (await self._session.execute(stmt)).all():
            counts.setdefault(loc, {})[str(status)] = int(count)
        return counts
