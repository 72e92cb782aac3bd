"""翻译键注册表仓库的 SQLAlchemy 实现。"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Sequence

from sqlalchemy import func, select

from locale_hub.core.types import KeyPriority, TranslationKey
from locale_hub.domain.search import fold
from locale_hub.infrastructure.db._schema import LhTranslationKey

from ._base_repo import BaseRepository


class SqlAlchemyKeyRepository(BaseRepository):
    """翻译键仓库实现。"""

    async def get_by_name(self, key_name: str) -> TranslationKey | None:
        stmt = select(LhTranslationKey).where(LhTranslationKey.key_name == key_name)
        result = (await self._session.execute(stmt)).scalar_one_or_none()
        return TranslationKey.from_orm_model(result) if result else None

    async def get_by_id(self, key_id: str) -> TranslationKey | None:
        result = await self._session.get(LhTranslationKey, key_id)
        return TranslationKey.from_orm_model(result) if result else None

    async def upsert(
        self,
        key_name: str,
        *,
        category: str,
        namespace: str | None = None,
        description: str | None = None,
        interpolation_vars: Sequence[str] = (),
        supports_pluralization: bool = False,
        priority: KeyPriority | str = KeyPriority.MEDIUM,
        is_active: bool = True,
    ) -> str:
        """按 key_name 插入或更新一个翻译键，返回其 ID。"""
        insert = self._get_insert_stmt()
        values = {
            "category": category,
            "namespace": namespace,
            "description": description,
            "search_text": fold(key_name, description),
            "interpolation_vars": list(interpolation_vars),
            "supports_pluralization": supports_pluralization,
            "priority": KeyPriority(priority).value,
            "is_active": is_active,
        }
        stmt = insert(LhTranslationKey).values(
            id=str(uuid.uuid4()), key_name=key_name, **values
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["key_name"],
            set_={
                **{name: stmt.excluded[name] for name in values},
                "updated_at": func.now(),
            },
        )
        await self._session.execute(stmt)

        key_id = await self._session.scalar(
            select(LhTranslationKey.id).where(LhTranslationKey.key_name == key_name)
        )
        return str(key_id)

    async def find_existing(self, key_names: Iterable[str]) -> list[str]:
        """返回 `key_names` 中已登记的键名（按名称排序）。"""
        names = list(key_names)
        if not names:
            return []
        stmt = (
            select(LhTranslationKey.key_name)
            .where(LhTranslationKey.key_name.in_(names))
            .order_by(LhTranslationKey.key_name)
        )
        return list((await self._session.scalars(stmt)).all())

    async def count_active(self) -> int:
        stmt = select(func.count()).select_from(LhTranslationKey).where(
            LhTranslationKey.is_active.is_(True)
        )
        return int(await self._session.scalar(stmt) or 0)
