"""翻译审计记录仓库的 SQLAlchemy 实现。"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select

from locale_hub.core.types import HistoryRecord
from locale_hub.infrastructure.db._schema import LhTranslationHistory

from ._base_repo import BaseRepository


class SqlAlchemyHistoryRepository(BaseRepository):
    """审计记录只追加，不修改。"""

    async def add(self, **data: Any) -> None:
        self._session.add(LhTranslationHistory(**data))

    async def list_for_translation(self, translation_id: str) -> list[HistoryRecord]:
        stmt = (
            select(LhTranslationHistory)
            .where(LhTranslationHistory.translation_id == translation_id)
            .order_by(LhTranslationHistory.changed_at, LhTranslationHistory.id)
        )
        rows = (await self._session.execute(stmt)).scalars().all()
        return [HistoryRecord.from_orm_model(r) for r in rows]
