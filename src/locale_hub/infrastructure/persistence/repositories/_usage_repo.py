"""使用统计仓库的 SQLAlchemy 实现。"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from sqlalchemy import Float, func, literal, select

from locale_hub.core.types import UsageStat
from locale_hub.infrastructure.db._schema import LhUsageStat

from ._base_repo import BaseRepository


class SqlAlchemyUsageRepository(BaseRepository):
    """使用统计仓库实现。"""

    async def merge(
        self,
        key_id: str,
        locale: str,
        day: date,
        now: datetime,
        load_time_ms: float | None,
    ) -> None:
        """
        以单条 INSERT ... ON CONFLICT DO UPDATE 合并一次使用事件。

        所有增量都相对列的当前值计算，并发调用在数据库侧合并，
        不存在“先读后写”的丢失更新。
        """
        table = LhUsageStat
        insert = self._get_insert_stmt()
        has_sample = load_time_ms is not None
        stmt = insert(table).values(
            key_id=key_id,
            locale=locale,
            recorded_date=day,
            view_count=1,
            total_requests=1,
            load_samples=1 if has_sample else 0,
            avg_load_time_ms=float(load_time_ms) if has_sample else None,
            last_viewed_at=now,
        )
        set_: dict[str, Any] = {
            "view_count": table.view_count + 1,
            "total_requests": table.total_requests + 1,
            "last_viewed_at": stmt.excluded.last_viewed_at,
        }
        if has_sample:
            sample = literal(float(load_time_ms), Float)
            set_["avg_load_time_ms"] = (
                func.coalesce(table.avg_load_time_ms, 0.0) * table.load_samples + sample
            ) / (table.load_samples + 1)
            set_["load_samples"] = table.load_samples + 1
        stmt = stmt.on_conflict_do_update(
            index_elements=["key_id", "locale", "recorded_date"], set_=set_
        )
        await self._session.execute(stmt)

    async def get(self, key_id: str, locale: str, day: date) -> UsageStat | None:
        stmt = (
            select(LhUsageStat)
            .where(
                LhUsageStat.key_id == key_id,
                LhUsageStat.locale == locale,
                LhUsageStat.recorded_date == day,
            )
            .execution_options(populate_existing=True)
        )
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        return UsageStat.from_orm_model(row) if row else None

    async def aggregate(
        self, locale: str | None, since: date
    ) -> dict[str, tuple[int, float | None]]:
        """按语言汇总窗口期内的 (总浏览数, 日均加载耗时的平均值)。"""
        stmt = (
            select(
                LhUsageStat.locale,
                func.coalesce(func.sum(LhUsageStat.view_count), 0),
                func.avg(LhUsageStat.avg_load_time_ms),
            )
            .where(LhUsageStat.recorded_date >= since)
            .group_by(LhUsageStat.locale)
        )
        if locale is not None:
            stmt = stmt.where(LhUsageStat.locale == locale)
        return {
            loc: (int(views), float(avg) if avg is not None else None)
            for loc, views, avg in (await self._session.execute(stmt)).all()
        }
