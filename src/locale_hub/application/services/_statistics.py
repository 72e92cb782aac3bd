"""按语言汇总翻译完成度与使用情况。"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from locale_hub.core.types import LocaleStatistics, TranslationStatus
from locale_hub.utils import utc_now, utc_today

if TYPE_CHECKING:
    from locale_hub.config import LocaleHubConfig
    from locale_hub.infrastructure.uow import UowFactory


class StatisticsService:
    def __init__(
        self,
        uow_factory: UowFactory,
        config: LocaleHubConfig,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._uow_factory = uow_factory
        self._config = config
        self._clock = clock

    async def get_statistics(
        self, locale: str | None = None, days_back: int = 30
    ) -> list[LocaleStatistics]:
        """
        每个语言一行：激活键总数、已发布数、草稿数、完成度（已发布 / 激活键，
        百分比保留两位小数），以及最近 `days_back` 天的浏览总数与平均加载耗时。
        """
        if days_back < 0:
            raise ValueError("days_back 不能为负数")
        since = utc_today(self._clock()) - timedelta(days=days_back)
        async with self._uow_factory() as uow:
            total_keys = await uow.keys.count_active()
            counts = await uow.translations.count_by_status(locale)
            usage = await uow.usage.aggregate(locale, since)

        if locale is not None:
            locales = [locale]
        else:
            locales = sorted(set(self._config.locales.supported) | set(counts))

        stats = []
        for loc in locales:
            by_status = counts.get(loc, {})
            published = by_status.get(TranslationStatus.PUBLISHED.value, 0)
            views, avg_load = usage.get(loc, (0, None))
            stats.append(
                LocaleStatistics(
                    locale=loc,
                    total_keys=total_keys,
                    published=published,
                    draft=by_status.get(TranslationStatus.DRAFT.value, 0),
                    completion_percentage=(
                        round(published / total_keys * 100, 2) if total_keys else 0.0
                    ),
                    total_views=views,
                    avg_load_time_ms=(
                        round(avg_load, 2) if avg_load is not None else None
                    ),
                )
            )
        return stats
