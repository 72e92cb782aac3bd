# src/locale_hub/application/coordinator.py
"""
Locale-Hub 应用服务总协调器。
这是一个高级门面，将调用委托给具体的应用服务。
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from locale_hub.core.types import (
        BulkTransitionResult,
        CacheEntry,
        CategoryEntry,
        HistoryRecord,
        LocaleStatistics,
        SearchHit,
        TransitionResult,
        TranslationStatus,
        UsageStat,
    )

    from .resolvers import TranslationResolver
    from .services import (
        BundleCacheService,
        CatalogueDocument,
        CatalogueLoadReport,
        CatalogueService,
        SearchService,
        StatisticsService,
        UsageRecorderService,
        WorkflowService,
    )


class Coordinator:
    """高级门面，接收已初始化的服务实例。"""

    def __init__(
        self,
        workflow_service: WorkflowService,
        bundle_cache_service: BundleCacheService,
        resolver: TranslationResolver,
        usage_service: UsageRecorderService,
        search_service: SearchService,
        statistics_service: StatisticsService,
        catalogue_service: CatalogueService,
    ):
        self.workflow_service = workflow_service
        self.bundle_cache_service = bundle_cache_service
        self.resolver = resolver
        self.usage_service = usage_service
        self.search_service = search_service
        self.statistics_service = statistics_service
        self.catalogue_service = catalogue_service

    # --- 读取 ---

    async def get_cached_bundle(
        self, locale: str, namespace: str | None = None
    ) -> dict[str, dict[str, str]]:
        """返回 (locale, namespace) 的语言包，缓存失效时同步重建。"""
        return await self.bundle_cache_service.get_cached_bundle(locale, namespace)

    async def resolve(
        self,
        key_name: str,
        locale: str,
        variables: Mapping[str, Any] | None = None,
        fallback_locale: str | None = None,
    ) -> str:
        """解析单个键，应用回退逻辑与插值；永不抛出。"""
        return await self.resolver.resolve(key_name, locale, variables, fallback_locale)

    async def get_by_category(self, category: str, locale: str) -> list[CategoryEntry]:
        return await self.resolver.get_by_category(category, locale)

    async def search(
        self,
        query: str,
        locale: str,
        categories: Sequence[str] | None = None,
        limit: int | None = None,
    ) -> list[SearchHit]:
        return await self.search_service.search(query, locale, categories, limit)

    # --- 缓存 ---

    async def invalidate(
        self,
        locale: str | None = None,
        namespace: str | None = None,
        reason: str = "manual invalidation",
    ) -> int:
        return await self.bundle_cache_service.invalidate(locale, namespace, reason)

    async def warm_cache(
        self, locales: Iterable[str] | None = None, namespace: str | None = None
    ) -> list[CacheEntry]:
        return await self.bundle_cache_service.warm(locales, namespace)

    # --- 工作流 ---

    async def create_draft(
        self,
        key_name: str,
        locale: str,
        value: str,
        icu_message: str | None = None,
        actor_id: str = "system",
    ) -> str:
        return await self.workflow_service.create_draft(
            key_name, locale, value, icu_message, actor_id
        )

    async def submit_for_review(
        self, translation_id: str, actor_id: str = "system"
    ) -> TransitionResult:
        return await self.workflow_service.submit_for_review(translation_id, actor_id)

    async def approve(self, translation_id: str, approver_id: str) -> TransitionResult:
        return await self.workflow_service.approve(translation_id, approver_id)

    async def reject(
        self, translation_id: str, reason: str, actor_id: str = "system"
    ) -> TransitionResult:
        return await self.workflow_service.reject(translation_id, reason, actor_id)

    async def return_to_draft(
        self, translation_id: str, actor_id: str = "system"
    ) -> TransitionResult:
        return await self.workflow_service.return_to_draft(translation_id, actor_id)

    async def publish(self, translation_id: str, publisher_id: str) -> TransitionResult:
        """发布一条已批准的翻译，并作废受影响的语言包缓存。"""
        return await self.workflow_service.publish(translation_id, publisher_id)

    async def bulk_transition(
        self,
        translation_ids: Iterable[str],
        new_status: TranslationStatus,
        actor_id: str,
        reason: str | None = None,
    ) -> BulkTransitionResult:
        return await self.workflow_service.bulk_transition(
            translation_ids, new_status, actor_id, reason
        )

    async def get_history(self, translation_id: str) -> list[HistoryRecord]:
        return await self.workflow_service.get_history(translation_id)

    # --- 使用统计与报表 ---

    async def record_usage(
        self, key_name: str, locale: str, load_time_ms: float | None = None
    ) -> None:
        await self.usage_service.record_usage(key_name, locale, load_time_ms)

    async def get_usage(
        self, key_name: str, locale: str, day: date | None = None
    ) -> UsageStat | None:
        return await self.usage_service.get_usage(key_name, locale, day)

    async def get_statistics(
        self, locale: str | None = None, days_back: int = 30
    ) -> list[LocaleStatistics]:
        return await self.statistics_service.get_statistics(locale, days_back)

    # --- 导入 ---

    async def load_catalogue(
        self, document: CatalogueDocument | Mapping[str, Any]
    ) -> CatalogueLoadReport:
        """导入一份 JSON 目录文档（翻译键与各语言的值）。"""
        return await self.catalogue_service.load(document)
