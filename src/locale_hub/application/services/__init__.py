# src/locale_hub/application/services/__init__.py
"""
应用服务层。

本模块包含所有具体的业务用例实现，每个服务对应一个或一组相关的业务操作。
"""

from ._bundle_cache import BundleCacheService
from ._cache_generator import CacheGeneratorService
from ._catalogue import (
    CatalogueDocument,
    CatalogueKey,
    CatalogueLoadReport,
    CatalogueService,
    CatalogueValue,
)
from ._event_publisher import EventPublisher
from ._search import SearchService
from ._statistics import StatisticsService
from ._usage_recorder import UsageRecorderService
from ._workflow import WorkflowService

__all__ = [
    "BundleCacheService",
    "CacheGeneratorService",
    "CatalogueDocument",
    "CatalogueKey",
    "CatalogueLoadReport",
    "CatalogueService",
    "CatalogueValue",
    "EventPublisher",
    "SearchService",
    "StatisticsService",
    "UsageRecorderService",
    "WorkflowService",
]
