"""Locale-Hub 核心契约：类型、异常与接口协议。"""

from .exceptions import (
    ConfigurationError,
    ConflictError,
    KeyCollisionError,
    LocaleHubError,
    NotFoundError,
    PermissionDeniedError,
    StateError,
    UnsupportedLocaleError,
    WorkflowError,
)
from .types import (
    ALL_NAMESPACES,
    BulkTransitionResult,
    CacheEntry,
    CategoryEntry,
    Event,
    HistoryRecord,
    KeyPriority,
    LocaleStatistics,
    PublishedTranslation,
    SearchHit,
    Translation,
    TranslationKey,
    TranslationStatus,
    TransitionResult,
    UsageStat,
    WorkflowAction,
)

__all__ = [
    "ALL_NAMESPACES",
    "BulkTransitionResult",
    "CacheEntry",
    "CategoryEntry",
    "ConfigurationError",
    "ConflictError",
    "Event",
    "HistoryRecord",
    "KeyCollisionError",
    "KeyPriority",
    "LocaleHubError",
    "LocaleStatistics",
    "NotFoundError",
    "PermissionDeniedError",
    "PublishedTranslation",
    "SearchHit",
    "StateError",
    "Translation",
    "TranslationKey",
    "TranslationStatus",
    "TransitionResult",
    "UnsupportedLocaleError",
    "UsageStat",
    "WorkflowAction",
    "WorkflowError",
]
