# src/locale_hub/core/types.py
"""
本模块定义了 Locale-Hub 系统的核心数据类型。
这些类型是系统各层之间数据交换的契约。
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

# 持久层中代表“所有命名空间”的哨兵值；对外的 DTO 一律使用 None。
ALL_NAMESPACES = "*"


class TranslationStatus(str, Enum):
    """表示翻译记录在其生命周期中的不同状态。"""

    DRAFT = "draft"
    REVIEW = "review"
    APPROVED = "approved"
    PUBLISHED = "published"
    REJECTED = "rejected"
    SUPERSEDED = "superseded"


class WorkflowAction(str, Enum):
    """授权器与审计记录中使用的操作名。"""

    CREATE = "create"
    SUBMIT_FOR_REVIEW = "submit_for_review"
    APPROVE = "approve"
    REJECT = "reject"
    RETURN_TO_DRAFT = "return_to_draft"
    PUBLISH = "publish"
    SUPERSEDE = "supersede"


class KeyPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class _OrmDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_orm_model(cls, orm_obj: Any):
        """
        [防腐层] 从 SQLAlchemy ORM 实例安全地创建 DTO。
        封装了 ORM -> DTO 的转换逻辑。
        """
        return cls.model_validate(orm_obj, from_attributes=True)


class TranslationKey(_OrmDTO):
    """翻译键（外部维护的参考数据）的 DTO。"""

    id: str
    key_name: str
    category: str
    namespace: Optional[str] = None
    description: Optional[str] = None
    interpolation_vars: list[str] = Field(default_factory=list)
    supports_pluralization: bool = False
    priority: KeyPriority = KeyPriority.MEDIUM
    is_active: bool = True


class Translation(_OrmDTO):
    """单个 (key, locale) 的一条翻译记录（某个版本）的 DTO。"""

    id: str
    key_id: str
    locale: str
    value: str
    icu_message: Optional[str] = None
    status: TranslationStatus
    version: int = 1
    previous_value: Optional[str] = None
    word_count: int = 0
    character_count: int = 0
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    published_by: Optional[str] = None
    published_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    superseded_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PublishedTranslation(BaseModel):
    """已发布翻译与其所属键元数据的联合视图，供解析、生成与检索使用。"""

    translation_id: str
    key_id: str
    key_name: str
    category: str
    namespace: Optional[str] = None
    description: Optional[str] = None
    locale: str
    value: str
    icu_message: Optional[str] = None
    interpolation_vars: list[str] = Field(default_factory=list)
    supports_pluralization: bool = False

    @property
    def template(self) -> str:
        """解析时使用的模板：优先 ICU 消息，其次纯文本值。"""
        return self.icu_message or self.value


class CategoryEntry(BaseModel):
    """`get_by_category` 的返回项。"""

    key_name: str
    value: str
    icu_message: Optional[str] = None
    interpolation_vars: list[str] = Field(default_factory=list)
    supports_pluralization: bool = False


class CacheEntry(BaseModel):
    """一份按 (locale, namespace) 生成的语言包快照。"""

    locale: str
    namespace: Optional[str] = None
    payload: dict[str, dict[str, str]] = Field(default_factory=dict)
    version: int
    generated_at: datetime
    expires_at: datetime
    generation_time_ms: float = 0.0
    is_valid: bool = True
    invalidated_at: Optional[datetime] = None
    invalidation_reason: Optional[str] = None

    def is_hit(self, now: datetime) -> bool:
        """仅当条目有效且尚未过期时才算命中。"""
        return self.is_valid and self.expires_at > now


class UsageStat(_OrmDTO):
    """按 (key, locale, 日) 聚合的使用统计。"""

    key_id: str
    locale: str
    recorded_date: date
    view_count: int = 0
    total_requests: int = 0
    load_samples: int = 0
    avg_load_time_ms: Optional[float] = None
    last_viewed_at: Optional[datetime] = None


class SearchHit(BaseModel):
    """检索结果项。"""

    translation_id: str
    key_name: str
    category: str
    locale: str
    value: str
    description: Optional[str] = None
    rank: float


class TransitionResult(BaseModel):
    """
    一次工作流操作的结果。

    失败不会抛出异常，而是以 `success=False` 加上 `error_code` 报告；
    在布尔上下文中结果对象等价于 `success`。
    """

    success: bool
    translation_id: str
    from_status: Optional[TranslationStatus] = None
    to_status: Optional[TranslationStatus] = None
    error_code: Optional[str] = None
    message: Optional[str] = None

    def __bool__(self) -> bool:
        return self.success


class BulkTransitionResult(BaseModel):
    succeeded: list[str] = Field(default_factory=list)
    failed: list[TransitionResult] = Field(default_factory=list)
    invalidated: int = 0


class LocaleStatistics(BaseModel):
    locale: str
    total_keys: int
    published: int
    draft: int
    completion_percentage: float
    total_views: int
    avg_load_time_ms: Optional[float] = None


class HistoryRecord(_OrmDTO):
    """翻译审计记录的 DTO。"""

    id: int | None = None
    translation_id: str
    key_id: str
    locale: str
    action: str
    old_status: Optional[str] = None
    new_status: Optional[str] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    change_reason: Optional[str] = None
    actor: str
    changed_at: Optional[datetime] = None


class Event(BaseModel):
    """领域事件的基类。"""

    translation_id: str
    key_id: str
    locale: str
    actor: str
    event_type: str
    old_status: Optional[TranslationStatus] = None
    new_status: Optional[TranslationStatus] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    reason: Optional[str] = None
