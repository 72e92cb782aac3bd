# src/locale_hub/infrastructure/db/_schema.py
"""
定义了与数据库 Alembic Schema 完全对应的 SQLAlchemy ORM 模型。
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from locale_hub.core.types import KeyPriority, TranslationStatus

from .base import Base

# 优先使用 PostgreSQL 的 JSONB；其他方言使用通用 JSON
json_type = JSON().with_variant(JSONB(), "postgresql")

# 以 VARCHAR 存储枚举值，SQLite 与 PostgreSQL 行为一致
translation_status_enum = Enum(
    *[s.value for s in TranslationStatus],
    name="lh_translation_status",
    native_enum=False,
    length=16,
)
key_priority_enum = Enum(
    *[p.value for p in KeyPriority],
    name="lh_key_priority",
    native_enum=False,
    length=16,
)

PUBLISHED_ONLY = text("status = 'published'")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _uuid() -> str:
    return str(uuid.uuid4())


class LhTranslationKey(Base):
    __tablename__ = "lh_translation_keys"

    key_name: Mapped[str] = mapped_column(Text, unique=True)
    category: Mapped[str] = mapped_column(Text, index=True)
    id: Mapped[str] = mapped_column(Text, primary_key=True, default_factory=_uuid)
    namespace: Mapped[str | None] = mapped_column(
        Text, nullable=True, default=None, index=True
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    # key_name 与 description 经 `domain.search.fold` 折叠后的检索文本
    search_text: Mapped[str] = mapped_column(Text, server_default="", default="")
    interpolation_vars: Mapped[list[str]] = mapped_column(
        json_type, default_factory=list
    )
    supports_pluralization: Mapped[bool] = mapped_column(
        Boolean, server_default=text("false"), default=False
    )
    priority: Mapped[str] = mapped_column(
        key_priority_enum, server_default=KeyPriority.MEDIUM.value, default="medium"
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, server_default=text("true"), default=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        default_factory=_utcnow,
        init=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        default_factory=_utcnow,
        init=False,
    )


class LhTranslation(Base):
    __tablename__ = "lh_translations"

    key_id: Mapped[str] = mapped_column(
        Text, ForeignKey("lh_translation_keys.id", ondelete="CASCADE")
    )
    locale: Mapped[str] = mapped_column(Text)
    value: Mapped[str] = mapped_column(Text)
    id: Mapped[str] = mapped_column(Text, primary_key=True, default_factory=_uuid)
    status: Mapped[str] = mapped_column(
        translation_status_enum,
        server_default=TranslationStatus.DRAFT.value,
        default=TranslationStatus.DRAFT.value,
    )
    icu_message: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    # value 经 `domain.search.fold` 折叠后的检索文本
    search_value: Mapped[str] = mapped_column(Text, server_default="", default="")
    version: Mapped[int] = mapped_column(Integer, server_default="1", default=1)
    previous_value: Mapped[str | None] = mapped_column(
        Text, nullable=True, default=None
    )
    word_count: Mapped[int] = mapped_column(Integer, server_default="0", default=0)
    character_count: Mapped[int] = mapped_column(
        Integer, server_default="0", default=0
    )
    approved_by: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )
    published_by: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    published_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )
    rejection_reason: Mapped[str | None] = mapped_column(
        Text, nullable=True, default=None
    )
    superseded_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )
    created_by: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    updated_by: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        default_factory=_utcnow,
        init=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        default_factory=_utcnow,
        init=False,
    )

    __table_args__ = (
        UniqueConstraint("key_id", "locale", "version", name="uq_lh_translations_version"),
        # 每个 (key, locale) 至多一条 published 记录
        Index(
            "uq_lh_translations_one_published",
            "key_id",
            "locale",
            unique=True,
            sqlite_where=PUBLISHED_ONLY,
            postgresql_where=PUBLISHED_ONLY,
        ),
        Index("ix_lh_translations_locale_status", "locale", "status"),
    )


class LhTranslationCache(Base):
    __tablename__ = "lh_translation_cache"

    locale: Mapped[str] = mapped_column(Text)
    # "*" 表示全部命名空间
    namespace: Mapped[str] = mapped_column(Text)
    payload: Mapped[dict[str, Any]] = mapped_column(json_type)
    version: Mapped[int] = mapped_column(BigInteger)
    generated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    id: Mapped[int] = mapped_column(Integer, primary_key=True, init=False)
    generation_time_ms: Mapped[float] = mapped_column(Float, default=0.0)
    is_valid: Mapped[bool] = mapped_column(
        Boolean, server_default=text("true"), default=True
    )
    invalidated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )
    invalidation_reason: Mapped[str | None] = mapped_column(
        Text, nullable=True, default=None
    )

    __table_args__ = (
        UniqueConstraint("locale", "namespace", name="uq_lh_translation_cache_scope"),
    )


class LhUsageStat(Base):
    __tablename__ = "lh_usage_stats"

    key_id: Mapped[str] = mapped_column(
        Text, ForeignKey("lh_translation_keys.id", ondelete="CASCADE")
    )
    locale: Mapped[str] = mapped_column(Text)
    recorded_date: Mapped[date] = mapped_column(Date)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, init=False)
    view_count: Mapped[int] = mapped_column(Integer, server_default="0", default=0)
    total_requests: Mapped[int] = mapped_column(
        Integer, server_default="0", default=0
    )
    load_samples: Mapped[int] = mapped_column(Integer, server_default="0", default=0)
    avg_load_time_ms: Mapped[float | None] = mapped_column(
        Float, nullable=True, default=None
    )
    last_viewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )

    __table_args__ = (
        UniqueConstraint(
            "key_id", "locale", "recorded_date", name="uq_lh_usage_stats_day"
        ),
    )


class LhTranslationHistory(Base):
    __tablename__ = "lh_translation_history"

    translation_id: Mapped[str] = mapped_column(Text, index=True)
    key_id: Mapped[str] = mapped_column(Text)
    locale: Mapped[str] = mapped_column(Text)
    action: Mapped[str] = mapped_column(Text)
    actor: Mapped[str] = mapped_column(Text)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, init=False)
    old_status: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    new_status: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    old_value: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    new_value: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    change_reason: Mapped[str | None] = mapped_column(
        Text, nullable=True, default=None
    )
    changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        default_factory=_utcnow,
        init=False,
    )
