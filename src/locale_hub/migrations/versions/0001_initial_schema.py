"""
迁移 0001: 创建 Locale-Hub 的全部核心表

职责:
- lh_translation_keys: 翻译键注册表
- lh_translations: 带版本与工作流状态的翻译记录
- lh_translation_cache: 按 (locale, namespace) 的语言包缓存
- lh_usage_stats: 按日聚合的使用统计
- lh_translation_history: 工作流审计记录

Revision ID: 0001
Revises:
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

json_type = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")

translation_status_enum = sa.Enum(
    "draft",
    "review",
    "approved",
    "published",
    "rejected",
    "superseded",
    name="lh_translation_status",
    native_enum=False,
    length=16,
)
key_priority_enum = sa.Enum(
    "low",
    "medium",
    "high",
    "critical",
    name="lh_key_priority",
    native_enum=False,
    length=16,
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "lh_translation_keys",
        sa.Column("key_name", sa.Text(), nullable=False),
        sa.Column("category", sa.Text(), nullable=False),
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column("namespace", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("search_text", sa.Text(), server_default="", nullable=False),
        sa.Column("interpolation_vars", json_type, nullable=False),
        sa.Column(
            "supports_pluralization",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        sa.Column(
            "priority", key_priority_enum, server_default="medium", nullable=False
        ),
        sa.Column(
            "is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_lh_translation_keys")),
        sa.UniqueConstraint("key_name", name=op.f("uq_lh_translation_keys_key_name")),
    )
    op.create_index(
        op.f("ix_lh_translation_keys_category"), "lh_translation_keys", ["category"]
    )
    op.create_index(
        op.f("ix_lh_translation_keys_namespace"), "lh_translation_keys", ["namespace"]
    )

    op.create_table(
        "lh_translations",
        sa.Column("key_id", sa.Text(), nullable=False),
        sa.Column("locale", sa.Text(), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column(
            "status", translation_status_enum, server_default="draft", nullable=False
        ),
        sa.Column("icu_message", sa.Text(), nullable=True),
        sa.Column("search_value", sa.Text(), server_default="", nullable=False),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.Column("previous_value", sa.Text(), nullable=True),
        sa.Column("word_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("character_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("approved_by", sa.Text(), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("published_by", sa.Text(), nullable=True),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("superseded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.Text(), nullable=True),
        sa.Column("updated_by", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["key_id"],
            ["lh_translation_keys.id"],
            name=op.f("fk_lh_translations_key_id_lh_translation_keys"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_lh_translations")),
        sa.UniqueConstraint(
            "key_id", "locale", "version", name="uq_lh_translations_version"
        ),
    )
    op.create_index(
        "uq_lh_translations_one_published",
        "lh_translations",
        ["key_id", "locale"],
        unique=True,
        sqlite_where=sa.text("status = 'published'"),
        postgresql_where=sa.text("status = 'published'"),
    )
    op.create_index(
        "ix_lh_translations_locale_status", "lh_translations", ["locale", "status"]
    )

    op.create_table(
        "lh_translation_cache",
        sa.Column("locale", sa.Text(), nullable=False),
        sa.Column("namespace", sa.Text(), nullable=False),
        sa.Column("payload", json_type, nullable=False),
        sa.Column("version", sa.BigInteger(), nullable=False),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("generation_time_ms", sa.Float(), nullable=False),
        sa.Column(
            "is_valid", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        sa.Column("invalidated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("invalidation_reason", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_lh_translation_cache")),
        sa.UniqueConstraint(
            "locale", "namespace", name="uq_lh_translation_cache_scope"
        ),
    )

    op.create_table(
        "lh_usage_stats",
        sa.Column("key_id", sa.Text(), nullable=False),
        sa.Column("locale", sa.Text(), nullable=False),
        sa.Column("recorded_date", sa.Date(), nullable=False),
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("view_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("total_requests", sa.Integer(), server_default="0", nullable=False),
        sa.Column("load_samples", sa.Integer(), server_default="0", nullable=False),
        sa.Column("avg_load_time_ms", sa.Float(), nullable=True),
        sa.Column("last_viewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["key_id"],
            ["lh_translation_keys.id"],
            name=op.f("fk_lh_usage_stats_key_id_lh_translation_keys"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_lh_usage_stats")),
        sa.UniqueConstraint(
            "key_id", "locale", "recorded_date", name="uq_lh_usage_stats_day"
        ),
    )

    op.create_table(
        "lh_translation_history",
        sa.Column("translation_id", sa.Text(), nullable=False),
        sa.Column("key_id", sa.Text(), nullable=False),
        sa.Column("locale", sa.Text(), nullable=False),
        sa.Column("action", sa.Text(), nullable=False),
        sa.Column("actor", sa.Text(), nullable=False),
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("old_status", sa.Text(), nullable=True),
        sa.Column("new_status", sa.Text(), nullable=True),
        sa.Column("old_value", sa.Text(), nullable=True),
        sa.Column("new_value", sa.Text(), nullable=True),
        sa.Column("change_reason", sa.Text(), nullable=True),
        sa.Column(
            "changed_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_lh_translation_history")),
    )
    op.create_index(
        op.f("ix_lh_translation_history_translation_id"),
        "lh_translation_history",
        ["translation_id"],
    )


def downgrade() -> None:
    op.drop_index(
        op.f("ix_lh_translation_history_translation_id"),
        table_name="lh_translation_history",
    )
    op.drop_table("lh_translation_history")
    op.drop_table("lh_usage_stats")
    op.drop_table("lh_translation_cache")
    op.drop_index("ix_lh_translations_locale_status", table_name="lh_translations")
    op.drop_index("uq_lh_translations_one_published", table_name="lh_translations")
    op.drop_table("lh_translations")
    op.drop_index(
        op.f("ix_lh_translation_keys_namespace"), table_name="lh_translation_keys"
    )
    op.drop_index(
        op.f("ix_lh_translation_keys_category"), table_name="lh_translation_keys"
    )
    op.drop_table("lh_translation_keys")
