# src/locale_hub/infrastructure/db/base.py
"""
定义了 SQLAlchemy 的元数据 (MetaData) 和声明式基类 (DeclarativeBase)。

所有 ORM 模型都通过 `Base` 类与模块级的单一 `metadata` 实例关联，
Alembic 与测试中的 `create_all` 都以它为准。
"""

from __future__ import annotations

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase, MappedAsDataclass

# 统一约束命名，保证 SQLite 批量迁移与 PostgreSQL 下的名称一致
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)


class Base(MappedAsDataclass, DeclarativeBase):
    """
    项目统一的声明式基类。

    它被配置为数据类 (`MappedAsDataclass`)，并与模块级的 `metadata` 实例关联。
    """

    __abstract__ = True
    metadata = metadata
