# src/locale_hub/containers/persistence.py
"""
持久化层容器。

负责管理数据库引擎、会话工厂和 UoW 的生命周期。
"""

from dependency_injector import containers, providers
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from locale_hub.config import LocaleHubConfig
from locale_hub.core.uow import IUnitOfWork
from locale_hub.infrastructure.db import (
    create_async_db_engine,
    create_async_sessionmaker,
)
from locale_hub.infrastructure.uow import SqlAlchemyUnitOfWork


class PersistenceContainer(containers.DeclarativeContainer):
    """持久化层相关服务的容器。"""

    config = providers.Dependency(instance_of=LocaleHubConfig)

    # 数据库引擎是一个资源，由容器管理其生命周期
    db_engine: providers.Resource[AsyncEngine] = providers.Resource(
        create_async_db_engine,
        cfg=config,
    )

    # Session Maker 是一个单例，依赖于已初始化的引擎
    session_maker: providers.Singleton[async_sessionmaker[AsyncSession]] = (
        providers.Singleton(
            create_async_sessionmaker,
            engine=db_engine,
        )
    )

    # UoW 是一个工厂，每次调用都会创建一个新的实例
    uow_factory: providers.Factory[IUnitOfWork] = providers.Factory(
        SqlAlchemyUnitOfWork,
        sessionmaker=session_maker,
    )
