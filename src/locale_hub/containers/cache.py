# src/locale_hub/containers/cache.py
"""
语言包缓存存储容器。

根据 `cache.store` 选择数据库表或进程内字典作为缓存存储。
"""

from dependency_injector import containers, providers

from locale_hub.config import LocaleHubConfig
from locale_hub.core.interfaces import CacheStore
from locale_hub.infrastructure.cache import DatabaseCacheStore, MemoryCacheStore


class CacheContainer(containers.DeclarativeContainer):
    """缓存层相关服务的容器。"""

    config = providers.Dependency(instance_of=LocaleHubConfig)
    uow_factory = providers.Dependency()

    # 两种实现都是单例；内存实现的状态必须在整个进程内共享
    cache_store: providers.Selector[CacheStore] = providers.Selector(
        config.provided.cache.store,
        database=providers.Singleton(
            DatabaseCacheStore,
            uow_factory=uow_factory.provider,
        ),
        memory=providers.Singleton(MemoryCacheStore),
    )
