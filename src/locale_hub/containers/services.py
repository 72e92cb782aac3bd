# src/locale_hub/containers/services.py
"""
应用服务层容器。

负责组装所有业务用例服务和总协调器 (Coordinator)。
本容器只依赖于抽象接口，不依赖任何具体的基础设施实现。
"""

from dependency_injector import containers, providers

from locale_hub.application import coordinator, resolvers, services
from locale_hub.config import LocaleHubConfig
from locale_hub.infrastructure.authorization import AllowAllAuthorizer
from locale_hub.utils import utc_now


class ServicesContainer(containers.DeclarativeContainer):
    """应用服务和协调器的容器。"""

    config = providers.Dependency(instance_of=LocaleHubConfig)
    # 服务需要的是“可调用的 UoW 工厂”，因此下面一律注入 `.provider`
    uow_factory = providers.Dependency()
    cache_store = providers.Dependency()

    clock = providers.Object(utc_now)
    authorizer = providers.Singleton(AllowAllAuthorizer)
    event_publisher = providers.Singleton(services.EventPublisher)

    # --- 持有进程内状态（锁池、single-flight、键缓存）的服务为单例 ---
    workflow_service = providers.Singleton(
        services.WorkflowService,
        uow_factory=uow_factory.provider,
        config=config,
        cache_store=cache_store,
        authorizer=authorizer,
        event_publisher=event_publisher,
        clock=clock,
    )
    cache_generator = providers.Singleton(
        services.CacheGeneratorService,
        uow_factory=uow_factory.provider,
        cache_store=cache_store,
        config=config,
        clock=clock,
    )
    bundle_cache_service = providers.Singleton(
        services.BundleCacheService,
        cache_store=cache_store,
        generator=cache_generator,
        config=config,
        clock=clock,
    )
    usage_service = providers.Singleton(
        services.UsageRecorderService,
        uow_factory=uow_factory.provider,
        config=config,
        clock=clock,
    )

    # --- 无状态服务 ---
    translation_resolver = providers.Factory(
        resolvers.TranslationResolver,
        uow_factory=uow_factory.provider,
        config=config,
        usage_recorder=usage_service,
    )
    search_service = providers.Factory(
        services.SearchService,
        uow_factory=uow_factory.provider,
        config=config,
    )
    statistics_service = providers.Factory(
        services.StatisticsService,
        uow_factory=uow_factory.provider,
        config=config,
        clock=clock,
    )
    catalogue_service = providers.Factory(
        services.CatalogueService,
        uow_factory=uow_factory.provider,
        config=config,
        workflow=workflow_service,
    )

    # --- 总协调器 (门面) ---
    coordinator = providers.Factory(
        coordinator.Coordinator,
        workflow_service=workflow_service,
        bundle_cache_service=bundle_cache_service,
        resolver=translation_resolver,
        usage_service=usage_service,
        search_service=search_service,
        statistics_service=statistics_service,
        catalogue_service=catalogue_service,
    )
