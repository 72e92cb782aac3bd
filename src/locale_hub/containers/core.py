# src/locale_hub/containers/core.py
"""
核心容器。

负责提供应用范围内的基础服务，目前只有日志。
它使用字段级的配置提供者。
"""

from dependency_injector import containers, providers

from locale_hub.observability.logging_config import setup_logging


class CoreContainer(containers.DeclarativeContainer):
    """核心服务和配置的容器。"""

    config = providers.Configuration()

    # 日志系统初始化器，在 init_resources 时被调用一次以配置全局日志
    logging = providers.Resource(
        setup_logging,
        log_level=config.logging.level,
        log_format=config.logging.format,
        service=config.service_name,
    )
