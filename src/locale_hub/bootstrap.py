# src/locale_hub/bootstrap.py
"""
应用引导程序和 DI 容器的生命周期管理。

本模块是应用的唯一初始化入口，负责：
1. 加载配置。
2. 创建并装配 DI 容器。
3. 管理核心资源（如数据库引擎）的启动和关闭。
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import structlog
from pydantic import ValidationError

from locale_hub.config import LocaleHubConfig
from locale_hub.containers import ApplicationContainer
from locale_hub.core.exceptions import ConfigurationError
from locale_hub.infrastructure.db import dispose_engine

EnvMode = Literal["prod", "dev", "test"]

# --- 路径设置 ---
PROJECT_ROOT_DIR = Path(__file__).resolve().parents[2]
logger = structlog.get_logger("locale_hub.bootstrap")


def _parse_dotenv_line(line: str) -> tuple[str, str] | None:
    line = line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    key, value = line.split("=", 1)
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        value = value[1:-1]
    return key.strip(), value


def _load_dotenv_files(env_mode: EnvMode, root: Path = PROJECT_ROOT_DIR) -> list[Path]:
    """根据环境模式，确定并加载相应的 .env 文件。"""
    files_to_load: list[Path] = []
    base_env = root / ".env"
    if base_env.is_file():
        files_to_load.append(base_env)

    dev_env = root / ".env.dev"
    if env_mode in ("dev", "test") and dev_env.is_file():
        files_to_load.append(dev_env)

    test_env = root / ".env.test"
    if env_mode == "test" and test_env.is_file():
        files_to_load.append(test_env)

    logger.debug("确定要加载的 dotenv 文件", files=[p.name for p in files_to_load])
    for file_path in files_to_load:
        try:
            with file_path.open("r", encoding="utf-8") as f:
                for line in f:
                    parsed = _parse_dotenv_line(line)
                    if parsed is None:
                        continue
                    key, value = parsed
                    # 只设置尚未在环境中存在的变量，外部环境变量优先
                    if key not in os.environ:
                        os.environ[key] = value
        except OSError as e:
            logger.warning("读取 .env 文件失败", path=str(file_path), error=str(e))
    return files_to_load


def resolve_env_mode(raw: str | None = None) -> EnvMode:
    """把 `LOCALEHUB_ENV` 归一化为 prod/dev/test，未知值按 dev 处理。"""
    value = (raw if raw is not None else os.getenv("LOCALEHUB_ENV", "dev")).lower()
    if value not in ("prod", "dev", "test"):
        return "dev"
    return value  # type: ignore[return-value]


def create_app_config(env_mode: EnvMode) -> LocaleHubConfig:
    """加载、验证并返回应用配置对象；配置不合法时抛出 ConfigurationError。"""
    _load_dotenv_files(env_mode)
    try:
        return LocaleHubConfig()
    except ValidationError as e:
        raise ConfigurationError(f"配置校验失败: {e}") from e


def create_container(config: LocaleHubConfig, service_name: str) -> ApplicationContainer:
    """创建并装配 DI 容器。"""
    container = ApplicationContainer()

    # 1. 注入整块配置对象，作为向下传递的唯一事实来源
    container.pydantic_config.override(config)

    # 2. 从整块配置中派生出字段级配置
    container.config.from_pydantic(config)
    container.config.service_name.from_value(service_name)

    # 3. 初始化核心服务（如日志）
    container.core.init_resources()

    return container


async def shutdown_container(container: ApplicationContainer) -> None:
    """释放数据库连接池并关闭容器管理的资源。必须在创建引擎的事件循环中调用。"""
    engine = container.persistence.db_engine()
    await dispose_engine(engine)
    container.shutdown_resources()
    logger.debug("容器资源已释放")
