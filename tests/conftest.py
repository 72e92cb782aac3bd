# tests/conftest.py
"""
项目全局共享的测试 Fixtures。

核心 Fixtures:
- test_config: 指向临时 SQLite 文件库的配置对象。
- clock: 可手动推进的假时钟，注入到所有服务。
- app_container: 完全装配好的 DI 容器，数据表已创建。
- coordinator / uow_factory: 从容器中获取的门面与 UoW 工厂。
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from dependency_injector import providers
from pytest_mock import MockerFixture
from rich.console import Console

from locale_hub.application.coordinator import Coordinator
from locale_hub.bootstrap import create_container, shutdown_container
from locale_hub.config import LocaleHubConfig
from locale_hub.containers import ApplicationContainer
from locale_hub.infrastructure.db import create_schema
from locale_hub.infrastructure.uow import UowFactory

from tests.helpers.factories import sqlite_url
from tests.helpers.fakes import FakeClock


@pytest.fixture(scope="session", autouse=True)
def disable_rich_colors_for_tests(
    session_mocker: MockerFixture,
) -> Generator[None, None, None]:
    """全局禁用 rich 库的颜色输出，以确保测试结果的确定性。"""
    original_init = Console.__init__

    def new_init(self: Console, *args: Any, **kwargs: Any) -> None:
        kwargs["force_terminal"] = False
        kwargs["color_system"] = None
        original_init(self, *args, **kwargs)

    session_mocker.patch("rich.console.Console.__init__", new=new_init)
    yield


@pytest.fixture
def test_config(tmp_path: Path) -> LocaleHubConfig:
    """每个测试一个独立的 SQLite 文件库。"""
    return LocaleHubConfig(
        database={"url": sqlite_url(tmp_path / "locale_hub_test.db")},
        logging={"level": "WARNING", "format": "json"},
        locales={"default_locale": "en", "supported": ["en", "fr", "th"]},
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest_asyncio.fixture
async def app_container(
    test_config: LocaleHubConfig, clock: FakeClock
) -> AsyncGenerator[ApplicationContainer, None]:
    """提供一个完全初始化的 DI 容器实例，并按 ORM 元数据建好表。"""
    container = create_container(test_config, service_name="locale-hub-test")
    container.services.clock.override(providers.Object(clock))

    await create_schema(container.persistence.db_engine())
    try:
        yield container
    finally:
        await shutdown_container(container)


@pytest.fixture
def uow_factory(app_container: ApplicationContainer) -> UowFactory:
    """从 DI 容器获取 UoW 工厂。"""
    return app_container.persistence.uow_factory


@pytest.fixture
def coordinator(app_container: ApplicationContainer) -> Coordinator:
    """从 DI 容器获取 Coordinator 实例。"""
    return app_container.services.coordinator()
