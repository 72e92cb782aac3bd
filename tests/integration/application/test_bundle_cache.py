# tests/integration/application/test_bundle_cache.py
"""语言包缓存读取路径的集成测试，覆盖数据库与内存两种存储。"""

import asyncio
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from locale_hub.application.coordinator import Coordinator
from locale_hub.config import LocaleHubConfig
from locale_hub.containers import ApplicationContainer
from locale_hub.infrastructure.uow import UowFactory

from tests.helpers.factories import create_key, create_published, sqlite_url
from tests.helpers.fakes import FakeClock


@pytest.fixture(params=["database", "memory"])
def test_config(request: pytest.FixtureRequest, tmp_path: Path) -> LocaleHubConfig:
    return LocaleHubConfig(
        database={"url": sqlite_url(tmp_path / "bundle_cache.db")},
        logging={"level": "WARNING", "format": "json"},
        cache={"ttl_seconds": 3600, "store": request.param},
        locales={"default_locale": "en", "supported": ["en", "fr", "th"]},
    )


async def _seed(coordinator: Coordinator, uow_factory: UowFactory) -> None:
    await create_key(uow_factory, "common.save", namespace="app")
    await create_key(uow_factory, "errors.network.timeout", category="errors")
    await create_published(coordinator, "common.save", "fr", "Enregistrer")
    await create_published(coordinator, "errors.network.timeout", "fr", "Délai dépassé")


@pytest.mark.asyncio
async def test_bundle_shape(coordinator: Coordinator, uow_factory: UowFactory) -> None:
    await _seed(coordinator, uow_factory)

    bundle = await coordinator.get_cached_bundle("fr")
    assert bundle == {
        "common": {"save": "Enregistrer"},
        "errors": {"network.timeout": "Délai dépassé"},
    }
    assert await coordinator.get_cached_bundle("th") == {}


@pytest.mark.asyncio
async def test_repeated_reads_hit_the_cache(
    app_container: ApplicationContainer, uow_factory: UowFactory
) -> None:
    coordinator = app_container.services.coordinator()
    bundles = app_container.services.bundle_cache_service()
    await _seed(coordinator, uow_factory)

    first = await bundles.get_entry("fr")
    second = await bundles.get_entry("fr")
    assert second.version == first.version
    assert second.generated_at == first.generated_at
    assert second.payload == first.payload


@pytest.mark.asyncio
async def test_publish_invalidates_cached_bundle(
    coordinator: Coordinator, uow_factory: UowFactory
) -> None:
    await _seed(coordinator, uow_factory)
    assert (await coordinator.get_cached_bundle("fr"))["common"]["save"] == "Enregistrer"

    await create_published(coordinator, "common.save", "fr", "Sauvegarder")

    assert (await coordinator.get_cached_bundle("fr"))["common"]["save"] == "Sauvegarder"


@pytest.mark.asyncio
async def test_publish_only_invalidates_its_locale(
    app_container: ApplicationContainer, uow_factory: UowFactory
) -> None:
    coordinator = app_container.services.coordinator()
    bundles = app_container.services.bundle_cache_service()
    await _seed(coordinator, uow_factory)
    en_entry = await bundles.get_entry("en")

    await create_published(coordinator, "common.save", "fr", "Sauvegarder")

    assert (await bundles.get_entry("en")).version == en_entry.version


@pytest.mark.asyncio
async def test_expired_entry_is_regenerated(
    app_container: ApplicationContainer, uow_factory: UowFactory, clock: FakeClock
) -> None:
    coordinator = app_container.services.coordinator()
    bundles = app_container.services.bundle_cache_service()
    await _seed(coordinator, uow_factory)

    first = await bundles.get_entry("fr")
    clock.advance(seconds=3599)
    assert (await bundles.get_entry("fr")).version == first.version

    clock.advance(seconds=2)
    refreshed = await bundles.get_entry("fr")
    assert refreshed.version > first.version
    assert refreshed.generated_at > first.generated_at


@pytest.mark.asyncio
async def test_manual_invalidation(
    app_container: ApplicationContainer, uow_factory: UowFactory
) -> None:
    coordinator = app_container.services.coordinator()
    bundles = app_container.services.bundle_cache_service()
    await _seed(coordinator, uow_factory)
    await coordinator.warm_cache(["en", "fr"])

    assert await coordinator.invalidate(locale="fr", reason="translator fix") == 1
    store = app_container.cache.cache_store()
    entry = await store.get("fr", None)
    assert entry.is_valid is False
    assert entry.invalidation_reason == "translator fix"
    assert (await store.get("en", None)).is_valid

    # 作废不删除条目，下一次读取才重建
    rebuilt = await bundles.get_entry("fr")
    assert rebuilt.is_valid
    assert rebuilt.version > entry.version
    assert rebuilt.generated_at > entry.invalidated_at

    assert await coordinator.invalidate() == 2


@pytest.mark.asyncio
async def test_namespace_scoped_bundles(
    app_container: ApplicationContainer, uow_factory: UowFactory
) -> None:
    coordinator = app_container.services.coordinator()
    await _seed(coordinator, uow_factory)

    assert await coordinator.get_cached_bundle("fr", "app") == {
        "common": {"save": "Enregistrer"}
    }
    await coordinator.get_cached_bundle("fr")

    # 命名空间作废同时命中该语言的全量语言包
    assert await coordinator.invalidate(locale="fr", namespace="app") == 2
    assert await coordinator.invalidate(locale="fr", namespace="other") == 1


@pytest.mark.asyncio
async def test_warm_cache_defaults_to_supported_locales(
    coordinator: Coordinator, uow_factory: UowFactory
) -> None:
    await _seed(coordinator, uow_factory)
    entries = await coordinator.warm_cache()
    assert [e.locale for e in entries] == ["en", "fr", "th"]
    assert all(e.is_valid for e in entries)


@pytest.mark.asyncio
async def test_regeneration_is_idempotent(
    app_container: ApplicationContainer, uow_factory: UowFactory
) -> None:
    coordinator = app_container.services.coordinator()
    generator = app_container.services.cache_generator()
    await _seed(coordinator, uow_factory)

    first = await generator.generate("fr")
    second = await generator.generate("fr")
    assert second.payload == first.payload
    assert second.version > first.version


@pytest.mark.asyncio
async def test_concurrent_misses_share_one_generation(
    app_container: ApplicationContainer,
    uow_factory: UowFactory,
    mocker: MockerFixture,
) -> None:
    coordinator = app_container.services.coordinator()
    generator = app_container.services.cache_generator()
    await _seed(coordinator, uow_factory)
    original_generate = generator.generate

    async def slow_generate(*args, **kwargs):
        # 让首个重建保持进行中，直到所有调用方都已完成缓存读取
        await asyncio.sleep(0.2)
        return await original_generate(*args, **kwargs)

    generate = mocker.patch.object(generator, "generate", side_effect=slow_generate)

    bundles = await asyncio.gather(
        *(coordinator.get_cached_bundle("fr") for _ in range(10))
    )

    assert generate.await_count == 1
    assert all(b == bundles[0] for b in bundles)
    assert bundles[0]["common"] == {"save": "Enregistrer"}
