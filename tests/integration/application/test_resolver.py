# tests/integration/application/test_resolver.py
"""单键解析（回退、插值、永不失败）与按类别读取的集成测试。"""

import pytest
from pytest_mock import MockerFixture

from locale_hub.application.coordinator import Coordinator
from locale_hub.containers import ApplicationContainer
from locale_hub.infrastructure.uow import UowFactory

from tests.helpers.factories import create_approved, create_key, create_published


@pytest.mark.asyncio
async def test_resolve_requested_locale_first(
    coordinator: Coordinator, uow_factory: UowFactory
) -> None:
    await create_key(uow_factory, "common.save")
    await create_published(coordinator, "common.save", "en", "Save")
    await create_published(coordinator, "common.save", "fr", "Enregistrer")

    assert await coordinator.resolve("common.save", "fr") == "Enregistrer"


@pytest.mark.asyncio
async def test_resolve_falls_back_then_returns_key(
    coordinator: Coordinator, uow_factory: UowFactory
) -> None:
    await create_key(uow_factory, "common.save")
    await create_published(coordinator, "common.save", "en", "Save")
    await create_published(coordinator, "common.save", "th", "บันทึก")

    # 默认回退到 en
    assert await coordinator.resolve("common.save", "fr") == "Save"
    # 缺失语言的解析结果等于直接解析回退语言
    assert await coordinator.resolve("common.save", "fr", fallback_locale="th") == (
        await coordinator.resolve("common.save", "th", fallback_locale="th")
    )
    # 显式指定回退语言
    assert await coordinator.resolve("common.save", "fr", fallback_locale="th") == "บันทึก"
    # 两个语言都没有时退化为键名
    assert await coordinator.resolve("common.missing", "fr") == "common.missing"


@pytest.mark.asyncio
async def test_unpublished_translations_are_invisible(
    coordinator: Coordinator, uow_factory: UowFactory
) -> None:
    await create_key(uow_factory, "common.save")
    await create_approved(coordinator, "common.save", "fr", "Enregistrer")
    assert await coordinator.resolve("common.save", "fr") == "common.save"


@pytest.mark.asyncio
async def test_empty_key_returns_placeholder(coordinator: Coordinator) -> None:
    assert await coordinator.resolve("", "en") == "[missing key]"


@pytest.mark.asyncio
async def test_resolve_interpolates_declared_variables_only(
    coordinator: Coordinator, uow_factory: UowFactory
) -> None:
    await create_key(uow_factory, "common.greeting", interpolation_vars=["name"])
    await create_published(
        coordinator, "common.greeting", "en", "Hello {name}, you have {count} items"
    )

    resolved = await coordinator.resolve(
        "common.greeting", "en", {"name": "Ana", "count": 3}
    )
    assert resolved == "Hello Ana, you have {count} items"


@pytest.mark.asyncio
async def test_icu_message_takes_precedence(
    coordinator: Coordinator, uow_factory: UowFactory
) -> None:
    await create_key(uow_factory, "cart.items", interpolation_vars=["count"])
    await create_published(
        coordinator,
        "cart.items",
        "en",
        "{count} items",
        icu_message="{count} item(s) in cart",
    )
    assert await coordinator.resolve("cart.items", "en", {"count": 2}) == "2 item(s) in cart"


@pytest.mark.asyncio
async def test_resolve_never_raises(
    app_container: ApplicationContainer, mocker: MockerFixture
) -> None:
    resolver = app_container.services.translation_resolver()
    mocker.patch.object(resolver, "_lookup", side_effect=RuntimeError("db down"))

    assert await resolver.resolve("common.save", "fr") == "common.save"


@pytest.mark.asyncio
async def test_resolve_records_usage_for_requested_locale(
    coordinator: Coordinator, uow_factory: UowFactory
) -> None:
    await create_key(uow_factory, "common.save")
    await create_published(coordinator, "common.save", "en", "Save")

    await coordinator.resolve("common.save", "fr")
    await coordinator.resolve("common.save", "fr")

    usage = await coordinator.get_usage("common.save", "fr")
    assert usage is not None
    assert usage.view_count == 2
    assert usage.load_samples == 2
    assert await coordinator.get_usage("common.save", "en") is None


@pytest.mark.asyncio
async def test_usage_failure_does_not_break_resolution(
    app_container: ApplicationContainer,
    uow_factory: UowFactory,
    mocker: MockerFixture,
) -> None:
    coordinator = app_container.services.coordinator()
    await create_key(uow_factory, "common.save")
    await create_published(coordinator, "common.save", "en", "Save")

    recorder = app_container.services.usage_service()
    mocker.patch.object(recorder, "record_usage", side_effect=RuntimeError("boom"))

    assert await coordinator.resolve("common.save", "en") == "Save"


@pytest.mark.asyncio
async def test_get_by_category(coordinator: Coordinator, uow_factory: UowFactory) -> None:
    await create_key(uow_factory, "common.save")
    await create_key(uow_factory, "common.cancel")
    await create_key(uow_factory, "errors.timeout", category="errors")
    await create_published(coordinator, "common.save", "fr", "Enregistrer")
    await create_published(coordinator, "common.cancel", "fr", "Annuler")
    await create_published(coordinator, "errors.timeout", "fr", "Expiré")
    await create_published(coordinator, "common.save", "en", "Save")

    entries = await coordinator.get_by_category("common", "fr")
    assert [(e.key_name, e.value) for e in entries] == [
        ("common.cancel", "Annuler"),
        ("common.save", "Enregistrer"),
    ]
    # 按类别读取不做语言回退
    assert await coordinator.get_by_category("errors", "th") == []
