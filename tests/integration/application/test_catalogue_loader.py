# tests/integration/application/test_catalogue_loader.py
"""JSON 目录导入的集成测试。"""

import pytest
from pydantic import ValidationError

from locale_hub.application.coordinator import Coordinator
from locale_hub.core.exceptions import KeyCollisionError, UnsupportedLocaleError
from locale_hub.infrastructure.uow import UowFactory

from tests.helpers.factories import catalogue_document


@pytest.mark.asyncio
async def test_load_publishes_every_value(
    coordinator: Coordinator, uow_factory: UowFactory
) -> None:
    report = await coordinator.load_catalogue(catalogue_document())

    assert report.keys_upserted == 2
    assert report.drafts_created == 4
    assert len(report.published) == 4
    assert report.failed == []
    assert report.missing_keys == []

    assert await coordinator.get_cached_bundle("fr") == {
        "common": {"greeting": "Bonjour {name}", "save": "Enregistrer"}
    }
    assert await coordinator.resolve("common.greeting", "fr", {"name": "Lea"}) == (
        "Bonjour Lea"
    )

    async with uow_factory() as uow:
        key = await uow.keys.get_by_name("common.greeting")
    assert key.interpolation_vars == ["name"]


@pytest.mark.asyncio
async def test_reload_skips_unchanged_values(coordinator: Coordinator) -> None:
    await coordinator.load_catalogue(catalogue_document())
    before = await coordinator.get_cached_bundle("en")

    doc = catalogue_document()
    doc["translations"]["en"]["common.save"] = "Save changes"
    report = await coordinator.load_catalogue(doc)

    assert report.skipped == 3
    assert report.drafts_created == 1
    assert len(report.published) == 1
    assert report.invalidated >= 1

    after = await coordinator.get_cached_bundle("en")
    assert before["common"]["save"] == "Save"
    assert after["common"]["save"] == "Save changes"


@pytest.mark.asyncio
async def test_translations_for_unknown_keys_are_reported(
    coordinator: Coordinator,
) -> None:
    doc = catalogue_document()
    doc["translations"]["en"]["common.unknown"] = "Unknown"
    report = await coordinator.load_catalogue(doc)

    assert report.missing_keys == ["common.unknown"]
    assert len(report.published) == 4


@pytest.mark.asyncio
async def test_icu_message_is_imported(coordinator: Coordinator) -> None:
    doc = catalogue_document()
    doc["keys"].append(
        {"key_name": "cart.items", "category": "cart", "interpolation_vars": ["count"]}
    )
    doc["translations"]["en"]["cart.items"] = {
        "value": "{count} items",
        "icu_message": "{count, plural, one {# item} other {# items}}",
    }
    await coordinator.load_catalogue(doc)

    [entry] = await coordinator.get_by_category("cart", "en")
    assert entry.icu_message.startswith("{count, plural")
    bundle = await coordinator.get_cached_bundle("en")
    # 语言包只携带纯文本值
    assert bundle["cart"]["items"] == "{count} items"


@pytest.mark.asyncio
async def test_invalid_documents_are_rejected(coordinator: Coordinator) -> None:
    duplicate = catalogue_document(
        keys=[
            {"key_name": "common.save", "category": "common"},
            {"key_name": "common.save", "category": "common"},
        ]
    )
    with pytest.raises(ValidationError):
        await coordinator.load_catalogue(duplicate)

    doc = catalogue_document()
    doc["translations"]["de"] = {"common.save": "Speichern"}
    with pytest.raises(UnsupportedLocaleError):
        await coordinator.load_catalogue(doc)

    assert await coordinator.get_cached_bundle("en") == {}


@pytest.mark.asyncio
async def test_keys_sharing_a_bundle_slot_are_rejected(
    coordinator: Coordinator, uow_factory: UowFactory
) -> None:
    clashing = catalogue_document(
        keys=[
            {"key_name": "title", "category": "common"},
            {"key_name": "title.value", "category": "common"},
        ],
        translations={"en": {"title": "Top", "title.value": "Nested"}},
    )
    with pytest.raises(ValidationError):
        await coordinator.load_catalogue(clashing)

    first = catalogue_document(
        keys=[{"key_name": "title", "category": "common"}],
        translations={"en": {"title": "Top"}},
    )
    await coordinator.load_catalogue(first)

    second = catalogue_document(
        keys=[{"key_name": "title.value", "category": "common"}],
        translations={"en": {"title.value": "Nested"}},
    )
    with pytest.raises(KeyCollisionError):
        await coordinator.load_catalogue(second)

    async with uow_factory() as uow:
        assert await uow.keys.get_by_name("title.value") is None
    assert await coordinator.get_cached_bundle("en") == {"title": {"value": "Top"}}
