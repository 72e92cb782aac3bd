# tests/integration/application/test_search_service.py
"""已发布翻译全文检索的集成测试。"""

import pytest
import pytest_asyncio

from locale_hub.application.coordinator import Coordinator
from locale_hub.infrastructure.uow import UowFactory

from tests.helpers.factories import create_approved, create_key, create_published


@pytest_asyncio.fixture
async def seeded(coordinator: Coordinator, uow_factory: UowFactory) -> Coordinator:
    await create_key(uow_factory, "common.save", description="Save button label")
    await create_key(uow_factory, "common.save_all")
    await create_key(uow_factory, "errors.save_failed", category="errors")
    await create_key(uow_factory, "common.cancel")
    await create_published(coordinator, "common.save", "en", "Save")
    await create_published(coordinator, "common.save_all", "en", "Save all changes")
    await create_published(
        coordinator, "errors.save_failed", "en", "Could not save your changes"
    )
    await create_published(coordinator, "common.cancel", "en", "Cancel")
    await create_approved(coordinator, "common.cancel", "en", "Save draft cancel")
    return coordinator


@pytest.mark.asyncio
async def test_search_ranks_matches(seeded: Coordinator) -> None:
    hits = await seeded.search("save", "en")

    keys = [h.key_name for h in hits]
    assert set(keys) == {"common.save", "common.save_all", "errors.save_failed"}
    # 值完全等于查询词的那一条排在最前
    assert keys[0] == "common.save"
    assert all(h.rank > 0 for h in hits)
    assert [h.rank for h in hits] == sorted((h.rank for h in hits), reverse=True)


@pytest.mark.asyncio
async def test_search_ignores_unpublished_rows(seeded: Coordinator) -> None:
    hits = await seeded.search("draft", "en")
    assert hits == []


@pytest.mark.asyncio
async def test_search_filters_categories_and_limits(seeded: Coordinator) -> None:
    errors_only = await seeded.search("save", "en", categories=["errors"])
    assert [h.key_name for h in errors_only] == ["errors.save_failed"]

    limited = await seeded.search("save", "en", limit=1)
    assert len(limited) == 1
    assert await seeded.search("save", "en", limit=0) == []


@pytest.mark.asyncio
async def test_search_other_locale_and_blank_query(seeded: Coordinator) -> None:
    assert await seeded.search("save", "fr") == []
    assert await seeded.search("   ", "en") == []


@pytest.mark.asyncio
async def test_search_folds_non_ascii_case(
    coordinator: Coordinator, uow_factory: UowFactory
) -> None:
    await create_key(uow_factory, "common.edit", description="Écran du profil")
    await create_key(uow_factory, "common.street")
    await create_published(coordinator, "common.edit", "fr", "Éditer le profil")
    await create_published(coordinator, "common.street", "fr", "Grande Straße")

    for query in ("éditer", "ÉDITER", "écran"):
        hits = await coordinator.search(query, "fr")
        assert [h.key_name for h in hits] == ["common.edit"], query

    # casefold 把 "ß" 折叠为 "ss"
    hits = await coordinator.search("STRASSE", "fr")
    assert [h.key_name for h in hits] == ["common.street"]
