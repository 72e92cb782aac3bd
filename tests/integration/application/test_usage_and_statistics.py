# tests/integration/application/test_usage_and_statistics.py
"""使用统计合并与按语言汇总报表的集成测试。"""

import asyncio
from datetime import timedelta

import pytest

from locale_hub.application.coordinator import Coordinator
from locale_hub.infrastructure.uow import UowFactory

from tests.helpers.factories import create_key, create_published
from tests.helpers.fakes import FakeClock


@pytest.mark.asyncio
async def test_record_usage_merges_into_daily_row(
    coordinator: Coordinator, uow_factory: UowFactory, clock: FakeClock
) -> None:
    await create_key(uow_factory, "common.save")

    for sample in (10.0, 20.0, None, 30.0):
        await coordinator.record_usage("common.save", "fr", sample)

    usage = await coordinator.get_usage("common.save", "fr")
    assert usage.view_count == 4
    assert usage.total_requests == 4
    assert usage.load_samples == 3
    assert usage.avg_load_time_ms == pytest.approx(20.0)
    assert usage.recorded_date == clock().date()


@pytest.mark.asyncio
async def test_concurrent_record_usage_loses_no_increments(
    coordinator: Coordinator, uow_factory: UowFactory
) -> None:
    await create_key(uow_factory, "common.save")
    samples = [float(n) for n in range(1, 21)]

    await asyncio.gather(
        *(coordinator.record_usage("common.save", "fr", s) for s in samples)
    )

    usage = await coordinator.get_usage("common.save", "fr")
    assert usage.view_count == 20
    assert usage.total_requests == 20
    assert usage.load_samples == 20
    assert usage.avg_load_time_ms == pytest.approx(sum(samples) / len(samples))


@pytest.mark.asyncio
async def test_usage_is_bucketed_per_utc_day(
    coordinator: Coordinator, uow_factory: UowFactory, clock: FakeClock
) -> None:
    await create_key(uow_factory, "common.save")
    today = clock().date()

    await coordinator.record_usage("common.save", "fr", 5.0)
    clock.advance(days=1)
    await coordinator.record_usage("common.save", "fr", 15.0)

    yesterday_usage = await coordinator.get_usage("common.save", "fr", today)
    today_usage = await coordinator.get_usage("common.save", "fr")
    assert yesterday_usage.view_count == 1
    assert today_usage.view_count == 1
    assert today_usage.recorded_date == today + timedelta(days=1)


@pytest.mark.asyncio
async def test_unknown_key_is_ignored(coordinator: Coordinator) -> None:
    await coordinator.record_usage("missing.key", "fr", 1.0)
    assert await coordinator.get_usage("missing.key", "fr") is None


@pytest.mark.asyncio
async def test_negative_load_time_is_rejected(
    coordinator: Coordinator, uow_factory: UowFactory
) -> None:
    await create_key(uow_factory, "common.save")
    with pytest.raises(ValueError):
        await coordinator.record_usage("common.save", "fr", -1.0)


@pytest.mark.asyncio
async def test_statistics_per_locale(
    coordinator: Coordinator, uow_factory: UowFactory
) -> None:
    for name in ("common.save", "common.cancel", "common.close", "common.open"):
        await create_key(uow_factory, name)
    await create_key(uow_factory, "legacy.key", is_active=False)

    await create_published(coordinator, "common.save", "fr", "Enregistrer")
    await create_published(coordinator, "common.cancel", "fr", "Annuler")
    await create_published(coordinator, "common.close", "fr", "Fermer")
    await coordinator.create_draft("common.open", "fr", "Ouvrir")
    await create_published(coordinator, "common.save", "en", "Save")

    await coordinator.record_usage("common.save", "fr", 10.0)
    await coordinator.record_usage("common.save", "fr", 20.0)
    await coordinator.record_usage("common.cancel", "fr")

    stats = {s.locale: s for s in await coordinator.get_statistics()}
    assert list(stats) == ["en", "fr", "th"]

    fr = stats["fr"]
    assert fr.total_keys == 4
    assert fr.published == 3
    assert fr.draft == 1
    assert fr.completion_percentage == 75.0
    assert fr.total_views == 3
    assert fr.avg_load_time_ms == pytest.approx(15.0)

    assert stats["en"].completion_percentage == 25.0
    assert stats["th"].published == 0
    assert stats["th"].avg_load_time_ms is None


@pytest.mark.asyncio
async def test_statistics_single_locale_and_window(
    coordinator: Coordinator, uow_factory: UowFactory, clock: FakeClock
) -> None:
    await create_key(uow_factory, "common.save")
    await coordinator.record_usage("common.save", "fr")
    clock.advance(days=10)
    await coordinator.record_usage("common.save", "fr")

    [recent] = await coordinator.get_statistics("fr", days_back=5)
    assert recent.locale == "fr"
    assert recent.total_views == 1

    [wide] = await coordinator.get_statistics("fr", days_back=30)
    assert wide.total_views == 2

    with pytest.raises(ValueError):
        await coordinator.get_statistics("fr", days_back=-1)
