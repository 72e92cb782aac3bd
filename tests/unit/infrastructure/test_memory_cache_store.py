# tests/unit/infrastructure/test_memory_cache_store.py
"""测试内存缓存存储的版本号、作废与竞态保护语义。"""

from datetime import datetime, timedelta, timezone

import pytest

from locale_hub.core.types import CacheEntry
from locale_hub.infrastructure.cache import MemoryCacheStore

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def _entry(locale: str = "en", namespace: str | None = None, **kwargs) -> CacheEntry:
    return CacheEntry(
        locale=locale,
        namespace=namespace,
        payload=kwargs.pop("payload", {"common": {"save": "Save"}}),
        version=kwargs.pop("version", 1),
        generated_at=NOW,
        expires_at=NOW + timedelta(hours=1),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_save_then_get_returns_copy() -> None:
    store = MemoryCacheStore()
    await store.save(_entry(), generation_started_at=NOW)

    fetched = await store.get("en", None)
    assert fetched is not None
    assert fetched.is_hit(NOW)
    fetched.payload["common"]["save"] = "mutated"

    again = await store.get("en", None)
    assert again.payload["common"]["save"] == "Save"
    assert await store.get("fr", None) is None


@pytest.mark.asyncio
async def test_version_increases_on_overwrite() -> None:
    store = MemoryCacheStore()
    first = await store.save(_entry(version=1), generation_started_at=NOW)
    second = await store.save(_entry(version=1), generation_started_at=NOW)
    assert second.version > first.version


@pytest.mark.asyncio
async def test_invalidation_after_generation_start_wins() -> None:
    store = MemoryCacheStore()
    await store.save(_entry(), generation_started_at=NOW)

    started = NOW + timedelta(seconds=1)
    await store.invalidate("en", None, "published", at=NOW + timedelta(seconds=2))
    saved = await store.save(_entry(), generation_started_at=started)

    assert saved.is_valid is False
    assert saved.invalidation_reason == "published"


@pytest.mark.asyncio
async def test_invalidation_before_generation_start_is_cleared() -> None:
    store = MemoryCacheStore()
    await store.save(_entry(), generation_started_at=NOW)
    await store.invalidate("en", None, "manual", at=NOW + timedelta(seconds=1))

    saved = await store.save(_entry(), generation_started_at=NOW + timedelta(seconds=5))
    assert saved.is_valid is True
    assert saved.invalidated_at is None


@pytest.mark.asyncio
async def test_invalidate_scopes() -> None:
    store = MemoryCacheStore()
    for locale, ns in [("en", None), ("en", "common"), ("en", "errors"), ("fr", None)]:
        await store.save(_entry(locale, ns), generation_started_at=NOW)

    # 命名空间作废同时命中“全部命名空间”的语言包
    assert await store.invalidate("en", "common", "r", at=NOW) == 2
    assert (await store.get("en", "errors")).is_valid is True
    assert (await store.get("fr", None)).is_valid is True

    assert await store.invalidate(None, None, "all", at=NOW) == 4
    assert not (await store.get("fr", None)).is_valid


@pytest.mark.asyncio
async def test_clear() -> None:
    store = MemoryCacheStore()
    await store.save(_entry(), generation_started_at=NOW)
    store.clear()
    assert await store.get("en", None) is None
