"""
Tests for the HTTP client and its category cache.
"""

import json

import httpx
import pytest

from client.cache import CACHE_KEY, CategoryCache, JsonFileStore, MemoryStore
from client.service import TutorialApiError, TutorialService
from core.config import DEFAULT_CATEGORIES


class FakeClock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now


def _api(app, **kwargs):
    return TutorialService(
        "http://testserver/api",
        transport=httpx.ASGITransport(app=app),
        **kwargs,
    )


class TestAgainstApp:
    @pytest.mark.asyncio
    async def test_crud_round_trip(self, app):
        async with _api(app) as api:
            created = await api.create({"title": "Intro to X", "category": 1})
            fetched = await api.get(created["id"])
            updated = await api.update(created["id"], {"published": True})
            published = await api.find_all_published()
            removed = await api.remove(created["id"])

        assert fetched["title"] == "Intro to X"
        assert updated == {"message": "Tutorial was updated successfully."}
        assert [t["id"] for t in published] == [created["id"]]
        assert removed == {"message": "Tutorial was deleted successfully!"}

    @pytest.mark.asyncio
    async def test_errors_carry_status_and_message(self, app):
        async with _api(app) as api:
            with pytest.raises(TutorialApiError) as excinfo:
                await api.create({})

        assert excinfo.value.status_code == 400
        assert excinfo.value.message == "Content can not be empty!"

    @pytest.mark.asyncio
    async def test_remove_all_fails_by_default(self, app):
        async with _api(app) as api:
            with pytest.raises(TutorialApiError) as excinfo:
                await api.remove_all()

        assert excinfo.value.status_code == 500

    @pytest.mark.asyncio
    async def test_counters_and_filters(self, app):
        async with _api(app) as api:
            created = await api.create({"title": "React18", "difficulty": "medium"})
            await api.increment_view_count(created["id"])
            await api.increment_likes(created["id"])
            await api.increment_likes(created["id"])
            await api.decrement_likes(created["id"])
            by_title = await api.find_by_title("react")
            by_level = await api.find_by_difficulty("intermediate")
            record = await api.get(created["id"])

        assert record["viewCount"] == 1
        assert record["likes"] == 1
        assert [t["id"] for t in by_title] == [created["id"]]
        assert [t["id"] for t in by_level] == [created["id"]]

    @pytest.mark.asyncio
    async def test_categories_fetched_then_cached(self, app):
        clock = FakeClock()
        cache = CategoryCache(MemoryStore(), clock=clock)

        async with _api(app, cache=cache) as api:
            first = await api.get_categories()

        assert first == list(DEFAULT_CATEGORIES)
        assert cache.is_valid()
        assert cache.read() == list(DEFAULT_CATEGORIES)


def _counting_transport(responses):
    """
    Serve queued responses (or exceptions) for the categories endpoint.
    """
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        item = responses.pop(0)
        if isinstance(item, Exception):
            raise item
        status_code, payload = item
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler), calls


class TestCategoryCaching:
    @pytest.mark.asyncio
    async def test_valid_cache_skips_network(self):
        clock = FakeClock()
        cache = CategoryCache(MemoryStore(), clock=clock)
        cache.write([{"id": 1, "category": "Cached"}])
        transport, calls = _counting_transport([(200, [{"id": 1, "category": "Fresh"}])])

        async with TutorialService("http://api.test/api", cache=cache, transport=transport) as api:
            result = await api.get_categories()

        assert result == [{"id": 1, "category": "Cached"}]
        assert calls == []

    @pytest.mark.asyncio
    async def test_expired_cache_is_refreshed(self):
        clock = FakeClock()
        cache = CategoryCache(MemoryStore(), clock=clock)
        cache.write([{"id": 1, "category": "Old"}])
        clock.now += 24 * 60 * 60 + 1
        transport, calls = _counting_transport([(200, [{"id": 1, "category": "New"}])])

        async with TutorialService("http://api.test/api", cache=cache, transport=transport) as api:
            result = await api.get_categories()

        assert result == [{"id": 1, "category": "New"}]
        assert len(calls) == 1
        assert calls[0].url.path == "/api/tutorials/categories"
        assert cache.is_valid()
        assert cache.read() == [{"id": 1, "category": "New"}]

    @pytest.mark.asyncio
    async def test_failure_falls_back_to_stale_cache(self):
        clock = FakeClock()
        cache = CategoryCache(MemoryStore(), clock=clock)
        cache.write([{"id": 2, "category": "Stale"}])
        clock.now += 48 * 60 * 60
        transport, _ = _counting_transport([httpx.ConnectError("down")])

        async with TutorialService("http://api.test/api", cache=cache, transport=transport) as api:
            result = await api.get_categories()

        assert result == [{"id": 2, "category": "Stale"}]

    @pytest.mark.asyncio
    async def test_failure_without_cache_returns_empty_list(self):
        transport, _ = _counting_transport([(500, {"message": "nope"})])

        async with TutorialService("http://api.test/api", transport=transport) as api:
            result = await api.get_categories()

        assert result == []

    @pytest.mark.asyncio
    async def test_empty_result_does_not_overwrite_cache(self):
        clock = FakeClock()
        cache = CategoryCache(MemoryStore(), clock=clock)
        cache.write([{"id": 1, "category": "Kept"}])
        clock.now += 25 * 60 * 60
        transport, _ = _counting_transport([(200, [])])

        async with TutorialService("http://api.test/api", cache=cache, transport=transport) as api:
            result = await api.get_categories()

        assert result == []
        assert cache.read() == [{"id": 1, "category": "Kept"}]
        assert not cache.is_valid()


class TestCategoryCache:
    def test_entry_layout(self):
        store = MemoryStore()
        cache = CategoryCache(store, clock=FakeClock(100.0), ttl_s=50)

        cache.write([{"id": 1, "category": "A"}])

        entry = json.loads(store.get(CACHE_KEY))
        assert entry == {"expiry": 150.0, "data": [{"id": 1, "category": "A"}]}

    def test_missing_and_corrupt_entries(self):
        store = MemoryStore()
        cache = CategoryCache(store)

        assert not cache.is_valid()
        assert cache.read() is None

        store.set(CACHE_KEY, "{not json")
        assert not cache.is_valid()
        assert cache.read() is None

    def test_expiry_boundary(self):
        clock = FakeClock(0.0)
        cache = CategoryCache(MemoryStore(), clock=clock, ttl_s=10)
        cache.write([])

        clock.now = 9.999
        assert cache.is_valid()
        clock.now = 10.0
        assert not cache.is_valid()

    def test_json_file_store_persists(self, tmp_path):
        path = str(tmp_path / "cache" / "client.json")
        CategoryCache(JsonFileStore(path), clock=FakeClock()).write([{"id": 1, "category": "A"}])

        reloaded = CategoryCache(JsonFileStore(path), clock=FakeClock())

        assert reloaded.is_valid()
        assert reloaded.read() == [{"id": 1, "category": "A"}]
