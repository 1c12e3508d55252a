"""Unit tests for the persistence layer (mocked Playwright request context)."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError

from favstore.config import ApiSettings
from favstore.core.errors import BackendError
from favstore.core.types import Resource
from favstore.persistence.api_backend import ApiBackend
from favstore.persistence.base import SyncResult, attempt, result_from_gather
from favstore.persistence.cache import TTLCache
from favstore.persistence.memory import InMemoryBackend


def make_response(payload=None, status=200) -> MagicMock:
    response = MagicMock()
    response.status = status
    response.ok = 200 <= status < 300
    response.json = AsyncMock(return_value=payload)
    return response


def make_context(*responses) -> AsyncMock:
    context = AsyncMock()
    context.fetch = AsyncMock(side_effect=list(responses))
    context.dispose = AsyncMock()
    return context


def make_settings(**overrides) -> ApiSettings:
    values = {"api_url": "http://api.test", "user_id": 7, "timeout_ms": 1000.0, "retries": 3}
    values.update(overrides)
    return ApiSettings(**values)


# ---------------------------------------------------------------------------
# TTLCache
# ---------------------------------------------------------------------------

class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestTTLCache:
    def setup_method(self):
        self.clock = FakeClock()
        self.cache = TTLCache(10, clock=self.clock)

    def test_get_missing_returns_none(self):
        assert self.cache.get("k") is None

    def test_get_fresh_entry(self):
        self.cache.set("k", [1])
        self.clock.now = 9.5
        assert self.cache.get("k") == [1]

    def test_expired_entry_is_evicted(self):
        self.cache.set("k", [1])
        self.clock.now = 10.5
        assert self.cache.get("k") is None
        assert len(self.cache) == 0

    def test_delete_and_clear(self):
        self.cache.set("a", 1)
        self.cache.set("b", 2)
        self.cache.delete("a")
        self.cache.delete("missing")
        assert len(self.cache) == 1
        self.cache.clear()
        assert len(self.cache) == 0


# ---------------------------------------------------------------------------
# attempt / SyncResult
# ---------------------------------------------------------------------------

class TestAttempt:
    async def test_success(self):
        result = await attempt(AsyncMock(return_value=True)(), "add_favorite")
        assert result == SyncResult(ok=True, value=True)
        assert result.changed

    async def test_no_change(self):
        result = await attempt(AsyncMock(return_value=False)(), "add_favorite")
        assert result.ok and not result.changed

    async def test_failure_is_captured_and_logged(self, caplog):
        error = BackendError("down")
        with caplog.at_level(logging.WARNING, logger="favstore.persistence.base"):
            result = await attempt(AsyncMock(side_effect=error)(), "clear_all_favorites")
        assert result.ok is False
        assert result.error is error
        assert "clear_all_favorites" in caplog.text

    def test_result_from_gather(self):
        assert result_from_gather(True) == SyncResult(ok=True, value=True)
        error = ValueError("x")
        assert result_from_gather(error) == SyncResult(ok=False, error=error)


# ---------------------------------------------------------------------------
# InMemoryBackend
# ---------------------------------------------------------------------------

class TestInMemoryBackend:
    async def test_add_remove_clear(self):
        backend = InMemoryBackend(["https://a.com"])
        assert await backend.add_favorite("https://a.com") is False
        assert await backend.add_favorite("https://b.com") is True
        assert await backend.remove_favorite("https://a.com") is True
        assert await backend.remove_favorite("https://a.com") is False
        assert await backend.get_user_favorites() == ["https://b.com"]
        assert await backend.clear_all_favorites() is True
        assert await backend.clear_all_favorites() is False

    async def test_fail_switch(self):
        backend = InMemoryBackend(fail=True)
        with pytest.raises(BackendError):
            await backend.add_favorite("https://a.com")
        assert backend.calls == [("add_favorite", "https://a.com")]


# ---------------------------------------------------------------------------
# ApiBackend
# ---------------------------------------------------------------------------

class TestApiBackendWrites:
    async def test_add_favorite_posts_payload(self):
        context = make_context(make_response({"success": True, "message": "Added"}))
        backend = ApiBackend(context, make_settings())

        assert await backend.add_favorite("https://a.com") is True
        context.fetch.assert_awaited_once_with(
            "/api/favorites",
            method="POST",
            params=None,
            data={"url": "https://a.com", "displayName": "A", "userNotes": None, "userId": 7},
        )

    async def test_add_favorite_derives_display_name_from_url(self):
        context = make_context(make_response({"success": True}))
        backend = ApiBackend(context, make_settings())

        await backend.add_favorite("https://www.github.com/anthropics")
        _, kwargs = context.fetch.await_args
        assert kwargs["data"]["displayName"] == "GitHub - Anthropics"

    async def test_add_favorite_keeps_explicit_display_name(self):
        context = make_context(make_response({"success": True}))
        backend = ApiBackend(context, make_settings())

        await backend.add_favorite("https://a.com", display_name="Mine", user_notes="note")
        _, kwargs = context.fetch.await_args
        assert kwargs["data"]["displayName"] == "Mine"
        assert kwargs["data"]["userNotes"] == "note"

    async def test_remove_favorite_reports_no_change(self):
        context = make_context(make_response({"success": False, "message": "Not found"}))
        backend = ApiBackend(context, make_settings())

        assert await backend.remove_favorite("https://a.com") is False
        _, kwargs = context.fetch.await_args
        assert kwargs["method"] == "DELETE"
        assert kwargs["data"] == {"url": "https://a.com", "userId": 7}

    async def test_clear_all_favorites(self):
        context = make_context(make_response({"success": True}))
        backend = ApiBackend(context, make_settings())

        assert await backend.clear_all_favorites() is True
        args, kwargs = context.fetch.await_args
        assert args == ("/api/favorites/all",)
        assert kwargs["data"] == {"userId": 7}

    async def test_http_error_raises_backend_error_without_retry(self):
        context = make_context(make_response({"error": "boom"}, status=500))
        backend = ApiBackend(context, make_settings())

        with pytest.raises(BackendError) as excinfo:
            await backend.add_favorite("https://a.com")
        assert excinfo.value.status == 500
        assert context.fetch.await_count == 1

    async def test_successful_write_invalidates_favorites_cache(self):
        context = make_context(
            make_response([{"Url": "https://a.com"}]),
            make_response({"success": True}),
            make_response([{"Url": "https://a.com"}, {"Url": "https://b.com"}]),
        )
        backend = ApiBackend(context, make_settings())

        assert await backend.get_user_favorites(use_cache=True) == ["https://a.com"]
        await backend.add_favorite("https://b.com")
        assert await backend.get_user_favorites(use_cache=True) == ["https://a.com", "https://b.com"]
        assert context.fetch.await_count == 3

    async def test_successful_write_keeps_resource_cache(self):
        context = make_context(
            make_response([{"Url": "https://a.com", "name": "A"}]),
            make_response([{"Url": "https://a.com"}]),
            make_response({"success": True}),
        )
        backend = ApiBackend(context, make_settings())

        await backend.get_all_resources()
        await backend.get_user_favorites(use_cache=True)
        await backend.add_favorite("https://b.com")

        assert backend.cache_stats() == {
            "all_resources": 1,
            "frequently_visited": 0,
            "user_favorites": 0,
        }
        assert await backend.get_all_resources() == [Resource(url="https://a.com", name="A")]
        assert context.fetch.await_count == 3


class TestApiBackendReads:
    async def test_get_user_favorites_maps_rows(self):
        context = make_context(make_response([{"Url": "https://a.com"}, {"Url": "https://b.com"}]))
        backend = ApiBackend(context, make_settings())

        assert await backend.get_user_favorites() == ["https://a.com", "https://b.com"]
        context.fetch.assert_awaited_once_with(
            "/api/favorites", method="GET", params={"userId": 7}, data=None
        )

    async def test_get_user_favorites_uncached_by_default(self):
        context = make_context(make_response([]), make_response([]))
        backend = ApiBackend(context, make_settings())
        await backend.get_user_favorites()
        await backend.get_user_favorites()
        assert context.fetch.await_count == 2

    async def test_get_all_resources_is_cached(self):
        context = make_context(make_response([{"Url": "https://a.com", "name": "A"}]))
        backend = ApiBackend(context, make_settings())

        first = await backend.get_all_resources()
        second = await backend.get_all_resources()
        assert first == [Resource(url="https://a.com", name="A")]
        assert second == first
        assert context.fetch.await_count == 1
        assert backend.cache_stats()["all_resources"] == 1

    async def test_get_frequently_visited_keyed_by_top_count(self):
        context = make_context(
            make_response([{"Url": "https://a.com", "name": None}]),
            make_response([]),
        )
        backend = ApiBackend(context, make_settings())

        assert await backend.get_frequently_visited(5) == [Resource(url="https://a.com", name="")]
        assert await backend.get_frequently_visited(3) == []
        _, kwargs = context.fetch.await_args
        assert kwargs["params"] == {"userId": 7, "topCount": 3}

    async def test_clear_caches(self):
        context = make_context(make_response([]), make_response([]))
        backend = ApiBackend(context, make_settings())
        await backend.get_all_resources()
        backend.clear_caches()
        assert backend.cache_stats() == {"all_resources": 0, "frequently_visited": 0, "user_favorites": 0}
        await backend.get_all_resources()
        assert context.fetch.await_count == 2

    async def test_reads_retry_transport_errors(self):
        context = AsyncMock()
        context.fetch = AsyncMock(side_effect=[PlaywrightError("refused"), make_response([{"Url": "https://a.com"}])])
        backend = ApiBackend(context, make_settings())

        assert await backend.get_user_favorites() == ["https://a.com"]
        assert context.fetch.await_count == 2

    async def test_reads_give_up_after_retries(self):
        context = AsyncMock()
        context.fetch = AsyncMock(side_effect=PlaywrightError("refused"))
        backend = ApiBackend(context, make_settings(retries=2))

        with pytest.raises(BackendError):
            await backend.get_user_favorites()
        assert context.fetch.await_count == 2

    async def test_zero_retries_still_sends_one_request(self):
        context = make_context(make_response({"error": "down"}, status=503))
        backend = ApiBackend(context, make_settings(retries=0))

        with pytest.raises(BackendError) as excinfo:
            await backend.get_user_favorites()
        assert excinfo.value.status == 503
        assert context.fetch.await_count == 1

    async def test_client_error_is_not_retried(self):
        context = make_context(make_response({"error": "bad"}, status=400))
        backend = ApiBackend(context, make_settings())

        with pytest.raises(BackendError) as excinfo:
            await backend.get_all_resources()
        assert excinfo.value.status == 400
        assert context.fetch.await_count == 1


class TestApiBackendLifecycle:
    async def test_connect_opens_request_context(self):
        context = make_context()
        playwright = MagicMock()
        playwright.request.new_context = AsyncMock(return_value=context)
        settings = make_settings()

        backend = await ApiBackend.connect(playwright, settings)

        playwright.request.new_context.assert_awaited_once_with(
            base_url="http://api.test",
            timeout=1000.0,
            extra_http_headers={"Content-Type": "application/json"},
        )
        await backend.close()
        context.dispose.assert_awaited_once()


class TestApiSettings:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("FAVSTORE_API_URL", "http://example.test:9000")
        monkeypatch.setenv("FAVSTORE_USER_ID", "42")
        monkeypatch.setenv("FAVSTORE_TIMEOUT_MS", "250")
        settings = ApiSettings()
        assert settings.api_url == "http://example.test:9000"
        assert settings.user_id == 42
        assert settings.timeout_ms == 250.0

    def test_defaults(self, monkeypatch):
        for name in ("FAVSTORE_API_URL", "FAVSTORE_USER_ID", "FAVSTORE_TIMEOUT_MS", "FAVSTORE_RETRIES"):
            monkeypatch.delenv(name, raising=False)
        settings = ApiSettings()
        assert settings.api_url == "http://localhost:3001"
        assert settings.user_id == 1
        assert settings.retries == 3
