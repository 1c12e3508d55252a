"""REST backend that talks to the favorites HTTP API through Playwright's request context."""

from __future__ import annotations

import logging
from typing import Any

from playwright.async_api import APIRequestContext, Error as PlaywrightError, Playwright

from favstore.config import ApiSettings, settings as default_settings
from favstore.core.errors import BackendError
from favstore.core.types import Resource
from favstore.core.urls import derive_display_name
from favstore.persistence.base import FavoritesBackend
from favstore.persistence.cache import TTLCache

logger = logging.getLogger(__name__)

_USER_FAVORITES_KEY = "user-favorites"
_RESOURCES_KEY = "all-resources"


class ApiBackend(FavoritesBackend):
    """
    FavoritesBackend over the favorites REST API.

    Endpoints::

        GET    /api/favorites?userId=        rows of {"Url": ...}
        POST   /api/favorites                {url, displayName, userNotes, userId}
        DELETE /api/favorites                {url, userId}
        DELETE /api/favorites/all            {userId}
        GET    /api/resources?userId=        rows of {"Url", "name"}
        GET    /api/frequently-visited       rows of {"Url", "name"}

    Write endpoints answer ``{"success": bool, "message": str}``; success maps
    to the bool return value. Any non-2xx status raises BackendError.
    """

    def __init__(self, context: APIRequestContext, settings: ApiSettings | None = None) -> None:
        self._context = context
        self._settings = settings or default_settings
        self._resources_cache = TTLCache(self._settings.resources_ttl)
        self._frequent_cache = TTLCache(self._settings.frequently_visited_ttl)
        self._favorites_cache = TTLCache(self._settings.user_favorites_ttl)

    @classmethod
    async def connect(cls, playwright: Playwright, settings: ApiSettings | None = None) -> ApiBackend:
        """Open a request context against settings.api_url."""
        settings = settings or default_settings
        context = await playwright.request.new_context(
            base_url=settings.api_url,
            timeout=settings.timeout_ms,
            extra_http_headers={"Content-Type": "application/json"},
        )
        return cls(context, settings)

    async def close(self) -> None:
        await self._context.dispose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict | None = None,
        data: dict | None = None,
    ) -> Any:
        # Only reads are retried; a repeated write could double-apply
        attempts = max(1, self._settings.retries) if method == "GET" else 1
        attempt_no = 0
        while True:
            attempt_no += 1
            try:
                response = await self._context.fetch(path, method=method, params=params, data=data)
            except PlaywrightError as exc:
                error = BackendError(f"{method} {path} failed: {exc}")
            else:
                if response.ok:
                    return await response.json()
                error = BackendError(
                    f"{method} {path} returned {response.status}", status=response.status
                )
                if response.status < 500:
                    raise error

            if attempt_no >= attempts:
                raise error
            logger.debug("Attempt %d/%d: %s", attempt_no, attempts, error)

    async def _write(self, method: str, path: str, data: dict) -> bool:
        result = await self._request(method, path, data={**data, "userId": self._settings.user_id})
        success = bool(result.get("success")) if isinstance(result, dict) else False
        message = result.get("message", "") if isinstance(result, dict) else ""
        if success:
            self._favorites_cache.delete(_USER_FAVORITES_KEY)
            logger.info("%s %s: %s", method, path, message or "ok")
        else:
            logger.info("%s %s made no change: %s", method, path, message)
        return success

    @staticmethod
    def _rows_to_resources(rows: list[dict]) -> list[Resource]:
        return [Resource(url=row["Url"], name=row.get("name") or "") for row in rows]

    # ------------------------------------------------------------------
    # FavoritesBackend
    # ------------------------------------------------------------------

    async def add_favorite(
        self, url: str, display_name: str | None = None, user_notes: str | None = None
    ) -> bool:
        """Star url. Without display_name the API gets one derived from the URL."""
        return await self._write(
            "POST",
            "/api/favorites",
            {
                "url": url,
                "displayName": display_name or derive_display_name(url),
                "userNotes": user_notes,
            },
        )

    async def remove_favorite(self, url: str) -> bool:
        return await self._write("DELETE", "/api/favorites", {"url": url})

    async def clear_all_favorites(self) -> bool:
        return await self._write("DELETE", "/api/favorites/all", {})

    async def get_user_favorites(self, use_cache: bool = False) -> list[str]:
        """
        URLs the user has starred. Not cached by default: favorites change
        often and every local write already invalidates the entry.
        """
        if use_cache:
            cached = self._favorites_cache.get(_USER_FAVORITES_KEY)
            if cached is not None:
                return list(cached)

        rows = await self._request("GET", "/api/favorites", params={"userId": self._settings.user_id})
        urls = [row["Url"] for row in rows]
        if use_cache:
            self._favorites_cache.set(_USER_FAVORITES_KEY, urls)
        return list(urls)

    # ------------------------------------------------------------------
    # Resource catalog
    # ------------------------------------------------------------------

    async def get_all_resources(self, use_cache: bool = True) -> list[Resource]:
        if use_cache:
            cached = self._resources_cache.get(_RESOURCES_KEY)
            if cached is not None:
                return cached

        rows = await self._request("GET", "/api/resources", params={"userId": self._settings.user_id})
        resources = self._rows_to_resources(rows)
        self._resources_cache.set(_RESOURCES_KEY, resources)
        return resources

    async def get_frequently_visited(self, top_count: int = 10, use_cache: bool = True) -> list[Resource]:
        key = f"frequently-visited-{top_count}"
        if use_cache:
            cached = self._frequent_cache.get(key)
            if cached is not None:
                return cached

        rows = await self._request(
            "GET",
            "/api/frequently-visited",
            params={"userId": self._settings.user_id, "topCount": top_count},
        )
        resources = self._rows_to_resources(rows)
        self._frequent_cache.set(key, resources)
        return resources

    def clear_caches(self) -> None:
        self._resources_cache.clear()
        self._frequent_cache.clear()
        self._favorites_cache.clear()

    def cache_stats(self) -> dict[str, int]:
        return {
            "all_resources": len(self._resources_cache),
            "frequently_visited": len(self._frequent_cache),
            "user_favorites": len(self._favorites_cache),
        }
