"""
HTTP client for the tutorial API.

Every method maps to one REST call. Non-2xx responses raise
`TutorialApiError` with the server's message; nothing is retried.
Categories go through `CategoryCache` first.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from .cache import CategoryCache, JsonFileStore

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8080/api"


class TutorialApiError(RuntimeError):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:300] or resp.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return resp.reason_phrase


class TutorialService:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        cache: CategoryCache | None = None,
        timeout_s: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cache = cache if cache is not None else CategoryCache()
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout_s,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    @classmethod
    def from_env(cls) -> "TutorialService":
        base_url = os.environ.get("TUTORIAL_API_URL", DEFAULT_BASE_URL).strip() or DEFAULT_BASE_URL
        cache_path = os.environ.get("TUTORIAL_CACHE_FILE", "").strip()
        cache = CategoryCache(JsonFileStore(cache_path)) if cache_path else CategoryCache()
        return cls(base_url, cache=cache)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "TutorialService":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        resp = await self._client.request(method, path, **kwargs)
        if resp.status_code >= 400:
            raise TutorialApiError(resp.status_code, _error_message(resp))
        if not resp.content:
            return None
        return resp.json()

    async def get_all(self) -> list[dict]:
        return await self._request("GET", "/tutorials")

    async def get(self, tutorial_id: str) -> dict:
        return await self._request("GET", f"/tutorials/{tutorial_id}")

    async def create(self, data: dict) -> dict:
        return await self._request("POST", "/tutorials", json=data)

    async def update(self, tutorial_id: str, data: dict) -> dict:
        return await self._request("PUT", f"/tutorials/{tutorial_id}", json=data)

    async def remove(self, tutorial_id: str) -> dict:
        return await self._request("DELETE", f"/tutorials/{tutorial_id}")

    async def remove_all(self) -> dict:
        return await self._request("DELETE", "/tutorials")

    async def find_by_title(self, title: str) -> list[dict]:
        return await self._request("GET", "/tutorials", params={"title": title})

    async def find_all_published(self) -> list[dict]:
        return await self._request("GET", "/tutorials/published")

    async def find_by_difficulty(self, difficulty: str) -> list[dict]:
        return await self._request("GET", f"/tutorials/difficulty/{difficulty}")

    async def increment_view_count(self, tutorial_id: str) -> dict:
        return await self._request("POST", f"/tutorials/{tutorial_id}/view")

    async def increment_likes(self, tutorial_id: str) -> dict:
        return await self._request("POST", f"/tutorials/{tutorial_id}/like", json={"increment": True})

    async def decrement_likes(self, tutorial_id: str) -> dict:
        return await self._request("POST", f"/tutorials/{tutorial_id}/like", json={"increment": False})

    async def get_categories(self) -> list[dict]:
        """
        Categories from a valid cache, else from the API.

        A non-empty fetch result rewrites the cache. When the fetch fails the
        stale cache is served, or an empty list if there is none.
        """
        if self.cache.is_valid():
            cached = self.cache.read()
            if cached is not None:
                logger.debug("Using cached categories data")
                return cached

        try:
            data = await self._request("GET", "/tutorials/categories")
        except (httpx.HTTPError, TutorialApiError, ValueError) as exc:
            logger.error("Error fetching categories: %s", exc)
            stale = self.cache.read()
            return stale if stale is not None else []

        categories = data if isinstance(data, list) else []
        if categories:
            self.cache.write(categories)
        return categories
