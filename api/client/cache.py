"""
Time-expiring category cache.

One key (`categories`) holds `{"expiry": <epoch seconds>, "data": [...]}`.
The entry is valid while the current time is before `expiry`.
"""

from __future__ import annotations

import json
import logging
import os
import time
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)

CACHE_KEY = "categories"
DEFAULT_TTL_S = 24 * 60 * 60


class CacheStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value


class JsonFileStore:
    """
    Key/value strings persisted in a single JSON file.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def _load(self) -> dict[str, str]:
        try:
            with open(self.path, encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable cache file %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump(data, fh)
        os.replace(tmp_path, self.path)


class CategoryCache:
    def __init__(
        self,
        store: CacheStore | None = None,
        *,
        ttl_s: float = DEFAULT_TTL_S,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store if store is not None else MemoryStore()
        self.ttl_s = ttl_s
        self.clock = clock

    def _entry(self) -> dict[str, Any] | None:
        raw = self.store.get(CACHE_KEY)
        if not raw:
            return None
        try:
            entry = json.loads(raw)
        except ValueError:
            logger.error("Error parsing categories cache")
            return None
        return entry if isinstance(entry, dict) else None

    def is_valid(self) -> bool:
        entry = self._entry()
        if entry is None:
            logger.debug("Categories cache not found")
            return False
        expiry = entry.get("expiry")
        valid = isinstance(expiry, (int, float)) and self.clock() < expiry
        logger.debug("Categories cache is %s", "valid" if valid else "expired")
        return valid

    def read(self) -> list[dict] | None:
        """
        Return cached categories regardless of expiry, or None if absent.
        """
        entry = self._entry()
        if entry is None:
            return None
        data = entry.get("data")
        return data if isinstance(data, list) else None

    def write(self, categories: list[dict]) -> None:
        entry = {"expiry": self.clock() + self.ttl_s, "data": categories}
        self.store.set(CACHE_KEY, json.dumps(entry))
