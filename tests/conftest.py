"""
Shared fixtures.

The Postgres repository is swapped for an in-memory one through the
`get_repository` dependency; everything above the repository runs for real.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from core.db import StoreError
from main import create_app
from tutorials.dependencies import get_repository
from tutorials.repository import WRITABLE_COLUMNS

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class InMemoryTutorialRepository:
    def __init__(self):
        self.rows: dict[UUID, dict] = {}
        self.fail_with: str | None = None
        self.calls: list[str] = []
        self._tick = 0

    def _now(self) -> datetime:
        self._tick += 1
        return BASE_TIME + timedelta(seconds=self._tick)

    def _guard(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_with is not None:
            raise StoreError(self.fail_with)

    async def ensure_schema(self):
        self._guard("ensure_schema")

    async def count(self):
        self._guard("count")
        return len(self.rows)

    async def create(self, values):
        self._guard("create")
        now = self._now()
        row = {
            "id": uuid4(),
            "title": None,
            "description": None,
            "author": "",
            "category": None,
            "published": False,
            "read_time": None,
            "difficulty": "beginner",
            "tags": None,
            "image_url": None,
            "view_count": 0,
            "likes": 0,
            "created_at": now,
            "updated_at": now,
        }
        row.update({k: v for k, v in values.items() if k in WRITABLE_COLUMNS})
        self.rows[row["id"]] = row
        return dict(row)

    async def insert_seed(self, rows):
        self._guard("insert_seed")
        inserted = 0
        for values in rows:
            if values["id"] in self.rows:
                continue
            row = {"view_count": 0, "likes": 0, "read_time": None, "tags": None, "image_url": None}
            row.update(values)
            self.rows[row["id"]] = row
            inserted += 1
        return inserted

    def _sorted(self, rows):
        return sorted(rows, key=lambda r: r["updated_at"], reverse=True)

    async def list_all(self, *, title=None):
        self._guard("list_all")
        q = (title or "").strip().lower()
        rows = [dict(r) for r in self.rows.values() if not q or q in (r["title"] or "").lower()]
        return self._sorted(rows)

    async def list_published(self):
        self._guard("list_published")
        return self._sorted([dict(r) for r in self.rows.values() if r["published"]])

    async def list_by_difficulty(self, difficulty):
        self._guard("list_by_difficulty")
        return self._sorted([dict(r) for r in self.rows.values() if r["difficulty"] == difficulty])

    async def get(self, tutorial_id):
        self._guard("get")
        row = self.rows.get(tutorial_id)
        return dict(row) if row is not None else None

    async def update(self, tutorial_id, values):
        self._guard("update")
        row = self.rows.get(tutorial_id)
        if row is None:
            return 0
        row.update({k: v for k, v in values.items() if k in WRITABLE_COLUMNS})
        row["updated_at"] = self._now()
        return 1

    async def delete(self, tutorial_id):
        self._guard("delete")
        return 1 if self.rows.pop(tutorial_id, None) is not None else 0

    async def delete_all(self):
        self._guard("delete_all")
        deleted = len(self.rows)
        self.rows.clear()
        return deleted

    async def increment_view_count(self, tutorial_id):
        self._guard("increment_view_count")
        row = self.rows.get(tutorial_id)
        if row is None:
            return None
        row["view_count"] += 1
        return {"id": tutorial_id, "view_count": row["view_count"]}

    async def adjust_likes(self, tutorial_id, *, increment):
        self._guard("adjust_likes")
        row = self.rows.get(tutorial_id)
        if row is None:
            return None
        row["likes"] = row["likes"] + 1 if increment else max(0, row["likes"] - 1)
        return {"id": tutorial_id, "likes": row["likes"]}


@pytest.fixture
def settings():
    return Settings(database_url="postgresql://unused/test")


@pytest.fixture
def repo():
    return InMemoryTutorialRepository()


@pytest.fixture
def app(settings, repo):
    application = create_app(settings)
    application.dependency_overrides[get_repository] = lambda: repo
    return application


@pytest.fixture
def client(app):
    # Not used as a context manager: the lifespan (and its DB pool) never starts.
    return TestClient(app)


@pytest.fixture
def make_client(repo):
    def _make(**overrides):
        application = create_app(Settings(database_url="postgresql://unused/test", **overrides))
        application.dependency_overrides[get_repository] = lambda: repo
        return TestClient(application)

    return _make
