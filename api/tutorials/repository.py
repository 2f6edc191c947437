"""
Tutorial persistence (raw SQL).

All statements target the single `tutorials` table. Counter updates are
single atomic UPDATE statements, not fetch-then-write.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID, uuid4

from core import db

TUTORIAL_COLUMNS = (
    "id",
    "title",
    "description",
    "author",
    "category",
    "published",
    "read_time",
    "difficulty",
    "tags",
    "image_url",
    "view_count",
    "likes",
    "created_at",
    "updated_at",
)

# Columns a create/update request may write.
WRITABLE_COLUMNS = (
    "title",
    "description",
    "author",
    "category",
    "published",
    "read_time",
    "difficulty",
    "tags",
    "image_url",
)

_SELECT = ", ".join(TUTORIAL_COLUMNS)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS tutorials (
  id uuid PRIMARY KEY,
  title varchar(255),
  description text,
  author varchar(255) DEFAULT '',
  category varchar(255),
  published boolean NOT NULL DEFAULT false,
  read_time integer,
  difficulty varchar(32) NOT NULL DEFAULT 'beginner',
  tags text,
  image_url text,
  view_count integer NOT NULL DEFAULT 0,
  likes integer NOT NULL DEFAULT 0 CHECK (likes >= 0),
  created_at timestamptz NOT NULL DEFAULT now(),
  updated_at timestamptz NOT NULL DEFAULT now()
);
ALTER TABLE tutorials ALTER COLUMN category TYPE varchar(255);
CREATE INDEX IF NOT EXISTS tutorials_updated_at_idx ON tutorials (updated_at DESC);
CREATE INDEX IF NOT EXISTS tutorials_difficulty_idx ON tutorials (difficulty);
"""


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _writable(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if k in WRITABLE_COLUMNS}


class TutorialRepository:
    """
    Postgres-backed tutorial store.

    Rows come back as plain dicts keyed by column name.
    """

    async def ensure_schema(self) -> None:
        await db.execute(SCHEMA_SQL)

    async def count(self) -> int:
        row = await db.fetch_one("SELECT count(*)::int AS n FROM tutorials")
        return int(row["n"]) if row is not None else 0

    async def create(self, values: dict[str, Any]) -> dict[str, Any]:
        data = _writable(values)
        columns = ["id", *data.keys()]
        placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
        row = await db.fetch_one(
            f"""
            INSERT INTO tutorials ({", ".join(columns)})
            VALUES ({placeholders})
            RETURNING {_SELECT}
            """,
            uuid4(),
            *data.values(),
        )
        if row is None:
            raise db.StoreError("Failed to create tutorial.")
        return row

    async def insert_seed(self, rows: list[dict[str, Any]]) -> int:
        inserted = 0
        for values in rows:
            columns = [c for c in TUTORIAL_COLUMNS if c in values]
            placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
            inserted += await db.execute_count(
                f"""
                INSERT INTO tutorials ({", ".join(columns)})
                VALUES ({placeholders})
                ON CONFLICT (id) DO NOTHING
                """,
                *(values[c] for c in columns),
            )
        return inserted

    async def list_all(self, *, title: str | None = None) -> list[dict[str, Any]]:
        q = (title or "").strip()
        return await db.fetch_all(
            f"""
            SELECT {_SELECT}
            FROM tutorials
            WHERE $1 = ''
               OR title ILIKE ('%' || $1 || '%') ESCAPE '\\'
            ORDER BY updated_at DESC, id
            """,
            _escape_like(q),
        )

    async def list_published(self) -> list[dict[str, Any]]:
        return await db.fetch_all(
            f"""
            SELECT {_SELECT}
            FROM tutorials
            WHERE published = true
            ORDER BY updated_at DESC, id
            """
        )

    async def list_by_difficulty(self, difficulty: str) -> list[dict[str, Any]]:
        return await db.fetch_all(
            f"""
            SELECT {_SELECT}
            FROM tutorials
            WHERE difficulty = $1
            ORDER BY updated_at DESC, id
            """,
            difficulty,
        )

    async def get(self, tutorial_id: UUID) -> dict[str, Any] | None:
        return await db.fetch_one(
            f"""
            SELECT {_SELECT}
            FROM tutorials
            WHERE id = $1
            """,
            tutorial_id,
        )

    async def update(self, tutorial_id: UUID, values: dict[str, Any]) -> int:
        """
        Write the given columns and return the number of rows affected.
        """
        data = _writable(values)
        if not data:
            return 0
        assignments = ", ".join(f"{col} = ${i}" for i, col in enumerate(data.keys(), start=2))
        return await db.execute_count(
            f"""
            UPDATE tutorials
            SET {assignments},
                updated_at = now()
            WHERE id = $1
            """,
            tutorial_id,
            *data.values(),
        )

    async def delete(self, tutorial_id: UUID) -> int:
        return await db.execute_count("DELETE FROM tutorials WHERE id = $1", tutorial_id)

    async def delete_all(self) -> int:
        return await db.execute_count("DELETE FROM tutorials")

    async def increment_view_count(self, tutorial_id: UUID) -> dict[str, Any] | None:
        return await db.fetch_one(
            """
            UPDATE tutorials
            SET view_count = view_count + 1
            WHERE id = $1
            RETURNING id, view_count
            """,
            tutorial_id,
        )

    async def adjust_likes(self, tutorial_id: UUID, *, increment: bool) -> dict[str, Any] | None:
        return await db.fetch_one(
            """
            UPDATE tutorials
            SET likes = CASE WHEN $2 THEN likes + 1 ELSE GREATEST(likes - 1, 0) END
            WHERE id = $1
            RETURNING id, likes
            """,
            tutorial_id,
            increment,
        )
