"""
View helpers over fetched tutorial records.

Records are the API's JSON dicts (camelCase keys). Nothing here mutates its
input; mapped records are shallow copies.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

from tutorials.categories import Category, CategoryCatalog
from tutorials.difficulty import normalize_difficulty

RELATED_LIMIT = 3
RECENT_LIMIT = 5

TIME_RANGES = {
    "all": None,
    "30days": timedelta(days=30),
    "90days": timedelta(days=90),
    "1year": None,  # calendar year, handled separately
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            ts = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=timezone.utc)


# -- form helpers -----------------------------------------------------------


def tags_to_list(tags: str | None) -> list[str]:
    if not tags:
        return []
    return [t.strip() for t in tags.split(",") if t.strip()]


def tags_to_string(tags: Iterable[str]) -> str:
    return ",".join(t.strip() for t in tags if t and t.strip())


@dataclass
class TutorialForm:
    """
    Editable form state for a tutorial; tags are kept as a list while editing.
    """

    title: str = ""
    description: str = ""
    author: str = ""
    category: str | None = None
    published: bool = False
    read_time: int | None = 10
    difficulty: str = "beginner"
    tags: list[str] = field(default_factory=list)
    image_url: str = ""

    @classmethod
    def from_record(cls, record: dict) -> "TutorialForm":
        category = record.get("category")
        return cls(
            title=record.get("title") or "",
            description=record.get("description") or "",
            author=record.get("author") or "",
            category=str(category) if category not in (None, "") else None,
            published=bool(record.get("published")),
            read_time=record.get("readTime"),
            difficulty=normalize_difficulty(record.get("difficulty")) or "beginner",
            tags=tags_to_list(record.get("tags")),
            image_url=record.get("imageUrl") or "",
        )

    def to_payload(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "author": self.author,
            "category": self.category,
            "published": self.published,
            "readTime": self.read_time,
            "difficulty": normalize_difficulty(self.difficulty) or "beginner",
            "tags": tags_to_string(self.tags),
            "imageUrl": self.image_url,
        }


# -- record mapping ---------------------------------------------------------


def map_difficulty(tutorials: Any) -> Any:
    """
    Normalize `difficulty` on one record or a list of records.
    """
    if isinstance(tutorials, dict):
        record = dict(tutorials)
        if record.get("difficulty"):
            record["difficulty"] = normalize_difficulty(record["difficulty"])
        return record
    if isinstance(tutorials, list):
        return [map_difficulty(t) for t in tutorials]
    return tutorials


def map_categories(tutorials: list[dict], categories: Iterable[dict]) -> list[dict]:
    """
    Replace category codes with their labels ("Unknown (<code>)" if unmatched).
    """
    catalog = CategoryCatalog(categories)
    mapped: list[dict] = []
    for tutorial in tutorials:
        record = dict(tutorial)
        if record.get("category"):
            record["category"] = catalog.label(record["category"])
        mapped.append(record)
    return mapped


# -- list view --------------------------------------------------------------


def filter_tutorials(
    tutorials: list[dict],
    *,
    category: str | None = None,
    difficulty: str | None = None,
    status: str | None = None,
    title: str | None = None,
) -> list[dict]:
    """
    Client-side filters. `category` compares against the record's category
    value as displayed (label after `map_categories`, or the raw code);
    `status` is "published" or "draft".
    """
    result = list(tutorials)
    if category:
        result = [t for t in result if str(t.get("category") or "") == str(category)]
    if difficulty:
        wanted = normalize_difficulty(difficulty)
        result = [t for t in result if normalize_difficulty(t.get("difficulty")) == wanted]
    if status == "published":
        result = [t for t in result if t.get("published")]
    elif status == "draft":
        result = [t for t in result if not t.get("published")]
    if title:
        needle = title.lower()
        result = [t for t in result if needle in str(t.get("title") or "").lower()]
    return result


def sort_tutorials(tutorials: list[dict], field_name: str = "updatedAt", *, descending: bool = True) -> list[dict]:
    """
    Sort by one field; records missing the field always sort last.
    """
    present = [t for t in tutorials if t.get(field_name) is not None]
    missing = [t for t in tutorials if t.get(field_name) is None]

    def key(record: dict) -> Any:
        value = record[field_name]
        if field_name in ("createdAt", "updatedAt"):
            ts = parse_timestamp(value)
            return ts.timestamp() if ts is not None else 0.0
        if isinstance(value, str):
            return value.lower()
        return value

    return sorted(present, key=key, reverse=descending) + missing


@dataclass(frozen=True)
class Page:
    items: list[dict]
    page: int
    rows: int
    total: int

    @property
    def page_count(self) -> int:
        return max(1, math.ceil(self.total / self.rows)) if self.rows else 1


def paginate(items: list[dict], *, page: int = 1, rows: int = 10) -> Page:
    """
    One page of `rows` items; `page` is 1-based and clamped to the valid range.
    """
    rows = max(1, rows)
    total = len(items)
    last_page = max(1, math.ceil(total / rows))
    page = min(max(1, page), last_page)
    start = (page - 1) * rows
    return Page(items=items[start:start + rows], page=page, rows=rows, total=total)


# -- detail view ------------------------------------------------------------


def related_tutorials(
    current: dict,
    tutorials: list[dict],
    categories: Iterable[dict],
    *,
    limit: int = RELATED_LIMIT,
) -> list[dict]:
    """
    Published tutorials sharing the category of `current` (a raw record
    carrying a category code), excluding `current` itself.
    """
    catalog = CategoryCatalog(categories)
    ref = catalog.resolve(current.get("category"))
    if not isinstance(ref, Category):
        return []
    label = ref.label

    mapped = map_difficulty(map_categories(tutorials, catalog.as_list()))
    related = [
        t
        for t in mapped
        if t.get("published") and t.get("category") == label and t.get("id") != current.get("id")
    ]
    return related[:limit]


# -- dashboard & analytics --------------------------------------------------


def published_ratio(tutorials: list[dict]) -> dict[str, int]:
    published = sum(1 for t in tutorials if t.get("published"))
    return {"published": published, "unpublished": len(tutorials) - published}


def dashboard_summary(tutorials: list[dict], categories: Iterable[dict]) -> dict[str, Any]:
    """
    Counts per known category (every category listed, zeros included),
    published vs draft counts and the most recently updated records.
    """
    catalog = CategoryCatalog(categories)
    counts = {c.code: 0 for c in catalog}
    for tutorial in tutorials:
        ref = catalog.resolve(tutorial.get("category"))
        if isinstance(ref, Category):
            counts[ref.code] += 1

    return {
        "categoryStats": {
            "labels": [c.category for c in catalog],
            "data": [counts[c.code] for c in catalog],
        },
        "publishedStats": published_ratio(tutorials),
        "recentTutorials": sort_tutorials(tutorials, "updatedAt", descending=True)[:RECENT_LIMIT],
    }


def _cutoff(time_range: str, now: datetime) -> datetime | None:
    if time_range not in TIME_RANGES:
        raise ValueError(f"Unknown time range: {time_range}")
    if time_range == "1year":
        try:
            return now.replace(year=now.year - 1)
        except ValueError:
            # Feb 29 -> Feb 28
            return now.replace(year=now.year - 1, day=28)
    delta = TIME_RANGES[time_range]
    return now - delta if delta is not None else None


def _updated_since(tutorial: dict, cutoff: datetime) -> bool:
    updated = parse_timestamp(tutorial.get("updatedAt"))
    return updated is not None and updated >= cutoff


def word_count_stats(tutorials: list[dict]) -> dict[str, int]:
    if not tutorials:
        return {"average": 0, "max": 0, "min": 0}
    counts = [len(str(t.get("description") or "").split()) for t in tutorials]
    return {
        "average": _round_half_up(sum(counts) / len(counts)),
        "max": max(counts),
        "min": min(counts),
    }


def analytics_summary(
    tutorials: list[dict],
    categories: Iterable[dict],
    *,
    time_range: str = "all",
    category_id: int | str | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    catalog = CategoryCatalog(categories)

    selected = list(tutorials)
    cutoff = _cutoff(time_range, now)
    if cutoff is not None:
        selected = [t for t in selected if _updated_since(t, cutoff)]
    if category_id is not None:
        selected = [t for t in selected if str(t.get("category") or "") == str(category_id)]

    months: dict[tuple[int, int], int] = {}
    for tutorial in selected:
        created = parse_timestamp(tutorial.get("createdAt"))
        if created is None:
            continue
        key = (created.year, created.month)
        months[key] = months.get(key, 0) + 1
    ordered_months = sorted(months)

    breakdown: list[dict[str, Any]] = []
    for cat in catalog:
        in_category = [t for t in selected if str(t.get("category") or "") == cat.code]
        if not in_category:
            continue
        published = sum(1 for t in in_category if t.get("published"))
        breakdown.append(
            {
                "id": cat.code,
                "name": cat.category,
                "count": len(in_category),
                "published": published,
                "unpublished": len(in_category) - published,
                "publishedPercentage": _round_half_up(published / len(in_category) * 100),
            }
        )
    breakdown.sort(key=lambda row: row["count"], reverse=True)

    return {
        "monthlyData": {
            "labels": [f"{month}/{year}" for (year, month) in ordered_months],
            "data": [months[key] for key in ordered_months],
        },
        "categoryBreakdown": breakdown,
        "publishedRatio": published_ratio(selected),
        "wordCountStats": word_count_stats(selected),
    }
