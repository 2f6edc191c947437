"""
Demo tutorials, inserted on startup into an empty table when SEED_DEMO_DATA is on.
"""

from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

logger = logging.getLogger(__name__)


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value)


def _row(
    tutorial_id: str,
    title: str,
    description: str,
    *,
    published: bool,
    category: int,
    created_at: str,
    updated_at: str | None = None,
) -> dict:
    return {
        "id": UUID(tutorial_id),
        "title": title,
        "description": description,
        "author": "",
        "category": str(category),
        "published": published,
        "difficulty": "beginner",
        "created_at": _ts(created_at),
        "updated_at": _ts(updated_at or created_at),
    }


DEMO_TUTORIALS: list[dict] = [
    _row("23541257-719c-4c0b-8849-ec6f9975df95", "React18", "The Beginners guide!",
         published=True, category=1, created_at="2022-12-20T12:56:52.286+05:30"),
    _row("7b857865-b969-46f1-9221-698d9088297f", "Fire on Fire!", "Sam Smith",
         published=False, category=6, created_at="2022-12-20T12:57:10.755+05:30"),
    _row("7f1d3fe4-6456-4619-aa0e-794dfa5dc6e3", "Mockingbirds", "Eminem",
         published=False, category=6, created_at="2022-12-20T12:57:23.694+05:30"),
    _row("fc4684cc-78d2-434b-9596-f506e3b0f1d8", "Lost Skeleton Returns Again!", "Exposure of tooth",
         published=True, category=6, created_at="2022-12-20T12:57:35.611+05:30"),
    _row("64e10527-cb8a-4a8f-930e-396db5492f46", "Forced to Kill!", "The untold story",
         published=True, category=6, created_at="2022-12-20T12:57:45.975+05:30"),
    _row("bd1be822-e6a6-4ae0-92b5-134f70e49849", "Lost Skeleton", "Finding of tooth",
         published=True, category=6, created_at="2022-12-20T12:58:31.253+05:30"),
    _row("42a70d73-d242-4622-b7da-849ceb7e6aea", "React Native ", "The Intro",
         published=False, category=1, created_at="2022-12-20T12:58:39.408+05:30"),
    _row("fb01f094-6585-47ff-ae6b-9813961ef021", "The broken leg", "Story of a femur",
         published=True, category=6, created_at="2022-12-20T12:57:02.876+05:30",
         updated_at="2022-12-20T14:22:22.704+05:30"),
    _row("01e2cace-ec91-4b90-a7bc-40b3b4b8ff8f", "Solid JS", "The Alter ego of React",
         published=False, category=1, created_at="2022-12-20T14:22:45.812+05:30",
         updated_at="2022-12-20T14:22:52.707+05:30"),
]


async def seed_if_empty(repo) -> int:
    """
    Insert the demo tutorials when the table has no rows. Returns rows inserted.
    """
    if await repo.count() > 0:
        logger.info("Skipping demo seed: tutorials table is not empty.")
        return 0
    inserted = await repo.insert_seed(DEMO_TUTORIALS)
    logger.info("Seeded %d demo tutorials.", inserted)
    return inserted
