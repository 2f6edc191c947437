"""
Difficulty levels and their accepted synonyms.
"""

from __future__ import annotations

from enum import Enum


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


_SYNONYMS = {
    "beginner": Difficulty.BEGINNER.value,
    "easy": Difficulty.BEGINNER.value,
    "intermediate": Difficulty.INTERMEDIATE.value,
    "medium": Difficulty.INTERMEDIATE.value,
    "advanced": Difficulty.ADVANCED.value,
    "hard": Difficulty.ADVANCED.value,
    "expert": Difficulty.ADVANCED.value,
}


def normalize_difficulty(value: str | None) -> str | None:
    """
    Map a difficulty (or synonym) to its canonical lowercase value.

    Unknown values come back lowercased, unchanged otherwise; empty values
    come back as given.
    """
    if not value:
        return value
    lowered = str(value).strip().lower()
    return _SYNONYMS.get(lowered, lowered)


def parse_difficulty(value: str | None) -> Difficulty:
    """
    Like `normalize_difficulty`, but raises ValueError for unknown levels.
    """
    return Difficulty(normalize_difficulty(value) or "")
