"""
Pydantic schemas for tutorial endpoints.

Wire names are camelCase (`readTime`, `imageUrl`, ...); Python attributes and
storage columns are snake_case.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .categories import normalize_code
from .difficulty import Difficulty, normalize_difficulty


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _join_tags(value: object) -> object:
    if isinstance(value, (list, tuple)):
        return ",".join(str(t).strip() for t in value if str(t).strip())
    return value


class TutorialUpdate(CamelModel):
    title: str | None = Field(default=None, max_length=255)
    description: str | None = None
    author: str | None = Field(default=None, max_length=255)
    category: str | None = Field(default=None, max_length=255)
    published: bool | None = None
    read_time: int | None = Field(default=None, ge=0)
    difficulty: Difficulty | None = None
    tags: str | None = None
    image_url: str | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, value: object) -> str | None:
        return normalize_code(value)

    @field_validator("difficulty", mode="before")
    @classmethod
    def _difficulty(cls, value: object) -> object:
        return normalize_difficulty(value) if isinstance(value, str) else value

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value: object) -> object:
        return _join_tags(value)


class TutorialCreate(TutorialUpdate):
    # Title stays optional here; the service rejects a missing one with the API message.
    author: str | None = Field(default="", max_length=255)
    published: bool | None = False
    difficulty: Difficulty | None = Difficulty.BEGINNER


class TutorialResponse(CamelModel):
    id: UUID
    title: str | None = None
    description: str | None = None
    author: str | None = ""
    category: str | None = None
    published: bool = False
    read_time: int | None = None
    difficulty: str | None = Difficulty.BEGINNER.value
    tags: str | None = None
    image_url: str | None = None
    view_count: int = 0
    likes: int = 0
    created_at: datetime
    updated_at: datetime


class LikeRequest(BaseModel):
    increment: bool = False


class MessageResponse(BaseModel):
    message: str


class CategoryResponse(BaseModel):
    id: int
    category: str
