"""
Tutorial business logic.

Each operation maps one request onto one store call and translates the
outcome into an HTTP result:
- validation problems -> 400
- confirmed absence (no row / rows affected != 1) -> 404
- store failures -> 500
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status

from core.config import Settings
from core.db import StoreError

from . import schemas
from .categories import CategoryCatalog
from .difficulty import parse_difficulty
from .repository import TutorialRepository

logger = logging.getLogger(__name__)

BULK_DELETE_FAILED = "Failed to Delete the tutorials"


def parse_tutorial_id(raw: str) -> UUID:
    try:
        return UUID(str(raw).strip())
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid tutorial id: {raw}",
        ) from exc


def _store_failure(exc: StoreError, message: str) -> HTTPException:
    logger.error("%s (%s)", message, exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


def _to_response(row: dict) -> schemas.TutorialResponse:
    return schemas.TutorialResponse.model_validate(row)


def _check_category(code: str | None, *, catalog: CategoryCatalog, strict: bool) -> None:
    if code is None or catalog.is_known(code):
        return
    if strict:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown category code: {code}",
        )
    logger.warning("Storing tutorial with unknown category code %r", code)


async def create_tutorial(
    payload: schemas.TutorialCreate | None,
    *,
    repo: TutorialRepository,
    settings: Settings,
) -> schemas.TutorialResponse:
    if payload is None or not payload.title:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Content can not be empty!",
        )
    if not payload.title.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title can not be blank!",
        )

    _check_category(
        payload.category,
        catalog=CategoryCatalog(settings.categories),
        strict=settings.strict_categories,
    )

    values = payload.model_dump(mode="json")
    values["author"] = values.get("author") or ""
    values["published"] = bool(values.get("published"))
    values["difficulty"] = values.get("difficulty") or "beginner"

    try:
        row = await repo.create(values)
    except StoreError as exc:
        raise _store_failure(exc, str(exc) or "Some error occurred while creating the Tutorial.") from exc

    logger.info("Created tutorial %s", row["id"])
    return _to_response(row)


async def list_tutorials(
    *,
    title: str | None,
    repo: TutorialRepository,
) -> list[schemas.TutorialResponse]:
    try:
        rows = await repo.list_all(title=title)
    except StoreError as exc:
        raise _store_failure(exc, str(exc) or "Some error occurred while retrieving tutorials.") from exc

    logger.info("Fetched %d tutorials", len(rows))
    return [_to_response(r) for r in rows]


async def list_published(*, repo: TutorialRepository) -> list[schemas.TutorialResponse]:
    try:
        rows = await repo.list_published()
    except StoreError as exc:
        raise _store_failure(exc, str(exc) or "Some error occurred while retrieving tutorials.") from exc
    return [_to_response(r) for r in rows]


async def list_by_difficulty(
    difficulty: str,
    *,
    repo: TutorialRepository,
) -> list[schemas.TutorialResponse]:
    try:
        level = parse_difficulty(difficulty)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid difficulty: {difficulty}",
        ) from exc

    try:
        rows = await repo.list_by_difficulty(level.value)
    except StoreError as exc:
        raise _store_failure(exc, str(exc) or "Some error occurred while retrieving tutorials.") from exc
    return [_to_response(r) for r in rows]


async def get_tutorial(raw_id: str, *, repo: TutorialRepository) -> schemas.TutorialResponse:
    tutorial_id = parse_tutorial_id(raw_id)
    try:
        row = await repo.get(tutorial_id)
    except StoreError as exc:
        raise _store_failure(exc, f"Error retrieving Tutorial with id={tutorial_id}") from exc

    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Not found Tutorial with id {tutorial_id}",
        )
    return _to_response(row)


async def update_tutorial(
    raw_id: str,
    payload: schemas.TutorialUpdate | None,
    *,
    repo: TutorialRepository,
    settings: Settings,
) -> schemas.MessageResponse:
    values = payload.model_dump(mode="json", exclude_unset=True) if payload is not None else {}
    # Non-nullable columns keep their current value when sent as null.
    for key in ("published", "difficulty"):
        if key in values and values[key] is None:
            del values[key]
    if not values:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Data to update can not be empty!",
        )

    tutorial_id = parse_tutorial_id(raw_id)
    if "category" in values:
        _check_category(
            values["category"],
            catalog=CategoryCatalog(settings.categories),
            strict=settings.strict_categories,
        )

    try:
        affected = await repo.update(tutorial_id, values)
    except StoreError as exc:
        raise _store_failure(exc, f"Error updating Tutorial with id={tutorial_id}") from exc

    if affected != 1:
        logger.error("Cannot update Tutorial with id=%s: %d rows matched", tutorial_id, affected)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Cannot update Tutorial with id={tutorial_id}. Maybe Tutorial was not found!",
        )
    return schemas.MessageResponse(message="Tutorial was updated successfully.")


async def delete_tutorial(raw_id: str, *, repo: TutorialRepository) -> schemas.MessageResponse:
    tutorial_id = parse_tutorial_id(raw_id)
    try:
        affected = await repo.delete(tutorial_id)
    except StoreError as exc:
        raise _store_failure(exc, f"Could not delete Tutorial with id={tutorial_id}") from exc

    if not affected:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Cannot delete Tutorial with id={tutorial_id}. Maybe Tutorial was not found!",
        )
    logger.info("Deleted tutorial %s", tutorial_id)
    return schemas.MessageResponse(message="Tutorial was deleted successfully!")


async def delete_all_tutorials(
    *,
    repo: TutorialRepository,
    settings: Settings,
) -> schemas.MessageResponse:
    # Disabled unless explicitly switched on; the store is never touched then.
    if not settings.bulk_delete_enabled:
        logger.error("Bulk delete failed! %s", BULK_DELETE_FAILED)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=BULK_DELETE_FAILED,
        )

    try:
        deleted = await repo.delete_all()
    except StoreError as exc:
        raise _store_failure(exc, str(exc) or "Some error occurred while removing all tutorials.") from exc

    logger.warning("Bulk deleted %d tutorials", deleted)
    return schemas.MessageResponse(message=f"{deleted} Tutorials were deleted successfully!")


async def record_view(raw_id: str, *, repo: TutorialRepository) -> schemas.MessageResponse:
    tutorial_id = parse_tutorial_id(raw_id)
    try:
        row = await repo.increment_view_count(tutorial_id)
    except StoreError as exc:
        raise _store_failure(exc, f"Error updating view count for Tutorial with id={tutorial_id}") from exc

    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Not found Tutorial with id {tutorial_id}",
        )
    return schemas.MessageResponse(message="View count updated successfully.")


async def adjust_likes(
    raw_id: str,
    *,
    increment: bool,
    repo: TutorialRepository,
) -> schemas.MessageResponse:
    tutorial_id = parse_tutorial_id(raw_id)
    try:
        row = await repo.adjust_likes(tutorial_id, increment=increment)
    except StoreError as exc:
        raise _store_failure(exc, f"Error updating likes for Tutorial with id={tutorial_id}") from exc

    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Not found Tutorial with id {tutorial_id}",
        )
    return schemas.MessageResponse(message="Likes updated successfully.")


def list_categories(*, catalog: CategoryCatalog) -> list[dict]:
    return catalog.as_list()
