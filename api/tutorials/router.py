"""
Tutorial API endpoints, mounted under /api/tutorials.

Static paths are declared before `/{tutorial_id}` so they are not captured
by the id route.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from core.config import Settings
from core.dependencies import get_settings

from . import schemas, service
from .categories import CategoryCatalog
from .dependencies import (
    create_payload,
    get_category_catalog,
    get_repository,
    like_payload,
    update_payload,
)
from .repository import TutorialRepository

router = APIRouter(prefix="/api/tutorials")


@router.post("")
async def create_tutorial(
    payload: schemas.TutorialCreate | None = Depends(create_payload),
    repo: TutorialRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> schemas.TutorialResponse:
    return await service.create_tutorial(payload, repo=repo, settings=settings)


@router.get("")
async def list_tutorials(
    title: str | None = Query(default=None, max_length=255),
    repo: TutorialRepository = Depends(get_repository),
) -> list[schemas.TutorialResponse]:
    return await service.list_tutorials(title=title, repo=repo)


@router.delete("")
async def delete_all_tutorials(
    repo: TutorialRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> schemas.MessageResponse:
    return await service.delete_all_tutorials(repo=repo, settings=settings)


@router.get("/published")
async def list_published(
    repo: TutorialRepository = Depends(get_repository),
) -> list[schemas.TutorialResponse]:
    return await service.list_published(repo=repo)


@router.get("/categories")
async def list_categories(
    catalog: CategoryCatalog = Depends(get_category_catalog),
) -> list[schemas.CategoryResponse]:
    return service.list_categories(catalog=catalog)


@router.get("/difficulty/{difficulty}")
async def list_by_difficulty(
    difficulty: str,
    repo: TutorialRepository = Depends(get_repository),
) -> list[schemas.TutorialResponse]:
    return await service.list_by_difficulty(difficulty, repo=repo)


@router.get("/{tutorial_id}")
async def get_tutorial(
    tutorial_id: str,
    repo: TutorialRepository = Depends(get_repository),
) -> schemas.TutorialResponse:
    return await service.get_tutorial(tutorial_id, repo=repo)


@router.put("/{tutorial_id}")
async def update_tutorial(
    tutorial_id: str,
    payload: schemas.TutorialUpdate | None = Depends(update_payload),
    repo: TutorialRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> schemas.MessageResponse:
    return await service.update_tutorial(tutorial_id, payload, repo=repo, settings=settings)


@router.delete("/{tutorial_id}")
async def delete_tutorial(
    tutorial_id: str,
    repo: TutorialRepository = Depends(get_repository),
) -> schemas.MessageResponse:
    return await service.delete_tutorial(tutorial_id, repo=repo)


@router.post("/{tutorial_id}/view")
async def record_view(
    tutorial_id: str,
    repo: TutorialRepository = Depends(get_repository),
) -> schemas.MessageResponse:
    return await service.record_view(tutorial_id, repo=repo)


@router.post("/{tutorial_id}/like")
async def adjust_likes(
    tutorial_id: str,
    payload: schemas.LikeRequest | None = Depends(like_payload),
    repo: TutorialRepository = Depends(get_repository),
) -> schemas.MessageResponse:
    increment = payload.increment if payload is not None else False
    return await service.adjust_likes(tutorial_id, increment=increment, repo=repo)
