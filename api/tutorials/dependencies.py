"""
Dependencies for tutorial routes.

Request bodies are accepted as JSON or as HTML form posts
(`application/x-www-form-urlencoded` / `multipart/form-data`). An empty body
resolves to None so the service can answer with its own message.
"""

from __future__ import annotations

import json
from typing import Any, Awaitable, Callable, TypeVar

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from core.config import Settings
from core.dependencies import get_settings

from . import schemas
from .categories import CategoryCatalog
from .repository import TutorialRepository

ModelT = TypeVar("ModelT", bound=BaseModel)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_repository() -> TutorialRepository:
    return TutorialRepository()


def get_category_catalog(settings: Settings = Depends(get_settings)) -> CategoryCatalog:
    return CategoryCatalog(settings.categories)


async def _read_body(request: Request) -> Any:
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return dict(form)

    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": {}}]
        ) from exc


def _body_parser(model: type[ModelT]) -> Callable[[Request], Awaitable[ModelT | None]]:
    async def parse(request: Request) -> ModelT | None:
        data = await _read_body(request)
        if data is None:
            return None
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise RequestValidationError(exc.errors()) from exc

    return parse


create_payload = _body_parser(schemas.TutorialCreate)
update_payload = _body_parser(schemas.TutorialUpdate)
like_payload = _body_parser(schemas.LikeRequest)
