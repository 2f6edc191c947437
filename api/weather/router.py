"""
Weather proxy endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from core.config import Settings
from core.dependencies import get_settings

from . import service

router = APIRouter(prefix="/api/weather")


@router.get("")
async def get_weather(
    location: str = Query(default="", max_length=200),
    settings: Settings = Depends(get_settings),
) -> dict:
    return await service.current_weather(location, settings=settings)
