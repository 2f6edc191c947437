"""
Current-weather passthrough.

Used endpoint:
- GET {base}/weather?q=<location>&appid=<key>  -> upstream JSON, returned as-is
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from fastapi import HTTPException, status

from core.config import Settings

logger = logging.getLogger(__name__)


class WeatherError(RuntimeError):
    pass


def _normalize_base_url(base_url: str) -> str:
    base_url = (base_url or "").strip()
    if not base_url:
        raise WeatherError("WEATHER_API_BASE_URL is empty.")
    return base_url.rstrip("/")


async def fetch_current_weather(
    location: str,
    *,
    base_url: str,
    api_key: str,
    timeout_s: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """
    Fetch current weather for `location` from the upstream API.
    """
    base_url = _normalize_base_url(base_url)
    location = (location or "").strip()
    if not location:
        raise WeatherError("Location is empty.")
    if not api_key:
        raise WeatherError("WEATHER_API_KEY is not set.")

    try:
        async with httpx.AsyncClient(base_url=base_url, timeout=timeout_s, transport=transport) as client:
            resp = await client.get("/weather", params={"q": location, "appid": api_key})
    except httpx.HTTPError as exc:
        raise WeatherError(f"Weather request failed: {exc}") from exc

    if resp.status_code != 200:
        body = resp.text[:300]
        raise WeatherError(f"Weather request failed: {resp.status_code} {body}")

    try:
        data = resp.json()
    except ValueError as exc:
        raise WeatherError("Weather API returned invalid JSON.") from exc
    if not isinstance(data, dict):
        raise WeatherError("Weather API returned an unexpected payload.")
    return data


async def current_weather(
    location: str,
    *,
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    try:
        return await fetch_current_weather(
            location,
            base_url=settings.weather_api_base_url,
            api_key=settings.weather_api_key,
            timeout_s=settings.weather_timeout_s,
            transport=transport,
        )
    except WeatherError as exc:
        logger.error("Error fetching weather for %r: %s", location, exc)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Error retrieving data for location={location}",
        ) from exc
