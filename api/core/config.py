"""
Process configuration.

Settings are read from the environment once, at startup, and injected into
the application (`main.create_app(settings)`). Feature code receives them
through `core.dependencies.get_settings` instead of reading `os.environ`.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field

DEFAULT_WEATHER_BASE_URL = "http://api.openweathermap.org/data/2.5"

DEFAULT_CATEGORIES: tuple[dict, ...] = (
    {"id": 1, "category": "Frameworks"},
    {"id": 2, "category": "DIY|How To"},
    {"id": 3, "category": "Soft Skills"},
    {"id": 4, "category": "Children"},
    {"id": 5, "category": "Style"},
    {"id": 6, "category": "Random"},
)


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    return default


def _env_categories(name: str) -> tuple[dict, ...]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return DEFAULT_CATEGORIES
    try:
        items = json.loads(raw)
    except json.JSONDecodeError:
        return DEFAULT_CATEGORIES
    if not isinstance(items, list):
        return DEFAULT_CATEGORIES

    parsed: list[dict] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            parsed.append({"id": int(item["id"]), "category": str(item["category"])})
        except (KeyError, TypeError, ValueError):
            continue
    return tuple(parsed) or DEFAULT_CATEGORIES


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    values = tuple(v.strip() for v in raw.split(",") if v.strip())
    return values or default


@dataclass(frozen=True)
class Settings:
    database_url: str = ""
    db_pool_min_size: int = 1
    db_pool_max_size: int = 5
    db_command_timeout_s: float = 30.0
    db_auto_migrate: bool = True
    seed_demo_data: bool = False

    bulk_delete_enabled: bool = False
    strict_categories: bool = False
    categories: tuple[dict, ...] = DEFAULT_CATEGORIES

    weather_api_base_url: str = DEFAULT_WEATHER_BASE_URL
    weather_api_key: str = ""
    weather_timeout_s: float = 10.0

    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("*",))
    log_level: str = "INFO"
    log_dir: str = ""

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=_env_str("DATABASE_URL"),
            db_pool_min_size=max(0, _env_int("DB_POOL_MIN_SIZE", 1)),
            db_pool_max_size=max(1, _env_int("DB_POOL_MAX_SIZE", 5)),
            db_command_timeout_s=_env_float("DB_COMMAND_TIMEOUT_S", 30.0),
            db_auto_migrate=_env_bool("DB_AUTO_MIGRATE", True),
            seed_demo_data=_env_bool("SEED_DEMO_DATA", False),
            bulk_delete_enabled=_env_bool("BULK_DELETE_ENABLED", False),
            strict_categories=_env_bool("STRICT_CATEGORIES", False),
            categories=_env_categories("TUTORIAL_CATEGORIES"),
            weather_api_base_url=_env_str("WEATHER_API_BASE_URL", DEFAULT_WEATHER_BASE_URL),
            weather_api_key=_env_str("WEATHER_API_KEY"),
            weather_timeout_s=_env_float("WEATHER_TIMEOUT_S", 10.0),
            cors_origins=_env_list("CORS_ORIGINS", ("*",)),
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
            log_dir=_env_str("LOG_DIR"),
        )
