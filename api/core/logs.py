"""
Logging setup and per-request access logging.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from typing import Awaitable, Callable

from fastapi import Request, Response

from .config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

access_logger = logging.getLogger("tutorials.access")


def configure_logging(settings: Settings) -> None:
    """
    Configure the root logger from settings.

    Always logs to stdout. When `log_dir` is set, everything also goes to
    `app.log` and errors additionally to `error.log`.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if settings.log_dir:
        os.makedirs(settings.log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(os.path.join(settings.log_dir, "app.log")))
        error_handler = logging.FileHandler(os.path.join(settings.log_dir, "error.log"))
        error_handler.setLevel(logging.ERROR)
        handlers.append(error_handler)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


async def log_requests(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000

    if response.status_code >= 500:
        level = logging.ERROR
    elif response.status_code >= 400:
        level = logging.WARNING
    else:
        level = logging.INFO

    access_logger.log(
        level,
        "%s %s - %s (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response
