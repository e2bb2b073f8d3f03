from __future__ import annotations

import random
import re
import traceback
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from sample_app.logging import LEVELS, AppLogger

from .deps import get_app_logger

router = APIRouter(default_response_class=PlainTextResponse)

DEFAULT_GENERATE_COUNT = 10
ACTIONS = ("login", "logout", "purchase", "view", "search")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class SampleError(Exception):
    pass


def _parse_count(raw: Optional[str]) -> int:
    """Leading integer of ``raw`` ("3.7" -> 3, "5abc" -> 5).

    Missing, no leading digits or zero means the default; negatives mean none.
    """
    match = _LEADING_INT.match(raw or "")
    count = int(match.group(1)) if match else 0
    if count == 0:
        return DEFAULT_GENERATE_COUNT
    return max(count, 0)


@router.get("/")
async def home(logger: AppLogger = Depends(get_app_logger)) -> str:
    logger.info("Home page accessed")
    return "Sample App for ELK Stack Integration"


@router.get("/info")
async def info(logger: AppLogger = Depends(get_app_logger)) -> str:
    logger.info("This is an informational message")
    return "Info log generated"


@router.get("/warn")
async def warn(logger: AppLogger = Depends(get_app_logger)) -> str:
    logger.warn("This is a warning message")
    return "Warning log generated"


@router.get("/error")
async def error(logger: AppLogger = Depends(get_app_logger)) -> str:
    logger.error("This is an error message", error="Sample Error", code="ERR_SAMPLE")
    return "Error log generated"


@router.get("/exception")
async def exception(logger: AppLogger = Depends(get_app_logger)) -> PlainTextResponse:
    try:
        raise SampleError("This is a sample exception")
    except SampleError as exc:
        logger.error("Exception occurred", error=str(exc), stack=traceback.format_exc())
        return PlainTextResponse("Exception logged", status_code=500)


@router.get("/generate")
async def generate(
    count: Optional[str] = Query(default=None),
    logger: AppLogger = Depends(get_app_logger),
) -> str:
    total = _parse_count(count)
    for _ in range(total):
        level = random.choice(LEVELS)
        action = random.choice(ACTIONS)
        user_id = random.randrange(1000)
        logger.log(
            level,
            f"User {user_id} performed {action}",
            userId=user_id,
            action=action,
            result="failure" if level == "error" else "success",
            processingTime=random.randrange(500),
        )
    return f"Generated {total} random logs"
