"""
City Lines - Levels API

Progression levels, on-demand generation and stateless validation.
"""

import logging

from fastapi import APIRouter, HTTPException, Request

from ..middleware.security import GENERATE_RATE_LIMIT, limiter
from ..schemas import (
    GenerationConfig, GenerationErrorResponse, LevelRecord, LevelResponse, ValidationReport,
)
from ..services.connectivity import ConnectivityEngine
from ..services.generator import generate_level
from ..services.progression import load_level

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/levels", tags=["levels"])


@router.get("/{level_num}", response_model=LevelResponse)
async def get_level(level_num: int):
    """Level from the progression: hand-authored, generated or fallback."""
    if level_num < 1:
        raise HTTPException(status_code=400, detail="Invalid level number")
    return load_level(level_num)


@router.post(
    "/generate",
    response_model=LevelRecord,
    responses={422: {"model": GenerationErrorResponse}},
)
@limiter.limit(GENERATE_RATE_LIMIT)
async def generate(request: Request, config: GenerationConfig):
    """
    One generation attempt for an explicit config.

    Failures surface as 422 with the error kind; nothing is retried here.
    """
    generated = generate_level(config)
    logger.info("[LevelsAPI] Generated %dx%d level, seed %d", *generated.grid_size, generated.seed)
    return generated.to_record()


@router.post("/validate", response_model=ValidationReport)
async def validate(record: LevelRecord):
    """Win-condition report for the record's current rotations."""
    engine = ConnectivityEngine.from_record(record)
    return engine.report
