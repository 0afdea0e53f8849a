"""
CatVote: Winner Route Handlers
==============================

What:  GET /api/winner reads this month's recorded winner;
       POST /api/winner records the leader of a month.
Who:   GET is called by the client data layer's fetch_winner(). POST is the
       entry point for whatever schedules the monthly snapshot (cron, an
       admin, a test).

Both answer JSON `null` when there is no winner; that is not an error.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from catvote.database import get_db_session
from catvote.schemas.common import ErrorResponse
from catvote.schemas.winner import WinnerResponse
from catvote.services.winner_service import MONTH_KEY_PATTERN, winner_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Winner"])


@router.get(
    "/winner",
    response_model=Optional[WinnerResponse],
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="Current month's winner",
    description=(
        "Returns the recorded winner for the current UTC month (highest "
        "upvote_count), or null when none has been recorded."
    ),
)
async def get_winner(db: AsyncSession = Depends(get_db_session)) -> Optional[WinnerResponse]:
    return await winner_service.get_current_winner(db)


@router.post(
    "/winner",
    response_model=Optional[WinnerResponse],
    responses={
        400: {"description": "Malformed month key", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Record a month's winner",
    description=(
        "Counts the upvotes cast during the month (default: current UTC month), "
        "stores the most upvoted cat as that month's only winner row and returns "
        "it. Returns null and stores nothing when the month has no upvotes."
    ),
)
async def record_winner(
    month: Optional[str] = Query(
        default=None,
        pattern=MONTH_KEY_PATTERN,
        description="Month to record, formatted YYYY-MM",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[WinnerResponse]:
    return await winner_service.record_monthly_winner(db, month_year=month)
