"""
CatVote: Maintenance Route Handler
==================================

What:  POST /api/clear wipes votes, monthly winners and cats.
Who:   Demo resets; the next client fetch_cats() then re-seeds from the
       external image source.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from catvote.database import get_db_session
from catvote.schemas.common import ErrorResponse, MessageResponse
from catvote.services.cat_service import cat_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Maintenance"])


@router.post(
    "/clear",
    response_model=MessageResponse,
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="Delete all cats, votes and winners",
)
async def clear_all(db: AsyncSession = Depends(get_db_session)) -> MessageResponse:
    logger.warning("Clearing all store data")
    await cat_service.clear_all(db)
    return MessageResponse(success=True, message="Database cleared")
