"""
CatVote: Votes Route Handler
============================

What:  POST /api/votes records one up/down vote.
Who:   Called by the client data layer's submit_vote().

Request Flow:
    1. FastAPI validates the body against VoteRequest
       (missing cat_id / unknown vote_type → 400, store untouched)
    2. VoteService inserts the row
       (unknown cat_id → foreign key violation → 500, no row)
    3. {"success": true, "message": "Vote recorded"}
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from catvote.database import get_db_session
from catvote.schemas.common import ErrorResponse, MessageResponse
from catvote.schemas.vote import VoteRequest
from catvote.services.vote_service import vote_service

router = APIRouter(prefix="/api", tags=["Votes"])


@router.post(
    "/votes",
    response_model=MessageResponse,
    responses={
        400: {"description": "Invalid cat_id or vote_type", "model": ErrorResponse},
        500: {"description": "Store error (including unknown cat)", "model": ErrorResponse},
    },
    summary="Vote on a cat",
)
async def submit_vote(
    payload: VoteRequest,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await vote_service.submit_vote(db, cat_id=payload.cat_id, vote_type=payload.vote_type)
    return MessageResponse(success=True, message="Vote recorded")
