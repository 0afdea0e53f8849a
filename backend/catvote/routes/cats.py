"""
CatVote: Cats Route Handlers
============================

What:  GET /api/cats (aggregated list) and POST /api/cats (seed batch).
How:   Validates input with Pydantic, delegates to CatService, returns JSON.
Who:   Called by the client data layer's fetch_cats() and cold-start seeding.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from catvote.database import get_db_session
from catvote.schemas.cat import CatScore, SeedCatsRequest, SeedCatsResponse
from catvote.schemas.common import ErrorResponse
from catvote.services.cat_service import cat_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Cats"])


@router.get(
    "/cats",
    response_model=List[CatScore],
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="List cats with vote counts",
    description=(
        "Returns every cat with its upvote and downvote counts, most upvoted "
        "first (ties ordered by id). Cats without votes report 0 and 0."
    ),
)
async def list_cats(db: AsyncSession = Depends(get_db_session)) -> List[CatScore]:
    return await cat_service.list_cats(db)


@router.post(
    "/cats",
    response_model=SeedCatsResponse,
    responses={
        400: {"description": "Body is not a non-empty list of cats", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Seed cats from the external image source",
    description=(
        "Inserts each {id, url} record unless a cat with the same external id "
        "already exists. Returns the number of rows actually created."
    ),
)
async def seed_cats(
    payload: SeedCatsRequest,
    db: AsyncSession = Depends(get_db_session),
) -> SeedCatsResponse:
    """
    Insert-or-ignore a batch of cats.

    Each record is inserted independently: one bad record is logged and
    skipped without aborting the rest of the batch.
    """
    logger.info("Received seed batch of %d cats", len(payload.cats))
    inserted = await cat_service.seed_cats(db, payload.cats)
    return SeedCatsResponse(success=True, inserted=inserted)
