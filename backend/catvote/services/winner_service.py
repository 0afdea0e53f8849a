"""
CatVote: Winner Service (Monthly Winner Read + Recording Job)
=============================================================

What:  Reads the current month's recorded winner and records a month's
       leader into `monthly_winners`.
Who:   GET /api/winner (read), POST /api/winner (record), and any scheduler
       that wants to snapshot the leader (see record_monthly_winner).

Period key:
    Calendar year-month in UTC, formatted "YYYY-MM".

Read vs. write:
    get_current_winner() only ever reads monthly_winners; a month with no row
    answers None even when votes exist. record_monthly_winner() is the write
    path: it counts upvotes cast during the month, replaces that month's rows
    with a single row for the leader, and returns it.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catvote.exceptions import DatabaseError, ValidationError
from catvote.models import Cat, MonthlyWinner, Vote, VoteType
from catvote.schemas.winner import WinnerResponse

logger = logging.getLogger(__name__)

MONTH_KEY_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


def current_month_key(now: Optional[datetime] = None) -> str:
    """Return the "YYYY-MM" key of `now` (default: the current UTC time)."""
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y-%m")


def validate_month_key(month_year: str) -> str:
    if not re.match(MONTH_KEY_PATTERN, month_year):
        raise ValidationError(
            message=f"Invalid month '{month_year}'. Expected format YYYY-MM.",
            field="month",
        )
    return month_year


class WinnerService:
    """
    Responsibilities:
        - get_current_winner():     highest upvote_count row for this month
        - compute_monthly_leader(): most upvoted cat among votes of a month
        - record_monthly_winner():  persist that leader as the month's winner
    """

    async def get_current_winner(
        self, db: AsyncSession, month_year: Optional[str] = None
    ) -> Optional[WinnerResponse]:
        """
        Look up the recorded winner for the current (or given) month.

        Returns:
            WinnerResponse for the row with the highest upvote_count (lowest
            row id on ties), or None when the month has no row.

        Raises:
            DatabaseError: Query execution failed (→ 500)
        """
        month_year = month_year or current_month_key()

        query = (
            select(Cat.id, Cat.image_url, MonthlyWinner.upvote_count)
            .join(Cat, MonthlyWinner.cat_id == Cat.id)
            .where(MonthlyWinner.month_year == month_year)
            .order_by(desc(MonthlyWinner.upvote_count), MonthlyWinner.id)
            .limit(1)
        )

        try:
            result = await db.execute(query)
            row = result.first()
        except SQLAlchemyError as e:
            logger.error("Database error fetching winner: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch winner",
                context={"month_year": month_year, "error_type": type(e).__name__},
            )

        if row is None:
            logger.debug("No winner recorded for %s", month_year)
            return None

        return WinnerResponse(id=row.id, image_url=row.image_url, upvote_count=row.upvote_count)

    async def compute_monthly_leader(
        self, db: AsyncSession, month_year: str
    ) -> Optional[WinnerResponse]:
        """
        Find the cat with the most upvotes cast during `month_year`.

        Ties go to the lowest cat id. Downvotes do not count.

        Returns:
            WinnerResponse, or None when nobody was upvoted that month.
        """
        validate_month_key(month_year)
        upvote_count = func.count(Vote.id).label("upvote_count")

        query = (
            select(Cat.id, Cat.image_url, upvote_count)
            .join(Vote, Vote.cat_id == Cat.id)
            .where(
                Vote.vote_type == VoteType.UPVOTE.value,
                func.strftime("%Y-%m", Vote.created_at) == month_year,
            )
            .group_by(Cat.id, Cat.image_url)
            .order_by(desc(upvote_count), Cat.id)
            .limit(1)
        )

        try:
            result = await db.execute(query)
            row = result.first()
        except SQLAlchemyError as e:
            logger.error("Database error computing leader: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to compute monthly winner",
                context={"month_year": month_year, "error_type": type(e).__name__},
            )

        if row is None:
            return None
        return WinnerResponse(id=row.id, image_url=row.image_url, upvote_count=row.upvote_count)

    async def record_monthly_winner(
        self, db: AsyncSession, month_year: Optional[str] = None
    ) -> Optional[WinnerResponse]:
        """
        Snapshot the month's leader into monthly_winners.

        Existing rows for the month are replaced, leaving exactly one. Nothing
        is written when the month has no upvotes.

        Args:
            db:         Async database session
            month_year: "YYYY-MM" key; defaults to the current UTC month

        Returns:
            The recorded winner, or None.

        Raises:
            ValidationError: month_year is not a YYYY-MM key (→ 400)
            DatabaseError:   Any read or write failed (→ 500)
        """
        month_year = validate_month_key(month_year or current_month_key())
        leader = await self.compute_monthly_leader(db, month_year)

        if leader is None:
            logger.info("No upvotes in %s; no winner recorded", month_year)
            return None

        try:
            await db.execute(delete(MonthlyWinner).where(MonthlyWinner.month_year == month_year))
            db.add(
                MonthlyWinner(
                    cat_id=leader.id,
                    month_year=month_year,
                    upvote_count=leader.upvote_count,
                )
            )
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error recording winner: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to record monthly winner",
                context={"month_year": month_year, "error_type": type(e).__name__},
            )

        logger.info(
            "Recorded winner for %s: cat %d with %d upvotes",
            month_year,
            leader.id,
            leader.upvote_count,
        )
        return leader


winner_service = WinnerService()
