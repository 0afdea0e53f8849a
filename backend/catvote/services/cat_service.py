"""
CatVote: Cat Service (Aggregation, Seeding, Bulk Clear)
=======================================================

What:  Business logic for the cats collection: the vote aggregation list,
       idempotent seeding from the external image source, and the bulk clear.
Who:   Called by the cats and maintenance routers.

Aggregation query (list_cats):
    SELECT cats.id, cats.image_url,
           SUM(CASE WHEN votes.vote_type = 'upvote'   THEN 1 ELSE 0 END) AS upvotes,
           SUM(CASE WHEN votes.vote_type = 'downvote' THEN 1 ELSE 0 END) AS downvotes
    FROM cats LEFT OUTER JOIN votes ON cats.id = votes.cat_id
    GROUP BY cats.id
    ORDER BY upvotes DESC, cats.id ASC

    The LEFT OUTER JOIN keeps cats without votes (their single NULL-joined
    row counts as 0 in both sums). The id tiebreak makes ties reproducible.

Error Handling Strategy:
    SQLAlchemy errors are logged with full detail and re-raised as
    DatabaseError, whose response never carries driver messages.
"""

import logging
from typing import List, Sequence

from sqlalchemy import case, delete, desc, func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catvote.exceptions import DatabaseError
from catvote.models import Cat, MonthlyWinner, Vote, VoteType
from catvote.schemas.cat import CatScore, SeedCat

logger = logging.getLogger(__name__)


def vote_count(vote_type: VoteType):
    """SUM(CASE ...) counting one vote type over a LEFT OUTER JOIN on votes."""
    return func.coalesce(
        func.sum(case((Vote.vote_type == vote_type.value, 1), else_=0)),
        0,
    )


class CatService:
    """
    Stateless service; every method receives the session it works in.

    Responsibilities:
        - list_cats():  aggregated scores, most upvoted first
        - seed_cats():  insert-or-ignore by external id, per-item isolation
        - clear_all():  delete votes, winners, cats (children first)
    """

    async def list_cats(self, db: AsyncSession) -> List[CatScore]:
        """
        Return every cat with its upvote and downvote counts.

        Returns:
            CatScore list ordered by upvotes descending, then id ascending.

        Raises:
            DatabaseError: Query execution failed (→ 500)
        """
        upvotes = vote_count(VoteType.UPVOTE).label("upvotes")
        downvotes = vote_count(VoteType.DOWNVOTE).label("downvotes")

        query = (
            select(Cat.id, Cat.image_url, upvotes, downvotes)
            .select_from(Cat)
            .outerjoin(Vote, Vote.cat_id == Cat.id)
            .group_by(Cat.id, Cat.image_url)
            .order_by(desc(upvotes), Cat.id)
        )

        try:
            result = await db.execute(query)
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error("Database error listing cats: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch cats",
                context={"error_type": type(e).__name__},
            )

        return [
            CatScore(
                id=row.id,
                image_url=row.image_url,
                upvotes=int(row.upvotes),
                downvotes=int(row.downvotes),
            )
            for row in rows
        ]

    async def seed_cats(self, db: AsyncSession, cats: Sequence[SeedCat]) -> int:
        """
        Insert cats from the external image source, skipping known ones.

        How:
            Each record is an INSERT ... ON CONFLICT(external_id) DO NOTHING
            inside its own SAVEPOINT. A failing record is logged and rolled
            back to its savepoint; the rest of the batch still lands.

        Args:
            db:   Async database session
            cats: Records shaped {id, url} (already schema-validated)

        Returns:
            Number of rows actually created (duplicates count as 0).
        """
        inserted = 0
        for cat in cats:
            stmt = (
                sqlite_insert(Cat)
                .values(image_url=cat.url, external_id=cat.id)
                .on_conflict_do_nothing(index_elements=[Cat.external_id])
            )
            try:
                async with db.begin_nested():
                    result = await db.execute(stmt)
                    inserted += max(result.rowcount or 0, 0)
            except SQLAlchemyError as e:
                logger.error(
                    "Error inserting cat external_id=%s: %s", cat.id, str(e)
                )

        logger.info(
            "Seeded cats: %d received, %d inserted, %d skipped",
            len(cats),
            inserted,
            len(cats) - inserted,
        )
        return inserted

    async def clear_all(self, db: AsyncSession) -> None:
        """
        Delete every vote, monthly winner and cat.

        Children are deleted before parents so the foreign keys on votes and
        monthly_winners are never violated. Irreversible.

        Raises:
            DatabaseError: Any delete failed (→ 500)
        """
        try:
            for table in (Vote, MonthlyWinner, Cat):
                result = await db.execute(delete(table))
                logger.info("Cleared %s: %d rows", table.__tablename__, result.rowcount)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error clearing store: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to clear database",
                context={"error_type": type(e).__name__},
            )


cat_service = CatService()
