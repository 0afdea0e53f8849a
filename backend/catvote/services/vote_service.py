"""
CatVote: Vote Service
=====================

What:  Records a single vote.
Who:   Called by POST /api/votes once VoteRequest has validated the body.

Nothing is recomputed after the insert; scores are aggregated on read, so the
caller re-reads GET /api/cats to see the effect.
"""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catvote.exceptions import DatabaseError
from catvote.models import Vote, VoteType

logger = logging.getLogger(__name__)


class VoteService:

    async def submit_vote(self, db: AsyncSession, cat_id: int, vote_type: VoteType) -> Vote:
        """
        Insert one immutable vote row.

        Args:
            db:        Async database session
            cat_id:    Id of an existing cat
            vote_type: VoteType.UPVOTE or VoteType.DOWNVOTE

        Returns:
            The flushed Vote (id assigned).

        Raises:
            DatabaseError: cat_id does not exist (foreign key violation) or the
                           insert failed for another storage reason (→ 500)
        """
        vote = Vote(cat_id=cat_id, vote_type=VoteType(vote_type).value)
        try:
            db.add(vote)
            await db.flush()
        except IntegrityError as e:
            logger.error(
                "Vote rejected by store constraints (cat_id=%s, vote_type=%s): %s",
                cat_id,
                vote.vote_type,
                str(e.orig),
            )
            raise DatabaseError(
                message="Failed to add vote",
                context={"cat_id": cat_id, "error_type": "IntegrityError"},
            )
        except SQLAlchemyError as e:
            logger.error("Database error adding vote: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to add vote",
                context={"cat_id": cat_id, "error_type": type(e).__name__},
            )

        logger.info("Vote %d recorded: cat_id=%d %s", vote.id, cat_id, vote.vote_type)
        return vote


vote_service = VoteService()
