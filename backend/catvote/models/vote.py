"""
CatVote: Vote SQLAlchemy Model
==============================

What:  ORM model representing the `votes` table, plus the VoteType enum.
Who:   Written by VoteService.submit_vote(); aggregated by CatService and
       WinnerService.

Invariants:
    - cat_id must reference an existing cat (FOREIGN KEY, enforced because the
      store turns PRAGMA foreign_keys on for every connection)
    - vote_type is exactly 'upvote' or 'downvote' (validated by the API schema
      first, CHECK constraint as the last line)
    - rows are immutable; only the bulk clear removes them
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from catvote.database import Base


class VoteType(str, enum.Enum):
    """The two vote literals accepted anywhere in the system."""

    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


class Vote(Base):
    """A single immutable up/down signal tied to one cat."""

    __tablename__ = "votes"
    __table_args__ = (
        CheckConstraint(
            "vote_type IN ('upvote', 'downvote')",
            name="ck_votes_vote_type",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    cat_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("cats.id"),
        nullable=False,
        index=True,
    )

    # Stored as the plain literal so raw SQL aggregation can compare strings
    vote_type: Mapped[str] = mapped_column(String(10), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.current_timestamp(),
    )

    def __repr__(self) -> str:
        return f"<Vote(id={self.id}, cat_id={self.cat_id}, vote_type='{self.vote_type}')>"
