"""
CatVote: MonthlyWinner SQLAlchemy Model
=======================================

What:  ORM model representing the `monthly_winners` table.
Who:   Written by WinnerService.record_monthly_winner(); read by
       WinnerService.get_current_winner().

month_year uses the "YYYY-MM" calendar key. The schema allows several rows
per month; the read path always picks the one with the highest
upvote_count, and the recording job replaces a month's rows with one.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, func, text
from sqlalchemy.orm import Mapped, mapped_column

from catvote.database import Base


class MonthlyWinner(Base):
    """The leading cat recorded for one calendar month."""

    __tablename__ = "monthly_winners"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    cat_id: Mapped[int] = mapped_column(Integer, ForeignKey("cats.id"), nullable=False)

    month_year: Mapped[str] = mapped_column(String(7), nullable=False)

    upvote_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.current_timestamp(),
    )

    __table_args__ = (
        Index("idx_monthly_winners_month_year", "month_year"),
    )

    def __repr__(self) -> str:
        return (
            f"<MonthlyWinner(month_year='{self.month_year}', cat_id={self.cat_id}, "
            f"upvote_count={self.upvote_count})>"
        )
