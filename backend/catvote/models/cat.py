"""
CatVote: Cat SQLAlchemy Model
=============================

What:  ORM model representing the `cats` table.
Who:   Written by CatService.seed_cats(); read by every aggregation query.

Table Design:
    - Integer autoincrement primary key: the id clients vote with
    - image_url: where the client loads the picture from
    - external_id: id assigned by the external image source; UNIQUE so that
      re-seeding the same image is a no-op (NULL allowed, SQLite treats
      NULLs as distinct)
    - created_at: insertion time (UTC)

Rows are never updated; they disappear only through the bulk clear.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from catvote.database import Base


class Cat(Base):
    """A cat picture that can receive votes."""

    __tablename__ = "cats"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    image_url: Mapped[str] = mapped_column(Text, nullable=False)

    external_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        unique=True,
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.current_timestamp(),
    )

    def __repr__(self) -> str:
        return f"<Cat(id={self.id}, external_id='{self.external_id}')>"
