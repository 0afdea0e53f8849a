"""
CatVote: Winner Response Schema
===============================

What:  Shape of the monthly winner returned by GET/POST /api/winner.
       The endpoints answer `null` instead of this object when no winner
       exists for the month.
"""

from pydantic import BaseModel, Field


class WinnerResponse(BaseModel):
    id: int = Field(description="Winning cat id")
    image_url: str = Field(description="Winning cat picture")
    upvote_count: int = Field(ge=0, description="Upvotes that won the month")

    model_config = {"from_attributes": True}
