"""
CatVote: Cat Request/Response Schemas
=====================================

What:  Pydantic models for listing cats and seeding them.
Who:   GET /api/cats and POST /api/cats; reused by the client data layer to
       parse the same payloads on the other side of the wire.
"""

from typing import List

from pydantic import BaseModel, Field


class CatScore(BaseModel):
    """
    One row of the vote aggregation.

    Computed fresh on every request; never persisted.
    """
    id: int = Field(description="Cat identifier (use this as cat_id when voting)")
    image_url: str = Field(description="Where to load the cat picture from")
    upvotes: int = Field(default=0, ge=0, description="Number of upvotes received")
    downvotes: int = Field(default=0, ge=0, description="Number of downvotes received")

    model_config = {"from_attributes": True}


class SeedCat(BaseModel):
    """
    A record from the external cat-image source.

    The source returns extra keys (width, height, breeds...); they are ignored.
    """
    id: str = Field(min_length=1, description="Identifier assigned by the image source")
    url: str = Field(min_length=1, description="Image URL")

    model_config = {"extra": "ignore"}


class SeedCatsRequest(BaseModel):
    """Body of POST /api/cats. An empty list is rejected."""
    cats: List[SeedCat] = Field(min_length=1, description="Cats to insert (non-empty)")


class SeedCatsResponse(BaseModel):
    """
    Result of a seed batch.

    inserted counts rows actually created; duplicates of an existing
    external id are skipped silently.
    """
    success: bool = True
    inserted: int = Field(ge=0, description="Number of new cats stored")
