"""
CatVote: Vote Request Schema
============================

What:  Validated body of POST /api/votes.
How:   FastAPI parses the JSON body into VoteRequest before the handler runs;
       anything not conforming (missing cat_id, unknown vote_type, extra keys)
       is rejected with a 400 validation_error and never reaches the store.
"""

from pydantic import BaseModel, Field

from catvote.models.vote import VoteType

# Largest value a SQLite INTEGER column can hold
MAX_CAT_ID = 2**63 - 1


class VoteRequest(BaseModel):
    cat_id: int = Field(gt=0, le=MAX_CAT_ID, description="Id of the cat being voted on")
    vote_type: VoteType = Field(description="Either 'upvote' or 'downvote'")

    model_config = {"extra": "forbid"}
