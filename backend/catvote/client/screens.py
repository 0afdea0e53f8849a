"""
CatVote Client: Screens
=======================

What:  View-models for the two screens, the voting list and the winner
       display. They read CatsProvider.state and forward user actions; all
       data logic stays in the provider.

WinnerScreen shows two things: the winner recorded by the API for this month
(state.winner) and the live leader computed from the loaded cats, which is
the cat with the highest positive net score (upvotes - downvotes), the first
one in list order winning ties.
"""

from typing import List, Optional

from pydantic import BaseModel

from catvote.client.provider import CatsProvider
from catvote.models.vote import VoteType
from catvote.schemas.cat import CatScore
from catvote.schemas.winner import WinnerResponse


class CatRow(BaseModel):
    id: int
    image_url: str
    upvotes: int
    downvotes: int
    score: int

    @classmethod
    def from_score(cls, cat: CatScore) -> "CatRow":
        return cls(
            id=cat.id,
            image_url=cat.image_url,
            upvotes=cat.upvotes,
            downvotes=cat.downvotes,
            score=cat.upvotes - cat.downvotes,
        )


class CatListScreen:
    """Voting list: one row per cat, in the order the API returned them."""

    def __init__(self, provider: CatsProvider):
        self.provider = provider

    def rows(self) -> List[CatRow]:
        return [CatRow.from_score(cat) for cat in self.provider.state.cats]

    async def upvote(self, cat_id: int) -> None:
        await self.provider.submit_vote(cat_id, VoteType.UPVOTE)

    async def downvote(self, cat_id: int) -> None:
        await self.provider.submit_vote(cat_id, VoteType.DOWNVOTE)

    async def refresh(self) -> None:
        await self.provider.fetch_cats()

    def render(self) -> List[str]:
        state = self.provider.state
        if state.loading:
            return ["Loading cats..."]
        if state.error:
            return [f"Error: {state.error}"]
        return [
            f"#{row.id} 👍 {row.upvotes} 👎 {row.downvotes} {row.image_url}"
            for row in self.rows()
        ]


class WinnerScreen:
    """Winner display."""

    def __init__(self, provider: CatsProvider):
        self.provider = provider

    @property
    def recorded_winner(self) -> Optional[WinnerResponse]:
        return self.provider.state.winner

    def leader(self) -> Optional[CatRow]:
        """Cat with the highest positive net score, or None."""
        best: Optional[CatRow] = None
        for row in (CatRow.from_score(cat) for cat in self.provider.state.cats):
            if row.score > (best.score if best else 0):
                best = row
        return best

    def render(self) -> List[str]:
        if self.provider.state.loading:
            return ["Loading..."]

        lines = ["🏆 This Month's Winner!"]
        leader = self.leader()
        if leader is None:
            lines.append("No votes yet!")
        else:
            lines.extend([
                leader.image_url,
                f"Score: {leader.score}",
                f"👍 {leader.upvotes}",
                f"👎 {leader.downvotes}",
            ])

        winner = self.recorded_winner
        if winner is not None:
            lines.append(f"Recorded winner: #{winner.id} with {winner.upvote_count} upvotes")
        return lines
