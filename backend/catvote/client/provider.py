"""
CatVote Client: Cats Provider (Client Data Layer)
=================================================

What:  Owns the UI-facing state {cats, winner, loading, error, status} and the
       three actions that change it: fetch_cats, fetch_winner, submit_vote.
How:   Every piece of state is derived from the latest API response; nothing
       is cached across actions. Collaborators (ApiClient, CatImageSource) are
       passed in, so screens and tests share one explicit provider object.

Fetch cycle (fetch_cats):
    idle → loading → success | error

    GET /api/cats
      └─ empty? ─yes→ CatImageSource.fetch() → POST /api/cats → GET /api/cats
    Any failure lands in state.error. Nothing retries; the next attempt comes
    from the user (a new load() or another vote).

submit_vote:
    POST /api/votes, then fetch_cats() and fetch_winner(). A failed POST skips
    both refreshes and is stored in state.error.
"""

import enum
import logging
import time
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from catvote.client.api import ApiClient
from catvote.client.cat_source import CatImageSource
from catvote.exceptions import CatVoteError
from catvote.models.vote import VoteType
from catvote.schemas.cat import CatScore
from catvote.schemas.winner import WinnerResponse

logger = logging.getLogger(__name__)


class FetchStatus(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class CatsState(BaseModel):
    """Snapshot the screens render."""
    cats: List[CatScore] = Field(default_factory=list)
    winner: Optional[WinnerResponse] = None
    loading: bool = False
    error: Optional[str] = None
    status: FetchStatus = FetchStatus.IDLE


class CatsProvider:
    """
    Client data layer shared by CatListScreen and WinnerScreen.

    Example:
        provider = CatsProvider(ApiClient(), CatImageSource())
        await provider.load()
        await provider.submit_vote(provider.state.cats[0].id, VoteType.UPVOTE)
    """

    def __init__(self, api: ApiClient, image_source: CatImageSource):
        self.api = api
        self.image_source = image_source
        self.state = CatsState()

    async def load(self) -> None:
        """Initial load: cats first, then the winner."""
        logger.info("CatsProvider loading initial data")
        await self.fetch_cats()
        await self.fetch_winner()

    async def fetch_cats(self) -> None:
        """
        Refresh state.cats, seeding from the image source when the store is empty.

        Never raises for API or source failures; they end up in state.error
        with status ERROR.
        """
        self.state.loading = True
        self.state.error = None
        self.state.status = FetchStatus.LOADING
        start_time = time.perf_counter()

        try:
            cats = await self.api.list_cats()
            source = "database"

            if not cats:
                logger.info("Store is empty, fetching from the external cat image source")
                new_cats = await self.image_source.fetch()
                seeded = await self.api.seed_cats(new_cats)
                logger.info("Seeded %d new cats", seeded.inserted)
                cats = await self.api.list_cats()
                source = "external_api"

            self.state.cats = cats
            self.state.status = FetchStatus.SUCCESS
            logger.info(
                "Cats loaded: count=%d source=%s duration=%.1fms",
                len(cats),
                source,
                (time.perf_counter() - start_time) * 1000,
            )
        except CatVoteError as e:
            self.state.error = e.message
            self.state.status = FetchStatus.ERROR
            logger.error("Failed to fetch cats: %s (%s)", e.message, type(e).__name__)
        finally:
            self.state.loading = False

    async def fetch_winner(self) -> None:
        """
        Refresh state.winner.

        Failures are logged only; state.error is left as it was.
        """
        try:
            self.state.winner = await self.api.get_winner()
            logger.debug(
                "Winner fetched: %s",
                self.state.winner.id if self.state.winner else None,
            )
        except CatVoteError as e:
            logger.error("Failed to fetch winner: %s", e.message)

    async def submit_vote(self, cat_id: int, vote_type: Union[VoteType, str]) -> None:
        """
        Cast a vote, then refresh cats and winner.

        A failed vote is stored in state.error and nothing is refreshed.
        """
        logger.info("Submitting vote: cat_id=%s vote_type=%s", cat_id, vote_type)
        try:
            await self.api.submit_vote(cat_id, vote_type)
        except CatVoteError as e:
            logger.error("Vote submission failed for cat %s: %s", cat_id, e.message)
            self.state.error = e.message
            return

        await self.fetch_cats()
        await self.fetch_winner()
