"""
CatVote Client: API Client
==========================

What:  Async JSON-over-HTTP wrapper around the CatVote API.
How:   httpx.AsyncClient with a base URL (settings.api_url by default); every
       request is logged with its duration and tagged with an X-Request-ID
       so client and server log lines can be matched.
Who:   Used by CatsProvider; tests inject an AsyncClient on ASGITransport.

Failure semantics:
    Non-2xx response  → ApiRequestError("API Error: <status>", status_code)
    Transport failure → ApiRequestError("Network error: ...")
    Body not JSON, or not the expected shape → ApiRequestError("Invalid API response")
    No retry in any case.
"""

import logging
import time
import uuid
from typing import Any, List, Optional, Sequence, Union

import httpx
from pydantic import TypeAdapter

from catvote.config import settings
from catvote.exceptions import ApiRequestError
from catvote.models.vote import VoteType
from catvote.schemas.cat import CatScore, SeedCat, SeedCatsResponse
from catvote.schemas.common import MessageResponse
from catvote.schemas.winner import WinnerResponse

logger = logging.getLogger(__name__)

_cat_list = TypeAdapter(List[CatScore])
_winner = TypeAdapter(Optional[WinnerResponse])
_seed_result = TypeAdapter(SeedCatsResponse)
_message = TypeAdapter(MessageResponse)


class ApiClient:
    """
    Client for the CatVote HTTP API.

    Example:
        async with ApiClient("http://localhost:3000") as api:
            cats = await api.list_cats()
            await api.submit_vote(cats[0].id, VoteType.UPVOTE)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url or settings.api_url,
            timeout=timeout or settings.http_timeout,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    # ── Raw requests ──────────────────────────────────────────────────────

    async def get(self, endpoint: str) -> Any:
        return await self._request("GET", endpoint)

    async def post(self, endpoint: str, data: Any = None) -> Any:
        return await self._request("POST", endpoint, data)

    async def _request(self, method: str, endpoint: str, data: Any = None) -> Any:
        rid = str(uuid.uuid4())[:8]
        logger.debug("[%s] API request initiated: %s %s", rid, method, endpoint)
        start_time = time.perf_counter()

        try:
            response = await self._client.request(
                method,
                endpoint,
                json=data,
                headers={"X-Request-ID": rid},
            )
        except httpx.HTTPError as e:
            logger.error(
                "[%s] Network error during API request %s %s: %s",
                rid,
                method,
                endpoint,
                str(e),
            )
            raise ApiRequestError(
                message=f"Network error: {e}",
                context={"endpoint": endpoint, "method": method, "request_id": rid},
            ) from e

        duration_ms = (time.perf_counter() - start_time) * 1000

        if response.is_error:
            logger.error(
                "[%s] API request failed: %s %s %d %.1fms %s",
                rid,
                method,
                endpoint,
                response.status_code,
                duration_ms,
                response.text,
            )
            raise ApiRequestError(
                message=f"API Error: {response.status_code}",
                status_code=response.status_code,
                context={"endpoint": endpoint, "method": method, "request_id": rid},
            )

        logger.debug(
            "[%s] API request completed: %s %s %d %.1fms",
            rid,
            method,
            endpoint,
            response.status_code,
            duration_ms,
        )
        try:
            return response.json()
        except ValueError as e:
            logger.error("[%s] API response was not JSON: %s %s", rid, method, endpoint)
            raise ApiRequestError(
                message="Invalid API response",
                status_code=response.status_code,
                context={"endpoint": endpoint, "method": method, "request_id": rid},
            ) from e

    # ── Typed endpoints ───────────────────────────────────────────────────

    def _parse(self, adapter: TypeAdapter, data: Any, endpoint: str) -> Any:
        # pydantic's ValidationError is a ValueError
        try:
            return adapter.validate_python(data)
        except ValueError as e:
            logger.error("API response for %s did not match its schema: %s", endpoint, str(e))
            raise ApiRequestError(
                message="Invalid API response",
                context={"endpoint": endpoint, "error_type": type(e).__name__},
            ) from e

    async def list_cats(self) -> List[CatScore]:
        data = await self.get("/api/cats")
        return self._parse(_cat_list, data, "/api/cats")

    async def get_winner(self) -> Optional[WinnerResponse]:
        data = await self.get("/api/winner")
        return self._parse(_winner, data, "/api/winner")

    async def seed_cats(self, cats: Sequence[SeedCat]) -> SeedCatsResponse:
        data = await self.post(
            "/api/cats",
            {"cats": [cat.model_dump() for cat in cats]},
        )
        return self._parse(_seed_result, data, "/api/cats")

    async def submit_vote(self, cat_id: int, vote_type: Union[VoteType, str]) -> MessageResponse:
        # Unknown literals are passed through; the server owns validation
        value = vote_type.value if isinstance(vote_type, VoteType) else vote_type
        data = await self.post("/api/votes", {"cat_id": cat_id, "vote_type": value})
        return self._parse(_message, data, "/api/votes")

    async def clear(self) -> MessageResponse:
        data = await self.post("/api/clear")
        return self._parse(_message, data, "/api/clear")
