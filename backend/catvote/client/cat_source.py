"""
CatVote Client: External Cat-Image Source
=========================================

What:  Fetches a batch of random cat images ([{id, url, ...}]) from
       TheCatAPI (settings.cat_api_url).
When:  Only on cold start, when the CatVote store holds zero cats.

A failure (network, status, unexpected body) raises UpstreamError with a
generic user-facing message. There is no retry.
"""

import logging
from typing import List, Optional

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from catvote.config import settings
from catvote.exceptions import UpstreamError
from catvote.schemas.cat import SeedCat

logger = logging.getLogger(__name__)

_seed_list = TypeAdapter(List[SeedCat])


class CatImageSource:

    def __init__(
        self,
        url: Optional[str] = None,
        limit: Optional[int] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        self.url = url or settings.cat_api_url
        self.limit = limit or settings.cat_api_limit
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout or settings.http_timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self) -> List[SeedCat]:
        """
        Download one batch of cat records.

        Returns:
            SeedCat list ready to POST to /api/cats (extra keys dropped).

        Raises:
            UpstreamError: The source was unreachable or answered garbage.
        """
        logger.info("Fetching %d cats from %s", self.limit, self.url)
        try:
            response = await self._client.get(self.url, params={"limit": self.limit})
            response.raise_for_status()
            cats = _seed_list.validate_python(response.json())
        except httpx.HTTPError as e:
            logger.error("Cat image source request failed: %s", str(e))
            raise UpstreamError(context={"url": self.url, "error_type": type(e).__name__}) from e
        except (ValueError, PydanticValidationError) as e:
            logger.error("Cat image source returned an unexpected body: %s", str(e))
            raise UpstreamError(context={"url": self.url, "error_type": type(e).__name__}) from e

        logger.info("Cat image source returned %d cats", len(cats))
        return cats
