"""
Infrastructure adapter: REST /api/stocks/{symbol}/realtime -> IQuoteSource.

All httpx details are confined here. No explicit retry: the polling
coordinator treats each tick as an independent attempt and masks failures.
"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from nexis_feed.domain.entities.quote import Quote
from nexis_feed.domain.errors import QuoteFetchError
from nexis_feed.domain.ports.quote_source_port import IQuoteSource
from nexis_feed.infrastructure.schemas.realtime_quote import RealtimeQuotePayload

logger = logging.getLogger(__name__)


class HttpQuoteSource(IQuoteSource):
    """Fetches quotes from the platform's realtime quote endpoint."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def fetch_quote(self, symbol: str) -> Quote:
        try:
            response = await self._client.get(f"/api/stocks/{quote(symbol, safe='')}/realtime")
            response.raise_for_status()
            payload = RealtimeQuotePayload.model_validate(response.json())
            result = payload.to_quote()
        except httpx.HTTPError as exc:
            raise QuoteFetchError(symbol, f"request failed: {exc}") from exc
        except (ValueError, ValidationError) as exc:
            raise QuoteFetchError(symbol, f"malformed payload: {exc}") from exc
        logger.debug("Fetched %s from %s", symbol, response.url)
        return result

    async def aclose(self) -> None:
        await self._client.aclose()
