"""
Infrastructure adapter: local PriceGenerator -> IQuoteSource.

Serves the same synthetic series as the /realtime endpoint without a network
hop; useful for demos and offline development.
"""

from collections.abc import Callable
from datetime import datetime, timezone

from nexis_feed.application.services.price_generator import PriceGenerator
from nexis_feed.domain.entities.quote import Quote
from nexis_feed.domain.ports.quote_source_port import IQuoteSource


class SyntheticQuoteSource(IQuoteSource):
    def __init__(
        self,
        generator: PriceGenerator,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._generator = generator
        self._clock = clock

    async def fetch_quote(self, symbol: str) -> Quote:
        return self._generator.generate(symbol, self._clock())
