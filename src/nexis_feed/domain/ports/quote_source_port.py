"""
Port (interface) for quote sources.
Infrastructure adapters (e.g. HttpQuoteSource, YFinanceQuoteSource) must
implement this interface.
"""

from abc import ABC, abstractmethod

from nexis_feed.domain.entities.quote import Quote


class IQuoteSource(ABC):
    @abstractmethod
    async def fetch_quote(self, symbol: str) -> Quote:
        """Fetch the current quote for *symbol*.

        Raises:
            QuoteFetchError: when the source cannot produce a quote.
        """
        ...

    async def aclose(self) -> None:
        """Release any transport held by the source."""
        return None
