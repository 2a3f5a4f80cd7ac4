"""
Use-case: produce the current real-time quote for a given symbol.
Depends only on Domain entities and application services; no infrastructure imports.
"""

from nexis_feed.application.services.price_generator import PriceGenerator
from nexis_feed.domain.entities.quote import Quote


class GetRealtimeQuoteUseCase:
    def __init__(self, generator: PriceGenerator) -> None:
        self._generator = generator

    def execute(self, symbol: str) -> Quote:
        """Synthesize the current quote for *symbol* (uppercased).

        Unlisted symbols are priced from the default base price.

        Raises:
            ValueError: if *symbol* is blank.
        """
        if not symbol or not symbol.strip():
            raise ValueError("symbol must be a non-empty string")
        return self._generator.generate(symbol.upper().strip())
