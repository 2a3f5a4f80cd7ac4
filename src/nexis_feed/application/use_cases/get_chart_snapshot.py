"""
Use-case: build the live chart render state for a given symbol.
Depends only on application services; no infrastructure imports.
"""

from nexis_feed.application.services.chart_view import ChartView, build_chart_view
from nexis_feed.application.services.feed_registry import FeedRegistry


class GetChartSnapshotUseCase:
    def __init__(self, registry: FeedRegistry) -> None:
        self._registry = registry

    async def execute(self, symbol: str) -> ChartView:
        """Return the chart view for *symbol*.

        Uses the live feed when one is subscribed, otherwise a one-shot fetch.

        Raises:
            ValueError: if *symbol* is blank.
        """
        if not symbol or not symbol.strip():
            raise ValueError("symbol must be a non-empty string")
        snapshot = await self._registry.snapshot(symbol)
        return build_chart_view(snapshot)
