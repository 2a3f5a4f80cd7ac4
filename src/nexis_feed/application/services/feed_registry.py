"""
Application service: owns one PollingCoordinator per subscribed symbol.

The first subscriber to a symbol creates and starts its coordinator; the last
one to leave stops and drops it. Streams for different symbols share no
mutable state.
"""

import logging
from collections.abc import Callable
from typing import Optional

from nexis_feed.application.services.polling_coordinator import (
    FeedSnapshot,
    PollingCoordinator,
)
from nexis_feed.domain.ports.quote_source_port import IQuoteSource

logger = logging.getLogger(__name__)

CoordinatorFactory = Callable[[str], PollingCoordinator]


def normalize_symbol(symbol: str) -> str:
    return symbol.strip().upper()


class FeedRegistry:
    def __init__(
        self,
        coordinator_factory: CoordinatorFactory,
        source: Optional[IQuoteSource] = None,
    ) -> None:
        """
        Args:
            coordinator_factory: Builds an unstarted coordinator for a symbol.
            source:              Quote source shared by the coordinators; closed
                                 on shutdown().
        """
        self._factory = coordinator_factory
        self._source = source
        self._coordinators: dict[str, PollingCoordinator] = {}
        self._subscribers: dict[str, int] = {}

    def symbols(self) -> list[str]:
        return sorted(self._coordinators)

    def get(self, symbol: str) -> Optional[PollingCoordinator]:
        return self._coordinators.get(normalize_symbol(symbol))

    def subscriber_count(self, symbol: str) -> int:
        return self._subscribers.get(normalize_symbol(symbol), 0)

    def subscribe(self, symbol: str) -> PollingCoordinator:
        """Register a subscriber; must be called from within the event loop."""
        key = normalize_symbol(symbol)
        coordinator = self._coordinators.get(key)
        if coordinator is None:
            coordinator = self._factory(key)
            self._coordinators[key] = coordinator
            self._subscribers[key] = 0
            coordinator.start()
            logger.info("Started polling %s", key)
        self._subscribers[key] += 1
        return coordinator

    def unsubscribe(self, symbol: str) -> None:
        key = normalize_symbol(symbol)
        if key not in self._coordinators:
            return
        self._subscribers[key] -= 1
        if self._subscribers[key] > 0:
            return
        coordinator = self._coordinators.pop(key)
        del self._subscribers[key]
        coordinator.stop()
        logger.info("Stopped polling %s", key)

    async def snapshot(self, symbol: str) -> FeedSnapshot:
        """Snapshot of the live feed, or a one-shot fetch when nobody subscribes."""
        key = normalize_symbol(symbol)
        coordinator = self._coordinators.get(key)
        if coordinator is None:
            coordinator = self._factory(key)
            await coordinator.refresh()
        return coordinator.snapshot()

    async def shutdown(self) -> None:
        for key, coordinator in list(self._coordinators.items()):
            coordinator.stop(cancel_pending=True)
            logger.info("Stopped polling %s", key)
        self._coordinators.clear()
        self._subscribers.clear()
        if self._source is not None:
            await self._source.aclose()
