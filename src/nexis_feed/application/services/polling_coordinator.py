"""
Application service: per-symbol polling of a quote source.

A PollingCoordinator owns the cached Quote and synthetic history for exactly
one symbol. It runs on the asyncio event loop:

  - a timer task launches a fetch every ``refresh_interval`` seconds without
    awaiting the previous one, so fetches may overlap;
  - whichever fetch resolves last wins, even if it was requested first;
  - a failing source is masked by the local PriceGenerator (no retry, no
    backoff, no circuit breaker: every tick is an independent attempt);
  - a quote change regenerates the history and notifies listeners.

Depends only on Domain ports and entities and sibling application services.
"""

import asyncio
import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from nexis_feed.application.services.history_synthesizer import HistorySynthesizer
from nexis_feed.application.services.indicator_calculator import IndicatorCalculator
from nexis_feed.application.services.price_generator import PriceGenerator
from nexis_feed.domain.entities.quote import ChartPoint, HistoryPoint, Quote
from nexis_feed.domain.ports.quote_source_port import IQuoteSource

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Listener = Callable[["PollingCoordinator"], None]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def log_task_failure(task: asyncio.Task) -> None:
    """Done-callback that surfaces exceptions of fire-and-forget tasks."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Task %s failed", task.get_name(), exc_info=exc)


class CoordinatorState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"


@dataclass(frozen=True)
class FeedSnapshot:
    """Read-only view of a coordinator handed to the chart adapter."""

    symbol: str
    state: CoordinatorState
    quote: Optional[Quote]
    history: tuple[HistoryPoint, ...]
    chart_points: tuple[ChartPoint, ...]
    is_stale: bool
    is_fallback: bool
    updated_at: Optional[datetime]


class PollingCoordinator:
    REFRESH_INTERVAL: float = 30.0
    STALE_AFTER: float = 25.0

    def __init__(
        self,
        symbol: str,
        source: Optional[IQuoteSource],
        generator: PriceGenerator,
        synthesizer: HistorySynthesizer,
        calculator: IndicatorCalculator,
        refresh_interval: float = REFRESH_INTERVAL,
        stale_after: float = STALE_AFTER,
        clock: Clock = utcnow,
    ) -> None:
        """
        Args:
            symbol:           Normalised ticker symbol this coordinator serves.
            source:           Remote quote source; None means synthetic only.
            generator:        Local generator used when the source fails.
            synthesizer:      Builds the history behind the chart.
            calculator:       Annotates the history with SMA/oscillator/OHLC.
            refresh_interval: Seconds between fetch launches.
            stale_after:      Age in seconds after which the quote is stale.
            clock:            Returns the current aware datetime.
        """
        self.symbol = symbol
        self._source = source
        self._generator = generator
        self._synthesizer = synthesizer
        self._calculator = calculator
        self._refresh_interval = refresh_interval
        self._stale_after = timedelta(seconds=stale_after)
        self._clock = clock

        self._quote: Optional[Quote] = None
        self._history: tuple[HistoryPoint, ...] = ()
        self._updated_at: Optional[datetime] = None
        self._is_fallback = False
        self._in_flight = 0
        self._listeners: list[Listener] = []
        self._timer: Optional[asyncio.Task[None]] = None
        self._pending: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> CoordinatorState:
        if self._quote is not None:
            return CoordinatorState.READY
        if self._in_flight:
            return CoordinatorState.LOADING
        return CoordinatorState.IDLE

    @property
    def quote(self) -> Optional[Quote]:
        return self._quote

    @property
    def is_stale(self) -> bool:
        if self._updated_at is None:
            return True
        return self._clock() - self._updated_at > self._stale_after

    @property
    def is_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def snapshot(self) -> FeedSnapshot:
        """Return the current state; chart points are re-derived on every call."""
        return FeedSnapshot(
            symbol=self.symbol,
            state=self.state,
            quote=self._quote,
            history=self._history,
            chart_points=tuple(self._calculator.annotate(self._history)),
            is_stale=self.is_stale,
            is_fallback=self._is_fallback,
            updated_at=self._updated_at,
        )

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    async def refresh(self) -> Quote:
        """Run one fetch attempt and cache its result (last resolution wins)."""
        self._in_flight += 1
        try:
            quote, is_fallback = await self._fetch()
        finally:
            self._in_flight -= 1
        self._apply(quote, is_fallback)
        return quote

    async def _fetch(self) -> tuple[Quote, bool]:
        if self._source is None:
            return self._generator.generate(self.symbol, self._clock()), True
        try:
            return await self._source.fetch_quote(self.symbol), False
        except Exception as exc:
            logger.warning("Using synthetic quote for %s: %s", self.symbol, exc)
            return self._generator.generate(self.symbol, self._clock()), True

    def _apply(self, quote: Quote, is_fallback: bool) -> None:
        changed = quote != self._quote
        self._quote = quote
        self._is_fallback = is_fallback
        self._updated_at = self._clock()
        if not changed:
            return
        self._history = tuple(self._synthesizer.synthesize(quote, self._updated_at))
        logger.debug(
            "%s refreshed: price=%s points=%d fallback=%s",
            self.symbol, quote.price, len(self._history), is_fallback,
        )
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Listener failed for %s", self.symbol)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Schedule the polling timer on the running event loop."""
        if self.is_running:
            return
        self._timer = asyncio.get_running_loop().create_task(
            self._run(), name=f"poll-{self.symbol}"
        )
        self._timer.add_done_callback(log_task_failure)

    def stop(self, cancel_pending: bool = False) -> None:
        """Cancel the timer. In-flight fetches resolve unless *cancel_pending*."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if cancel_pending:
            for task in list(self._pending):
                task.cancel()

    async def _run(self) -> None:
        while True:
            task = asyncio.create_task(self.refresh(), name=f"refresh-{self.symbol}")
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
            task.add_done_callback(log_task_failure)
            await asyncio.sleep(self._refresh_interval)
