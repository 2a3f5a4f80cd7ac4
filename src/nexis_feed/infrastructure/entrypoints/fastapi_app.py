"""
FastAPI entry point.

This module is the Composition Root: it wires the quote source selected by
configuration, the synthetic generators and the per-symbol feed registry, and
passes them to the application layer.

Run locally:
    uvicorn nexis_feed.infrastructure.entrypoints.fastapi_app:app --reload --port 8000
"""

import asyncio
import dataclasses
import logging
import random
from contextlib import asynccontextmanager
from functools import partial
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect

from nexis_feed.application.services.chart_view import build_chart_view
from nexis_feed.application.services.feed_registry import FeedRegistry
from nexis_feed.application.services.history_synthesizer import HistorySynthesizer
from nexis_feed.application.services.indicator_calculator import IndicatorCalculator
from nexis_feed.application.services.polling_coordinator import (
    PollingCoordinator,
    log_task_failure,
)
from nexis_feed.application.services.price_generator import (
    FALLBACK_PROFILE,
    SERVER_PROFILE,
    PriceGenerator,
)
from nexis_feed.application.use_cases.get_chart_snapshot import GetChartSnapshotUseCase
from nexis_feed.application.use_cases.get_realtime_quote import GetRealtimeQuoteUseCase
from nexis_feed.application.use_cases.list_stocks import ListStocksUseCase
from nexis_feed.domain.ports.quote_source_port import IQuoteSource
from nexis_feed.infrastructure.config.settings import Settings
from nexis_feed.infrastructure.observability.logging_config import configure_logging
from nexis_feed.infrastructure.quote_sources.http_quote_source import HttpQuoteSource
from nexis_feed.infrastructure.quote_sources.synthetic_quote_source import SyntheticQuoteSource
from nexis_feed.infrastructure.schemas.chart_view import chart_view_payload
from nexis_feed.infrastructure.schemas.realtime_quote import RealtimeQuotePayload

logger = logging.getLogger(__name__)


def build_quote_source(settings: Settings, rng: random.Random) -> IQuoteSource:
    if settings.quote_source == "synthetic":
        return SyntheticQuoteSource(PriceGenerator(SERVER_PROFILE, rng))
    if settings.quote_source == "yfinance":
        # Imported lazily so yfinance (and pandas) load only when selected.
        from nexis_feed.infrastructure.quote_sources.yfinance_quote_source import (
            YFinanceQuoteSource,
        )
        return YFinanceQuoteSource()
    return HttpQuoteSource(settings.api_base_url, timeout=settings.http_timeout)


def build_registry(settings: Settings, rng: random.Random) -> FeedRegistry:
    source = build_quote_source(settings, rng)
    coordinator_factory = partial(
        PollingCoordinator,
        source=source,
        generator=PriceGenerator(FALLBACK_PROFILE, rng),
        synthesizer=HistorySynthesizer(settings.history_points, rng),
        calculator=IndicatorCalculator(rng=rng),
        refresh_interval=settings.refresh_interval,
        stale_after=settings.stale_after,
    )
    return FeedRegistry(coordinator_factory, source=source)


def _bad_request(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=400, detail=str(exc))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    # ---------------------------------------------------------------------------
    # Composition Root: wire all dependencies once per application
    # ---------------------------------------------------------------------------
    settings = settings or Settings.from_env()
    rng = random.Random(settings.random_seed)
    registry = build_registry(settings, rng)
    realtime_uc = GetRealtimeQuoteUseCase(PriceGenerator(SERVER_PROFILE, rng))
    chart_uc = GetChartSnapshotUseCase(registry)
    stocks_uc = ListStocksUseCase()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        logger.info("Quote source: %s", settings.quote_source)
        yield
        await registry.shutdown()

    app = FastAPI(title="Nexis Market Feed API", lifespan=lifespan)
    app.state.settings = settings
    app.state.registry = registry

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/api/stocks")
    async def list_stocks():
        return [dataclasses.asdict(item) for item in stocks_uc.execute()]

    @app.get("/api/stocks/{symbol}/realtime")
    async def realtime_quote(symbol: str):
        """Synthetic real-time quote in the camelCase wire format."""
        try:
            quote = realtime_uc.execute(symbol)
        except ValueError as exc:
            raise _bad_request(exc) from exc
        return RealtimeQuotePayload.from_quote(quote).to_wire()

    @app.get("/api/stocks/{symbol}/chart")
    async def chart(symbol: str):
        try:
            view = await chart_uc.execute(symbol)
        except ValueError as exc:
            raise _bad_request(exc) from exc
        return chart_view_payload(view)

    @app.websocket("/ws/stocks/{symbol}/chart")
    async def chart_stream(websocket: WebSocket, symbol: str):
        """Push the chart view on connect and after every quote change."""
        await websocket.accept()
        if not symbol.strip():
            await websocket.close(code=1008, reason="symbol must be a non-empty string")
            return
        coordinator = registry.subscribe(symbol)
        updates: asyncio.Queue = asyncio.Queue()

        def on_update(c: PollingCoordinator) -> None:
            updates.put_nowait(c.snapshot())

        async def push() -> None:
            snapshot = coordinator.snapshot()
            while True:
                await websocket.send_json(chart_view_payload(build_chart_view(snapshot)))
                snapshot = await updates.get()

        coordinator.add_listener(on_update)
        pusher = asyncio.create_task(push(), name=f"chart-stream-{coordinator.symbol}")
        pusher.add_done_callback(log_task_failure)
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            logger.info("Chart stream for %s closed", coordinator.symbol)
        finally:
            pusher.cancel()
            coordinator.remove_listener(on_update)
            registry.unsubscribe(symbol)

    return app


# ---------------------------------------------------------------------------
# Module-level app for uvicorn
# ---------------------------------------------------------------------------
load_dotenv()
_settings = Settings.from_env()
configure_logging(_settings.log_level)
app = create_app(_settings)
