"""
Application service: turns a FeedSnapshot into the render state of the live
price chart (axis domains, overlays and display labels).

Axis domains come from the actual min/max of the supplied points because the
synthetic series does not respect the quote's high/low. An empty or not yet
ready snapshot renders as a loading state instead of failing.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from nexis_feed.application.services.polling_coordinator import (
    CoordinatorState,
    FeedSnapshot,
)

PRICE_AXIS_PADDING = 0.5
OVERBOUGHT = 70.0
OVERSOLD = 30.0
NEUTRAL_OSCILLATOR = 50.0


@dataclass(frozen=True)
class ChartRow:
    index: int
    time: str
    timestamp: datetime
    price: float
    volume: int
    open: float
    high: float
    low: float
    close: float
    sma: float
    oscillator: float


@dataclass(frozen=True)
class Overlay:
    price_label: str
    change_label: str
    percent_label: str
    sma_label: Optional[str]
    oscillator: float
    oscillator_label: str
    oscillator_zone: str
    trend: str
    volume_label: str


@dataclass(frozen=True)
class ChartView:
    symbol: str
    is_loading: bool
    is_stale: bool
    is_fallback: bool
    current_price: Optional[float]
    change: Optional[float]
    change_percent: Optional[float]
    is_positive: bool
    rows: tuple[ChartRow, ...]
    price_domain: Optional[tuple[float, float]]
    volume_domain: Optional[tuple[float, float]]
    overlay: Overlay


def _finite(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


def format_price(value: Optional[float]) -> str:
    if not _finite(value):
        return "$0.00"
    return f"${value:.2f}"


def format_change(value: Optional[float]) -> str:
    if not _finite(value):
        return "0.00"
    return f"{value:+.2f}"


def format_percent(value: Optional[float]) -> str:
    if not _finite(value):
        return "0.00%"
    return f"{value:+.2f}%"


def format_volume_millions(value: Optional[float]) -> str:
    if not _finite(value):
        return "0M"
    return f"{value / 1_000_000:.1f}M"


def format_time(timestamp: datetime) -> str:
    return timestamp.strftime("%I:%M %p")


def oscillator_zone(value: float) -> str:
    if value > OVERBOUGHT:
        return "overbought"
    if value < OVERSOLD:
        return "oversold"
    return "neutral"


def build_chart_view(snapshot: FeedSnapshot, padding: float = PRICE_AXIS_PADDING) -> ChartView:
    """Build the chart render state for *snapshot* without mutating it."""
    quote = snapshot.quote
    price = quote.price if quote else None
    change = quote.change if quote else None
    change_percent = quote.change_percent if quote else None
    is_positive = (change if _finite(change) else 0.0) >= 0

    rows = tuple(
        ChartRow(
            index=p.index,
            time=format_time(p.timestamp),
            timestamp=p.timestamp,
            price=p.price,
            volume=p.volume,
            open=p.open,
            high=p.high,
            low=p.low,
            close=p.close,
            sma=p.sma,
            oscillator=p.oscillator,
        )
        for p in snapshot.chart_points
    )
    is_loading = snapshot.state is not CoordinatorState.READY or not rows

    price_domain = None
    volume_domain = None
    if rows:
        values = [
            v
            for r in rows
            for v in (r.price, r.sma, r.high, r.low)
            if math.isfinite(v)
        ]
        if values:
            price_domain = (min(values) - padding, max(values) + padding)
        volume_domain = (0.0, float(max(r.volume for r in rows)))

    latest = rows[-1] if rows else None
    oscillator = latest.oscillator if latest else NEUTRAL_OSCILLATOR
    overlay = Overlay(
        price_label=format_price(price),
        change_label=format_change(change),
        percent_label=format_percent(change_percent),
        sma_label=format_price(latest.sma) if latest else None,
        oscillator=oscillator,
        oscillator_label=f"{oscillator:.1f}",
        oscillator_zone=oscillator_zone(oscillator),
        trend="bull" if is_positive else "bear",
        volume_label=format_volume_millions(latest.volume if latest else None),
    )

    return ChartView(
        symbol=snapshot.symbol,
        is_loading=is_loading,
        is_stale=snapshot.is_stale,
        is_fallback=snapshot.is_fallback,
        current_price=price,
        change=change,
        change_percent=change_percent,
        is_positive=is_positive,
        rows=rows,
        price_domain=price_domain,
        volume_domain=volume_domain,
        overlay=overlay,
    )
