from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

import pytest

from nexis_feed.application.services.chart_view import (
    build_chart_view,
    format_change,
    format_percent,
    format_price,
    format_time,
    format_volume_millions,
    oscillator_zone,
)
from nexis_feed.application.services.polling_coordinator import CoordinatorState, FeedSnapshot
from nexis_feed.domain.entities.quote import ChartPoint


def _snapshot(quote=None, points=(), state=CoordinatorState.READY) -> FeedSnapshot:
    return FeedSnapshot(
        symbol="GOOGL",
        state=state,
        quote=quote,
        history=(),
        chart_points=tuple(points),
        is_stale=False,
        is_fallback=False,
        updated_at=None,
    )


def _point(index: int, price: float, sma: float, high: float, low: float, volume: int,
           oscillator: float = 55.0) -> ChartPoint:
    return ChartPoint(
        index=index,
        timestamp=datetime(2025, 3, 14, 15, 0, tzinfo=timezone.utc) + timedelta(minutes=index),
        price=price,
        volume=volume,
        open=price,
        high=high,
        low=low,
        close=price,
        sma=sma,
        oscillator=oscillator,
    )


def test_empty_snapshot_renders_loading_state() -> None:
    view = build_chart_view(_snapshot(state=CoordinatorState.LOADING))

    assert view.is_loading is True
    assert view.rows == ()
    assert view.price_domain is None
    assert view.volume_domain is None
    assert view.current_price is None
    assert view.overlay.price_label == "$0.00"
    assert view.overlay.change_label == "0.00"
    assert view.overlay.percent_label == "0.00%"
    assert view.overlay.sma_label is None
    assert view.overlay.oscillator == 50.0
    assert view.overlay.oscillator_zone == "neutral"
    assert view.overlay.volume_label == "0M"


def test_ready_snapshot_with_malformed_quote_is_still_loading(make_quote) -> None:
    view = build_chart_view(_snapshot(quote=make_quote(price=math.nan, change=math.nan)))

    assert view.is_loading is True
    assert view.overlay.price_label == "$0.00"
    assert view.is_positive is True


def test_axis_domains_come_from_data(make_quote) -> None:
    points = [
        _point(0, price=100.0, sma=100.0, high=100.1, low=99.8, volume=60_000),
        _point(1, price=103.0, sma=101.5, high=103.4, low=102.9, volume=140_000),
        _point(2, price=101.0, sma=101.3, high=101.0, low=100.9, volume=90_000),
    ]

    view = build_chart_view(_snapshot(quote=make_quote(price=101.0), points=points))

    assert view.is_loading is False
    assert view.price_domain == pytest.approx((99.8 - 0.5, 103.4 + 0.5))
    assert view.volume_domain == (0.0, 140_000.0)
    assert [row.time for row in view.rows] == ["03:00 PM", "03:01 PM", "03:02 PM"]


def test_domain_tolerates_quote_outside_series(make_quote) -> None:
    # The quote's own high/low are not consulted; only the plotted data is.
    quote = make_quote(price=50.0, high=10.0, low=900.0)
    points = [_point(0, price=50.0, sma=50.0, high=50.2, low=49.9, volume=70_000)]

    view = build_chart_view(_snapshot(quote=quote, points=points), padding=1.0)

    assert view.price_domain == pytest.approx((48.9, 51.2))


def test_overlay_uses_newest_point(make_quote) -> None:
    points = [
        _point(0, price=100.0, sma=100.0, high=100.0, low=100.0, volume=80_000, oscillator=40.0),
        _point(1, price=102.0, sma=101.0, high=102.0, low=102.0, volume=1_260_000, oscillator=72.34),
    ]
    quote = make_quote(price=102.0, change=-1.5, change_percent=-1.45)

    view = build_chart_view(_snapshot(quote=quote, points=points))

    assert view.overlay.sma_label == "$101.00"
    assert view.overlay.oscillator_label == "72.3"
    assert view.overlay.oscillator_zone == "overbought"
    assert view.overlay.trend == "bear"
    assert view.overlay.change_label == "-1.50"
    assert view.overlay.percent_label == "-1.45%"
    assert view.overlay.volume_label == "1.3M"
    assert view.is_positive is False


@pytest.mark.parametrize(
    "value,zone",
    [(70.01, "overbought"), (70.0, "neutral"), (30.0, "neutral"), (29.99, "oversold")],
)
def test_oscillator_zones(value: float, zone: str) -> None:
    assert oscillator_zone(value) == zone


def test_formatters() -> None:
    assert format_price(175.421) == "$175.42"
    assert format_price(None) == "$0.00"
    assert format_price(math.nan) == "$0.00"
    assert format_change(1.234) == "+1.23"
    assert format_change(0.0) == "+0.00"
    assert format_change(-0.5) == "-0.50"
    assert format_percent(0.7) == "+0.70%"
    assert format_percent(math.inf) == "0.00%"
    assert format_volume_millions(15_240_000) == "15.2M"
    assert format_time(datetime(2025, 1, 2, 9, 5, tzinfo=timezone.utc)) == "09:05 AM"
