from __future__ import annotations

import math
import random
from datetime import datetime, timezone

import pytest

from nexis_feed.application.services.price_generator import (
    FALLBACK_PROFILE,
    SERVER_PROFILE,
    PriceGenerator,
)
from nexis_feed.domain.entities.stock_listing import DEFAULT_BASE_PRICE

TIMESTAMPS = [
    datetime(1970, 1, 1, tzinfo=timezone.utc),
    datetime(2025, 3, 14, 15, 30, 7, tzinfo=timezone.utc),
    datetime(2400, 12, 31, 23, 59, 59, tzinfo=timezone.utc),
]


@pytest.mark.parametrize("symbol", ["GOOGL", "AMZN", "CRCL", "googl", "", "NOT-A-TICKER"])
@pytest.mark.parametrize("now", TIMESTAMPS)
def test_generate_is_finite_with_volume_in_band(symbol: str, now: datetime) -> None:
    quote = PriceGenerator(rng=random.Random(3)).generate(symbol, now)

    for value in (
        quote.price,
        quote.change,
        quote.change_percent,
        quote.high,
        quote.low,
        quote.previous_close,
    ):
        assert math.isfinite(value)
    assert isinstance(quote.volume, int)
    assert FALLBACK_PROFILE.volume_min <= quote.volume < FALLBACK_PROFILE.volume_max
    assert quote.symbol == symbol
    assert quote.timestamp == now


def test_unknown_symbol_uses_default_base_price() -> None:
    quote = PriceGenerator(rng=random.Random(0)).generate("ZZZZ", TIMESTAMPS[1])

    assert quote.previous_close == DEFAULT_BASE_PRICE


def test_listed_symbol_is_matched_case_insensitively() -> None:
    quote = PriceGenerator(rng=random.Random(0)).generate("googl", TIMESTAMPS[1])

    assert quote.previous_close == 175.42


def test_price_stays_within_signal_amplitude_of_base() -> None:
    generator = PriceGenerator(rng=random.Random(9))
    bound = (
        FALLBACK_PROFILE.slow_amplitude
        + FALLBACK_PROFILE.fast_amplitude
        + FALLBACK_PROFILE.noise_span / 2
        + 0.01
    )
    for second in range(0, 7200, 97):
        now = datetime.fromtimestamp(1_700_000_000 + second, tz=timezone.utc)
        quote = generator.generate("AMZN", now)
        assert abs(quote.price - 185.21) <= bound
        assert quote.price == pytest.approx(quote.previous_close + quote.change, abs=0.011)


def test_change_percent_is_relative_to_base() -> None:
    quote = PriceGenerator(rng=random.Random(5)).generate("GOOGL", TIMESTAMPS[1])

    assert quote.change_percent == pytest.approx(quote.change / 175.42 * 100, abs=0.01)


def test_high_and_low_bracket_price_by_fraction_of_change() -> None:
    generator = PriceGenerator(rng=random.Random(11))
    for minute in range(30):
        now = datetime.fromtimestamp(1_700_000_000 + minute * 60, tz=timezone.utc)
        quote = generator.generate("CRCL", now)
        spread = abs(quote.change) * FALLBACK_PROFILE.hl_fraction
        assert quote.high >= quote.price + spread - 0.02
        assert quote.low <= quote.price - spread + 0.02
        assert quote.high - quote.price <= spread + FALLBACK_PROFILE.hl_jitter + 0.02


def test_seeded_generators_are_reproducible() -> None:
    a = PriceGenerator(rng=random.Random(42)).generate("GOOGL", TIMESTAMPS[1])
    b = PriceGenerator(rng=random.Random(42)).generate("GOOGL", TIMESTAMPS[1])

    assert a == b


def test_server_profile_has_wider_volume_band() -> None:
    generator = PriceGenerator(SERVER_PROFILE, rng=random.Random(8))
    volumes = [generator.generate("AMZN", TIMESTAMPS[1]).volume for _ in range(200)]

    assert all(12_000_000 <= v < 20_000_000 for v in volumes)
    assert generator.profile is SERVER_PROFILE
