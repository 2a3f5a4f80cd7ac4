from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

import pytest

from nexis_feed.domain.entities.quote import Quote


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 3, 14, 15, 30, tzinfo=timezone.utc))


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def make_quote():
    def _make(symbol: str = "GOOGL", price: float = 175.0, **overrides) -> Quote:
        fields = dict(
            symbol=symbol,
            price=price,
            change=1.25,
            change_percent=0.72,
            volume=16_000_000,
            high=price + 1,
            low=price - 1,
            previous_close=price - 1.25,
            timestamp=datetime(2025, 3, 14, 15, 30, tzinfo=timezone.utc),
        )
        fields.update(overrides)
        return Quote(**fields)

    return _make
