"""
Application service: expands one Quote into a synthetic minute-by-minute history.

Every call builds a fresh random walk around the latest price; consecutive
polls are NOT a rolling window. Depends only on Domain entities.
"""

import math
import random
from datetime import datetime, timedelta, timezone
from typing import Optional

from nexis_feed.domain.entities.quote import HistoryPoint, Quote


class HistorySynthesizer:
    POINTS: int = 50
    SPACING = timedelta(minutes=1)
    # Each point deviates from the current price by at most +/- VARIATION / 2.
    VARIATION: float = 0.02
    VOLUME_MIN: int = 50_000
    VOLUME_MAX: int = 150_000

    def __init__(self, points: int = POINTS, rng: Optional[random.Random] = None) -> None:
        if points < 1:
            raise ValueError("points must be >= 1")
        self._points = points
        self._rng = rng or random.Random()

    @property
    def points(self) -> int:
        return self._points

    def synthesize(
        self, quote: Optional[Quote], now: Optional[datetime] = None
    ) -> list[HistoryPoint]:
        """Return exactly ``points`` HistoryPoints ending at *now*, oldest first.

        Returns an empty list when there is no usable price yet (missing quote,
        NaN, infinite or zero price).
        """
        if quote is None or not _usable_price(quote.price):
            return []

        now = now or datetime.now(timezone.utc)
        current = float(quote.price)
        history: list[HistoryPoint] = []
        for offset in range(self._points - 1, -1, -1):
            deviation = (self._rng.random() - 0.5) * self.VARIATION
            history.append(
                HistoryPoint(
                    timestamp=now - offset * self.SPACING,
                    price=max(0.0, round(current * (1 + deviation), 2)),
                    volume=self._rng.randrange(self.VOLUME_MIN, self.VOLUME_MAX),
                )
            )
        return history


def _usable_price(price: Optional[float]) -> bool:
    return price is not None and math.isfinite(price) and price != 0
