"""
Application service: derives chart-ready points from a synthetic history.

The oscillator is a cosmetic stand-in for a momentum indicator and the
open/high/low values are fresh noise on every call, so two reads of the same
history differ. Callers that need stable values must seed the injected RNG.
"""

import math
import random
from collections.abc import Sequence
from typing import Optional

from nexis_feed.domain.entities.quote import ChartPoint, HistoryPoint


def simple_moving_average(prices: Sequence[float], window: int) -> list[float]:
    """Trailing mean over ``min(i + 1, window)`` prices for each index i.

    >>> simple_moving_average([10, 11, 12, 13, 14, 15, 16, 17, 18, 19, 20, 21], 10)[11]
    16.5
    """
    if window < 1:
        raise ValueError("window must be >= 1")
    averages: list[float] = []
    running = 0.0
    for i, price in enumerate(prices):
        running += price
        if i >= window:
            running -= prices[i - window]
        averages.append(running / min(i + 1, window))
    return averages


class IndicatorCalculator:
    SMA_WINDOW: int = 10
    OSCILLATOR_CENTER: float = 45.0
    OSCILLATOR_AMPLITUDE: float = 20.0
    OSCILLATOR_FREQUENCY: float = 0.3
    OSCILLATOR_NOISE: float = 10.0
    # Half-width of the per-point open/close perturbation.
    CANDLE_VARIATION: float = 0.4
    WICK_FACTOR: float = 0.8

    def __init__(self, sma_window: int = SMA_WINDOW, rng: Optional[random.Random] = None) -> None:
        if sma_window < 1:
            raise ValueError("sma_window must be >= 1")
        self._sma_window = sma_window
        self._rng = rng or random.Random()

    def annotate(self, history: Sequence[HistoryPoint]) -> list[ChartPoint]:
        """Return one ChartPoint per HistoryPoint; empty in, empty out."""
        smas = simple_moving_average([p.price for p in history], self._sma_window)
        points: list[ChartPoint] = []
        for index, (point, sma) in enumerate(zip(history, smas)):
            v = (self._rng.random() - 0.5) * self.CANDLE_VARIATION
            wick = abs(v) * self.WICK_FACTOR
            points.append(
                ChartPoint(
                    index=index,
                    timestamp=point.timestamp,
                    price=point.price,
                    volume=point.volume,
                    open=max(0.0, point.price - v),
                    high=max(point.price, point.price + wick),
                    low=min(point.price, point.price - wick),
                    close=point.price,
                    sma=sma,
                    oscillator=self._oscillator(index),
                )
            )
        return points

    def _oscillator(self, index: int) -> float:
        return (
            self.OSCILLATOR_CENTER
            + math.sin(index * self.OSCILLATOR_FREQUENCY) * self.OSCILLATOR_AMPLITUDE
            + self._rng.random() * self.OSCILLATOR_NOISE
        )
