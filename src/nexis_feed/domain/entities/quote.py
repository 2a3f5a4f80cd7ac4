"""
Domain entities for market quotes and the chart series derived from them.
Zero external dependencies: pure Python dataclasses only.

Numeric fields on Quote may carry NaN when a remote payload was malformed;
consumers treat such a quote as "no data yet" rather than an error.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Quote:
    symbol: str
    price: float
    change: float
    change_percent: float
    volume: int
    high: float
    low: float
    previous_close: float
    timestamp: datetime


@dataclass(frozen=True)
class HistoryPoint:
    timestamp: datetime
    price: float
    volume: int


@dataclass(frozen=True)
class ChartPoint:
    """A HistoryPoint enriched with synthetic OHLC and indicator readings.

    open/high/low and the oscillator are noisy by construction and are not
    guaranteed to be consistent with each other or with the quote's high/low.
    """

    index: int
    timestamp: datetime
    price: float
    volume: int
    open: float
    high: float
    low: float
    close: float
    sma: float
    oscillator: float
