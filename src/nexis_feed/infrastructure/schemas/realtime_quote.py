"""
Wire schema of GET /api/stocks/{symbol}/realtime.

Used on both sides of the contract: the FastAPI route serialises quotes with
it and HttpQuoteSource parses responses with it. Parsing is lenient: missing
or non-numeric fields become NaN instead of failing validation, so a
malformed payload degrades to a "no data yet" chart.
"""

import math
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nexis_feed.domain.entities.quote import Quote


def _to_float(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return math.nan


def _from_epoch_millis(value: Optional[int]) -> Optional[datetime]:
    if value is None:
        return None
    try:
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        # Outside the platform's representable range.
        return None


class RealtimeQuotePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    price: float = math.nan
    change: float = math.nan
    change_percent: float = Field(default=math.nan, alias="changePercent")
    volume: float = math.nan
    high: float = math.nan
    low: float = math.nan
    previous_close: float = Field(default=math.nan, alias="previousClose")
    timestamp: Optional[int] = Field(
        default=None, description="Epoch milliseconds at which the quote was produced"
    )

    @field_validator(
        "price", "change", "change_percent", "volume", "high", "low", "previous_close",
        mode="before",
    )
    @classmethod
    def coerce_number(cls, v: Any) -> float:
        """Mirror JavaScript Number(): anything unparseable becomes NaN."""
        return _to_float(v)

    @field_validator("timestamp", mode="before")
    @classmethod
    def coerce_timestamp(cls, v: Any) -> Optional[int]:
        number = _to_float(v)
        return int(number) if math.isfinite(number) else None

    @classmethod
    def from_quote(cls, quote: Quote) -> "RealtimeQuotePayload":
        return cls(
            symbol=quote.symbol,
            price=quote.price,
            change=quote.change,
            change_percent=quote.change_percent,
            volume=quote.volume,
            high=quote.high,
            low=quote.low,
            previous_close=quote.previous_close,
            timestamp=int(quote.timestamp.timestamp() * 1000),
        )

    def to_quote(self, received_at: Optional[datetime] = None) -> Quote:
        timestamp = _from_epoch_millis(self.timestamp) or received_at or datetime.now(timezone.utc)
        return Quote(
            symbol=self.symbol,
            price=self.price,
            change=self.change,
            change_percent=self.change_percent,
            volume=int(self.volume) if math.isfinite(self.volume) else 0,
            high=self.high,
            low=self.low,
            previous_close=self.previous_close,
            timestamp=timestamp,
        )

    def to_wire(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True)
        if math.isfinite(self.volume):
            data["volume"] = int(self.volume)
        return data
