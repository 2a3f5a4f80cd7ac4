"""
Infrastructure adapter: yfinance -> IQuoteSource.

All yfinance-specific details (ticker.info, fast_info) are confined here; the
rest of the codebase depends only on IQuoteSource. yfinance is blocking, so
each fetch runs in a worker thread to keep the event loop free.
"""

import asyncio
from datetime import datetime, timezone

import yfinance as yf

from nexis_feed.domain.entities.quote import Quote
from nexis_feed.domain.errors import QuoteFetchError
from nexis_feed.domain.ports.quote_source_port import IQuoteSource


class YFinanceQuoteSource(IQuoteSource):
    """Fetches live quotes from Yahoo Finance via the yfinance library."""

    async def fetch_quote(self, symbol: str) -> Quote:
        try:
            return await asyncio.to_thread(self._fetch, symbol)
        except QuoteFetchError:
            raise
        except Exception as exc:
            raise QuoteFetchError(symbol, f"yfinance lookup failed: {exc}") from exc

    def _fetch(self, symbol: str) -> Quote:
        ticker = yf.Ticker(symbol)
        info = ticker.info
        fast_info = ticker.fast_info

        current_price = getattr(fast_info, "last_price", None) or info.get("currentPrice")
        if current_price is None:
            raise QuoteFetchError(symbol, "no price data available")
        price = float(current_price)

        previous_close = (
            getattr(fast_info, "previous_close", None) or info.get("previousClose") or price
        )
        previous_close = float(previous_close)
        change = price - previous_close
        change_percent = change / previous_close * 100 if previous_close else 0.0
        high = getattr(fast_info, "day_high", None) or info.get("dayHigh") or price
        low = getattr(fast_info, "day_low", None) or info.get("dayLow") or price
        volume = getattr(fast_info, "last_volume", None) or info.get("volume") or 0

        return Quote(
            symbol=symbol,
            price=round(price, 2),
            change=round(change, 2),
            change_percent=round(change_percent, 2),
            volume=int(volume),
            high=round(float(high), 2),
            low=round(float(low), 2),
            previous_close=round(previous_close, 2),
            timestamp=datetime.now(timezone.utc),
        )
