"""
Catalog of the tokenized stocks offered on the platform.
Zero external dependencies: pure Python dataclasses only.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StockListing:
    symbol: str
    name: str
    base_price: float


# Base price used for any symbol that is not listed.
DEFAULT_BASE_PRICE = 28.45

STOCK_CATALOG: tuple[StockListing, ...] = (
    StockListing(symbol="GOOGL", name="Google Stock", base_price=175.42),
    StockListing(symbol="AMZN", name="Amazon Stock", base_price=185.21),
    StockListing(symbol="CRCL", name="Circle Stock", base_price=DEFAULT_BASE_PRICE),
)


def find_listing(symbol: str) -> Optional[StockListing]:
    """Return the listing for *symbol* (case-insensitive), or None."""
    wanted = symbol.strip().upper()
    return next((item for item in STOCK_CATALOG if item.symbol == wanted), None)


def base_price_for(symbol: str) -> float:
    listing = find_listing(symbol)
    return listing.base_price if listing else DEFAULT_BASE_PRICE
