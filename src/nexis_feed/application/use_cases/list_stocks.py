"""
Use-case: list the tokenized stocks available for trading.
"""

from nexis_feed.domain.entities.stock_listing import STOCK_CATALOG, StockListing


class ListStocksUseCase:
    def execute(self) -> list[StockListing]:
        return list(STOCK_CATALOG)
