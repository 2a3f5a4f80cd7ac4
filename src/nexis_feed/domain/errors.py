"""
Domain-level exceptions shared by adapters and use cases.
"""


class QuoteFetchError(Exception):
    """A quote source could not produce a quote for *symbol*."""

    def __init__(self, symbol: str, message: str) -> None:
        super().__init__(f"{symbol}: {message}")
        self.symbol = symbol
