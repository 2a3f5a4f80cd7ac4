"""
Process-wide logging setup, called once from the composition root.
"""

import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        stream=sys.stdout,
    )
    # httpx logs every request at INFO; a 30s poll per symbol is too chatty.
    logging.getLogger("httpx").setLevel(logging.WARNING)
