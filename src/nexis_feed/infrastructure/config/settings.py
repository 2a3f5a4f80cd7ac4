"""
Runtime configuration read from environment variables.

The composition root calls load_dotenv() before Settings.from_env(), so values
may also come from a local .env file.
"""

import os
from dataclasses import dataclass
from typing import Optional

QUOTE_SOURCES = ("http", "yfinance", "synthetic")


@dataclass(frozen=True)
class Settings:
    quote_source: str = "http"
    api_base_url: str = "http://localhost:8000"
    http_timeout: float = 10.0
    refresh_interval: float = 30.0
    stale_after: float = 25.0
    history_points: int = 50
    random_seed: Optional[int] = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.quote_source not in QUOTE_SOURCES:
            raise ValueError(
                f"NEXIS_QUOTE_SOURCE must be one of {QUOTE_SOURCES}, got {self.quote_source!r}"
            )
        if self.refresh_interval <= 0 or self.stale_after <= 0 or self.http_timeout <= 0:
            raise ValueError("intervals and timeouts must be positive")
        if self.history_points < 1:
            raise ValueError("NEXIS_HISTORY_POINTS must be >= 1")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from NEXIS_* environment variables.

        Raises:
            ValueError: on a malformed or out-of-range value.
        """
        seed = os.environ.get("NEXIS_RANDOM_SEED")
        return cls(
            quote_source=os.environ.get("NEXIS_QUOTE_SOURCE", "http").strip().lower(),
            api_base_url=os.environ.get("NEXIS_API_BASE_URL", "http://localhost:8000"),
            http_timeout=float(os.environ.get("NEXIS_HTTP_TIMEOUT", "10")),
            refresh_interval=float(os.environ.get("NEXIS_REFRESH_INTERVAL", "30")),
            stale_after=float(os.environ.get("NEXIS_STALE_AFTER", "25")),
            history_points=int(os.environ.get("NEXIS_HISTORY_POINTS", "50")),
            random_seed=int(seed) if seed else None,
            log_level=os.environ.get("NEXIS_LOG_LEVEL", "INFO").upper(),
        )
