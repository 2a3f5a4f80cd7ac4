"""
Application service: synthesizes a current Quote for a symbol.

The quote is a per-symbol base price moved by a slow and a fast sine wave of
wall-clock time plus bounded uniform noise. Successive calls inside the same
second differ because of the noise term; that is expected simulation noise.

Depends only on Domain entities. Randomness is injected so tests can seed it.
"""

import math
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from nexis_feed.domain.entities.quote import Quote
from nexis_feed.domain.entities.stock_listing import base_price_for


@dataclass(frozen=True)
class GeneratorProfile:
    """Shape of the synthetic price signal.

    slow_amplitude / slow_tau:  amplitude and time constant (seconds) of the
                                slow trend.
    fast_amplitude / fast_tau:  same for the short-term wiggle.
    noise_span:                 width of the uniform noise band centred on 0.
    volume_min / volume_max:    half-open band for the sampled volume.
    hl_fraction / hl_jitter:    high/low sit |change| * hl_fraction away from
                                the price plus up to hl_jitter of noise.
    """

    slow_amplitude: float
    slow_tau: float
    fast_amplitude: float
    fast_tau: float
    noise_span: float
    volume_min: int
    volume_max: int
    hl_fraction: float
    hl_jitter: float


# Used by the polling coordinator when the remote quote cannot be fetched.
FALLBACK_PROFILE = GeneratorProfile(
    slow_amplitude=3.0,
    slow_tau=3600.0,
    fast_amplitude=1.5,
    fast_tau=60.0,
    noise_span=0.8,
    volume_min=15_000_000,
    volume_max=20_000_000,
    hl_fraction=0.5,
    hl_jitter=1.0,
)

# Used by the /realtime endpoint.
SERVER_PROFILE = GeneratorProfile(
    slow_amplitude=2.5,
    slow_tau=3600.0,
    fast_amplitude=0.0,
    fast_tau=60.0,
    noise_span=1.8,
    volume_min=12_000_000,
    volume_max=20_000_000,
    hl_fraction=1.0,
    hl_jitter=1.5,
)


class PriceGenerator:
    def __init__(
        self,
        profile: GeneratorProfile = FALLBACK_PROFILE,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._profile = profile
        self._rng = rng or random.Random()

    @property
    def profile(self) -> GeneratorProfile:
        return self._profile

    def generate(self, symbol: str, now: Optional[datetime] = None) -> Quote:
        """Return a synthetic quote for *symbol* at *now* (defaults to UTC now).

        Total over any symbol: unlisted symbols use the default base price.
        """
        now = now or datetime.now(timezone.utc)
        p = self._profile
        base = base_price_for(symbol)
        t = now.timestamp()

        trend = math.sin(t / p.slow_tau) * p.slow_amplitude
        wiggle = math.sin(t / p.fast_tau) * p.fast_amplitude
        noise = (self._rng.random() - 0.5) * p.noise_span

        change = trend + wiggle + noise
        price = base + change
        spread = abs(change) * p.hl_fraction

        return Quote(
            symbol=symbol,
            price=round(price, 2),
            change=round(change, 2),
            change_percent=round(change / base * 100, 2),
            volume=self._rng.randrange(p.volume_min, p.volume_max),
            high=round(price + spread + self._rng.random() * p.hl_jitter, 2),
            low=round(price - spread - self._rng.random() * p.hl_jitter, 2),
            previous_close=round(base, 2),
            timestamp=now,
        )
