"""Instrument registry: the static catalogue of synthetic instruments."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Iterator

from marketsim.config_loader import AppConfig, SeedConfig
from marketsim.errors import ConfigurationError

logger = logging.getLogger(__name__)


DEFAULT_SEED_CONFIGS: tuple[SeedConfig, ...] = (
    SeedConfig(
        ticker="MOON",
        name="Moonshot Industries",
        start_price=142.57,
        total_shares=1_000_000,
        volatility=0.08,
        base_volume=5_000,
    ),
    SeedConfig(
        ticker="ROCK",
        name="Bedrock Holdings",
        start_price=88.0,
        total_shares=5_000_000,
        volatility=0.002,
        base_volume=10_000,
    ),
    # Upward drift with occasional crashes
    SeedConfig(
        ticker="HYPE",
        name="Hype Corp",
        start_price=55.2,
        total_shares=2_000_000,
        volatility=0.03,
        bias=0.003,
        crash_probability=0.02,
        base_volume=15_000,
    ),
    SeedConfig(
        ticker="DOGE",
        name="Doge Dynamics",
        start_price=12.44,
        total_shares=10_000_000,
        volatility=0.06,
        base_volume=80_000,
    ),
    SeedConfig(
        ticker="BOOM",
        name="Boom Technologies",
        start_price=1_240.0,
        total_shares=500_000,
        volatility=0.04,
        base_volume=1_000,
    ),
    SeedConfig(
        ticker="FLAT",
        name="Flatline Corp",
        start_price=25.0,
        total_shares=3_000_000,
        volatility=0.001,
        base_volume=500,
    ),
)


class InstrumentRegistry:
    """
    Ordered, read-only collection of SeedConfig entries.

    The catalogue is validated once on construction; a malformed
    catalogue raises ConfigurationError and must abort startup.
    """

    def __init__(self, configs: Iterable[SeedConfig] = DEFAULT_SEED_CONFIGS):
        self._configs: tuple[SeedConfig, ...] = tuple(configs)
        self.validate()
        self._by_ticker = {c.ticker: c for c in self._configs}

    @classmethod
    def from_config(cls, config: AppConfig) -> InstrumentRegistry:
        """Build from the `instruments` section, falling back to the defaults."""
        if config.instruments is None:
            return cls()
        logger.info(f"Using {len(config.instruments)} instruments from configuration")
        return cls(config.instruments)

    def validate(self) -> None:
        """Check catalogue invariants."""
        if not self._configs:
            raise ConfigurationError("Instrument registry is empty")

        seen: set[str] = set()
        for cfg in self._configs:
            if cfg.ticker in seen:
                raise ConfigurationError(f"Duplicate ticker in registry: {cfg.ticker}")
            seen.add(cfg.ticker)

            if not 0 < cfg.start_price < math.inf:
                raise ConfigurationError(
                    f"{cfg.ticker}: start_price must be positive and finite, got {cfg.start_price}"
                )
            if not cfg.total_shares > 0:
                raise ConfigurationError(
                    f"{cfg.ticker}: total_shares must be positive, got {cfg.total_shares}"
                )
            for name in ("volatility", "bias", "crash_probability"):
                value = getattr(cfg, name)
                if not math.isfinite(value):
                    raise ConfigurationError(f"{cfg.ticker}: {name} must be finite, got {value}")

    @property
    def tickers(self) -> tuple[str, ...]:
        return tuple(c.ticker for c in self._configs)

    def get(self, ticker: str) -> SeedConfig | None:
        return self._by_ticker.get(ticker)

    def __iter__(self) -> Iterator[SeedConfig]:
        return iter(self._configs)

    def __len__(self) -> int:
        return len(self._configs)

    def __contains__(self, ticker: object) -> bool:
        return ticker in self._by_ticker
