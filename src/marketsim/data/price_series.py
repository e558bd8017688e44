"""Price series generation.

Produces a bounded random-walk price path per instrument. The random
source is passed in so a seeded ``random.Random`` reproduces a series
exactly.
"""

from __future__ import annotations

import logging
import random
from datetime import datetime, timedelta

from marketsim.config_loader import SeedConfig
from marketsim.constants import CRASH_FACTOR, PRICE_FLOOR, SESSION_START, TICK_INTERVAL
from marketsim.data.market_data import PriceTick

logger = logging.getLogger(__name__)


def generate_series(
    config: SeedConfig,
    length: int,
    rng: random.Random,
    session_start: datetime = SESSION_START,
    interval: timedelta = TICK_INTERVAL,
) -> list[PriceTick]:
    """
    Generate `length` ticks for one instrument.

    Each step applies a symmetric perturbation scaled by volatility, the
    per-tick drift, an independent crash shock and the price floor.

    Args:
        config: Instrument parameters.
        length: Number of ticks to emit.
        rng: Random source; all draws come from here.
        session_start: Timestamp of the first tick.
        interval: Fixed spacing between ticks.

    Returns:
        Ticks in time order.
    """
    if length < 0:
        raise ValueError(f"Series length must be non-negative, got: {length}")
    if interval <= timedelta(0):
        raise ValueError(f"Tick interval must be positive, got: {interval}")

    ticks: list[PriceTick] = []
    price = config.start_price
    crashes = 0

    for i in range(length):
        delta = price * config.volatility * (rng.random() * 2 - 1)
        price = price * (1 + config.bias) + delta

        # Only draw for instruments that can crash, so others keep their draw sequence
        if config.crash_probability > 0 and rng.random() < config.crash_probability:
            price *= CRASH_FACTOR
            crashes += 1

        price = max(PRICE_FLOOR, price)

        ticks.append(
            PriceTick(
                ticker=config.ticker,
                price=price,
                timestamp=session_start + i * interval,
                volume=int(config.base_volume * (0.5 + rng.random())),
            )
        )

    logger.debug(
        f"{config.ticker}: generated {length} ticks, "
        f"{config.start_price:.2f} -> {price:.2f} ({crashes} crashes)"
    )
    return ticks
