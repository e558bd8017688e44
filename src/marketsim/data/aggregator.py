"""Reduce a price series into instrument summary metrics."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from marketsim.config_loader import SeedConfig
from marketsim.constants import TREND_EPSILON, Trend
from marketsim.data.market_data import Instrument, PriceTick
from marketsim.errors import InvalidSeriesError

logger = logging.getLogger(__name__)


def classify_trend(fractional_change: float) -> Trend:
    """Classify a fractional move (0.01 == 1%) against the flat band."""
    if fractional_change > TREND_EPSILON:
        return Trend.UP
    if fractional_change < -TREND_EPSILON:
        return Trend.DOWN
    return Trend.FLAT


def aggregate(config: SeedConfig, series: Sequence[PriceTick]) -> Instrument:
    """
    Build the current-state Instrument from a completed series.

    Raises:
        InvalidSeriesError: If the series has fewer than two ticks or
            contains ticks for another ticker.
    """
    if len(series) < 2:
        raise InvalidSeriesError(
            f"{config.ticker}: need at least 2 ticks to aggregate, got {len(series)}"
        )

    foreign = {t.ticker for t in series if t.ticker != config.ticker}
    if foreign:
        raise InvalidSeriesError(
            f"{config.ticker}: series contains ticks for {sorted(foreign)}"
        )

    current_price = series[-1].price
    previous_price = series[-2].price
    fractional_change = (current_price - previous_price) / previous_price

    instrument = Instrument(
        ticker=config.ticker,
        name=config.name,
        current_price=current_price,
        previous_price=previous_price,
        volume=sum(t.volume for t in series),
        market_cap=current_price * config.total_shares,
        total_shares=config.total_shares,
        trend=classify_trend(fractional_change),
        change_percent=fractional_change * 100,
        price_history=tuple(series),
    )

    logger.debug(
        f"{instrument.ticker}: price={current_price:.2f} "
        f"change={instrument.change_percent:+.2f}% trend={instrument.trend.value}"
    )
    return instrument
