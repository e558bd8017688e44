"""Price series generation and aggregation."""

from marketsim.data.aggregator import aggregate, classify_trend
from marketsim.data.market_data import Instrument, OrderBookEntry, PriceTick
from marketsim.data.price_series import generate_series

__all__ = [
    "PriceTick",
    "Instrument",
    "OrderBookEntry",
    "generate_series",
    "aggregate",
    "classify_trend",
]
