"""Exceptions raised by the market-data engine.

Unknown tickers are not an error: lookups return ``None``.
"""


class MarketSimError(Exception):
    """Base exception for marketsim."""

    pass


class ConfigurationError(MarketSimError):
    """Malformed instrument registry or settings. Fatal at startup."""

    pass


class InvalidSeriesError(MarketSimError):
    """A price series that cannot be aggregated (too short or mixed tickers)."""

    pass
