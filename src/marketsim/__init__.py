"""Synthetic market-data engine."""

from marketsim.app import MarketSimApp, initialize_snapshot
from marketsim.snapshot import MarketSnapshot, build_snapshot

__version__ = "0.1.0"

__all__ = [
    "MarketSimApp",
    "MarketSnapshot",
    "build_snapshot",
    "initialize_snapshot",
]
