"""Market data structures and types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from marketsim.constants import OrderSide, OrderStatus, Trend


@dataclass(frozen=True)
class PriceTick:
    """One simulated price/volume observation."""

    ticker: str
    price: float
    timestamp: datetime
    volume: int

    @property
    def timestamp_ms(self) -> int:
        """Epoch milliseconds."""
        return int(self.timestamp.timestamp() * 1000)


@dataclass(frozen=True)
class Instrument:
    """Current-state summary of an instrument, derived from its price series."""

    ticker: str
    name: str
    current_price: float
    previous_price: float
    volume: int  # Cumulative over the whole series
    market_cap: float
    total_shares: int
    trend: Trend
    change_percent: float
    price_history: tuple[PriceTick, ...]

    @property
    def price_change(self) -> float:
        """Absolute move from the previous tick."""
        return self.current_price - self.previous_price

    @property
    def open_price(self) -> float:
        return self.price_history[0].price

    @property
    def session_high(self) -> float:
        return max(t.price for t in self.price_history)

    @property
    def session_low(self) -> float:
        return min(t.price for t in self.price_history)


@dataclass(frozen=True)
class OrderBookEntry:
    """A resting limit order."""

    id: str
    ticker: str
    side: OrderSide
    quantity: int
    limit_price: float
    status: OrderStatus
    user_id: str
    created_at: datetime

    @property
    def is_pending(self) -> bool:
        return self.status == OrderStatus.PENDING
