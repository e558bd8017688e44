"""Market snapshot: the read-only result of one generation run."""

from __future__ import annotations

import json
import logging
import random
from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from types import MappingProxyType
from typing import Any

from marketsim.book.order_book import OrderBookSynthesizer, OrderBookView, split_book
from marketsim.constants import (
    DEFAULT_TICK_COUNT,
    FAKE_USERS,
    ORDER_WINDOW,
    SESSION_START,
    TICK_INTERVAL,
)
from marketsim.data.aggregator import aggregate
from marketsim.data.market_data import Instrument, OrderBookEntry
from marketsim.data.price_series import generate_series
from marketsim.registry import InstrumentRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarketSnapshot:
    """
    All instruments and the full order book, built once per process.

    Nothing here is mutated after construction, so any number of readers
    may query it concurrently.
    """

    instruments: tuple[Instrument, ...]
    order_book: tuple[OrderBookEntry, ...]
    seed: int | None = None
    _by_ticker: Mapping[str, Instrument] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # frozen dataclass: bypass __setattr__ to normalise and derive fields
        object.__setattr__(self, "instruments", tuple(self.instruments))
        object.__setattr__(self, "order_book", tuple(self.order_book))
        object.__setattr__(
            self, "_by_ticker", MappingProxyType({i.ticker: i for i in self.instruments})
        )

    @property
    def tickers(self) -> tuple[str, ...]:
        return tuple(i.ticker for i in self.instruments)

    def get_instrument(self, ticker: str) -> Instrument | None:
        """Look up by canonical (uppercase) ticker. None if unknown."""
        return self._by_ticker.get(ticker)

    def list_instruments(self) -> tuple[Instrument, ...]:
        """All instruments in registry order."""
        return self.instruments

    def orders_for(self, ticker: str) -> OrderBookView:
        """Pending orders for `ticker`; empty view for unknown tickers."""
        return split_book(ticker, self.order_book)

    def to_dict(self) -> dict[str, Any]:
        """Plain-data form for export."""
        return {
            "seed": self.seed,
            "instruments": [asdict(i) for i in self.instruments],
            "order_book": [asdict(o) for o in self.order_book],
        }

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), cls=SnapshotEncoder, indent=indent)


class SnapshotEncoder(json.JSONEncoder):
    """JSON encoder that handles datetimes and enums."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


def build_snapshot(
    registry: InstrumentRegistry,
    rng: random.Random,
    *,
    tick_count: int = DEFAULT_TICK_COUNT,
    session_start: datetime = SESSION_START,
    tick_interval: timedelta = TICK_INTERVAL,
    order_window: timedelta = ORDER_WINDOW,
    users: Sequence[str] = FAKE_USERS,
    seed: int | None = None,
) -> MarketSnapshot:
    """
    Run the full pipeline: registry -> series -> aggregates -> order book.

    Args:
        registry: Validated instrument catalogue.
        rng: Random source shared by every stage, in registry order.
        tick_count: Series length per instrument.
        seed: Recorded on the snapshot for reference only; seeding is the
            caller's job via `rng`.
    """
    logger.info(f"Generating market data for {len(registry)} instruments ({tick_count} ticks each)")

    instruments = []
    for config in registry:
        series = generate_series(
            config, tick_count, rng, session_start=session_start, interval=tick_interval
        )
        instruments.append(aggregate(config, series))

    synthesizer = OrderBookSynthesizer(
        rng, session_start=session_start, window=order_window, users=users
    )
    order_book = synthesizer.synthesize(instruments)

    snapshot = MarketSnapshot(
        instruments=tuple(instruments),
        order_book=tuple(order_book),
        seed=seed,
    )
    logger.info(
        f"Market snapshot ready: {len(snapshot.instruments)} instruments, "
        f"{len(snapshot.order_book)} orders"
    )
    return snapshot
