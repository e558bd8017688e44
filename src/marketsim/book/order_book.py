"""Order book synthesis.

Fabricates resting limit orders around each instrument's current price.
Bids are drawn from [0.97, 0.995) of the price and asks from
[1.005, 1.03), so a synthesized book is never crossed.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from marketsim.constants import (
    ASK_LOW,
    ASK_SPAN,
    BID_LOW,
    BID_SPAN,
    BOOK_DISPLAY_DEPTH,
    BUYS_PER_INSTRUMENT,
    FAKE_USERS,
    MAX_ORDER_QTY,
    MIN_ORDER_QTY,
    ORDER_WINDOW,
    SESSION_START,
    OrderSide,
    OrderStatus,
)
from marketsim.data.market_data import Instrument, OrderBookEntry

logger = logging.getLogger(__name__)


class OrderBookSynthesizer:
    """
    Builds the initial order book for a set of instruments.

    A running entry counter numbers orders across the whole book so ids
    stay unique. Instruments alternate between two asks and one ask.
    """

    def __init__(
        self,
        rng: random.Random,
        session_start: datetime = SESSION_START,
        window: timedelta = ORDER_WINDOW,
        users: Sequence[str] = FAKE_USERS,
    ):
        if not users:
            raise ValueError("users must not be empty")
        self.rng = rng
        self.session_start = session_start
        self.window_ms = int(window.total_seconds() * 1000)
        self.users = tuple(users)
        self._counter = 0
        self._instruments_seen = 0

    def synthesize(self, instruments: Iterable[Instrument]) -> list[OrderBookEntry]:
        """Emit 2 bids and then 2 or 1 asks (alternating) per instrument, in input order."""
        entries: list[OrderBookEntry] = []

        for instrument in instruments:
            for _ in range(BUYS_PER_INSTRUMENT):
                entries.append(self._make_entry(instrument, OrderSide.BUY))

            sell_count = 2 if self._instruments_seen % 2 == 0 else 1
            for _ in range(sell_count):
                entries.append(self._make_entry(instrument, OrderSide.SELL))

            self._instruments_seen += 1

        logger.debug(f"Synthesized {len(entries)} orders")
        return entries

    def _make_entry(self, instrument: Instrument, side: OrderSide) -> OrderBookEntry:
        if side == OrderSide.BUY:
            multiplier = BID_LOW + self.rng.random() * BID_SPAN
        else:
            multiplier = ASK_LOW + self.rng.random() * ASK_SPAN

        entry = OrderBookEntry(
            id=f"ord-{instrument.ticker}-{self._counter}",
            ticker=instrument.ticker,
            side=side,
            quantity=int(MIN_ORDER_QTY + self.rng.random() * (MAX_ORDER_QTY - MIN_ORDER_QTY)),
            limit_price=instrument.current_price * multiplier,
            status=OrderStatus.PENDING,
            user_id=self.rng.choice(self.users),
            created_at=self.session_start
            + timedelta(milliseconds=int(self.rng.random() * self.window_ms)),
        )
        self._counter += 1
        return entry


def synthesize(
    instruments: Iterable[Instrument],
    rng: random.Random,
    session_start: datetime = SESSION_START,
    window: timedelta = ORDER_WINDOW,
    users: Sequence[str] = FAKE_USERS,
) -> list[OrderBookEntry]:
    """Convenience wrapper around a one-shot OrderBookSynthesizer."""
    synthesizer = OrderBookSynthesizer(rng, session_start=session_start, window=window, users=users)
    return synthesizer.synthesize(instruments)


@dataclass(frozen=True)
class OrderBookView:
    """Pending orders for one ticker split into sorted bid and ask sides."""

    ticker: str
    bids: tuple[OrderBookEntry, ...] = ()  # Best (highest) first
    asks: tuple[OrderBookEntry, ...] = ()  # Best (lowest) first

    @property
    def best_bid(self) -> float | None:
        return self.bids[0].limit_price if self.bids else None

    @property
    def best_ask(self) -> float | None:
        return self.asks[0].limit_price if self.asks else None

    @property
    def spread(self) -> float | None:
        if self.best_bid is None or self.best_ask is None:
            return None
        return self.best_ask - self.best_bid

    @property
    def is_crossed(self) -> bool:
        return self.spread is not None and self.spread <= 0

    @property
    def is_empty(self) -> bool:
        return not self.bids and not self.asks

    def depth(self, levels: int = BOOK_DISPLAY_DEPTH) -> OrderBookView:
        """Top `levels` orders per side."""
        return OrderBookView(self.ticker, self.bids[:levels], self.asks[:levels])


def split_book(ticker: str, entries: Iterable[OrderBookEntry]) -> OrderBookView:
    """Collect pending orders for `ticker` into a sorted bid/ask view."""
    orders = [e for e in entries if e.ticker == ticker and e.is_pending]
    bids = sorted(
        (o for o in orders if o.side == OrderSide.BUY), key=lambda o: o.limit_price, reverse=True
    )
    asks = sorted((o for o in orders if o.side == OrderSide.SELL), key=lambda o: o.limit_price)
    return OrderBookView(ticker=ticker, bids=tuple(bids), asks=tuple(asks))
