"""Tests for MarketSnapshot and the application bootstrap."""

from __future__ import annotations

import json
import random
from pathlib import Path

import pytest

from marketsim.app import MarketSimApp, initialize_snapshot
from marketsim.constants import OrderSide, Trend
from marketsim.errors import ConfigurationError
from marketsim.registry import InstrumentRegistry
from marketsim.snapshot import MarketSnapshot, build_snapshot


@pytest.fixture
def snapshot() -> MarketSnapshot:
    return build_snapshot(InstrumentRegistry(), random.Random(42), seed=42)


class TestQueries:
    def test_lookup_registered_ticker(self, snapshot):
        doge = snapshot.get_instrument("DOGE")
        assert doge is not None
        assert doge.ticker == "DOGE"
        assert doge.name == "Doge Dynamics"

    def test_lookup_unknown_ticker_returns_none(self, snapshot):
        assert snapshot.get_instrument("NOTREAL") is None

    def test_lookup_is_case_sensitive(self, snapshot):
        assert snapshot.get_instrument("doge") is None

    def test_list_in_registry_order(self, snapshot):
        assert [i.ticker for i in snapshot.list_instruments()] == list(
            InstrumentRegistry().tickers
        )
        assert snapshot.tickers == InstrumentRegistry().tickers

    def test_one_instrument_per_seed(self, snapshot):
        assert len(snapshot.list_instruments()) == len(InstrumentRegistry())

    def test_series_length(self, snapshot):
        assert all(len(i.price_history) == 100 for i in snapshot.list_instruments())

    def test_orders_for(self, snapshot):
        view = snapshot.orders_for("MOON")
        assert view.ticker == "MOON"
        assert len(view.bids) == 2
        assert len(view.asks) in (1, 2)
        assert all(o.side == OrderSide.BUY for o in view.bids)
        assert all(o.side == OrderSide.SELL for o in view.asks)
        prices = [o.limit_price for o in view.bids]
        assert prices == sorted(prices, reverse=True)
        prices = [o.limit_price for o in view.asks]
        assert prices == sorted(prices)

    def test_orders_for_unknown_ticker_is_empty(self, snapshot):
        view = snapshot.orders_for("NOTREAL")
        assert view.is_empty

    def test_no_crossed_books(self, snapshot):
        for ticker in snapshot.tickers:
            assert not snapshot.orders_for(ticker).is_crossed

    def test_order_ids_unique(self, snapshot):
        ids = [o.id for o in snapshot.order_book]
        assert len(ids) == len(set(ids))


class TestImmutability:
    def test_snapshot_frozen(self, snapshot):
        with pytest.raises(AttributeError):
            snapshot.seed = 1

    def test_index_read_only(self, snapshot):
        with pytest.raises(TypeError):
            snapshot._by_ticker["NEW"] = snapshot.instruments[0]

    def test_instrument_frozen(self, snapshot):
        with pytest.raises(AttributeError):
            snapshot.instruments[0].current_price = 1.0

    def test_sequences_stored_as_tuples(self, snapshot):
        rebuilt = MarketSnapshot(
            instruments=list(snapshot.instruments), order_book=list(snapshot.order_book)
        )
        assert isinstance(rebuilt.instruments, tuple)
        assert isinstance(rebuilt.order_book, tuple)
        assert rebuilt.get_instrument("DOGE") == snapshot.get_instrument("DOGE")


class TestRegeneration:
    def test_same_seed_identical(self):
        a = build_snapshot(InstrumentRegistry(), random.Random(7))
        b = build_snapshot(InstrumentRegistry(), random.Random(7))
        assert a == b
        assert a.to_json() == b.to_json()

    def test_different_seed_differs(self):
        a = build_snapshot(InstrumentRegistry(), random.Random(7))
        b = build_snapshot(InstrumentRegistry(), random.Random(8))
        assert a.to_json() != b.to_json()


class TestExport:
    def test_to_dict_round_trips_through_json(self, snapshot):
        data = json.loads(snapshot.to_json())

        assert data["seed"] == 42
        assert len(data["instruments"]) == 6
        first = data["instruments"][0]
        assert first["ticker"] == "MOON"
        assert first["trend"] in {t.value for t in Trend}
        assert first["price_history"][0]["timestamp"] == "2026-02-28T09:30:00+00:00"
        assert data["order_book"][0]["side"] == "buy"
        assert data["order_book"][0]["status"] == "pending"


class TestMarketSimApp:
    def test_initialize_with_defaults(self):
        app = MarketSimApp(seed=3)
        snap = app.initialize()
        assert snap.seed == 3
        assert app.registry is not None
        assert len(snap.instruments) == 6

    def test_snapshot_built_once(self):
        app = MarketSimApp(seed=3)
        assert app.snapshot is app.snapshot
        assert app.initialize() is app.snapshot

    def test_seeded_apps_agree(self):
        assert initialize_snapshot(seed=9) == initialize_snapshot(seed=9)

    def test_tick_count_override(self):
        snap = MarketSimApp(seed=1, tick_count=10).initialize()
        assert all(len(i.price_history) == 10 for i in snap.instruments)

    def test_config_file(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            """
generation:
  seed: 11
  tick_count: 20
instruments:
  - ticker: solo
    name: Solo Ltd
    start_price: 5.0
    total_shares: 100
    volatility: 0.01
"""
        )
        snap = MarketSimApp(config_path=config_file).initialize()
        assert snap.tickers == ("SOLO",)
        assert snap.seed == 11
        assert len(snap.get_instrument("SOLO").price_history) == 20
        assert len(snap.orders_for("SOLO").asks) == 2

    def test_malformed_registry_is_fatal(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            """
instruments:
  - {ticker: DUP, name: One, start_price: 1.0, total_shares: 1}
  - {ticker: DUP, name: Two, start_price: 2.0, total_shares: 1}
"""
        )
        with pytest.raises(ConfigurationError):
            MarketSimApp(config_path=config_file).initialize()
