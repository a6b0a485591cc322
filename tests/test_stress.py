from unittest import mock

import pytest

from arbengine.stress import (
    simulate_latency,
    simulate_liquidity_drain,
    simulate_price_drop,
    simulate_price_shock,
)
from arbengine.types import OrderBookUpdate


def _book():
    return OrderBookUpdate(
        symbol="BTCUSDT",
        best_bid=100.0,
        best_ask=101.0,
        bids=[(100.0, 1.0)],
        asks=[(101.0, 2.0)],
        best_bid_qty=1.0,
        best_ask_qty=2.0,
        bid_qty=10.0,
        ask_qty=20.0,
    )


def test_negative_shock_lowers_prices():
    shocked = simulate_price_shock(_book(), -20.0)
    assert shocked.best_bid == pytest.approx(80.0)
    assert shocked.best_ask < 101.0


def test_zero_shock_is_identity():
    book = _book()
    assert simulate_price_shock(book, 0.0) == book


def test_shock_round_trip():
    book = _book()
    restored = simulate_price_shock(simulate_price_shock(book, -20.0), 25.0)
    assert restored.best_bid == pytest.approx(book.best_bid)
    assert restored.best_ask == pytest.approx(book.best_ask)


def test_shock_leaves_original_untouched():
    book = _book()
    shocked = simulate_price_shock(book, -50.0)
    shocked.bids.append((1.0, 1.0))
    assert book.best_bid == 100.0
    assert book.bids == [(100.0, 1.0)]


def test_shock_keeps_quantities_and_symbol():
    book = _book()
    shocked = simulate_price_shock(book, 10.0)
    assert (shocked.symbol, shocked.best_bid_qty, shocked.best_ask_qty) == (
        book.symbol,
        book.best_bid_qty,
        book.best_ask_qty,
    )


def test_drop_matches_negative_shock(capsys):
    book = _book()
    dropped = simulate_price_drop(book, 20.0)
    shocked = simulate_price_shock(book, -20.0)
    assert dropped.best_bid == pytest.approx(shocked.best_bid)
    assert dropped.best_ask == pytest.approx(shocked.best_ask)
    assert "Price Shock Applied: 20% down" in capsys.readouterr().out


def test_liquidity_drain(capsys):
    book = _book()
    drained = simulate_liquidity_drain(book)
    assert drained.bid_qty == pytest.approx(book.bid_qty / 10)
    assert drained.ask_qty == pytest.approx(book.ask_qty / 10)
    assert drained.best_bid == book.best_bid
    assert book.bid_qty == 10.0
    assert "Liquidity Drain Simulated" in capsys.readouterr().out


def test_latency_sleeps(capsys):
    with mock.patch("arbengine.stress.time.sleep") as sleep:
        simulate_latency(50)
    sleep.assert_called_once_with(0.05)
    assert "Injected latency: 50 ms" in capsys.readouterr().out