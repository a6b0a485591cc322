"""Scenario shocks applied to order books."""

from __future__ import annotations

import dataclasses
import time

from arbengine.types import OrderBookUpdate, fmt_num


def _copy(book: OrderBookUpdate, **changes: float) -> OrderBookUpdate:
    return dataclasses.replace(book, bids=list(book.bids), asks=list(book.asks), **changes)


def simulate_price_shock(book: OrderBookUpdate, shock_percent: float) -> OrderBookUpdate:
    """Copy of the book with top prices moved by shock_percent (negative is a drop)."""
    factor = 1.0 + shock_percent / 100.0
    return _copy(book, best_bid=book.best_bid * factor, best_ask=book.best_ask * factor)


def simulate_price_drop(book: OrderBookUpdate, shock_percent: float) -> OrderBookUpdate:
    """Copy of the book with top prices lowered by shock_percent."""
    factor = 1.0 - shock_percent / 100.0
    shocked = _copy(book, best_bid=book.best_bid * factor, best_ask=book.best_ask * factor)
    print(f"⚠️ Price Shock Applied: {fmt_num(shock_percent)}% down")
    return shocked


def simulate_liquidity_drain(book: OrderBookUpdate) -> OrderBookUpdate:
    """Copy of the book with aggregate quantities cut to a tenth."""
    drained = _copy(book, bid_qty=book.bid_qty * 0.1, ask_qty=book.ask_qty * 0.1)
    print("⚠️ Liquidity Drain Simulated")
    return drained


def simulate_latency(ms_delay: int) -> None:
    """Block for the given number of milliseconds."""
    print(f"🐢 Injected latency: {ms_delay} ms")
    time.sleep(ms_delay / 1000.0)