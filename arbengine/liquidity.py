"""Slippage, depth and capital sizing estimates from order books."""

from __future__ import annotations

import math

from arbengine.types import OrderBookUpdate, fmt_num


def estimate_slippage(book: OrderBookUpdate, trade_size: float) -> float:
    """Slippage in quote currency: the spread scaled by trade size, capped at full spread."""
    spread = book.best_ask - book.best_bid
    impact = min(trade_size / 10000.0, 1.0)
    return spread * impact


def is_liquidity_sufficient(book: OrderBookUpdate, capital: float) -> bool:
    """Whether depth within 0.5% of the top covers the required quantity on both sides."""
    mid = book.mid()
    required = capital / mid if mid != 0 else math.inf
    bid_limit = book.best_bid * 0.995
    ask_limit = book.best_ask * 1.005

    bid_depth = 0.0
    for price, qty in book.bids:
        if price < bid_limit:
            break
        bid_depth += qty

    ask_depth = 0.0
    for price, qty in book.asks:
        if price > ask_limit:
            break
        ask_depth += qty

    sufficient = bid_depth >= required and ask_depth >= required
    if not sufficient:
        print(
            f"⚠️ Liquidity insufficient: Required Qty: {fmt_num(required)}, "
            f"Bid Depth: {fmt_num(bid_depth)}, Ask Depth: {fmt_num(ask_depth)}"
        )
    return sufficient


def estimate_market_impact(book: OrderBookUpdate, order_size: float, aggressiveness: float = 0.2) -> float:
    """Estimated slippage in percent against top-of-book depth, capped at 5%."""
    depth = book.best_bid_qty * book.best_bid + book.best_ask_qty * book.best_ask
    if depth <= 0.0:
        return 0.0
    impact = aggressiveness * (order_size / depth)
    return min(impact * 100.0, 5.0)


def log_impact_estimate(exchange: str, book: OrderBookUpdate, order_size: float) -> float:
    """Print the market impact estimate and return it."""
    slip = estimate_market_impact(book, order_size)
    print(f"📉 Estimated Slippage on {exchange} for ${fmt_num(order_size)}: ~{fmt_num(slip)}%")
    return slip


def compute_capital_limit(long_leg: OrderBookUpdate, short_leg: OrderBookUpdate, max_capital: float) -> float:
    """Capital that both top-of-book legs can absorb, bounded by max_capital."""
    if (
        long_leg.best_ask <= 0
        or long_leg.best_ask_qty <= 0
        or short_leg.best_bid <= 0
        or short_leg.best_bid_qty <= 0
    ):
        return 0.0
    qty = min(long_leg.best_ask_qty, short_leg.best_bid_qty)
    return min(qty * long_leg.best_ask, qty * short_leg.best_bid, max_capital)