"""Core market data and opportunity records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


def fmt_num(value: float) -> str:
    """Format a number the way a default text stream does (6 significant digits)."""
    return f"{value:g}"


@dataclass
class OrderBookUpdate:
    """Top-of-book snapshot for one instrument on one exchange."""

    symbol: str = ""
    best_bid: float = 0.0
    best_ask: float = 0.0
    bids: list[tuple[float, float]] = field(default_factory=list)
    asks: list[tuple[float, float]] = field(default_factory=list)
    timestamp: datetime | None = None
    best_bid_qty: float = 0.0
    best_ask_qty: float = 0.0
    bid_qty: float = 0.0
    ask_qty: float = 0.0

    def mid(self) -> float:
        """Midpoint between best bid and best ask."""
        return (self.best_bid + self.best_ask) / 2.0


@dataclass
class SyntheticInstrument:
    """A price derived from other instruments."""

    kind: str
    symbol: str
    price: float
    leg_a: str
    leg_b: str


@dataclass
class ArbitrageOpportunity:
    """A buy/sell pair between two venues; empty long_exchange means none found."""

    symbol: str = ""
    long_exchange: str = ""
    short_exchange: str = ""
    strategy_type: str = "unknown strategy"
    long_price: float = 0.0
    short_price: float = 0.0
    profit_percentage: float = 0.0
    capital: float = 0.0
    long_book: OrderBookUpdate = field(default_factory=OrderBookUpdate)
    short_book: OrderBookUpdate = field(default_factory=OrderBookUpdate)

    def describe(self) -> str:
        """Human-readable multi-line summary."""
        return (
            f"💰 Arbitrage Opportunity: [{self.symbol}]\n"
            f"➡️ Buy from: {self.long_exchange} at {fmt_num(self.long_price)}\n"
            f"⬅️ Sell to: {self.short_exchange} at {fmt_num(self.short_price)}\n"
            f"📈 Profit: {fmt_num(self.profit_percentage)}%\n"
            f"💵 Capital Required: {fmt_num(self.capital)} USDT\n"
            f"🔍 Strategy: {self.strategy_type}\n"
        )