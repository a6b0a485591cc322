"""Risk limits and position sizing."""

from __future__ import annotations

from arbengine.liquidity import is_liquidity_sufficient
from arbengine.types import ArbitrageOpportunity, OrderBookUpdate, fmt_num

MAX_CAPITAL = 20000.0
MIN_PROFIT_PERCENT = 0.01


def is_risk_acceptable(opportunity: ArbitrageOpportunity, book: OrderBookUpdate) -> bool:
    """Check liquidity, capital limit and minimum profit; print the reason for a rejection."""
    if not is_liquidity_sufficient(book, opportunity.capital):
        print("🚫 Rejected due to poor liquidity")
        return False
    if opportunity.capital > MAX_CAPITAL:
        print(f"🚫 Rejected: Capital exceeds max allowed limit ({fmt_num(MAX_CAPITAL)})")
        return False
    if abs(opportunity.profit_percentage) < MIN_PROFIT_PERCENT:
        print(
            f"🚫 Rejected: Profit % ({fmt_num(opportunity.profit_percentage)}) "
            f"below threshold ({fmt_num(MIN_PROFIT_PERCENT)})"
        )
        return False
    return True


def compute_position_size(capital: float, entry_price: float, risk_factor: float = 0.01) -> float:
    """Quantity to trade when risking risk_factor of capital."""
    return capital * risk_factor / entry_price


def should_stop_loss(entry_price: float, current_price: float, threshold: float = 0.01) -> bool:
    return (current_price - entry_price) / entry_price <= -threshold


def should_take_profit(entry_price: float, current_price: float, threshold: float = 0.015) -> bool:
    return (current_price - entry_price) / entry_price >= threshold