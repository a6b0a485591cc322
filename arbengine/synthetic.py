"""Synthetic instrument pricing and arbitrage evaluation."""

from __future__ import annotations

import math

from arbengine.types import ArbitrageOpportunity, OrderBookUpdate, SyntheticInstrument, fmt_num


def compute_synthetic_spot(book: OrderBookUpdate, leverage: float, funding_rate: float) -> SyntheticInstrument:
    """Spot price implied by a perpetual adjusted for funding."""
    price = book.mid() * (1 + funding_rate * leverage)
    return SyntheticInstrument("Synthetic Spot", book.symbol, price, book.symbol + "_PERP", "FundingAdj")


def compute_synthetic_future_carry(
    book: OrderBookUpdate, cost_of_carry: float, time_to_expiry: float
) -> SyntheticInstrument:
    """Future price from spot under a cost-of-carry model."""
    price = book.mid() * (1 + cost_of_carry * time_to_expiry)
    return SyntheticInstrument(
        "Synthetic Future (Carry)", book.symbol, price, book.symbol + "_SPOT", "CostOfCarry"
    )


def compute_synthetic_future_funding(
    book: OrderBookUpdate, funding_rate: float, time_window: float
) -> SyntheticInstrument:
    """Future price from spot under a funding-rate model."""
    price = book.mid() * (1 + funding_rate * time_window)
    return SyntheticInstrument(
        "Synthetic Future (Funding)", book.symbol, price, book.symbol + "_SPOT", "FundingRate"
    )


def compute_mispricing(real_price: float, synthetic_price: float) -> float:
    """Percentage difference of the real price relative to the synthetic one."""
    if synthetic_price == 0:
        return 0.0
    return (real_price - synthetic_price) / synthetic_price * 100.0


def _percent_gain(high: float, low: float) -> float:
    if low == 0:
        return math.inf
    return (high - low) / low * 100.0


def evaluate_arbitrage(
    symbol: str,
    real_exchange: str,
    synthetic_exchange: str,
    real_price: float,
    synthetic_price: float,
    min_profit_threshold: float,
    capital: float,
    real_book: OrderBookUpdate,
    synthetic_book: OrderBookUpdate,
) -> ArbitrageOpportunity:
    """Buy the cheaper leg and sell the dearer one if the gap beats the threshold."""
    if synthetic_price > real_price:
        profit = _percent_gain(synthetic_price, real_price)
        if profit >= min_profit_threshold:
            print("\n💰 Arbitrage Opportunity Detected:")
            print(f"🔹 Symbol: {symbol}")
            print(f"🟢 Buy: {real_exchange} at {fmt_num(real_price)}")
            print(f"🔴 Sell: {synthetic_exchange} at {fmt_num(synthetic_price)}")
            print(f"📈 Profit: {fmt_num(profit)}%")
            print(f"💵 Capital Required: {fmt_num(capital)} USDT\n")
            return ArbitrageOpportunity(
                symbol=symbol,
                long_exchange=real_exchange,
                short_exchange=synthetic_exchange,
                long_price=real_price,
                short_price=synthetic_price,
                profit_percentage=profit,
                capital=capital,
                long_book=real_book,
                short_book=synthetic_book,
            )
    elif real_price > synthetic_price:
        profit = _percent_gain(real_price, synthetic_price)
        if profit >= min_profit_threshold:
            return ArbitrageOpportunity(
                symbol=symbol,
                long_exchange=synthetic_exchange,
                short_exchange=real_exchange,
                long_price=synthetic_price,
                short_price=real_price,
                profit_percentage=profit,
                capital=capital,
                long_book=synthetic_book,
                short_book=real_book,
            )
    return ArbitrageOpportunity(symbol=symbol)