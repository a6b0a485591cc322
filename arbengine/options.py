"""Black-Scholes pricing, implied volatility and volatility-arbitrage checks."""

from __future__ import annotations

import math
from enum import Enum

from arbengine.market_data import MarketDataAggregator
from arbengine.types import fmt_num


class OptionType(Enum):
    CALL = "call"
    PUT = "put"


def _norm_cdf(x: float) -> float:
    return 0.5 * math.erfc(-x / math.sqrt(2))


def black_scholes_price(
    option_type: OptionType, spot: float, strike: float, expiry: float, rate: float, sigma: float
) -> float:
    """European option price; expiry in years, rate and sigma annualised."""
    vol_sqrt_t = sigma * math.sqrt(expiry)
    d1 = (math.log(spot / strike) + (rate + 0.5 * sigma * sigma) * expiry) / vol_sqrt_t
    d2 = d1 - vol_sqrt_t
    discounted_strike = strike * math.exp(-rate * expiry)
    if option_type is OptionType.CALL:
        return spot * _norm_cdf(d1) - discounted_strike * _norm_cdf(d2)
    return discounted_strike * _norm_cdf(-d2) - spot * _norm_cdf(-d1)


def black_scholes_call(spot: float, strike: float, expiry: float, rate: float, sigma: float) -> float:
    return black_scholes_price(OptionType.CALL, spot, strike, expiry, rate, sigma)


def implied_volatility(
    option_type: OptionType, market_price: float, spot: float, strike: float, expiry: float, rate: float
) -> float:
    """Volatility reproducing the market price, by bisection on [0.0001, 5]."""
    low, high, tol = 0.0001, 5.0, 1e-5
    mid = (low + high) / 2.0
    for _ in range(100):
        mid = (low + high) / 2.0
        price = black_scholes_price(option_type, spot, strike, expiry, rate, mid)
        if abs(price - market_price) < tol:
            break
        if price > market_price:
            high = mid
        else:
            low = mid
    return mid


def check_volatility_arbitrage(aggregator: MarketDataAggregator) -> float | None:
    """Compare a mock quoted call with its model price on the OKX spot; return mispricing in %."""
    book = aggregator.latest_updates().get("OKX")
    if book is None:
        return None
    spot = book.mid()
    if spot <= 0:
        return None

    strike = spot * 1.05
    expiry = 7.0 / 365.0
    rate = 0.02
    implied_vol = 0.65
    theo = black_scholes_call(spot, strike, expiry, rate, implied_vol)
    market_price = 150.0
    mispricing = (market_price - theo) / theo * 100.0 if theo != 0 else math.inf

    print("📈 Volatility Arbitrage:")
    print(f"    Spot: {fmt_num(spot)}, Strike: {fmt_num(strike)}, IV: {fmt_num(implied_vol)}")
    print(f"    Theoretical Price: {fmt_num(theo)}, Market Price: {fmt_num(market_price)}")
    print(f"    ≡ Mispricing (IV arb): {fmt_num(mispricing)}%")
    if abs(mispricing) > 5.0:
        print("🚨 Potential Volatility Arbitrage Opportunity Found!")
    return mispricing


def check_demo_volatility_arbitrage() -> float:
    """Run the check on fixed sample data; return market minus model price."""
    spot = 30000.0
    strike = 31000.0
    market_price = 1200.0
    expiry = 14.0 / 365.0
    rate = 0.03
    option_type = OptionType.CALL
    assumed_vol = 0.6

    theo = black_scholes_price(option_type, spot, strike, expiry, rate, assumed_vol)
    implied = implied_volatility(option_type, market_price, spot, strike, expiry, rate)
    diff = market_price - theo

    print("\n📊 Volatility Arbitrage Check")
    print(f"→ Market Price: {fmt_num(market_price)}")
    print(f"→ Theoretical Price (σ={fmt_num(assumed_vol)}): {fmt_num(theo)}")
    print(f"→ Implied Volatility: {fmt_num(implied)}")
    if abs(diff) > 100.0:
        print(f"🚨 Arbitrage Detected! Mispricing: {fmt_num(diff)} USDT")
    else:
        print("✅ No significant arbitrage found.")
    return diff