import pytest

from arbengine.synthetic import (
    compute_mispricing,
    compute_synthetic_future_carry,
    compute_synthetic_future_funding,
    compute_synthetic_spot,
    evaluate_arbitrage,
)
from arbengine.types import OrderBookUpdate


@pytest.fixture
def book():
    return OrderBookUpdate(symbol="BTCUSDT", best_bid=100.0, best_ask=102.0)


def test_synthetic_spot_names_and_zero_funding(book):
    inst = compute_synthetic_spot(book, 0.0005, 0.0)
    assert inst.kind == "Synthetic Spot"
    assert inst.leg_a == "BTCUSDT_PERP"
    assert inst.leg_b == "FundingAdj"
    assert inst.price == book.mid()


def test_synthetic_spot_positive_funding_raises_price(book):
    assert compute_synthetic_spot(book, 0.0005, 2.0).price > book.mid()


def test_carry_model(book):
    flat = compute_synthetic_future_carry(book, 0.0, 1.0)
    assert flat.price == book.mid()
    assert flat.kind == "Synthetic Future (Carry)"
    assert flat.leg_a == "BTCUSDT_SPOT"
    assert flat.leg_b == "CostOfCarry"
    assert compute_synthetic_future_carry(book, 0.05, 1.0).price > book.mid()


def test_funding_model(book):
    inst = compute_synthetic_future_funding(book, 0.01, 0.0)
    assert inst.price == book.mid()
    assert inst.kind == "Synthetic Future (Funding)"
    assert inst.leg_b == "FundingRate"
    assert compute_synthetic_future_funding(book, -0.01, 1.0).price < book.mid()


def test_mispricing():
    assert compute_mispricing(100.0, 0.0) == 0.0
    assert compute_mispricing(50.0, 50.0) == 0.0
    assert compute_mispricing(110.0, 100.0) == pytest.approx(10.0)
    assert compute_mispricing(90.0, 100.0) < 0


def test_evaluate_long_real_when_synthetic_higher(book, capsys):
    other = OrderBookUpdate(symbol="X")
    opp = evaluate_arbitrage("BTC/USDT", "OKX", "Binance", 100.0, 101.0, 0.1, 500.0, book, other)
    assert opp.long_exchange == "OKX"
    assert opp.short_exchange == "Binance"
    assert opp.long_price == 100.0 and opp.short_price == 101.0
    assert opp.profit_percentage == pytest.approx(1.0)
    assert opp.capital == 500.0
    assert opp.long_book is book and opp.short_book is other
    assert "Arbitrage Opportunity Detected" in capsys.readouterr().out


def test_evaluate_long_synthetic_when_real_higher(book):
    other = OrderBookUpdate(symbol="X")
    opp = evaluate_arbitrage("BTC/USDT", "OKX", "Binance", 101.0, 100.0, 0.1, 500.0, book, other)
    assert opp.long_exchange == "Binance"
    assert opp.short_exchange == "OKX"
    assert opp.long_book is other and opp.short_book is book
    assert opp.profit_percentage > 0.1


def test_evaluate_below_threshold_is_empty(book):
    opp = evaluate_arbitrage("BTC/USDT", "OKX", "Binance", 100.0, 100.01, 0.1, 500.0, book, book)
    assert opp.long_exchange == ""
    assert opp.symbol == "BTC/USDT"
    assert opp.capital == 0.0


def test_evaluate_equal_prices_is_empty(book):
    opp = evaluate_arbitrage("BTC/USDT", "OKX", "Binance", 100.0, 100.0, 0.0, 500.0, book, book)
    assert opp.long_exchange == ""
    assert opp.strategy_type == "unknown strategy"