from datetime import datetime

import pytest

from arbengine.executor import CSV_HEADER, TradeExecutor
from arbengine.types import ArbitrageOpportunity, OrderBookUpdate
from arbengine.var import VaREstimator

FIXED_TIME = datetime(2024, 1, 2, 3, 4, 5)


def _executor(var=None):
    return TradeExecutor(var, clock=lambda: FIXED_TIME)


def _opportunity(long_price, short_price, capital=1000.0, long_book=None, short_book=None):
    return ArbitrageOpportunity(
        symbol="BTC/USDT",
        long_exchange="OKX",
        short_exchange="Binance",
        long_price=long_price,
        short_price=short_price,
        profit_percentage=(short_price - long_price) / long_price * 100.0,
        capital=capital,
        long_book=long_book or OrderBookUpdate(),
        short_book=short_book or OrderBookUpdate(),
    )


def test_profitable_trade_is_recorded():
    executor = _executor()
    opp = _opportunity(100.0, 101.0)
    trade = executor.execute_trade(opp)
    assert trade is not None
    assert trade.buy_exchange == "OKX"
    assert trade.sell_exchange == "Binance"
    assert trade.buy_price == 100.0
    assert trade.sell_price == 101.0
    assert trade.capital_used == pytest.approx(opp.capital * 0.01)
    assert trade.profit > 0
    assert trade.timestamp == FIXED_TIME
    assert executor.trade_count() == 1
    assert executor.total_profit() == pytest.approx(trade.profit)
    assert executor.trade_history() == [trade]


def test_zero_capital_is_rejected(capsys):
    executor = _executor()
    assert executor.execute_trade(_opportunity(100.0, 101.0, capital=0.0)) is None
    assert executor.trade_count() == 0
    assert "Capital is zero or negative" in capsys.readouterr().err


def test_stop_loss_prevents_trade(capsys):
    executor = _executor()
    assert executor.execute_trade(_opportunity(100.0, 97.0)) is None
    assert executor.trade_count() == 0
    assert "Stop-loss Triggered" in capsys.readouterr().out


def test_take_profit_still_trades(capsys):
    executor = _executor()
    trade = executor.execute_trade(_opportunity(100.0, 104.0))
    assert trade is not None
    assert executor.trade_count() == 1
    assert "Take-Profit Triggered" in capsys.readouterr().out


def test_slippage_reduces_profit():
    plain = _executor().execute_trade(_opportunity(100.0, 101.0))
    book = OrderBookUpdate(best_bid=100.0, best_ask=101.0, best_bid_qty=1.0, best_ask_qty=1.0)
    slipped = _executor().execute_trade(_opportunity(100.0, 101.0, long_book=book, short_book=book))
    assert slipped.profit < plain.profit


def test_losing_trade_feeds_var():
    var = VaREstimator()
    executor = _executor(var)
    trade = executor.execute_trade(_opportunity(100.0, 99.5))
    assert trade.profit < 0
    assert var.historical_var() == pytest.approx(-trade.profit)
    assert executor.var_estimator is var


def test_history_is_a_copy():
    executor = _executor()
    executor.execute_trade(_opportunity(100.0, 101.0))
    executor.trade_history().clear()
    assert executor.trade_count() == 1


def test_pnl_summary(capsys):
    executor = _executor()
    executor.execute_trade(_opportunity(100.0, 101.0))
    capsys.readouterr()
    executor.print_pnl_summary()
    out = capsys.readouterr().out
    assert "Timestamp: 2024-01-02 03:04:05" in out
    assert "Total Trades Executed: 1" in out
    assert f"Total Profit: {executor.total_profit():.2f} USDT" in out


def test_csv_round_trip(tmp_path):
    executor = _executor()
    trade = executor.execute_trade(_opportunity(100.0, 101.0))
    path = tmp_path / "trades.csv"
    executor.write_trade_history_csv(path)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == ",".join(CSV_HEADER)
    assert len(lines) == 2
    fields = lines[1].split(",")
    assert fields[0] == "2024-01-02 03:04:05"
    assert fields[1:4] == ["BTC/USDT", "OKX", "Binance"]
    assert float(fields[4]) == trade.buy_price
    assert float(fields[5]) == trade.sell_price
    assert float(fields[7]) == pytest.approx(trade.profit, rel=1e-5)


def test_csv_empty_history_has_header_only(tmp_path):
    path = tmp_path / "empty.csv"
    _executor().write_trade_history_csv(path)
    assert path.read_text(encoding="utf-8") == ",".join(CSV_HEADER) + "\n"


def test_csv_unwritable_path_raises(tmp_path):
    with pytest.raises(OSError):
        _executor().write_trade_history_csv(tmp_path / "missing" / "trades.csv")