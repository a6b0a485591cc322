"""Simulated trade execution with slippage and a P&L ledger."""

from __future__ import annotations

import csv
import sys
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from os import PathLike

from arbengine.liquidity import estimate_market_impact, log_impact_estimate
from arbengine.risk import compute_position_size, should_stop_loss, should_take_profit
from arbengine.types import ArbitrageOpportunity, fmt_num
from arbengine.var import VaREstimator

_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
CSV_HEADER = (
    "Timestamp",
    "Symbol",
    "BuyExchange",
    "SellExchange",
    "BuyPrice",
    "SellPrice",
    "CapitalUsed",
    "Profit",
)


@dataclass(frozen=True)
class ExecutedTrade:
    """A completed simulated trade."""

    symbol: str
    buy_exchange: str
    sell_exchange: str
    buy_price: float
    sell_price: float
    capital_used: float
    profit: float
    timestamp: datetime


class TradeExecutor:
    """Sizes, prices and records simulated arbitrage trades."""

    def __init__(
        self,
        var_estimator: VaREstimator | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.var_estimator = var_estimator if var_estimator is not None else VaREstimator()
        self._clock = clock
        self._history: list[ExecutedTrade] = []
        self._total_profit = 0.0

    def execute_trade(self, opportunity: ArbitrageOpportunity) -> ExecutedTrade | None:
        """Execute the opportunity; None when it is rejected or stopped out."""
        if opportunity.capital <= 0.0:
            print("❌ Trade rejected: Capital is zero or negative.", file=sys.stderr)
            return None

        entry_buy = opportunity.long_price
        entry_sell = opportunity.short_price

        quantity = compute_position_size(opportunity.capital, entry_buy)
        capital_used = quantity * entry_buy

        market_price = (entry_buy + entry_sell) / 2.0
        if should_stop_loss(entry_buy, market_price):
            print("🔻 Stop-loss Triggered (Price dropped below threshold)")
            return None
        if should_take_profit(entry_buy, market_price):
            print("💰 Take-Profit Triggered (Profit threshold reached)")

        log_impact_estimate(opportunity.long_exchange, opportunity.long_book, opportunity.capital)
        log_impact_estimate(opportunity.short_exchange, opportunity.short_book, opportunity.capital)

        slippage_buy = estimate_market_impact(opportunity.long_book, opportunity.capital)
        slippage_sell = estimate_market_impact(opportunity.short_book, opportunity.capital)

        adjusted_buy = entry_buy * (1 + slippage_buy / 100.0)
        adjusted_sell = entry_sell * (1 - slippage_sell / 100.0)
        profit = (adjusted_sell - adjusted_buy) * quantity

        trade = ExecutedTrade(
            symbol=opportunity.symbol,
            buy_exchange=opportunity.long_exchange,
            sell_exchange=opportunity.short_exchange,
            buy_price=entry_buy,
            sell_price=entry_sell,
            capital_used=capital_used,
            profit=profit,
            timestamp=self._clock(),
        )
        self._history.append(trade)
        self._total_profit += profit
        self.var_estimator.add_pnl(profit)

        print("\n✅ Executed Trade:")
        print(f"🔹 Symbol: {opportunity.symbol}")
        print(f"🟢 Buy: {trade.buy_exchange} at {fmt_num(entry_buy)}")
        print(f"🔴 Sell: {trade.sell_exchange} at {fmt_num(entry_sell)}")
        print(f"💰 Capital Used: {fmt_num(capital_used)}")
        print(f"📉 Adjusted Buy Price (with slippage): {fmt_num(adjusted_buy)}")
        print(f"📈 Adjusted Sell Price (with slippage): {fmt_num(adjusted_sell)}")
        print(f"📈 Profit: {profit:.2f} USDT")
        return trade

    def total_profit(self) -> float:
        return self._total_profit

    def trade_count(self) -> int:
        return len(self._history)

    def trade_history(self) -> list[ExecutedTrade]:
        """A copy of the executed trades, oldest first."""
        return list(self._history)

    def print_pnl_summary(self) -> str:
        """Write the P&L summary to standard output and return the text written."""
        text = (
            f"Timestamp: {self._clock().strftime(_TIME_FORMAT)}\n"
            "\n📊 === P&L SUMMARY ===\n"
            f"Total Trades Executed: {self.trade_count()}\n"
            f"Total Profit: {self._total_profit:.2f} USDT\n"
        )
        sys.stdout.write(text)
        return text

    def write_trade_history_csv(self, filename: str | PathLike[str]) -> None:
        """Write every executed trade to a CSV file; raises OSError if it cannot be written."""
        with open(filename, "w", newline="", encoding="utf-8") as handle:
            writer = csv.writer(handle, lineterminator="\n")
            writer.writerow(CSV_HEADER)
            for trade in self._history:
                writer.writerow(
                    (
                        trade.timestamp.strftime(_TIME_FORMAT),
                        trade.symbol,
                        trade.buy_exchange,
                        trade.sell_exchange,
                        fmt_num(trade.buy_price),
                        fmt_num(trade.sell_price),
                        fmt_num(trade.capital_used),
                        fmt_num(trade.profit),
                    )
                )
        print(f"📝 Trade history saved to: {filename}")