"""The detection loop: strategies run against live market data."""

from __future__ import annotations

import argparse
import functools
import sys
import time
from os import PathLike

from arbengine.correlation import CorrelationAnalyzer
from arbengine.exchanges import BinanceClient, BinancePerpClient, BybitClient, ExchangeClient, OKXClient
from arbengine.executor import TradeExecutor
from arbengine.liquidity import compute_capital_limit
from arbengine.market_data import MarketDataAggregator
from arbengine.monitoring import (
    PerformanceMonitor,
    display_basis_risk,
    display_funding_impact,
    display_liquidity_alert,
)
from arbengine.options import check_volatility_arbitrage
from arbengine.risk import is_risk_acceptable
from arbengine.statarb import StatisticalArbitrageEngine
from arbengine.stress import simulate_price_shock
from arbengine.synthetic import (
    compute_mispricing,
    compute_synthetic_future_funding,
    compute_synthetic_spot,
    evaluate_arbitrage,
)
from arbengine.types import ArbitrageOpportunity, OrderBookUpdate, SyntheticInstrument, fmt_num
from arbengine.var import VaREstimator

SYMBOL = "BTC/USDT"
MAX_CAPITAL = 10000.0
MIN_PROFIT = 0.1
PERP_LEVERAGE = 0.0005
PERP_FUNDING = 2.0
RULE = "━" * 39


def _header(title: str) -> None:
    print(f"\n{RULE}")
    print(title)
    print(RULE)


class Engine:
    """Runs the arbitrage checks against an aggregator's latest data."""

    def __init__(
        self,
        aggregator: MarketDataAggregator | None = None,
        *,
        executor: TradeExecutor | None = None,
        statarb: StatisticalArbitrageEngine | None = None,
        correlation: CorrelationAnalyzer | None = None,
        monitor: PerformanceMonitor | None = None,
    ) -> None:
        self.aggregator = aggregator if aggregator is not None else MarketDataAggregator()
        self.executor = executor if executor is not None else TradeExecutor(VaREstimator())
        self.var = self.executor.var_estimator
        self.statarb = statarb if statarb is not None else StatisticalArbitrageEngine()
        self.correlation = correlation if correlation is not None else CorrelationAnalyzer()
        self.monitor = monitor if monitor is not None else PerformanceMonitor()

    def _try_execute(
        self, opportunity: ArbitrageOpportunity, book: OrderBookUpdate, strategy: str
    ) -> bool:
        if not opportunity.long_exchange or not is_risk_acceptable(opportunity, book):
            return False
        opportunity.strategy_type = strategy
        print(opportunity.describe(), end="")
        self.executor.execute_trade(opportunity)
        return True

    def check_synthetic_futures(self) -> list[ArbitrageOpportunity]:
        """OKX spot against a synthetic spot from the Binance perp and a funding-model future."""
        books = self.aggregator.latest_updates()
        if "Binance" not in books or "OKX" not in books:
            return []
        _header("🔍 SYNTHETIC FUTURES ANALYSIS")

        binance_perp = books["Binance"]
        okx_spot = books["OKX"]
        real_spot = okx_spot.mid()
        synthetic_spot = compute_synthetic_spot(binance_perp, PERP_LEVERAGE, PERP_FUNDING)

        funding = self.aggregator.funding_data("Binance")
        if funding is None:
            return []
        funding_rate = funding.funding_rate
        synthetic_future = compute_synthetic_future_funding(okx_spot, funding_rate, 7.0 / 365.0)

        mispricing_spot = compute_mispricing(real_spot, synthetic_spot.price)
        mispricing_future = compute_mispricing(real_spot, synthetic_future.price)
        print(f"📊 Real Spot (OKX): {fmt_num(real_spot)}")
        print(
            f"🧮 Synthetic Spot (Binance): {fmt_num(synthetic_spot.price)}"
            f" → Mispricing: {fmt_num(mispricing_spot)}%"
        )
        print(
            f"🧮 Synthetic Future (Funding Model): {fmt_num(synthetic_future.price)}"
            f" → Mispricing: {fmt_num(mispricing_future)}%"
        )

        display_funding_impact(SYMBOL, funding_rate, MAX_CAPITAL)
        display_liquidity_alert(SYMBOL, okx_spot, 2.0)
        display_basis_risk(SYMBOL, real_spot, synthetic_future.price)

        spread = synthetic_spot.price - real_spot
        self.statarb.update_spread_history("BTC_SPOT_SYNTH", spread)
        if self.statarb.is_mean_reversion_signal("BTC_SPOT_SYNTH", spread, 2.0):
            print("📈 Stat-Arb Signal: Spread deviation detected (Z-Score ≥ 2)")

        capital_spot = compute_capital_limit(okx_spot, binance_perp, MAX_CAPITAL)
        capital_future = compute_capital_limit(okx_spot, okx_spot, MAX_CAPITAL)
        candidates = [
            (
                evaluate_arbitrage(
                    SYMBOL, "OKX", "Binance", real_spot, synthetic_spot.price,
                    MIN_PROFIT, capital_spot, okx_spot, binance_perp,
                ),
                "Spot vs Synthetic Spot",
            ),
            (
                evaluate_arbitrage(
                    SYMBOL, "OKX", "OKX", real_spot, synthetic_future.price,
                    MIN_PROFIT, capital_future, okx_spot, binance_perp,
                ),
                "Spot vs Synthetic Future",
            ),
        ]
        executed = [opp for opp, strategy in candidates if self._try_execute(opp, okx_spot, strategy)]
        print(RULE)
        return executed

    def check_cross_exchange_spot_arb(self) -> list[ArbitrageOpportunity]:
        """Binance against Bybit mid prices."""
        books = self.aggregator.latest_updates()
        if "Binance" not in books or "Bybit" not in books:
            return []
        _header("🔍 CROSS-EXCHANGE SPOT ARBITRAGE")

        binance = books["Binance"]
        bybit = books["Bybit"]
        binance_mid = binance.mid()
        bybit_mid = bybit.mid()

        self.correlation.update_price("BTC_BINANCE", binance_mid)
        self.correlation.update_price("BTC_BYBIT", bybit_mid)
        self.correlation.alert_if_diverging("BTC_BINANCE", "BTC_BYBIT")

        mispricing = compute_mispricing(bybit_mid, binance_mid)
        print(f"≡ Cross-Exchange Mispricing (Binance vs Bybit): {fmt_num(mispricing)}%")

        capital = compute_capital_limit(bybit, binance, MAX_CAPITAL)
        opportunity = evaluate_arbitrage(
            SYMBOL, "Bybit", "Binance", bybit_mid, binance_mid, MIN_PROFIT, capital, bybit, binance
        )
        executed = (
            [opportunity]
            if self._try_execute(opportunity, bybit, "Cross-Exchange Spot Arbitrage")
            else []
        )
        print(RULE)
        return executed

    def check_synthetic_vs_real_spot(self) -> list[ArbitrageOpportunity]:
        """Bybit spot against a synthetic spot from the Binance perp."""
        books = self.aggregator.latest_updates()
        if "Binance" not in books or "Bybit" not in books:
            return []
        _header("🔍 SYNTHETIC VS REAL SPOT (BINANCE vs BYBIT)")

        binance_perp = books["Binance"]
        bybit_spot = books["Bybit"]
        display_liquidity_alert(SYMBOL, bybit_spot, 2.0)
        display_liquidity_alert(SYMBOL, binance_perp, 2.0)

        synthetic = compute_synthetic_spot(binance_perp, PERP_LEVERAGE, PERP_FUNDING)
        real_bybit = bybit_spot.mid()
        mispricing = compute_mispricing(real_bybit, synthetic.price)
        print(f"≡ Mispricing (Synthetic Spot vs Real Spot): {fmt_num(mispricing)}%")

        capital = compute_capital_limit(bybit_spot, binance_perp, MAX_CAPITAL)
        opportunity = evaluate_arbitrage(
            SYMBOL, "Bybit", "Binance", real_bybit, synthetic.price,
            MIN_PROFIT, capital, bybit_spot, binance_perp,
        )
        executed = (
            [opportunity]
            if self._try_execute(opportunity, bybit_spot, "Synthetic Spot vs Real Spot")
            else []
        )
        print(RULE)
        return executed

    def run_stress_test(self) -> SyntheticInstrument | None:
        """Reprice the synthetic spot after a 20% drop in the Binance book."""
        book = self.aggregator.latest_updates().get("Binance")
        if book is None:
            return None
        _header("🧪 STRESS TEST - PRICE SHOCK SIMULATION")
        shocked = simulate_price_shock(book, -20.0)
        print("⚠️ Simulated -20% Price Shock on Binance")
        print(f"Old Bid: {fmt_num(book.best_bid)} | New Bid: {fmt_num(shocked.best_bid)}")
        synthetic = compute_synthetic_spot(shocked, PERP_LEVERAGE, PERP_FUNDING)
        print(f"📉 Synthetic Spot Price After Shock: {fmt_num(synthetic.price)}")
        print(RULE)
        return synthetic

    def run_cycle(self) -> None:
        """Run every check once and print a market snapshot, timing the pass."""
        self.monitor.start_latency_timer()
        self.check_synthetic_futures()
        self.check_cross_exchange_spot_arb()
        self.check_synthetic_vs_real_spot()
        check_volatility_arbitrage(self.aggregator)
        _header("📸 MARKET SNAPSHOT")
        self.aggregator.print_snapshot()
        self.monitor.record_update()
        self.monitor.stop_latency_timer()

    def periodic_report(self, csv_path: str | PathLike[str]) -> None:
        """Stress test, risk and P&L reports, and the trade history file."""
        self.run_stress_test()
        self.var.print_report()
        self.monitor.print_metrics()
        self.executor.print_pnl_summary()
        try:
            self.executor.write_trade_history_csv(csv_path)
        except OSError as exc:
            print(f"❌ Failed to write trade history to CSV: {csv_path} ({exc})", file=sys.stderr)

    def run(
        self,
        cycles: int | None = None,
        interval: float = 2.0,
        report_every: int = 10,
        csv_path: str | PathLike[str] = "executed_trades.csv",
    ) -> int:
        """Run cycles (forever when None); return how many ran."""
        count = 0
        while cycles is None or count < cycles:
            self.run_cycle()
            time.sleep(interval)
            count += 1
            if count % report_every == 0:
                self.periodic_report(csv_path)
        return count


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Detect synthetic and cross-exchange arbitrage.")
    parser.add_argument("--csv", default="executed_trades.csv", help="trade history output file")
    parser.add_argument("--interval", type=float, default=2.0, help="seconds between cycles")
    parser.add_argument("--cycles", type=int, default=None, help="stop after this many cycles")
    parser.add_argument("--report-every", type=int, default=10, help="cycles between reports")
    parser.add_argument("--ca-file", default=None, help="CA bundle for TLS verification")
    args = parser.parse_args(argv)
    if args.report_every < 1:
        parser.error("--report-every must be at least 1")
    return args


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    reconfigure = getattr(sys.stdout, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(encoding="utf-8")

    engine = Engine()
    aggregator = engine.aggregator
    clients: list[ExchangeClient] = [
        BinanceClient("btcusdt", ca_file=args.ca_file),
        OKXClient("BTC-USDT", ca_file=args.ca_file),
        BybitClient("BTCUSDT", ca_file=args.ca_file),
    ]
    perp = BinancePerpClient("btcusdt", ca_file=args.ca_file)
    perp.set_mark_price_callback(functools.partial(aggregator.update_funding_and_mark, "Binance"))

    try:
        perp.connect()
        for client in clients:
            client.set_order_book_callback(functools.partial(aggregator.update, client.name))
            client.connect()
            time.sleep(2)
        engine.run(args.cycles, args.interval, args.report_every, args.csv)
    except KeyboardInterrupt:
        pass
    finally:
        for client in clients:
            client.disconnect()
        perp.disconnect()
    return 0


if __name__ == "__main__":
    sys.exit(main())