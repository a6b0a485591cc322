# arbengine

arbengine is a live arbitrage monitor for BTC/USDT. It streams top-of-book
data from Binance spot, OKX spot and Bybit. It also streams the mark price and
funding rate of the Binance perpetual. On each cycle it compares real prices
with synthetic ones and prints the mispricings it finds. Opportunities that
pass the risk checks are run through a simulated executor, which records
their P&L. Every few cycles it prints stress-test, VaR, performance and P&L
reports, and it writes the trade history to a CSV file.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Running

```
arbengine
```

The command connects to the exchanges, each on its own background thread, and
loops until it is interrupted. It accepts these options:

| Option | Default | Meaning |
| --- | --- | --- |
| `--csv PATH` | `executed_trades.csv` | where the trade history is written |
| `--interval SECONDS` | `2.0` | pause between cycles |
| `--cycles N` | unlimited | stop after N cycles |
| `--report-every N` | `10` | cycles between reports (at least 1) |
| `--ca-file PATH` | none | CA bundle used to verify the TLS connections |

## What each cycle does

`arbengine.app.Engine.run_cycle()` runs the following checks against the
latest data held by a `MarketDataAggregator`, then prints a market snapshot:

- **Synthetic futures** (`check_synthetic_futures`). This check needs a funding
  rate. It compares the OKX mid price with two synthetic prices: a synthetic
  spot built from the Binance book, and a funding-model synthetic future built
  from the OKX book and the Binance funding rate. It also prints the funding
  cost, a liquidity warning and the basis risk. It feeds the spread into a
  z-score mean-reversion signal.
- **Cross-exchange spot** (`check_cross_exchange_spot_arb`). This check
  compares the Binance and Bybit mid prices. It tracks their rolling
  correlation and prints an alert when the absolute correlation falls below
  0.85.
- **Synthetic vs real spot** (`check_synthetic_vs_real_spot`). This check
  compares the Binance-derived synthetic spot with the Bybit mid price.
- **Volatility arbitrage** (`arbengine.options.check_volatility_arbitrage`).
  This check prices a 7-day call, struck 5% above the OKX mid, with
  Black-Scholes. It compares that price with a fixed quoted price and flags a
  gap of more than 5%.

Each candidate opportunity comes from
`arbengine.synthetic.evaluate_arbitrage`. Before it is executed, it must pass
`arbengine.risk.is_risk_acceptable`. That check requires enough book depth
within 0.5% of the top on both sides, capital of no more than 20000, and a
profit of at least 0.01%.

`Engine.periodic_report(csv_path)` runs the following in order:

- a stress test that applies a 20% price drop to the Binance book;
- the VaR report at 95% and 99%;
- the performance metrics;
- the P&L summary;
- a write of the trade history CSV.

## Using the building blocks

Each part can also be used as a library:

```python
from arbengine.types import OrderBookUpdate
from arbengine.synthetic import compute_synthetic_spot, compute_mispricing
from arbengine.liquidity import compute_capital_limit, estimate_market_impact
from arbengine.options import OptionType, black_scholes_price, implied_volatility
from arbengine.var import VaREstimator

book = OrderBookUpdate(symbol="BTCUSDT", best_bid=30000.0, best_ask=30010.0,
                       best_bid_qty=1.5, best_ask_qty=2.0)
synthetic = compute_synthetic_spot(book, 0.0005, 2.0)
print(compute_mispricing(book.mid(), synthetic.price))
print(compute_capital_limit(book, book, 10000.0))
print(estimate_market_impact(book, 5000.0))

price = black_scholes_price(OptionType.CALL, 30000.0, 31000.0, 14 / 365, 0.03, 0.6)
vol = implied_volatility(OptionType.CALL, price, 30000.0, 31000.0, 14 / 365, 0.03)

estimator = VaREstimator()
for pnl in (-12.0, 4.0, -3.5):
    estimator.add_pnl(pnl)
print(estimator.historical_var(0.95))
```

The other modules work the same way:

- `arbengine.statarb.StatisticalArbitrageEngine` scores spreads as rolling
  z-scores.
- `arbengine.correlation` provides `pearson_correlation` and
  `CorrelationAnalyzer`.
- `arbengine.stress` provides price shocks, liquidity drains and injected
  latency.
- `arbengine.monitoring` provides `PerformanceMonitor` and the risk display
  helpers.
- `arbengine.market_data.MarketDataStore` keeps the latest book for each
  exchange and symbol.
- `arbengine.exchanges` provides the websocket clients. Its message parsers
  (`parse_binance_book_ticker`, `parse_okx_books`, `parse_bybit_orderbook`,
  `parse_binance_mark_prices`) can be used on their own.

An `Engine` can run on any feed: fill its `MarketDataAggregator` through
`update(exchange, book)` and `update_funding_and_mark(exchange, mark,
funding)`, then call `run_cycle()`.

## What it does not do

- **No real orders.** `TradeExecutor` only simulates fills. It uses a price
  adjusted for slippage and records the result in memory and in the CSV file.
  Nothing is sent to an exchange, and no account credentials are used.
- **No options feed.** The option price in the volatility check is a fixed
  number. The volatility used to price the call is a fixed number as well.
- **Nothing saved between runs.** The trade history, the P&L and the VaR
  history live only in memory for the life of the process. The CSV file is
  overwritten each time it is written.
- **One instrument only.** The symbols and exchanges are fixed to BTC/USDT on
  Binance, OKX and Bybit.