"""Detection latency metrics and risk display helpers."""

from __future__ import annotations

import math
import threading
import time
from collections.abc import Callable

from arbengine.types import OrderBookUpdate, fmt_num


class PerformanceMonitor:
    """Accumulates loop latency and update counts over a reporting window."""

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._start: float | None = None
        self._total_latency = 0.0
        self._update_count = 0

    def start_latency_timer(self) -> None:
        self._start = self._clock()

    def stop_latency_timer(self) -> None:
        if self._start is None:
            raise RuntimeError("latency timer was never started")
        self._total_latency += self._clock() - self._start

    def record_update(self) -> None:
        with self._lock:
            self._update_count += 1

    def average_latency_ms(self) -> float:
        with self._lock:
            count = self._update_count
        return self._total_latency / count * 1000.0 if count > 0 else 0.0

    def print_metrics(self) -> None:
        """Print the window's metrics and start a new window."""
        avg = self.average_latency_ms()
        with self._lock:
            count = self._update_count
            self._update_count = 0
        self._total_latency = 0.0
        print("📊 Performance Metrics:")
        print(f"   ➤ Market Updates Processed: {count}")
        print(f"   ➤ Avg Detection Latency: {avg:.4f} ms")


def display_funding_impact(symbol: str, funding_rate: float, capital: float) -> float:
    """Print and return the funding cost on the given capital."""
    impact = funding_rate * capital
    print(f"💡 Funding Rate Impact [{symbol}]: {funding_rate:.4f} → Cost: {impact:.2f} USDT")
    return impact


def display_liquidity_alert(symbol: str, book: OrderBookUpdate, required_qty: float) -> bool:
    """Warn and return True when either top-of-book side is thinner than required."""
    if book.best_bid_qty < required_qty or book.best_ask_qty < required_qty:
        print(
            f"⚠️ Liquidity Warning for {symbol}: Insufficient depth for "
            f"{fmt_num(required_qty)} units."
        )
        return True
    return False


def display_basis_risk(symbol: str, real_price: float, synthetic_price: float) -> tuple[float, float]:
    """Print and return the basis in quote currency and in percent of the real price."""
    basis = synthetic_price - real_price
    if real_price != 0:
        basis_pct = basis / real_price * 100.0
    elif basis == 0:
        basis_pct = math.nan
    else:
        basis_pct = math.copysign(math.inf, basis)
    print(f"📉 Basis Risk [{symbol}]: {basis:.2f} USDT ({basis_pct:.2f}%)")
    return basis, basis_pct