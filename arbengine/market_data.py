"""Thread-safe holders for the latest market data."""

from __future__ import annotations

import sys
import threading
from dataclasses import dataclass

from arbengine.types import OrderBookUpdate, SyntheticInstrument, fmt_num


@dataclass(frozen=True)
class FundingData:
    """Mark price and funding rate of a perpetual."""

    mark_price: float
    funding_rate: float


class MarketDataAggregator:
    """Latest book per exchange, plus funding and synthetic prices."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._books: dict[str, OrderBookUpdate] = {}
        self._funding: dict[str, FundingData] = {}
        self._synthetics: dict[str, SyntheticInstrument] = {}

    def update(self, exchange: str, update: OrderBookUpdate) -> None:
        with self._lock:
            self._books[exchange] = update

    def update_funding_and_mark(self, exchange: str, mark: float, funding: float) -> None:
        with self._lock:
            self._funding[exchange] = FundingData(mark, funding)

    def funding_data(self, exchange: str) -> FundingData | None:
        with self._lock:
            return self._funding.get(exchange)

    def latest_updates(self) -> dict[str, OrderBookUpdate]:
        """A copy of the latest book per exchange."""
        with self._lock:
            return dict(self._books)

    def synthetic_data(self) -> dict[str, SyntheticInstrument]:
        with self._lock:
            return dict(self._synthetics)

    def update_synthetic(self, name: str, synthetic: SyntheticInstrument) -> None:
        with self._lock:
            self._synthetics[name] = synthetic

    def format_snapshot(self) -> str:
        """Render all held data as text."""
        with self._lock:
            lines = ["", "=== Market Snapshot ==="]
            for exchange, book in self._books.items():
                lines.append(
                    f"{exchange}  - {book.symbol} | Bid: {fmt_num(book.best_bid)}"
                    f" | Ask: {fmt_num(book.best_ask)}"
                )
                funding = self._funding.get(exchange)
                if funding is not None:
                    lines.append(
                        f"   ↳ Mark: {funding.mark_price:.10f}, Funding: {funding.funding_rate:.10f}"
                    )
            lines.extend(["", "=== Synthetic Instruments ==="])
            for name, syn in self._synthetics.items():
                lines.append(
                    f"🔹 {syn.kind} [{name}] - Price: {fmt_num(syn.price)}"
                    f" (LegA: {syn.leg_a}, LegB: {syn.leg_b})"
                )
        return "\n".join(lines) + "\n"

    def print_snapshot(self) -> str:
        """Write the snapshot to standard output and return the text written."""
        text = self.format_snapshot()
        sys.stdout.write(text)
        return text


class MarketDataStore:
    """Latest book keyed by exchange and symbol."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._data: dict[str, dict[str, OrderBookUpdate]] = {}

    def update(self, exchange: str, update: OrderBookUpdate) -> None:
        with self._lock:
            self._data.setdefault(exchange, {})[update.symbol] = update

    def get(self, exchange: str, symbol: str) -> OrderBookUpdate | None:
        with self._lock:
            return self._data.get(exchange, {}).get(symbol)

    def snapshot(self) -> dict[str, dict[str, OrderBookUpdate]]:
        """A copy of everything held."""
        with self._lock:
            return {exchange: dict(books) for exchange, books in self._data.items()}