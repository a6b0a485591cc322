"""Websocket market-data clients and the parsers for their messages."""

from __future__ import annotations

import json
import sys
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import websocket

from arbengine.market_data import FundingData
from arbengine.types import OrderBookUpdate

OrderBookCallback = Callable[[OrderBookUpdate], None]
MarkPriceCallback = Callable[[float, float], None]

_PARSE_ERRORS = (ValueError, TypeError, KeyError, IndexError)


def _number(value: Any) -> float:
    if not isinstance(value, str):
        raise TypeError(f"expected a numeric string, got {value!r}")
    return float(value)


def _text(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {value!r}")
    return value


def parse_binance_book_ticker(payload: str) -> OrderBookUpdate:
    """Parse a combined-stream bookTicker message; absent fields read as zero."""
    message = json.loads(payload)
    data = message.get("data") if isinstance(message, dict) else None
    if not isinstance(data, dict):
        raise ValueError("book ticker message has no data object")
    return OrderBookUpdate(
        symbol=_text(data.get("s", "")),
        best_bid=_number(data.get("b", "0.0")),
        best_ask=_number(data.get("a", "0.0")),
        best_bid_qty=_number(data.get("B", "0.0")),
        best_ask_qty=_number(data.get("A", "0.0")),
    )


def _top_of_book(symbol: str, bids: Any, asks: Any) -> OrderBookUpdate:
    return OrderBookUpdate(
        symbol=symbol,
        best_bid=_number(bids[0][0]),
        best_ask=_number(asks[0][0]),
        best_bid_qty=_number(bids[0][1]),
        best_ask_qty=_number(asks[0][1]),
        timestamp=datetime.now(timezone.utc),
    )


def parse_okx_books(payload: str, symbol: str) -> OrderBookUpdate | None:
    """Parse a books5 message; None for messages that carry no book."""
    message = json.loads(payload)
    if not isinstance(message, dict):
        return None
    data = message.get("data")
    if not data:
        return None
    if not isinstance(data, list):
        raise ValueError("book message data is not an array")
    entry = data[0]
    if not isinstance(entry, dict) or "bids" not in entry or "asks" not in entry:
        return None
    bids, asks = entry["bids"], entry["asks"]
    if not bids or not asks:
        return None
    return _top_of_book(symbol, bids, asks)


def parse_bybit_orderbook(payload: str) -> OrderBookUpdate | None:
    """Parse an orderbook.1 message; None for messages that carry no full top of book."""
    message = json.loads(payload)
    if not isinstance(message, dict):
        return None
    data = message.get("data")
    if not isinstance(data, dict) or "b" not in data or "a" not in data:
        return None
    bids, asks = data["b"], data["a"]
    if not bids or not asks:
        return None
    return _top_of_book("BTCUSDT", bids, asks)


def parse_binance_mark_prices(payload: str, symbol: str) -> FundingData | None:
    """Find the symbol in an all-markets mark price array; None if it is absent."""
    message = json.loads(payload)
    if not isinstance(message, list):
        raise ValueError(f"expected a JSON array, got: {payload}")
    for entry in message:
        if isinstance(entry, dict) and entry.get("s") == symbol:
            return FundingData(mark_price=_number(entry["p"]), funding_rate=_number(entry["r"]))
    return None


class _Connection:
    """A websocket app running on a background thread."""

    def __init__(
        self,
        url: str,
        on_message: Callable[[str], Any],
        on_open: Callable[[websocket.WebSocketApp], None],
        on_error: Callable[[Any], None],
        ca_file: str | None,
    ) -> None:
        self._app = websocket.WebSocketApp(
            url,
            on_open=on_open,
            on_message=lambda _ws, message: on_message(message),
            on_error=lambda _ws, error: on_error(error),
        )
        self._sslopt = {"ca_certs": ca_file} if ca_file else None
        self._thread = threading.Thread(target=self._run, daemon=True)

    def _run(self) -> None:
        self._app.run_forever(sslopt=self._sslopt)

    def start(self) -> None:
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        self._app.close()
        if self._thread.is_alive():
            self._thread.join(timeout)


class ExchangeClient(ABC):
    """Streams top-of-book updates from one exchange to a callback."""

    name: str = ""

    def __init__(self, symbol: str, *, ca_file: str | None = None) -> None:
        self.symbol = symbol
        self.url = ""
        self.subscription: str | None = None
        self.connected = False
        self._ca_file = ca_file
        self._callback: OrderBookCallback | None = None
        self._connection: _Connection | None = None

    def set_order_book_callback(self, callback: OrderBookCallback | None) -> None:
        self._callback = callback

    @abstractmethod
    def _parse(self, payload: str) -> OrderBookUpdate | None:
        """Turn one message into an update, or None if it holds none."""

    def connect(self) -> None:
        """Open the stream on a background thread."""
        if self._connection is not None:
            return
        self._connection = _Connection(
            self.url, self.handle_message, self._on_open, self._on_error, self._ca_file
        )
        self._connection.start()

    def disconnect(self) -> None:
        if self._connection is None:
            return
        self._connection.stop()
        self._connection = None
        self.connected = False
        print(f"🔌 Disconnected from {self.name}.")

    def handle_message(self, payload: str) -> OrderBookUpdate | None:
        """Parse a message and pass any update to the callback; parse errors are reported."""
        try:
            update = self._parse(payload)
        except _PARSE_ERRORS as exc:
            print(f"❌ {self.name} parse error: {exc}", file=sys.stderr)
            return None
        if update is not None and self._callback is not None:
            self._callback(update)
        return update

    def _on_open(self, ws: websocket.WebSocketApp) -> None:
        if self.subscription is not None:
            try:
                ws.send(self.subscription)
            except websocket.WebSocketException as exc:
                print(f"❌ {self.name} subscription error: {exc}", file=sys.stderr)
                return
        self.connected = True
        print(f"🔌 Connected to {self.name} spot")

    def _on_error(self, error: Any) -> None:
        print(f"❌ {self.name} connection error: {error}", file=sys.stderr)


class BinanceClient(ExchangeClient):
    """Binance spot bookTicker stream."""

    name = "Binance"

    def __init__(self, symbol: str, *, ca_file: str | None = None) -> None:
        super().__init__(symbol, ca_file=ca_file)
        self.url = f"wss://stream.binance.com:443/stream?streams={symbol}@bookTicker"

    def _parse(self, payload: str) -> OrderBookUpdate | None:
        return parse_binance_book_ticker(payload)


class OKXClient(ExchangeClient):
    """OKX spot books5 stream."""

    name = "OKX"

    def __init__(self, symbol: str, *, ca_file: str | None = None) -> None:
        super().__init__(symbol, ca_file=ca_file)
        self.url = "wss://ws.okx.com:443/ws/v5/public"
        self.subscription = json.dumps(
            {"op": "subscribe", "args": [{"channel": "books5", "instId": symbol}]}
        )

    def _parse(self, payload: str) -> OrderBookUpdate | None:
        return parse_okx_books(payload, self.symbol)


class BybitClient(ExchangeClient):
    """Bybit level-1 order book stream."""

    name = "Bybit"

    def __init__(self, symbol: str, *, ca_file: str | None = None) -> None:
        super().__init__(symbol, ca_file=ca_file)
        self.url = "wss://stream.bybit.com/v5/public/linear"
        self.subscription = json.dumps({"op": "subscribe", "args": [f"orderbook.1.{symbol}"]})

    def _parse(self, payload: str) -> OrderBookUpdate | None:
        return parse_bybit_orderbook(payload)


class BinancePerpClient:
    """Binance perpetual mark price and funding rate stream."""

    name = "BinancePerp"
    url = "wss://fstream.binance.com/ws/!markPrice@arr"

    def __init__(self, symbol: str, *, ca_file: str | None = None) -> None:
        self.symbol = symbol
        self.connected = False
        self._market = symbol.upper()
        self._ca_file = ca_file
        self._callback: MarkPriceCallback | None = None
        self._connection: _Connection | None = None

    def set_mark_price_callback(self, callback: MarkPriceCallback | None) -> None:
        self._callback = callback

    def connect(self) -> None:
        if self._connection is not None:
            return
        self._connection = _Connection(
            self.url, self.handle_message, self._on_open, self._on_error, self._ca_file
        )
        self._connection.start()
        self.connected = True
        print("🔌 Connected to Binance perpetual")

    def disconnect(self) -> None:
        if self._connection is None:
            return
        self._connection.stop()
        self._connection = None
        self.connected = False

    def handle_message(self, payload: str) -> FundingData | None:
        """Extract this symbol's mark price and funding rate and pass them to the callback."""
        try:
            funding = parse_binance_mark_prices(payload, self._market)
        except _PARSE_ERRORS as exc:
            print(f"❌ {self.name} parse error: {exc}", file=sys.stderr)
            return None
        if funding is None:
            return None
        print(
            f"[DEBUG] Parsed fundingRate: {funding.funding_rate:.10f}, "
            f"markPrice: {funding.mark_price:.10f}"
        )
        if self._callback is not None:
            self._callback(funding.mark_price, funding.funding_rate)
        return funding

    def _on_open(self, ws: websocket.WebSocketApp) -> None:
        self.connected = True

    def _on_error(self, error: Any) -> None:
        print(f"❌ {self.name} connection error: {error}", file=sys.stderr)