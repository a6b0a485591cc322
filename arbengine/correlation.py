"""Rolling price correlation between instruments."""

from __future__ import annotations

import math
from collections import defaultdict, deque
from collections.abc import Sequence

from arbengine.types import fmt_num

WINDOW_SIZE = 100


def pearson_correlation(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Pearson correlation; 0 for unequal lengths, fewer than two points or no variance."""
    n = len(xs)
    if n != len(ys) or n < 2:
        return 0.0
    sum_x = sum(xs)
    sum_y = sum(ys)
    sum_xy = sum(x * y for x, y in zip(xs, ys))
    sum_x2 = sum(x * x for x in xs)
    sum_y2 = sum(y * y for y in ys)
    numerator = n * sum_xy - sum_x * sum_y
    product = (n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y)
    if product <= 0.0:
        return 0.0
    return numerator / math.sqrt(product)


class CorrelationAnalyzer:
    """Keeps a bounded price history per symbol."""

    def __init__(self, window_size: int = WINDOW_SIZE) -> None:
        self._history: defaultdict[str, deque[float]] = defaultdict(lambda: deque(maxlen=window_size))

    def update_price(self, symbol: str, price: float) -> None:
        self._history[symbol].append(price)

    def correlation(self, symbol_a: str, symbol_b: str) -> float:
        return pearson_correlation(
            list(self._history.get(symbol_a, ())), list(self._history.get(symbol_b, ()))
        )

    def alert_if_diverging(self, symbol_a: str, symbol_b: str, threshold: float = 0.85) -> bool:
        """Print an alert and return True when the correlation falls below the threshold."""
        corr = self.correlation(symbol_a, symbol_b)
        if abs(corr) >= threshold:
            return False
        print(f"⚠️ Correlation Alert: {symbol_a} & {symbol_b} correlation dropped to {fmt_num(corr)}")
        return True