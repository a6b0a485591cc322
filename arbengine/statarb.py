"""Rolling spread statistics and mean-reversion signals."""

from __future__ import annotations

import math
from collections import defaultdict, deque

MAX_HISTORY = 100
MIN_SAMPLES = 20


class StatisticalArbitrageEngine:
    """Keeps a bounded spread history per key and scores new spreads against it."""

    def __init__(self, max_history: int = MAX_HISTORY) -> None:
        self._history: defaultdict[str, deque[float]] = defaultdict(lambda: deque(maxlen=max_history))

    def update_spread_history(self, key: str, spread: float) -> None:
        """Append a spread, dropping the oldest once the window is full."""
        self._history[key].append(spread)

    def compute_z_score(self, key: str, current_spread: float) -> float:
        """Z-score of the spread against the key's history; 0 with too little data or no spread."""
        history = self._history.get(key)
        if history is None or len(history) < MIN_SAMPLES:
            return 0.0
        mean = sum(history) / len(history)
        variance = sum((value - mean) ** 2 for value in history) / len(history)
        stddev = math.sqrt(variance)
        if stddev == 0.0:
            return 0.0
        return (current_spread - mean) / stddev

    def is_mean_reversion_signal(self, key: str, current_spread: float, threshold: float) -> bool:
        """Record the spread and report whether its z-score reaches the threshold."""
        self.update_spread_history(key, current_spread)
        return abs(self.compute_z_score(key, current_spread)) >= threshold