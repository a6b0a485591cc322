"""Historical value-at-risk over realised trade P&L."""

from __future__ import annotations

import sys
from collections import deque

MAX_HISTORY = 1000


class VaREstimator:
    """Keeps recent P&L and reports historical VaR from its losses."""

    def __init__(self, max_history: int = MAX_HISTORY) -> None:
        self._pnl: deque[float] = deque(maxlen=max_history)

    def add_pnl(self, pnl: float) -> None:
        self._pnl.append(pnl)

    def historical_var(self, confidence_level: float = 0.95) -> float:
        """Loss at the (1 - confidence) rank of the sorted losses; 0 without losses."""
        if not 0.0 < confidence_level <= 1.0:
            raise ValueError(f"confidence level must be in (0, 1], got {confidence_level}")
        losses = sorted(-pnl for pnl in self._pnl if pnl < 0)
        if not losses:
            return 0.0
        return losses[int((1.0 - confidence_level) * len(losses))]

    def format_report(self) -> str:
        var95 = self.historical_var(0.95)
        var99 = self.historical_var(0.99)
        return f"\n📉 === VaR REPORT ===\nVaR (95%): ${var95:.2f}\nVaR (99%): ${var99:.2f}\n"

    def print_report(self) -> str:
        """Write the report to standard output and return the text written."""
        text = self.format_report()
        sys.stdout.write(text)
        return text