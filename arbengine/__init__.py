"""Live crypto arbitrage monitoring: market-data clients, synthetic pricing, risk checks and simulated execution."""

__version__ = "0.1.0"