"""
tradeledger - Trade history accounting and options analytics

Public API for replaying trade histories into positions (FIFO or average
cost), aggregating a portfolio against market prices, and analysing option
strategies.
"""

from importlib.metadata import version

try:
    __version__ = version("tradeledger")
except Exception:
    __version__ = "0.0.0.dev"  # Fallback for development


__all__ = [
    "__version__",
]
