"""Odds arbitrage, middle and value bet detection engine."""

__version__ = "0.1.0"
