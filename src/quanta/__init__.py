"""Quanta terminal: market-data acquisition, degradation and advisory pipeline."""

__version__ = "0.1.0"
