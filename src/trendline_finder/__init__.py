"""Trendline Finder - Detect support, resistance and crossing trendlines."""

__version__ = "0.1.0"
