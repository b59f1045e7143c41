"""Data models."""

from trendline_finder.models.series import Bar, PriceSeries

__all__ = ["Bar", "PriceSeries"]
