"""Output formatting for trendline results."""
