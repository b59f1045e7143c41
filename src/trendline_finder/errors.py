"""Exceptions raised by the trendline engine."""


class TrendlineError(Exception):
    """Base class for all trendline engine errors."""


class InvalidInputError(TrendlineError):
    """The price series failed validation (ordering, duplicates, bad bars)."""


class ConfigurationError(TrendlineError):
    """A tuning option is missing or out of range."""
