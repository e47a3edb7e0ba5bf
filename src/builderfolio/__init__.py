"""builderfolio — construction project tracking for builders and project managers."""

__version__ = "0.1.0"
