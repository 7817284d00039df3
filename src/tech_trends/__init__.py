"""Technology trend dashboard API: trend catalog, favorites and user settings."""

__version__ = "0.1.0"
