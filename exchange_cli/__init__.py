"""Interactive command-line client for ExchangeRate-API."""

__version__ = "0.1.0"
