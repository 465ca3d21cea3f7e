"""Port Town: trading-settlement economy simulation."""

__version__ = "0.1.0"
