"""solarprep: historical solar, load, price and battery time-series preparation."""

__version__ = "0.1.0"
