"""Price Catalogue - track product links and the prices they show."""

__version__ = "1.0.0"
