"""Adapters package initialization."""
from price_catalogue.adapters.html_fetcher import HTMLFetcher, FetchError
from price_catalogue.adapters.renderer import DynamicRenderer, RenderError

__all__ = ["HTMLFetcher", "FetchError", "DynamicRenderer", "RenderError"]
