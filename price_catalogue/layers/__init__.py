"""Layers package initialization."""
from price_catalogue.layers.acquisition import AcquisitionLayer, AcquisitionError
from price_catalogue.layers.catalogue import CatalogueService, ItemStore, ItemNotFoundError

__all__ = [
    "AcquisitionLayer",
    "AcquisitionError",
    "CatalogueService",
    "ItemStore",
    "ItemNotFoundError",
]
