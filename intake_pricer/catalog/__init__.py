"""Catalog layer: parsing, immutable rows and the cached provider."""

from .cache import CatalogProvider, TTLCache
from .csv_parser import iter_rows, parse_rows
from .ingestor import Catalog, CatalogRow, HeaderIndex, parse_catalog

__all__ = [
    "Catalog",
    "CatalogProvider",
    "CatalogRow",
    "HeaderIndex",
    "TTLCache",
    "iter_rows",
    "parse_catalog",
    "parse_rows",
]
