"""
Catalog — stores, categories, products, search.
"""

from marketgate.catalog._types import Store, Category, Product, Page
from marketgate.catalog._api import CatalogApi

__all__ = ("Store", "Category", "Product", "Page", "CatalogApi")
