"""
Seller — profile, incoming orders, categories, products.
"""

from marketgate.seller._types import SellerProfile
from marketgate.seller._api import SellerApi, product_payload

__all__ = ("SellerProfile", "SellerApi", "product_payload")
