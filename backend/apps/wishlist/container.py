from __future__ import annotations

from apps.catalog.repositories import ProductRepository

from .repositories import WishlistRepository
from .services import WishlistService


def build_wishlist_service() -> WishlistService:
    return WishlistService(items=WishlistRepository(), products=ProductRepository())
