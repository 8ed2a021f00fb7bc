from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from django.db import IntegrityError, transaction

from apps.common import get_logger
from .dtos import WishlistDTO, WishlistMembershipDTO
from .mappers import WishlistMapper
from .protocols import ProductLookupProtocol, WishlistRepositoryProtocol

logger = get_logger(__name__).bind(component="wishlist", layer="service")

ServiceError = Tuple[str, str, Optional[Dict[str, Any]]]


class WishlistService:
    """Saved products per customer. A product appears at most once per wishlist."""

    def __init__(self, items: WishlistRepositoryProtocol, products: ProductLookupProtocol):
        self.items = items
        self.products = products
        self.logger = logger.bind(service="WishlistService")

    def _to_dto(self, user_id: int) -> WishlistDTO:
        return WishlistMapper.to_dto(user_id, self.items.list_for_user(user_id))

    def get_wishlist(self, user_id: int) -> WishlistDTO:
        return self._to_dto(user_id)

    def contains(self, user_id: int, product_id: int) -> WishlistMembershipDTO:
        return WishlistMembershipDTO(
            product_id=product_id,
            in_wishlist=self.items.exists(user_id=user_id, product_id=product_id),
        )

    def add_item(self, user_id: int, product_id: int) -> Tuple[Optional[WishlistDTO], Optional[ServiceError]]:
        """Adding a product that is already saved is a no-op."""
        product = self.products.get(id=product_id, is_active=True)
        if product is None:
            return None, ("NOT_FOUND", "Product not found", {"productId": str(product_id)})
        if self.items.exists(user_id=user_id, product_id=product.id):
            self.logger.debug("Product already in wishlist", user_id=user_id, product_id=product.id)
            return self._to_dto(user_id), None
        try:
            with transaction.atomic():
                self.items.create(user_id=user_id, product=product)
        except IntegrityError:
            # Lost a race with a concurrent add of the same product
            self.logger.info("Concurrent wishlist add", user_id=user_id, product_id=product.id)
        else:
            self.logger.info("Added to wishlist", user_id=user_id, product_id=product.id)
        return self._to_dto(user_id), None

    def remove_item(self, user_id: int, product_id: int) -> Tuple[Optional[WishlistDTO], Optional[ServiceError]]:
        item = self.items.get(user_id=user_id, product_id=product_id)
        if item is None:
            return None, ("NOT_FOUND", "Product is not in your wishlist", {"productId": str(product_id)})
        self.items.delete(item)
        self.logger.info("Removed from wishlist", user_id=user_id, product_id=product_id)
        return self._to_dto(user_id), None

    def toggle_item(
        self, user_id: int, product_id: int
    ) -> Tuple[Optional[WishlistMembershipDTO], Optional[ServiceError]]:
        if self.items.exists(user_id=user_id, product_id=product_id):
            _, error = self.remove_item(user_id, product_id)
        else:
            _, error = self.add_item(user_id, product_id)
        if error:
            return None, error
        return self.contains(user_id, product_id), None

    def clear(self, user_id: int) -> WishlistDTO:
        removed = self.items.delete_where(user_id=user_id)
        self.logger.info("Wishlist cleared", user_id=user_id, removed=removed)
        return self._to_dto(user_id)

    def mark_all_seen(self, user_id: int) -> WishlistDTO:
        updated = self.items.mark_seen(user_id)
        self.logger.debug("Wishlist marked seen", user_id=user_id, updated=updated)
        return self._to_dto(user_id)
