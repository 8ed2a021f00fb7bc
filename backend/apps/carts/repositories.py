from typing import Sequence

from apps.common.repository import GenericRepository
from .models import Cart, CartItem


class CartRepository(GenericRepository[Cart]):
    def __init__(self):
        super().__init__(Cart)

    def get_or_create_for_user(self, user_id: int):
        return self.model.objects.get_or_create(user_id=user_id)


class CartItemRepository(GenericRepository[CartItem]):
    def __init__(self):
        super().__init__(CartItem)

    def _base_queryset(self):
        return self.model.objects.select_related("product", "variant").prefetch_related(
            "product__variants"
        )

    def list_for_cart(self, cart_id: int):
        return self._base_queryset().filter(cart_id=cart_id)

    def get(self, **filters):
        return self._base_queryset().filter(**filters).first()

    def find_line(self, cart_id: int, product_id: int, size: str, color: str):
        return (
            self._base_queryset()
            .filter(
                cart_id=cart_id,
                product_id=product_id,
                size__iexact=(size or "").strip(),
                color__iexact=(color or "").strip(),
            )
            .first()
        )

    def delete_ids(self, cart_id: int, item_ids: Sequence[int]) -> int:
        return self.delete_where(cart_id=cart_id, id__in=list(item_ids))

    def delete_for_cart(self, cart_id: int) -> int:
        return self.delete_where(cart_id=cart_id)
