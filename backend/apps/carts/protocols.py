from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence, Tuple, TYPE_CHECKING

from .models import Cart, CartItem

if TYPE_CHECKING:
    from apps.catalog.models import Product
    from apps.users.models import User


class CartRepositoryProtocol(Protocol):
    def get_or_create_for_user(self, user_id: int) -> Tuple[Cart, bool]: ...

    def update(self, cart: Cart, **data) -> Cart: ...


class CartItemRepositoryProtocol(Protocol):
    def list_for_cart(self, cart_id: int) -> Iterable[CartItem]: ...

    def get(self, **filters) -> Optional[CartItem]: ...

    def find_line(self, cart_id: int, product_id: int, size: str, color: str) -> Optional[CartItem]: ...

    def create(self, **data) -> CartItem: ...

    def update(self, item: CartItem, **data) -> CartItem: ...

    def delete(self, item: CartItem) -> None: ...

    def delete_ids(self, cart_id: int, item_ids: Sequence[int]) -> int: ...

    def delete_for_cart(self, cart_id: int) -> int: ...


class ProductLookupProtocol(Protocol):
    def get(self, **filters) -> Optional["Product"]: ...


class UserLookupProtocol(Protocol):
    def get(self, **filters) -> Optional["User"]: ...
