from __future__ import annotations

from typing import Iterable, Optional, Protocol, TYPE_CHECKING

from .models import WishlistItem

if TYPE_CHECKING:
    from apps.catalog.models import Product


class WishlistRepositoryProtocol(Protocol):
    def list_for_user(self, user_id: int) -> Iterable[WishlistItem]: ...

    def get(self, **filters) -> Optional[WishlistItem]: ...

    def exists(self, **filters) -> bool: ...

    def create(self, **data) -> WishlistItem: ...

    def delete(self, item: WishlistItem) -> None: ...

    def delete_where(self, **filters) -> int: ...

    def mark_seen(self, user_id: int) -> int: ...


class ProductLookupProtocol(Protocol):
    def get(self, **filters) -> Optional["Product"]: ...
