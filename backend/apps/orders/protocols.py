from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Protocol

from .models import CancellationRequest, DraftOrder, Order


class OrderRepositoryProtocol(Protocol):
    def create(self, **data) -> Order: ...

    def update(self, order: Order, **data) -> Order: ...

    def list_with_items(self, **filters) -> Iterable[Order]: ...

    def get_with_items(self, **filters) -> Optional[Order]: ...

    def add_items(self, order: Order, rows: List[Dict[str, Any]]) -> List[Any]: ...


class DraftOrderRepositoryProtocol(Protocol):
    def create(self, **data) -> DraftOrder: ...

    def update(self, draft: DraftOrder, **data) -> DraftOrder: ...

    def list_with_items(self, **filters) -> Iterable[DraftOrder]: ...

    def get_with_items(self, **filters) -> Optional[DraftOrder]: ...

    def add_items(self, draft: DraftOrder, rows: List[Dict[str, Any]]) -> List[Any]: ...


class CancellationRepositoryProtocol(Protocol):
    def create(self, **data) -> CancellationRequest: ...

    def update(self, request: CancellationRequest, **data) -> CancellationRequest: ...

    def list_with_order(self, **filters) -> Iterable[CancellationRequest]: ...

    def get_with_order(self, **filters) -> Optional[CancellationRequest]: ...

    def exists(self, **filters) -> bool: ...


class StockRepositoryProtocol(Protocol):
    def decrement_variant(self, variant_id: int, quantity: int) -> bool: ...

    def decrement_product(self, product_id: int, quantity: int) -> bool: ...

    def restock_variant(self, variant_id: int, quantity: int) -> bool: ...

    def restock_product(self, product_id: int, quantity: int) -> bool: ...


class AddressLookupProtocol(Protocol):
    def get_default(self, user_id: int) -> Optional[Any]: ...


class CoinLedgerProtocol(Protocol):
    def adjust_coins(self, user_id: int, delta: int) -> int: ...


class ListingCacheProtocol(Protocol):
    def invalidate_listing(self) -> None: ...
