from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable, Optional, Protocol

from .models import Reseller


class ResellerRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional[Reseller]: ...

    def create(self, **data) -> Reseller: ...

    def update(self, reseller: Reseller, **data) -> Reseller: ...

    def record_order(self, user_id: int, profit: Decimal) -> bool: ...


class ResellerOrderSourceProtocol(Protocol):
    def reseller_orders(self, user_id: int) -> Iterable[Any]: ...
