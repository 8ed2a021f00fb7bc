from __future__ import annotations

from typing import Iterable, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.users.models import Address, User


class UserRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional["User"]: ...

    def update(self, user: "User", **data) -> "User": ...

    def adjust_coins(self, user_id: int, delta: int) -> int: ...


class AddressRepositoryProtocol(Protocol):
    def list_for_user(self, user_id: int) -> Iterable["Address"]: ...

    def get(self, **filters) -> Optional["Address"]: ...

    def create(self, **data) -> "Address": ...

    def get_default(self, user_id: int) -> Optional["Address"]: ...

    def make_default(self, address: "Address") -> "Address": ...

    def has_any(self, user_id: int) -> bool: ...
