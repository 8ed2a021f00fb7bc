from __future__ import annotations

from typing import Iterable, Optional, Protocol

from .models import Coupon, CouponUsage


class CouponRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional[Coupon]: ...

    def list(self, **filters) -> Iterable[Coupon]: ...

    def create(self, **data) -> Coupon: ...

    def update(self, coupon: Coupon, **data) -> Coupon: ...

    def delete(self, coupon: Coupon) -> None: ...

    def active_with_code(self, code: str) -> Iterable[Coupon]: ...

    def active_for_owner(self, user_id: int) -> Iterable[Coupon]: ...

    def latest_new_user_coupon(self, user_id: int) -> Optional[Coupon]: ...

    def others_with_code(
        self, code: str, exclude_user_id: int, exclude_coupon_id: int
    ) -> Iterable[Coupon]: ...

    def increment_uses(self, coupon: Coupon) -> None: ...


class CouponUsageRepositoryProtocol(Protocol):
    def create(self, **data) -> CouponUsage: ...

    def count_for_user(self, coupon_id: int, user_id: int) -> int: ...
