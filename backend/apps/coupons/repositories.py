from django.db.models import F

from apps.common.repository import GenericRepository
from .models import NEW_USER_PREFIX, Coupon, CouponUsage


class CouponRepository(GenericRepository[Coupon]):
    def __init__(self):
        super().__init__(Coupon)

    def active_with_code(self, code: str):
        return self.model.objects.filter(code=code, is_active=True).order_by("created_at", "id")

    def active_for_owner(self, user_id: int):
        return self.model.objects.filter(created_by_id=user_id, is_active=True)[:50]

    def latest_new_user_coupon(self, user_id: int):
        return (
            self.model.objects.filter(
                created_by_id=user_id, is_active=True, code__startswith=NEW_USER_PREFIX
            )
            .order_by("-created_at", "-id")
            .first()
        )

    def others_with_code(self, code: str, exclude_user_id: int, exclude_coupon_id: int):
        """Same-code coupons owned by someone else, e.g. the referrer behind an invite."""
        return (
            self.model.objects.filter(code=code, created_by__isnull=False)
            .exclude(created_by_id=exclude_user_id)
            .exclude(id=exclude_coupon_id)
        )

    def increment_uses(self, coupon: Coupon) -> None:
        self.model.objects.filter(id=coupon.id).update(uses_count=F("uses_count") + 1)


class CouponUsageRepository(GenericRepository[CouponUsage]):
    def __init__(self):
        super().__init__(CouponUsage)

    def count_for_user(self, coupon_id: int, user_id: int) -> int:
        return self.model.objects.filter(coupon_id=coupon_id, user_id=user_id).count()
