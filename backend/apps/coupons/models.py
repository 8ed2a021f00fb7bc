from django.db import models

from apps.orders.models import Order
from apps.users.models import User

NEW_USER_PREFIX = "NEWUSER"
WELCOME_PREFIX = "WELCOME"
REFERRAL_REWARD_PREFIX = "REFREWARD"
REFERRAL_PREFIX = "REF"
REFERRAL_INVITE_MARKER = "referral invite"


class Coupon(models.Model):
    class DiscountType(models.TextChoices):
        PERCENTAGE = "percentage", "Percentage"
        FIXED = "fixed", "Fixed"

    # Not unique: a referral code may be mirrored for several creators
    code = models.CharField(max_length=50, db_index=True)
    description = models.TextField(blank=True, default="")
    discount_type = models.CharField(max_length=20, choices=DiscountType.choices)
    discount_value = models.DecimalField(max_digits=10, decimal_places=2)
    max_discount_value = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    min_order_value = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)
    max_uses = models.PositiveIntegerField(null=True, blank=True)
    uses_count = models.PositiveIntegerField(default=0)
    per_user_limit = models.PositiveIntegerField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="coupons"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["created_by", "is_active"], name="coupon_owner_active_idx"),
        ]

    def save(self, *args, **kwargs):
        self.code = (self.code or "").strip().upper()
        super().save(*args, **kwargs)

    def __str__(self):
        return self.code

    @property
    def is_new_user_coupon(self) -> bool:
        return self.code.startswith(NEW_USER_PREFIX)

    @property
    def is_welcome_coupon(self) -> bool:
        return self.code.startswith(WELCOME_PREFIX) or "welcome" in self.description.lower()

    @property
    def is_referral_reward(self) -> bool:
        return (
            self.code.startswith(REFERRAL_REWARD_PREFIX)
            or "referral reward" in self.description.lower()
        )

    @property
    def is_referral_invite(self) -> bool:
        return REFERRAL_INVITE_MARKER in self.description.lower()

    @property
    def is_referral_coupon(self) -> bool:
        return self.is_new_user_coupon or self.code.startswith(REFERRAL_PREFIX)


class CouponUsage(models.Model):
    coupon = models.ForeignKey(Coupon, on_delete=models.CASCADE, related_name="usages")
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="coupon_usages")
    order = models.ForeignKey(
        Order, on_delete=models.SET_NULL, null=True, blank=True, related_name="coupon_usages"
    )
    discount_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["coupon", "user"], name="coupon_usage_user_idx"),
        ]

    def __str__(self):
        return f"{self.coupon_id} by {self.user_id}"
