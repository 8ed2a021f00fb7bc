import unittest
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal
from unittest.mock import patch

from django.db import DatabaseError

from apps.common.rules import StoreRules
from apps.coupons.exceptions import CouponInvalidError
from apps.coupons.models import Coupon
from apps.coupons.services import CouponService

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=dt_timezone.utc)


class DummyAtomic:
    def __call__(self, *args, **kwargs):
        return self

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class FakeCouponRepository:
    def __init__(self):
        self.storage = {}
        self._next_id = 1

    def add(self, **fields):
        fields.setdefault("discount_type", Coupon.DiscountType.FIXED)
        fields.setdefault("discount_value", Decimal("100"))
        coupon = Coupon(**fields)
        coupon.code = coupon.code.upper()
        coupon.id = self._next_id
        self.storage[coupon.id] = coupon
        self._next_id += 1
        return coupon

    def _matches(self, coupon, filters):
        return all(getattr(coupon, k) == v for k, v in filters.items())

    def get(self, **filters):
        return next((c for c in self.storage.values() if self._matches(c, filters)), None)

    def list(self, **filters):
        return [c for c in self.storage.values() if self._matches(c, filters)]

    def create(self, **data):
        return self.add(**data)

    def update(self, coupon, **data):
        for key, value in data.items():
            setattr(coupon, key, value)
        return coupon

    def delete(self, coupon):
        self.storage.pop(coupon.id, None)

    def active_with_code(self, code):
        return [c for c in self.storage.values() if c.code == code and c.is_active]

    def active_for_owner(self, user_id):
        return [c for c in self.storage.values() if c.created_by_id == user_id and c.is_active]

    def latest_new_user_coupon(self, user_id):
        owned = [
            c
            for c in self.active_for_owner(user_id)
            if c.code.startswith("NEWUSER")
        ]
        return owned[-1] if owned else None

    def others_with_code(self, code, exclude_user_id, exclude_coupon_id):
        return [
            c
            for c in self.storage.values()
            if c.code == code
            and c.created_by_id is not None
            and c.created_by_id != exclude_user_id
            and c.id != exclude_coupon_id
        ]

    def increment_uses(self, coupon):
        coupon.uses_count += 1


class FakeUsageRepository:
    def __init__(self):
        self.rows = []

    def create(self, **data):
        self.rows.append(data)
        return data

    def count_for_user(self, coupon_id, user_id):
        return sum(
            1 for row in self.rows if row["coupon"].id == coupon_id and row["user_id"] == user_id
        )


class CouponServiceTestBase(unittest.TestCase):
    def setUp(self):
        self.coupons = FakeCouponRepository()
        self.usages = FakeUsageRepository()
        self.service = CouponService(
            coupons=self.coupons,
            usages=self.usages,
            rules=StoreRules.from_mapping(),
            clock=lambda: NOW,
        )

    def assertRejected(self, code, user_id, subtotal, title):
        with self.assertRaises(CouponInvalidError) as ctx:
            self.service.evaluate(code, user_id, subtotal)
        self.assertEqual(ctx.exception.title, title)
        return ctx.exception


class CouponEvaluationTests(CouponServiceTestBase):
    def test_blank_code_asks_for_code(self):
        self.assertRejected("   ", 1, "500", "Enter Coupon Code")

    def test_unknown_code_is_invalid(self):
        error = self.assertRejected("nope", 1, "500", "Invalid Coupon")
        self.assertEqual(error.code, "VALIDATION_ERROR")
        self.assertEqual(error.details["couponCode"], "NOPE")

    def test_code_is_normalised(self):
        self.coupons.add(code="SAVE50", discount_value=Decimal("50"))
        coupon, discount = self.service.evaluate("  save50 ", 1, "400")
        self.assertEqual(coupon.code, "SAVE50")
        self.assertEqual(discount, Decimal("50.00"))

    def test_own_referral_invite_rejected(self):
        self.coupons.add(
            code="REF1A2B3C4D",
            description="Share this referral invite: friends get 100 off",
            created_by_id=7,
        )
        error = self.assertRejected("REF1A2B3C4D", 7, "900", "Invalid Coupon")
        self.assertEqual(error.message, "You cannot use your own referral code")

    def test_friend_can_use_referral_invite(self):
        self.coupons.add(
            code="REF1A2B3C4D",
            description="Share this referral invite: friends get 100 off",
            created_by_id=7,
        )
        _, discount = self.service.evaluate("REF1A2B3C4D", 8, "900")
        self.assertEqual(discount, Decimal("100.00"))

    def test_own_new_user_coupon_allowed(self):
        self.coupons.add(code="NEWUSER000000071234", created_by_id=7, max_uses=1, per_user_limit=1)
        _, discount = self.service.evaluate("NEWUSER000000071234", 7, "250")
        self.assertEqual(discount, Decimal("100.00"))

    def test_date_window(self):
        self.coupons.add(code="LATER", start_date=NOW + timedelta(days=1))
        self.coupons.add(code="GONE", end_date=NOW - timedelta(seconds=1))
        self.assertRejected("LATER", 1, "500", "Coupon Not Active")
        self.assertRejected("GONE", 1, "500", "Coupon Expired")

    def test_minimum_order(self):
        self.coupons.add(code="BIG", min_order_value=Decimal("999"))
        error = self.assertRejected("BIG", 1, "998.99", "Minimum Order Not Met")
        self.assertEqual(error.details["minOrderValue"], "999.00")

    def test_global_and_per_user_limits(self):
        self.coupons.add(code="ONCE", max_uses=3, uses_count=3)
        self.assertRejected("ONCE", 1, "500", "Coupon Limit Reached")

        mine = self.coupons.add(code="MINE", per_user_limit=1)
        self.usages.create(coupon=mine, user_id=4, order_id=1, discount_amount=Decimal("10"))
        self.assertRejected("MINE", 4, "500", "Usage Limit Reached")
        _, discount = self.service.evaluate("MINE", 5, "500")
        self.assertEqual(discount, Decimal("100.00"))


class CouponDiscountTests(CouponServiceTestBase):
    def test_percentage_rounds_to_whole_units(self):
        coupon = self.coupons.add(
            code="TEN", discount_type=Coupon.DiscountType.PERCENTAGE, discount_value=Decimal("10")
        )
        self.assertEqual(self.service.compute_discount(coupon, "1234.50"), Decimal("123.00"))
        self.assertEqual(self.service.compute_discount(coupon, "1235.00"), Decimal("124.00"))
        self.assertEqual(self.service.compute_discount(coupon, "4.95"), Decimal("0.00"))

    def test_percentage_respects_max_discount_column(self):
        coupon = self.coupons.add(
            code="CAP",
            discount_type=Coupon.DiscountType.PERCENTAGE,
            discount_value=Decimal("50"),
            max_discount_value=Decimal("150"),
        )
        self.assertEqual(self.service.compute_discount(coupon, "1000"), Decimal("150.00"))

    def test_referral_reward_capped_by_description_metadata(self):
        coupon = self.coupons.add(
            code="REFREWARD00000007",
            discount_type=Coupon.DiscountType.PERCENTAGE,
            discount_value=Decimal("10"),
            description="Referral reward|REFERRALS:2:MAX:200",
        )
        self.assertEqual(self.service.compute_discount(coupon, "5000"), Decimal("200.00"))

    def test_fixed_never_exceeds_subtotal(self):
        coupon = self.coupons.add(code="FLAT", discount_value=Decimal("100"))
        self.assertEqual(self.service.compute_discount(coupon, "60"), Decimal("60.00"))
        self.assertEqual(self.service.compute_discount(coupon, "0"), Decimal("0.00"))


class AvailableCouponTests(CouponServiceTestBase):
    def test_listing_orders_and_filters(self):
        self.coupons.add(
            code="REFAAAA1111",
            description="Share this referral invite",
            created_by_id=3,
        )
        self.coupons.add(code="SUMMER", created_by_id=3)
        self.coupons.add(code="OLD", created_by_id=3, end_date=NOW - timedelta(days=1))
        self.coupons.add(code="NEWUSER000000031111", created_by_id=3)
        self.coupons.add(
            code="REFREWARD00000003",
            discount_type=Coupon.DiscountType.PERCENTAGE,
            discount_value=Decimal("10"),
            description="Referral reward|REFERRALS:3:MAX:300",
            created_by_id=3,
        )

        result = self.service.list_available(3, "1250")

        self.assertEqual([c.code for c in result.coupons], ["NEWUSER000000031111", "SUMMER"])
        reward = result.referral_reward
        self.assertEqual(reward.coupon_code, "REFREWARD00000003")
        self.assertEqual(reward.referral_count, 3)
        self.assertEqual(reward.max_discount, "300.00")
        self.assertEqual(reward.potential_discount, "125.00")

    def test_reward_without_referrals_stays_in_list(self):
        self.coupons.add(
            code="REFREWARD00000009",
            discount_type=Coupon.DiscountType.PERCENTAGE,
            discount_value=Decimal("10"),
            description="Referral reward",
            created_by_id=9,
        )
        result = self.service.list_available(9, "100")
        self.assertIsNone(result.referral_reward)
        self.assertEqual([c.code for c in result.coupons], ["REFREWARD00000009"])

    def test_auto_apply_new_user_coupon(self):
        coupon = self.coupons.add(code="NEWUSER000000051234", created_by_id=5, max_uses=1, per_user_limit=1)
        self.assertIs(self.service.auto_apply_new_user_coupon(5, "", "300"), coupon)
        self.assertIsNone(self.service.auto_apply_new_user_coupon(5, "SUMMER", "300"))
        self.assertIsNone(self.service.auto_apply_new_user_coupon(5, "", "0"))

        self.usages.create(coupon=coupon, user_id=5, order_id=1, discount_amount=Decimal("100"))
        self.assertIsNone(self.service.auto_apply_new_user_coupon(5, "", "300"))


@patch("apps.coupons.services.transaction.atomic", DummyAtomic())
class CouponUsageTests(CouponServiceTestBase):
    def test_logs_usage_for_applied_and_referrer_copies(self):
        invite = self.coupons.add(code="REFBBBB2222", description="referral invite", created_by_id=1)
        mirror = self.coupons.add(code="REFBBBB2222", description="referral invite", created_by_id=2)

        written = self.service.log_usage("refbbbb2222", 9, 55, "100")

        self.assertEqual(written, 2)
        self.assertEqual(invite.uses_count, 1)
        self.assertEqual(mirror.uses_count, 0)
        self.assertEqual([row["coupon"].id for row in self.usages.rows], [invite.id, mirror.id])
        self.assertTrue(all(row["order_id"] == 55 for row in self.usages.rows))

    def test_missing_coupon_is_not_an_error(self):
        self.assertEqual(self.service.log_usage("GHOST", 1, 2, "10"), 0)
        self.assertEqual(self.service.log_usage("", 1, 2, "10"), 0)

    def test_database_failure_is_logged_not_raised(self):
        self.coupons.add(code="FLAT")

        def boom(**data):
            raise DatabaseError("write failed")

        self.usages.create = boom
        self.assertEqual(self.service.log_usage("FLAT", 1, 2, "10"), 0)


class CouponAdminTests(CouponServiceTestBase):
    def test_create_update_delete(self):
        dto = self.service.create_coupon(
            {
                "code": " diwali ",
                "discount_type": "percentage",
                "discount_value": "15",
                "max_discount_value": "300",
            },
            created_by_id=1,
        )
        self.assertEqual(dto.code, "DIWALI")
        self.assertEqual(dto.max_discount_value, "300.00")
        self.assertTrue(dto.is_active)

        updated, error = self.service.update_coupon(dto.id, {"is_active": False})
        self.assertIsNone(error)
        self.assertFalse(updated.is_active)

        deleted, error = self.service.delete_coupon(dto.id)
        self.assertTrue(deleted)
        _, error = self.service.delete_coupon(dto.id)
        self.assertEqual(error[0], "NOT_FOUND")
