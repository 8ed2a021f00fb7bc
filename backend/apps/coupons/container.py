from __future__ import annotations

from .referrals import ReferralService
from .repositories import CouponRepository, CouponUsageRepository
from .services import CouponService


def build_coupon_service() -> CouponService:
    return CouponService(coupons=CouponRepository(), usages=CouponUsageRepository())


def build_referral_service() -> ReferralService:
    return ReferralService(coupons=CouponRepository())
