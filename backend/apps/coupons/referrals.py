"""
Referral onboarding built on coupons.

Every customer owns a shareable invite coupon (``REF`` + 8 characters). A new
user who signs up with someone's invite code receives a one-off NEWUSER
coupon, and the referrer's REFREWARD coupon grows: a percentage discount
capped at ``referral_count * reward_per_referral``.
"""
from __future__ import annotations

import hashlib
import re
from typing import Optional, Tuple

from django.db import transaction
from django.utils import timezone

from apps.common import get_logger
from apps.common.rules import StoreRules, get_store_rules
from .exceptions import ReferralCodeError
from .models import NEW_USER_PREFIX, REFERRAL_PREFIX, REFERRAL_REWARD_PREFIX, Coupon
from .protocols import CouponRepositoryProtocol

logger = get_logger(__name__).bind(component="coupons", layer="referrals")

REFERRAL_METADATA_PREFIX = "REFERRALS:"
_MAX_PATTERN = re.compile(r"MAX:(\d+)")


def referral_code_for(user_id: int) -> str:
    digest = hashlib.sha256(f"referral:{user_id}".encode("utf-8")).hexdigest()
    return f"{REFERRAL_PREFIX}{digest[:8].upper()}"


def referral_reward_code_for(user_id: int) -> str:
    return f"{REFERRAL_REWARD_PREFIX}{str(user_id).zfill(8)[-8:]}"


def new_user_code_for(user_id: int) -> str:
    suffix = timezone.now().strftime("%f")[-4:]
    return f"{NEW_USER_PREFIX}{str(user_id).zfill(8)[-8:]}{suffix}"


def build_reward_description(referral_count: int, max_discount: int, percent: int = 10) -> str:
    people = "person" if referral_count == 1 else "people"
    summary = (
        f"Referral reward: you have referred {referral_count} {people}. "
        f"Redeem {percent}% of your cart value (up to {max_discount})"
    )
    return f"{summary}|{REFERRAL_METADATA_PREFIX}{referral_count}:MAX:{max_discount}"


def parse_reward_metadata(description: Optional[str]) -> Tuple[int, int]:
    """``(referral_count, max_discount)`` from a reward description; zeros when absent."""
    if not description:
        return 0, 0
    meta = next(
        (part for part in description.split("|") if part.startswith(REFERRAL_METADATA_PREFIX)),
        None,
    )
    if meta is None:
        match = _MAX_PATTERN.search(description)
        return 0, int(match.group(1)) if match else 0
    count_part, _, max_part = meta.partition(":MAX:")
    try:
        count = int(count_part[len(REFERRAL_METADATA_PREFIX):])
    except ValueError:
        count = 0
    try:
        max_discount = int(max_part)
    except ValueError:
        max_discount = 0
    return count, max_discount


class ReferralService:
    def __init__(self, coupons: CouponRepositoryProtocol, rules: Optional[StoreRules] = None):
        self.coupons = coupons
        self.rules = rules or get_store_rules()
        self.logger = logger.bind(service="ReferralService")

    def ensure_referral_invite(self, user_id: int) -> Coupon:
        code = referral_code_for(user_id)
        existing = self.coupons.get(code=code, created_by_id=user_id)
        if existing:
            return existing
        amount = self.rules.referral_invite_amount
        coupon = self.coupons.create(
            code=code,
            description=f"Share this referral invite: friends get {amount} off their first order",
            discount_type=Coupon.DiscountType.FIXED,
            discount_value=amount,
            min_order_value=0,
            is_active=True,
            created_by_id=user_id,
        )
        self.logger.info("Referral invite created", user_id=user_id, code=code)
        return coupon

    def ensure_new_user_coupon(self, user_id: int) -> Coupon:
        existing = self.coupons.latest_new_user_coupon(user_id)
        if existing:
            return existing
        amount = self.rules.welcome_coupon_amount
        coupon = self.coupons.create(
            code=new_user_code_for(user_id),
            description=f"Welcome gift: {amount} off your first order",
            discount_type=Coupon.DiscountType.FIXED,
            discount_value=amount,
            max_uses=1,
            per_user_limit=1,
            min_order_value=0,
            is_active=True,
            created_by_id=user_id,
        )
        self.logger.info("New user coupon created", user_id=user_id, code=coupon.code)
        return coupon

    def ensure_referrer_reward(self, referrer_id: Optional[int]) -> Optional[Coupon]:
        if not referrer_id:
            return None
        code = referral_reward_code_for(referrer_id)
        existing = self.coupons.get(code=code, created_by_id=referrer_id)
        count, _ = parse_reward_metadata(existing.description if existing else None)
        count += 1
        max_discount = count * self.rules.referral_reward_per_referral
        percent = self.rules.referral_reward_percent
        fields = dict(
            description=build_reward_description(count, max_discount, percent),
            discount_type=Coupon.DiscountType.PERCENTAGE,
            discount_value=percent,
            max_discount_value=max_discount,
            max_uses=None,
            per_user_limit=None,
            min_order_value=0,
            is_active=True,
        )
        if existing:
            coupon = self.coupons.update(existing, **fields)
        else:
            coupon = self.coupons.create(code=code, created_by_id=referrer_id, **fields)
        self.logger.info(
            "Referrer reward updated", referrer_id=referrer_id, referrals=count, max_discount=max_discount
        )
        return coupon

    def resolve_referrer(self, code: Optional[str], new_user_id: Optional[int] = None) -> int:
        """Owner id of the invite coupon behind ``code``; raises ``ReferralCodeError``."""
        normalized = str(code or "").strip().upper()
        if not normalized:
            raise ReferralCodeError(message="Please enter a referral code", details={"referralCode": code})
        invite = next(
            (
                c
                for c in self.coupons.active_with_code(normalized)
                if c.created_by_id and c.is_referral_invite
            ),
            None,
        )
        if invite is None:
            self.logger.info("Unknown referral code", code=normalized)
            raise ReferralCodeError(
                message="Invalid referral code", details={"referralCode": normalized}
            )
        if new_user_id is not None and invite.created_by_id == new_user_id:
            raise ReferralCodeError(
                message="You cannot use your own referral code",
                details={"referralCode": normalized},
            )
        return invite.created_by_id

    def redeem_referral_code(self, new_user_id: int, code: Optional[str]) -> Tuple[Coupon, Optional[Coupon]]:
        referrer_id = self.resolve_referrer(code, new_user_id)
        with transaction.atomic():
            welcome = self.ensure_new_user_coupon(new_user_id)
            reward = self.ensure_referrer_reward(referrer_id)
        self.logger.info(
            "Referral code redeemed", new_user_id=new_user_id, referrer_id=referrer_id, coupon=welcome.code
        )
        return welcome, reward
