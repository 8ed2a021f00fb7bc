from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

from django.conf import settings

from .money import money

DEFAULT_RULES: Dict[str, Any] = {
    "FREE_DELIVERY_THRESHOLD": 500,
    "DELIVERY_CHARGE": 40,
    "COIN_BRACKET_AMOUNT": 1000,
    "COIN_BRACKET_VALUE": 100,
    "COIN_EARN_RATE": "0.10",
    "REFERRAL_REWARD_PER_REFERRAL": 100,
    "REFERRAL_REWARD_PERCENT": 10,
    "WELCOME_COUPON_AMOUNT": 100,
    "REFERRAL_INVITE_AMOUNT": 100,
}


@dataclass(frozen=True)
class StoreRules:
    """Pricing and loyalty knobs read from ``settings.STOREFRONT``."""

    free_delivery_threshold: Decimal
    delivery_charge: Decimal
    coin_bracket_amount: Decimal
    coin_bracket_value: int
    coin_earn_rate: Decimal
    referral_reward_per_referral: int
    referral_reward_percent: int
    welcome_coupon_amount: Decimal
    referral_invite_amount: Decimal

    @classmethod
    def from_mapping(cls, values: Optional[Dict[str, Any]] = None) -> "StoreRules":
        merged = {**DEFAULT_RULES, **(values or {})}
        return cls(
            free_delivery_threshold=money(merged["FREE_DELIVERY_THRESHOLD"]),
            delivery_charge=money(merged["DELIVERY_CHARGE"]),
            coin_bracket_amount=money(merged["COIN_BRACKET_AMOUNT"]),
            coin_bracket_value=int(merged["COIN_BRACKET_VALUE"]),
            coin_earn_rate=Decimal(str(merged["COIN_EARN_RATE"])),
            referral_reward_per_referral=int(merged["REFERRAL_REWARD_PER_REFERRAL"]),
            referral_reward_percent=int(merged["REFERRAL_REWARD_PERCENT"]),
            welcome_coupon_amount=money(merged["WELCOME_COUPON_AMOUNT"]),
            referral_invite_amount=money(merged["REFERRAL_INVITE_AMOUNT"]),
        )


def get_store_rules() -> StoreRules:
    return StoreRules.from_mapping(getattr(settings, "STOREFRONT", None))
