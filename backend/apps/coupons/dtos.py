from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class CouponDTO:
    id: int
    code: str
    description: str
    discount_type: str
    discount_value: str
    max_discount_value: Optional[str]
    min_order_value: str
    start_date: Optional[str]
    end_date: Optional[str]
    max_uses: Optional[int]
    uses_count: int
    per_user_limit: Optional[int]
    is_active: bool
    created_by_id: Optional[int]


@dataclass
class ReferralRewardDTO:
    coupon_id: int
    coupon_code: str
    referral_count: int
    max_discount: str
    potential_discount: str


@dataclass
class AvailableCouponsDTO:
    coupons: List[CouponDTO] = field(default_factory=list)
    referral_reward: Optional[ReferralRewardDTO] = None


@dataclass
class ReferralInviteDTO:
    code: str
    discount_value: str
    description: str
