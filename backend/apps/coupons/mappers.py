from typing import Iterable, List

from .dtos import CouponDTO
from .models import Coupon


def _iso(value):
    return value.isoformat() if value else None


class CouponMapper:
    @staticmethod
    def to_dto(coupon: Coupon) -> CouponDTO:
        return CouponDTO(
            id=coupon.id,
            code=coupon.code,
            description=coupon.description,
            discount_type=coupon.discount_type,
            discount_value=str(coupon.discount_value),
            max_discount_value=(
                str(coupon.max_discount_value) if coupon.max_discount_value is not None else None
            ),
            min_order_value=str(coupon.min_order_value),
            start_date=_iso(coupon.start_date),
            end_date=_iso(coupon.end_date),
            max_uses=coupon.max_uses,
            uses_count=coupon.uses_count,
            per_user_limit=coupon.per_user_limit,
            is_active=coupon.is_active,
            created_by_id=coupon.created_by_id,
        )

    @staticmethod
    def many_to_dto(coupons: Iterable[Coupon]) -> List[CouponDTO]:
        return [CouponMapper.to_dto(c) for c in coupons]
