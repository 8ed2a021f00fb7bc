from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from django.db import DatabaseError, transaction
from django.utils import timezone

from apps.common import get_logger
from apps.common.money import ZERO, money, round_units
from apps.common.rules import StoreRules, get_store_rules
from .commands import CouponCommand
from .dtos import AvailableCouponsDTO, CouponDTO, ReferralRewardDTO
from .exceptions import CouponInvalidError
from .mappers import CouponMapper
from .models import Coupon
from .protocols import CouponRepositoryProtocol, CouponUsageRepositoryProtocol
from .referrals import parse_reward_metadata

logger = get_logger(__name__).bind(component="coupons", layer="service")

ServiceError = Tuple[str, str, Optional[Dict[str, Any]]]


def normalize_code(code: Optional[str]) -> str:
    return str(code or "").strip().upper()


class CouponService:
    def __init__(
        self,
        coupons: CouponRepositoryProtocol,
        usages: CouponUsageRepositoryProtocol,
        rules: Optional[StoreRules] = None,
        clock: Optional[Callable[[], Any]] = None,
    ):
        self.coupons = coupons
        self.usages = usages
        self.rules = rules or get_store_rules()
        self.clock = clock or timezone.now
        self.logger = logger.bind(service="CouponService")

    # Lookup
    def find_coupon(self, code: str, user_id: Optional[int]) -> Optional[Coupon]:
        """Active coupon for ``code``, preferring the caller's own copy."""
        candidates = list(self.coupons.active_with_code(normalize_code(code)))
        if not candidates:
            return None
        for coupon in candidates:
            if user_id is not None and coupon.created_by_id == user_id:
                return coupon
        return candidates[0]

    # Evaluation
    def evaluate(self, code: Optional[str], user_id: int, subtotal: Any) -> Tuple[Coupon, Decimal]:
        """
        Validate ``code`` for ``user_id`` against ``subtotal`` and return the
        coupon with the discount it grants. Raises ``CouponInvalidError``.
        """
        normalized = normalize_code(code)
        if not normalized:
            raise CouponInvalidError("Enter Coupon Code", "Please enter a coupon code")

        coupon = self.find_coupon(normalized, user_id)
        if coupon is None:
            self.logger.info("Coupon not found", code=normalized, user_id=user_id)
            raise CouponInvalidError(
                "Invalid Coupon", "This coupon code is not valid", code=normalized
            )

        if coupon.created_by_id == user_id:
            own_allowed = (
                coupon.is_welcome_coupon
                or coupon.is_new_user_coupon
                or coupon.is_referral_reward
            )
            if not own_allowed:
                self.logger.warning("Self referral rejected", code=normalized, user_id=user_id)
                raise CouponInvalidError(
                    "Invalid Coupon",
                    "You cannot use your own referral code",
                    code=normalized,
                )

        now = self.clock()
        if coupon.start_date and coupon.start_date > now:
            raise CouponInvalidError(
                "Coupon Not Active", "This coupon is not yet active", code=normalized
            )
        if coupon.end_date and coupon.end_date < now:
            raise CouponInvalidError("Coupon Expired", "This coupon has expired", code=normalized)

        amount = money(subtotal)
        minimum = money(coupon.min_order_value)
        if minimum > 0 and minimum > amount:
            raise CouponInvalidError(
                "Minimum Order Not Met",
                f"Minimum order value is {minimum}",
                code=normalized,
                details={"minOrderValue": str(minimum)},
            )

        if coupon.max_uses and coupon.uses_count >= coupon.max_uses:
            raise CouponInvalidError(
                "Coupon Limit Reached",
                "This coupon has reached its usage limit",
                code=normalized,
            )

        if coupon.per_user_limit:
            used = self.usages.count_for_user(coupon.id, user_id)
            if used >= coupon.per_user_limit:
                raise CouponInvalidError(
                    "Usage Limit Reached",
                    f"You can only use this coupon {coupon.per_user_limit} time(s)",
                    code=normalized,
                )

        discount = self.compute_discount(coupon, amount)
        self.logger.debug(
            "Coupon evaluated", code=normalized, user_id=user_id, subtotal=amount, discount=discount
        )
        return coupon, discount

    def compute_discount(self, coupon: Coupon, subtotal: Any) -> Decimal:
        amount = money(subtotal)
        value = money(coupon.discount_value)
        if coupon.discount_type == Coupon.DiscountType.PERCENTAGE:
            discount = round_units(amount * value / 100)
            cap = self._discount_cap(coupon)
            if cap is not None and cap > 0:
                discount = min(discount, cap)
        elif coupon.discount_type == Coupon.DiscountType.FIXED:
            discount = min(value, amount)
        else:
            discount = ZERO
        return max(ZERO, min(discount, amount))

    def _discount_cap(self, coupon: Coupon) -> Optional[Decimal]:
        if coupon.max_discount_value is not None and money(coupon.max_discount_value) > 0:
            return money(coupon.max_discount_value)
        if coupon.code.startswith("REFREWARD"):
            _count, max_discount = parse_reward_metadata(coupon.description)
            return money(max_discount) if max_discount else None
        return None

    # Listing
    def list_available(self, user_id: int, subtotal: Any = None) -> AvailableCouponsDTO:
        amount = money(subtotal)
        owned = [
            c
            for c in self.coupons.active_for_owner(user_id)
            if not (c.is_referral_invite and not c.is_new_user_coupon and not c.is_referral_reward)
        ]

        reward_summary = None
        reward = next((c for c in owned if c.code.startswith("REFREWARD")), None)
        if reward is not None:
            count, max_discount = parse_reward_metadata(reward.description)
            if count > 0 and max_discount > 0:
                reward_summary = self._reward_summary(reward, count, max_discount, amount)
                owned = [c for c in owned if c.id != reward.id]

        priority = next((c for c in owned if c.is_new_user_coupon), None) or next(
            (c for c in owned if c.code.startswith("REF") and not c.code.startswith("REFREWARD")),
            None,
        )
        if priority is not None:
            owned = [priority] + [c for c in owned if c.id != priority.id]

        usable = [c for c in owned if self._is_listable(c, user_id, amount)]
        self.logger.debug(
            "Available coupons resolved",
            user_id=user_id,
            count=len(usable),
            has_reward=reward_summary is not None,
        )
        return AvailableCouponsDTO(
            coupons=CouponMapper.many_to_dto(usable), referral_reward=reward_summary
        )

    def _reward_summary(
        self, coupon: Coupon, count: int, max_discount: int, subtotal: Decimal
    ) -> ReferralRewardDTO:
        percent = Decimal(self.rules.referral_reward_percent) / 100
        potential = (subtotal * percent).quantize(Decimal("1"), rounding=ROUND_FLOOR)
        potential = min(money(potential), money(max_discount))
        return ReferralRewardDTO(
            coupon_id=coupon.id,
            coupon_code=coupon.code,
            referral_count=count,
            max_discount=str(money(max_discount)),
            potential_discount=str(potential),
        )

    def _is_listable(self, coupon: Coupon, user_id: int, subtotal: Decimal) -> bool:
        if coupon.is_referral_coupon:
            return True
        now = self.clock()
        if coupon.start_date and coupon.start_date > now:
            return False
        if coupon.end_date and coupon.end_date < now:
            return False
        if coupon.max_uses and coupon.uses_count >= coupon.max_uses:
            return False
        if coupon.per_user_limit and self.usages.count_for_user(coupon.id, user_id) >= coupon.per_user_limit:
            return False
        minimum = money(coupon.min_order_value)
        if minimum > 0 and subtotal > 0 and subtotal < minimum:
            return False
        return True

    def auto_apply_new_user_coupon(
        self, user_id: int, applied_code: Optional[str], subtotal: Any
    ) -> Optional[Coupon]:
        """
        The newest unused NEWUSER coupon the user owns when nothing is
        applied yet and it passes evaluation; otherwise None.
        """
        if normalize_code(applied_code) or money(subtotal) <= 0:
            return None
        coupon = self.coupons.latest_new_user_coupon(user_id)
        if coupon is None or self.usages.count_for_user(coupon.id, user_id) > 0:
            return None
        try:
            self.evaluate(coupon.code, user_id, subtotal)
        except CouponInvalidError as exc:
            self.logger.info(
                "New user coupon not auto-applied", user_id=user_id, code=coupon.code, reason=exc.title
            )
            return None
        self.logger.info("New user coupon auto-applied", user_id=user_id, code=coupon.code)
        return coupon

    # Usage
    def log_usage(
        self, coupon_code: Optional[str], user_id: int, order_id: Optional[int], discount: Any
    ) -> int:
        """
        Record usage of the applied coupon (and of same-code coupons owned
        by other users). Failures are logged, never raised. Returns the
        number of usage rows written.
        """
        code = normalize_code(coupon_code)
        if not code:
            return 0
        coupon = self.find_coupon(code, user_id)
        if coupon is None:
            self.logger.warning("Coupon usage not logged: coupon missing", code=code, order_id=order_id)
            return 0
        amount = money(discount)
        try:
            with transaction.atomic():
                self.usages.create(
                    coupon=coupon, user_id=user_id, order_id=order_id, discount_amount=amount
                )
                self.coupons.increment_uses(coupon)
                written = 1
                for other in self.coupons.others_with_code(code, user_id, coupon.id):
                    self.usages.create(
                        coupon=other, user_id=user_id, order_id=order_id, discount_amount=amount
                    )
                    written += 1
        except DatabaseError as exc:
            self.logger.error(
                "Failed to log coupon usage", code=code, order_id=order_id, error=str(exc)
            )
            return 0
        self.logger.info(
            "Coupon usage logged", code=code, user_id=user_id, order_id=order_id, rows=written
        )
        return written

    # Staff management
    def list_coupons(self) -> List[CouponDTO]:
        return CouponMapper.many_to_dto(self.coupons.list())

    def get_coupon(self, coupon_id: int) -> Optional[CouponDTO]:
        coupon = self.coupons.get(id=coupon_id)
        return CouponMapper.to_dto(coupon) if coupon else None

    def create_coupon(
        self, data: Union[Dict[str, Any], CouponCommand], created_by_id: Optional[int] = None
    ) -> CouponDTO:
        cmd = data if isinstance(data, CouponCommand) else CouponCommand.from_raw(data)
        fields = cmd.fields()
        fields.setdefault("created_by_id", created_by_id)
        coupon = self.coupons.create(**fields)
        self.logger.info("Coupon created", coupon_id=coupon.id, code=coupon.code)
        return CouponMapper.to_dto(coupon)

    def update_coupon(
        self, coupon_id: int, data: Union[Dict[str, Any], CouponCommand]
    ) -> Tuple[Optional[CouponDTO], Optional[ServiceError]]:
        coupon = self.coupons.get(id=coupon_id)
        if not coupon:
            return None, ("NOT_FOUND", "Coupon not found", {"id": str(coupon_id)})
        cmd = data if isinstance(data, CouponCommand) else CouponCommand.from_raw(data, partial=True)
        changes = cmd.fields()
        if "code" in changes:
            changes["code"] = normalize_code(changes["code"])
        self.coupons.update(coupon, **changes)
        self.logger.info("Coupon updated", coupon_id=coupon_id, fields=sorted(changes))
        return CouponMapper.to_dto(coupon), None

    def delete_coupon(self, coupon_id: int) -> Tuple[bool, Optional[ServiceError]]:
        coupon = self.coupons.get(id=coupon_id)
        if not coupon:
            return False, ("NOT_FOUND", "Coupon not found", {"id": str(coupon_id)})
        self.coupons.delete(coupon)
        self.logger.info("Coupon deleted", coupon_id=coupon_id)
        return True, None
