from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict, Optional, Tuple

from django.db import IntegrityError
from django.utils import timezone

from apps.common import get_logger
from apps.common.money import ZERO, money
from .dtos import ResellerDashboardDTO, ResellerDTO
from .mappers import ResellerMapper, ResellerOrderMapper, commission_of
from .protocols import ResellerOrderSourceProtocol, ResellerRepositoryProtocol

logger = get_logger(__name__).bind(component="resellers", layer="service")

ServiceError = Tuple[str, str, Optional[Dict[str, Any]]]

PROFILE_FIELDS = (
    "business_name",
    "business_type",
    "phone",
    "email",
    "city",
    "state",
    "pincode",
    "bank_account_name",
    "bank_account_number",
    "bank_ifsc",
    "upi_id",
)
DEFAULT_COMMISSION_RATE = Decimal("20.00")
PENDING_ORDER_STATUSES = ("pending", "processing", "shipped")
REALIZED_STATUSES = ("delivered", "completed")
PENDING_EARNING_STATUSES = ("pending", "processing", "shipped", "out_for_delivery")
RECENT_ORDER_LIMIT = 5


def calculate_selling_price(base_price: Any, margin_percentage: Any) -> Decimal:
    base = money(base_price)
    return money(base + base * Decimal(str(margin_percentage or 0)) / 100)


def calculate_margin(base_price: Any, selling_price: Any) -> Decimal:
    """Margin as a percentage of ``base_price``; zero when there is no base."""
    base = money(base_price)
    if base <= 0:
        return ZERO
    ratio = (money(selling_price) - base) / base * 100
    return ratio.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _month_start(moment: datetime) -> datetime:
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _previous_month_start(moment: datetime) -> datetime:
    first = _month_start(moment)
    if first.month == 1:
        return first.replace(year=first.year - 1, month=12)
    return first.replace(month=first.month - 1)


class ResellerService:
    def __init__(
        self,
        resellers: ResellerRepositoryProtocol,
        orders: ResellerOrderSourceProtocol,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.resellers = resellers
        self.orders = orders
        self.clock = clock or timezone.now
        self.logger = logger.bind(service="ResellerService")

    def get_for_user(self, user_id: int) -> Optional[ResellerDTO]:
        reseller = self.resellers.get(user_id=user_id)
        return ResellerMapper.to_dto(reseller) if reseller else None

    def register(
        self, user: Any, data: Dict[str, Any]
    ) -> Tuple[Optional[ResellerDTO], Optional[ServiceError]]:
        """Create the caller's reseller profile, or update it when one exists."""
        fields = {
            name: str(data[name]).strip()
            for name in PROFILE_FIELDS
            if name in data and data[name] is not None
        }
        existing = self.resellers.get(user_id=user.id)
        if existing is not None:
            if fields:
                self.resellers.update(existing, **fields)
            self.logger.info("Reseller profile updated", user_id=user.id, fields=sorted(fields))
            return ResellerMapper.to_dto(existing), None
        try:
            reseller = self.resellers.create(
                user_id=user.id, is_verified=False, is_active=True, **fields
            )
        except IntegrityError:
            self.logger.warning("Reseller registration conflict", user_id=user.id)
            return None, ("CONFLICT", "Reseller profile already exists", {"userId": str(user.id)})
        self.logger.info("Reseller registered", user_id=user.id, reseller_id=reseller.id)
        return ResellerMapper.to_dto(reseller), None

    def ensure_for_user(self, user: Any) -> ResellerDTO:
        existing = self.resellers.get(user_id=user.id)
        if existing is not None:
            return ResellerMapper.to_dto(existing)
        reseller = self.resellers.create(
            user_id=user.id,
            business_name=getattr(user, "name", "") or getattr(user, "email", "") or "Reseller",
            business_type="individual",
            phone=getattr(user, "phone", "") or "",
            email=getattr(user, "email", "") or "",
            is_verified=False,
            is_active=True,
            commission_rate=DEFAULT_COMMISSION_RATE,
        )
        self.logger.info("Reseller profile created on demand", user_id=user.id, reseller_id=reseller.id)
        return ResellerMapper.to_dto(reseller)

    def record_checkout(self, user_id: int, profit: Any) -> bool:
        """Bump order count and pending earnings; a no-op without a profile."""
        recorded = self.resellers.record_order(user_id, money(profit))
        if recorded:
            self.logger.info("Reseller checkout recorded", user_id=user_id, profit=money(profit))
        else:
            self.logger.debug("No reseller profile to update", user_id=user_id)
        return recorded

    def dashboard(self, user_id: int) -> ResellerDashboardDTO:
        orders = list(self.orders.reseller_orders(user_id))
        now = self.clock()
        this_month = _month_start(now)
        last_month = _previous_month_start(now)

        def total(rows) -> Decimal:
            return money(sum((commission_of(order) for order in rows), ZERO))

        realized = [o for o in orders if o.status in REALIZED_STATUSES]
        dto = ResellerDashboardDTO(
            total_orders=len(orders),
            pending_orders=sum(1 for o in orders if o.status in PENDING_ORDER_STATUSES),
            total_earnings=str(total(realized)),
            pending_earnings=str(total(o for o in orders if o.status in PENDING_EARNING_STATUSES)),
            this_month_earnings=str(total(o for o in realized if o.created_at >= this_month)),
            last_month_earnings=str(
                total(o for o in realized if last_month <= o.created_at < this_month)
            ),
            recent_orders=[ResellerOrderMapper.to_dto(o) for o in orders[:RECENT_ORDER_LIMIT]],
        )
        self.logger.debug("Reseller dashboard built", user_id=user_id, orders=len(orders))
        return dto
