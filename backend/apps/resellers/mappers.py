from typing import Any

from apps.common.money import money
from .dtos import ResellerDTO, ResellerOrderDTO
from .models import Reseller


def commission_of(order: Any):
    """Order profit, falling back to the margin amount for older rows."""
    profit = money(getattr(order, "reseller_profit", None))
    return profit if profit else money(getattr(order, "reseller_margin_amount", None))


class ResellerMapper:
    @staticmethod
    def to_dto(reseller: Reseller) -> ResellerDTO:
        return ResellerDTO(
            id=reseller.id,
            user_id=reseller.user_id,
            business_name=reseller.business_name,
            business_type=reseller.business_type,
            phone=reseller.phone,
            email=reseller.email,
            city=reseller.city,
            state=reseller.state,
            pincode=reseller.pincode,
            bank_account_name=reseller.bank_account_name,
            bank_account_number=reseller.bank_account_number,
            bank_ifsc=reseller.bank_ifsc,
            upi_id=reseller.upi_id,
            is_verified=reseller.is_verified,
            is_active=reseller.is_active,
            commission_rate=str(money(reseller.commission_rate)),
            total_orders=int(reseller.total_orders or 0),
            total_earnings=str(money(reseller.total_earnings)),
            pending_earnings=str(money(reseller.pending_earnings)),
            created_at=reseller.created_at.isoformat() if reseller.created_at else None,
        )


class ResellerOrderMapper:
    @staticmethod
    def to_dto(order: Any) -> ResellerOrderDTO:
        created = getattr(order, "created_at", None)
        return ResellerOrderDTO(
            id=order.id,
            order_number=order.order_number,
            status=order.status,
            total_amount=str(money(order.total_amount)),
            reseller_commission=str(commission_of(order)),
            created_at=created.isoformat() if created else None,
        )
