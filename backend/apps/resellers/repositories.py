from decimal import Decimal

from django.db.models import F

from apps.common.repository import GenericRepository
from apps.orders.models import Order
from .models import Reseller


class ResellerRepository(GenericRepository[Reseller]):
    def __init__(self):
        super().__init__(Reseller)

    def record_order(self, user_id: int, profit: Decimal) -> bool:
        updated = self.model.objects.filter(user_id=user_id).update(
            total_orders=F("total_orders") + 1,
            pending_earnings=F("pending_earnings") + profit,
        )
        return updated == 1


class ResellerOrderRepository:
    """Reseller orders live on the main orders table."""

    def reseller_orders(self, user_id: int):
        return Order.objects.filter(user_id=user_id, is_reseller_order=True).order_by(
            "-created_at", "-id"
        )
