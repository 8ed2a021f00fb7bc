from typing import Any, Dict, List

from apps.common.repository import GenericRepository
from .models import CancellationRequest, DraftOrder, DraftOrderItem, Order, OrderItem


class OrderRepository(GenericRepository[Order]):
    def __init__(self):
        super().__init__(Order)

    def list_with_items(self, **filters):
        return self.model.objects.filter(**filters).prefetch_related("items")

    def get_with_items(self, **filters):
        return self.list_with_items(**filters).first()

    def add_items(self, order: Order, rows: List[Dict[str, Any]]) -> List[OrderItem]:
        return OrderItem.objects.bulk_create([OrderItem(order=order, **row) for row in rows])


class DraftOrderRepository(GenericRepository[DraftOrder]):
    def __init__(self):
        super().__init__(DraftOrder)

    def list_with_items(self, **filters):
        return self.model.objects.filter(**filters).prefetch_related("items")

    def get_with_items(self, **filters):
        return self.list_with_items(**filters).first()

    def add_items(self, draft: DraftOrder, rows: List[Dict[str, Any]]) -> List[DraftOrderItem]:
        return DraftOrderItem.objects.bulk_create(
            [DraftOrderItem(draft_order=draft, **row) for row in rows]
        )


class CancellationRepository(GenericRepository[CancellationRequest]):
    def __init__(self):
        super().__init__(CancellationRequest)

    def list_with_order(self, **filters):
        return self.model.objects.filter(**filters).select_related("order")

    def get_with_order(self, **filters):
        return self.list_with_order(**filters).first()
