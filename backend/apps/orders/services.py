from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple

from django.utils import timezone

from apps.common import get_logger
from .dtos import DraftOrderDTO, OrderDTO
from .mappers import DraftOrderMapper, OrderMapper
from .models import DraftOrder, Order
from .protocols import DraftOrderRepositoryProtocol, OrderRepositoryProtocol

logger = get_logger(__name__).bind(component="orders", layer="service")

ServiceError = Tuple[str, str, Optional[Dict[str, Any]]]


class OrderService:
    def __init__(
        self,
        orders: OrderRepositoryProtocol,
        drafts: DraftOrderRepositoryProtocol,
        clock: Optional[Callable[[], Any]] = None,
    ):
        self.orders = orders
        self.drafts = drafts
        self.clock = clock or timezone.now
        self.logger = logger.bind(service="OrderService")

    # Orders
    def list_orders(
        self, user_id: int, is_privileged: bool = False, status: Optional[str] = None
    ) -> List[OrderDTO]:
        """Own orders, newest first; staff see every order."""
        filters: Dict[str, Any] = {} if is_privileged else {"user_id": user_id}
        if status:
            filters["status"] = status
        self.logger.debug("Listing orders", user_id=user_id, privileged=is_privileged, status=status)
        return OrderMapper.many_to_dto(self.orders.list_with_items(**filters))

    def get_order(
        self, user_id: int, order_id: int, is_privileged: bool = False
    ) -> Tuple[Optional[OrderDTO], Optional[ServiceError]]:
        order = self.orders.get_with_items(id=order_id)
        if order is None:
            return None, ("NOT_FOUND", "Order not found", {"id": str(order_id)})
        if not is_privileged and order.user_id != user_id:
            self.logger.warning("Order access forbidden", user_id=user_id, order_id=order_id)
            return None, (
                "FORBIDDEN",
                "You do not have permission to view this order",
                {"id": str(order_id)},
            )
        return OrderMapper.to_dto(order), None

    def update_order_status(
        self, order_id: int, status: str
    ) -> Tuple[Optional[OrderDTO], Optional[ServiceError]]:
        if status not in Order.Status.values:
            return None, (
                "VALIDATION_ERROR",
                "Unknown order status",
                {"status": status, "allowed": list(Order.Status.values)},
            )
        order = self.orders.get_with_items(id=order_id)
        if order is None:
            return None, ("NOT_FOUND", "Order not found", {"id": str(order_id)})
        previous = order.status
        self.orders.update(order, status=status)
        self.logger.info("Order status changed", order_id=order_id, previous=previous, status=status)
        return OrderMapper.to_dto(order), None

    # Draft orders
    def list_draft_orders(self, user_id: int, is_privileged: bool = False) -> List[DraftOrderDTO]:
        filters: Dict[str, Any] = {} if is_privileged else {"user_id": user_id}
        return DraftOrderMapper.many_to_dto(self.drafts.list_with_items(**filters))

    def update_draft_status(
        self,
        draft_id: int,
        status: str,
        approved_by_id: Optional[int] = None,
        rejection_reason: Optional[str] = None,
    ) -> Tuple[Optional[DraftOrderDTO], Optional[ServiceError]]:
        """
        Staff reconciliation of a draft order. Approval stamps the approver
        and time; a rejection keeps the reason when one is given.
        """
        if status not in DraftOrder.Status.values:
            return None, (
                "VALIDATION_ERROR",
                "Unknown draft order status",
                {"status": status, "allowed": list(DraftOrder.Status.values)},
            )
        draft = self.drafts.get_with_items(id=draft_id)
        if draft is None:
            return None, ("NOT_FOUND", "Draft order not found", {"id": str(draft_id)})
        changes: Dict[str, Any] = {"status": status}
        if status == DraftOrder.Status.APPROVED:
            changes["approved_at"] = self.clock()
            changes["approved_by_id"] = approved_by_id
        if status == DraftOrder.Status.REJECTED and rejection_reason:
            changes["rejection_reason"] = rejection_reason.strip()
        self.drafts.update(draft, **changes)
        self.logger.info("Draft order status changed", draft_id=draft_id, status=status)
        return DraftOrderMapper.to_dto(draft), None
