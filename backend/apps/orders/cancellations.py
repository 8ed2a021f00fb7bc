"""
Customer cancellation requests and their staff review.

A customer may ask to cancel an order while it is still pending or
confirmed. Approval cancels the order and puts its stock back on the shelf;
rejection leaves the order untouched.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple

from django.db import transaction
from django.utils import timezone

from apps.common import get_logger
from .dtos import CancellationRequestDTO
from .mappers import CancellationMapper
from .models import CancellationRequest, Order
from .protocols import (
    CancellationRepositoryProtocol,
    ListingCacheProtocol,
    OrderRepositoryProtocol,
    StockRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="orders", layer="cancellations")

ServiceError = Tuple[str, str, Optional[Dict[str, Any]]]

CANCELLABLE_STATUSES = (Order.Status.PENDING, Order.Status.CONFIRMED)


def _items(order: Any) -> List[Any]:
    manager = getattr(order, "items", None)
    if manager is None:
        return []
    return list(manager.all() if hasattr(manager, "all") else manager)


class CancellationService:
    def __init__(
        self,
        requests: CancellationRepositoryProtocol,
        orders: OrderRepositoryProtocol,
        stock: StockRepositoryProtocol,
        listing_cache: Optional[ListingCacheProtocol] = None,
        clock: Optional[Callable[[], Any]] = None,
    ):
        self.requests = requests
        self.orders = orders
        self.stock = stock
        self.listing_cache = listing_cache
        self.clock = clock or timezone.now
        self.logger = logger.bind(service="CancellationService")

    def request_cancellation(
        self, user_id: int, order_id: int, reason: str = ""
    ) -> Tuple[Optional[CancellationRequestDTO], Optional[ServiceError]]:
        order = self.orders.get_with_items(id=order_id)
        if order is None or order.user_id != user_id:
            return None, ("NOT_FOUND", "Order not found", {"id": str(order_id)})
        if order.status not in CANCELLABLE_STATUSES:
            return None, (
                "VALIDATION_ERROR",
                "This order can no longer be cancelled",
                {"id": str(order_id), "status": order.status},
            )
        if self.requests.exists(order_id=order.id, status=CancellationRequest.Status.PENDING):
            return None, (
                "CONFLICT",
                "A cancellation request for this order is already pending",
                {"id": str(order_id)},
            )
        request = self.requests.create(
            order=order,
            user_id=user_id,
            reason=(reason or "").strip(),
        )
        self.logger.info("Cancellation requested", user_id=user_id, order_id=order.id, request_id=request.id)
        return CancellationMapper.to_dto(request), None

    def list_cancellations(
        self, user_id: int, is_privileged: bool = False, status: Optional[str] = None
    ) -> List[CancellationRequestDTO]:
        """Own requests, newest first; staff see every request."""
        filters: Dict[str, Any] = {} if is_privileged else {"user_id": user_id}
        if status:
            filters["status"] = status
        return CancellationMapper.many_to_dto(self.requests.list_with_order(**filters))

    def get_cancellation(
        self, user_id: int, request_id: int, is_privileged: bool = False
    ) -> Tuple[Optional[CancellationRequestDTO], Optional[ServiceError]]:
        request = self.requests.get_with_order(id=request_id)
        if request is None or (not is_privileged and request.user_id != user_id):
            return None, ("NOT_FOUND", "Cancellation request not found", {"id": str(request_id)})
        return CancellationMapper.to_dto(request), None

    def review_cancellation(
        self,
        request_id: int,
        approve: bool,
        reviewer_id: Optional[int] = None,
        rejection_reason: Optional[str] = None,
    ) -> Tuple[Optional[CancellationRequestDTO], Optional[ServiceError]]:
        request = self.requests.get_with_order(id=request_id)
        if request is None:
            return None, ("NOT_FOUND", "Cancellation request not found", {"id": str(request_id)})
        if request.status != CancellationRequest.Status.PENDING:
            return None, (
                "CONFLICT",
                "This cancellation request has already been reviewed",
                {"id": str(request_id), "status": request.status},
            )

        changes: Dict[str, Any] = {"reviewed_at": self.clock(), "reviewed_by_id": reviewer_id}
        if not approve:
            changes["status"] = CancellationRequest.Status.REJECTED
            if rejection_reason:
                changes["rejection_reason"] = rejection_reason.strip()
            self.requests.update(request, **changes)
            self.logger.info("Cancellation rejected", request_id=request_id, order_id=request.order_id)
            return CancellationMapper.to_dto(request), None

        order = self.orders.get_with_items(id=request.order_id)
        if order is None or order.status not in CANCELLABLE_STATUSES:
            return None, (
                "VALIDATION_ERROR",
                "This order can no longer be cancelled",
                {"id": str(request.order_id), "status": getattr(order, "status", None)},
            )

        changes["status"] = CancellationRequest.Status.APPROVED
        with transaction.atomic():
            self.orders.update(order, status=Order.Status.CANCELLED)
            for item in _items(order):
                self._restock(item)
            self.requests.update(request, **changes)
        if self.listing_cache is not None:
            self.listing_cache.invalidate_listing()

        self.logger.info(
            "Cancellation approved",
            request_id=request_id,
            order_id=order.id,
            payment_status=order.payment_status,
            payment_id=order.payment_id,
        )
        request.order = order
        return CancellationMapper.to_dto(request), None

    def _restock(self, item: Any) -> None:
        if item.variant_id is not None:
            restocked = self.stock.restock_variant(item.variant_id, item.quantity)
        elif item.product_id is not None:
            restocked = self.stock.restock_product(item.product_id, item.quantity)
        else:
            restocked = False
        if not restocked:
            self.logger.warning(
                "Cancelled item not restocked",
                order_item_id=item.id,
                product_id=item.product_id,
                variant_id=item.variant_id,
            )
