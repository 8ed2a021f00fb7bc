from typing import Any, Iterable, List, Optional

from .dtos import CancellationRequestDTO, DraftOrderDTO, DraftOrderItemDTO, OrderDTO, OrderItemDTO
from .models import CancellationRequest, DraftOrder, DraftOrderItem, Order, OrderItem


def _iso(value: Any) -> Optional[str]:
    return value.isoformat() if value else None


def _str(value: Any) -> str:
    return str(value if value is not None else "0.00")


def _items(owner: Any) -> Iterable[Any]:
    manager = getattr(owner, "items", None)
    if manager is None:
        return []
    return manager.all() if hasattr(manager, "all") else manager


class OrderItemMapper:
    @staticmethod
    def to_dto(item: OrderItem) -> OrderItemDTO:
        return OrderItemDTO(
            id=item.id,
            product_id=item.product_id,
            variant_id=item.variant_id,
            product_name=item.product_name,
            product_image=item.product_image,
            size=item.size,
            color=item.color,
            quantity=item.quantity,
            unit_price=_str(item.unit_price),
            total_price=_str(item.total_price),
            base_unit_price=_str(item.base_unit_price),
            is_reseller=item.is_reseller,
            margin_amount=_str(item.margin_amount),
        )


class OrderMapper:
    @staticmethod
    def to_dto(order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id,
            order_number=order.order_number,
            user_id=order.user_id,
            status=order.status,
            payment_method=order.payment_method,
            payment_status=order.payment_status,
            payment_id=order.payment_id,
            subtotal=_str(order.subtotal),
            shipping_amount=_str(order.shipping_amount),
            tax_amount=_str(order.tax_amount),
            discount_amount=_str(order.discount_amount),
            coupon_code=order.coupon_code,
            coin_discount=_str(order.coin_discount),
            total_amount=_str(order.total_amount),
            shipping_address=order.shipping_address,
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            customer_phone=order.customer_phone,
            is_reseller_order=order.is_reseller_order,
            reseller_margin_percentage=_str(order.reseller_margin_percentage),
            reseller_margin_amount=_str(order.reseller_margin_amount),
            original_total=_str(order.original_total),
            reseller_profit=_str(order.reseller_profit),
            created_at=_iso(order.created_at),
            items=[OrderItemMapper.to_dto(i) for i in _items(order)],
        )

    @staticmethod
    def many_to_dto(orders: Iterable[Order]) -> List[OrderDTO]:
        return [OrderMapper.to_dto(o) for o in orders]


class DraftOrderMapper:
    @staticmethod
    def item_to_dto(item: DraftOrderItem) -> DraftOrderItemDTO:
        return DraftOrderItemDTO(
            id=item.id,
            product_id=item.product_id,
            variant_id=item.variant_id,
            product_name=item.product_name,
            product_image=item.product_image,
            size=item.size,
            color=item.color,
            quantity=item.quantity,
            available_quantity=item.available_quantity,
            unit_price=_str(item.unit_price),
            total_price=_str(item.total_price),
            is_reseller=item.is_reseller,
        )

    @staticmethod
    def to_dto(draft: DraftOrder) -> DraftOrderDTO:
        return DraftOrderDTO(
            id=draft.id,
            order_number=draft.order_number,
            user_id=draft.user_id,
            status=draft.status,
            total_amount=_str(draft.total_amount),
            shipping_address=draft.shipping_address,
            billing_address=draft.billing_address,
            payment_method=draft.payment_method,
            payment_status=draft.payment_status,
            notes=draft.notes,
            approved_at=_iso(draft.approved_at),
            approved_by_id=draft.approved_by_id,
            rejection_reason=draft.rejection_reason,
            created_at=_iso(draft.created_at),
            items=[DraftOrderMapper.item_to_dto(i) for i in _items(draft)],
        )

    @staticmethod
    def many_to_dto(drafts: Iterable[DraftOrder]) -> List[DraftOrderDTO]:
        return [DraftOrderMapper.to_dto(d) for d in drafts]


class CancellationMapper:
    @staticmethod
    def to_dto(request: CancellationRequest) -> CancellationRequestDTO:
        order = request.order
        return CancellationRequestDTO(
            id=request.id,
            order_id=request.order_id,
            order_number=order.order_number,
            order_status=order.status,
            user_id=request.user_id,
            reason=request.reason,
            status=request.status,
            reviewed_at=_iso(request.reviewed_at),
            reviewed_by_id=request.reviewed_by_id,
            rejection_reason=request.rejection_reason,
            created_at=_iso(request.created_at),
        )

    @staticmethod
    def many_to_dto(requests: Iterable[CancellationRequest]) -> List[CancellationRequestDTO]:
        return [CancellationMapper.to_dto(r) for r in requests]
