from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class OrderItemDTO:
    id: int
    product_id: Optional[int]
    variant_id: Optional[int]
    product_name: str
    product_image: str
    size: str
    color: str
    quantity: int
    unit_price: str
    total_price: str
    base_unit_price: str
    is_reseller: bool
    margin_amount: str


@dataclass
class OrderDTO:
    id: int
    order_number: str
    user_id: int
    status: str
    payment_method: str
    payment_status: str
    payment_id: str
    subtotal: str
    shipping_amount: str
    tax_amount: str
    discount_amount: str
    coupon_code: str
    coin_discount: str
    total_amount: str
    shipping_address: str
    customer_name: str
    customer_email: str
    customer_phone: str
    is_reseller_order: bool
    reseller_margin_percentage: str
    reseller_margin_amount: str
    original_total: str
    reseller_profit: str
    created_at: Optional[str]
    items: List[OrderItemDTO] = field(default_factory=list)


@dataclass
class DraftOrderItemDTO:
    id: int
    product_id: Optional[int]
    variant_id: Optional[int]
    product_name: str
    product_image: str
    size: str
    color: str
    quantity: int
    available_quantity: int
    unit_price: str
    total_price: str
    is_reseller: bool


@dataclass
class DraftOrderDTO:
    id: int
    order_number: str
    user_id: int
    status: str
    total_amount: str
    shipping_address: str
    billing_address: str
    payment_method: str
    payment_status: str
    notes: str
    approved_at: Optional[str]
    approved_by_id: Optional[int]
    rejection_reason: str
    created_at: Optional[str]
    items: List[DraftOrderItemDTO] = field(default_factory=list)


@dataclass
class CheckoutResultDTO:
    order: Optional[OrderDTO]
    draft_order: Optional[DraftOrderDTO]
    coins_earned: int = 0
    message: str = ""


@dataclass
class CancellationRequestDTO:
    id: int
    order_id: int
    order_number: str
    order_status: str
    user_id: int
    reason: str
    status: str
    reviewed_at: Optional[str]
    reviewed_by_id: Optional[int]
    rejection_reason: str
    created_at: Optional[str]
