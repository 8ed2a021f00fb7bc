from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class CartItemDTO:
    id: int
    product_id: int
    variant_id: Optional[int]
    name: str
    image: str
    size: str
    color: str
    quantity: int
    available_quantity: int
    mrp: str
    rsp: str
    discount_percentage: int
    unit_price: str
    line_total: str
    is_reseller: bool
    reseller_price: Optional[str]
    reseller_margin: str


@dataclass
class CartSummaryDTO:
    subtotal_mrp: str
    subtotal_rsp: str
    subtotal: str
    savings: str
    reseller_profit: str
    coupon_code: str
    coupon_discount: str
    coin_balance: int
    coins_to_redeem: int
    eligible_coin_discount: int
    coin_discount: str
    payable_subtotal: str
    delivery_charge: str
    total: str
    coins_earned: int
    item_count: int


@dataclass
class CartDTO:
    id: int
    user_id: int
    items: List[CartItemDTO] = field(default_factory=list)
    summary: Optional[CartSummaryDTO] = None
