"""
Cart arithmetic shared by the cart summary and checkout.

Amounts are Decimals with two places. ``reseller_price`` is a per-unit price;
a reseller line is charged at that price instead of the RSP.
"""
from dataclasses import dataclass
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from typing import Any, Iterable, List, Optional

from apps.catalog.pricing import available_quantity, item_pricing, match_variant
from apps.common.money import ZERO, money
from apps.common.rules import StoreRules


@dataclass(frozen=True)
class PricedLine:
    item: Any
    variant: Optional[Any]
    mrp: Decimal
    rsp: Decimal
    discount_pct: int
    unit_price: Decimal
    quantity: int
    is_reseller: bool
    reseller_requested: bool = False

    @property
    def line_mrp(self) -> Decimal:
        return money(self.mrp * self.quantity)

    @property
    def line_rsp(self) -> Decimal:
        return money(self.rsp * self.quantity)

    @property
    def line_total(self) -> Decimal:
        return money(self.unit_price * self.quantity)

    @property
    def margin(self) -> Decimal:
        if not self.is_reseller:
            return ZERO
        return money((self.unit_price - self.rsp) * self.quantity)

    @property
    def available(self) -> int:
        return available_quantity(self.item.product, self.variant)


@dataclass(frozen=True)
class CartTotals:
    subtotal_mrp: Decimal
    subtotal_rsp: Decimal
    subtotal: Decimal
    savings: Decimal
    reseller_profit: Decimal
    coupon_code: str
    coupon_discount: Decimal
    eligible_coin_discount: int
    coin_discount: Decimal
    payable_subtotal: Decimal
    delivery_charge: Decimal
    total: Decimal
    coins_earned: int
    item_count: int


def resolve_variant(item: Any) -> Optional[Any]:
    variant = getattr(item, "variant", None)
    if variant is not None:
        return variant
    return match_variant(item.product, getattr(item, "size", ""), getattr(item, "color", ""))


def price_line(item: Any) -> PricedLine:
    variant = resolve_variant(item)
    pricing = item_pricing(item.product, variant)
    reseller_price = money(getattr(item, "reseller_price", None))
    requested = bool(getattr(item, "is_reseller", False))
    is_reseller = requested and reseller_price > 0
    return PricedLine(
        item=item,
        variant=variant,
        mrp=pricing.mrp,
        rsp=pricing.rsp,
        discount_pct=pricing.discount_pct,
        unit_price=reseller_price if is_reseller else pricing.rsp,
        quantity=max(0, int(item.quantity or 0)),
        is_reseller=is_reseller,
        reseller_requested=requested,
    )


def price_lines(items: Iterable[Any]) -> List[PricedLine]:
    return [price_line(item) for item in items]


def eligible_coin_discount(subtotal: Any, coin_balance: int, rules: StoreRules) -> int:
    """Coins unlock ``coin_bracket_value`` per full ``coin_bracket_amount`` spent."""
    if rules.coin_bracket_amount <= 0:
        return 0
    brackets = (money(subtotal) / rules.coin_bracket_amount).to_integral_value(rounding=ROUND_FLOOR)
    return max(0, min(int(brackets) * rules.coin_bracket_value, int(coin_balance or 0)))


def delivery_charge_for(subtotal: Any, has_items: bool, rules: StoreRules) -> Decimal:
    if not has_items or money(subtotal) > rules.free_delivery_threshold:
        return ZERO
    return rules.delivery_charge


def compute_totals(
    lines: List[PricedLine],
    rules: StoreRules,
    *,
    coupon_code: str = "",
    coupon_discount: Any = ZERO,
    coins_to_redeem: int = 0,
    coin_balance: int = 0,
) -> CartTotals:
    subtotal_mrp = money(sum((line.line_mrp for line in lines), ZERO))
    subtotal_rsp = money(sum((line.line_rsp for line in lines), ZERO))
    subtotal = money(sum((line.line_total for line in lines), ZERO))
    reseller_profit = money(sum((line.margin for line in lines), ZERO))
    savings = max(ZERO, subtotal_mrp - subtotal_rsp)

    coupon_amount = min(money(coupon_discount), subtotal) if coupon_code else ZERO
    eligible = eligible_coin_discount(subtotal, coin_balance, rules)
    coin_discount = money(min(max(0, int(coins_to_redeem or 0)), eligible))

    payable = max(ZERO, subtotal - coupon_amount - coin_discount)
    delivery = delivery_charge_for(subtotal, bool(lines), rules)
    earned = (payable * rules.coin_earn_rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP)

    return CartTotals(
        subtotal_mrp=subtotal_mrp,
        subtotal_rsp=subtotal_rsp,
        subtotal=subtotal,
        savings=savings,
        reseller_profit=reseller_profit,
        coupon_code=coupon_code if coupon_code else "",
        coupon_discount=coupon_amount,
        eligible_coin_discount=eligible,
        coin_discount=coin_discount,
        payable_subtotal=money(payable),
        delivery_charge=money(delivery),
        total=money(payable + delivery),
        coins_earned=int(earned),
        item_count=sum(line.quantity for line in lines),
    )
