from typing import Iterable, List

from .dtos import CartDTO, CartItemDTO, CartSummaryDTO
from .models import Cart
from .pricing import CartTotals, PricedLine


class CartItemMapper:
    @staticmethod
    def to_dto(line: PricedLine) -> CartItemDTO:
        item = line.item
        product = item.product
        return CartItemDTO(
            id=item.id,
            product_id=item.product_id,
            variant_id=getattr(line.variant, "id", None),
            name=product.name,
            image=product.image,
            size=item.size,
            color=item.color,
            quantity=line.quantity,
            available_quantity=line.available,
            mrp=str(line.mrp),
            rsp=str(line.rsp),
            discount_percentage=line.discount_pct,
            unit_price=str(line.unit_price),
            line_total=str(line.line_total),
            is_reseller=line.is_reseller,
            reseller_price=str(line.unit_price) if line.is_reseller else None,
            reseller_margin=str(line.margin),
        )

    @staticmethod
    def many_to_dto(lines: Iterable[PricedLine]) -> List[CartItemDTO]:
        return [CartItemMapper.to_dto(line) for line in lines]


class CartMapper:
    @staticmethod
    def summary_to_dto(totals: CartTotals, coin_balance: int, coins_to_redeem: int) -> CartSummaryDTO:
        return CartSummaryDTO(
            subtotal_mrp=str(totals.subtotal_mrp),
            subtotal_rsp=str(totals.subtotal_rsp),
            subtotal=str(totals.subtotal),
            savings=str(totals.savings),
            reseller_profit=str(totals.reseller_profit),
            coupon_code=totals.coupon_code,
            coupon_discount=str(totals.coupon_discount),
            coin_balance=int(coin_balance or 0),
            coins_to_redeem=int(coins_to_redeem or 0),
            eligible_coin_discount=totals.eligible_coin_discount,
            coin_discount=str(totals.coin_discount),
            payable_subtotal=str(totals.payable_subtotal),
            delivery_charge=str(totals.delivery_charge),
            total=str(totals.total),
            coins_earned=totals.coins_earned,
            item_count=totals.item_count,
        )

    @staticmethod
    def to_dto(cart: Cart, lines: List[PricedLine], totals: CartTotals, coin_balance: int) -> CartDTO:
        return CartDTO(
            id=cart.id,
            user_id=cart.user_id,
            items=CartItemMapper.many_to_dto(lines),
            summary=CartMapper.summary_to_dto(totals, coin_balance, cart.coins_to_redeem),
        )
