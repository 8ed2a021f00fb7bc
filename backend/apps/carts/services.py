from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from apps.api.exceptions import ApplicationError
from apps.catalog.pricing import available_quantity, item_pricing, match_variant
from apps.common import get_logger
from apps.common.money import ZERO, money
from apps.common.rules import StoreRules, get_store_rules
from apps.coupons.exceptions import CouponInvalidError
from apps.coupons.models import Coupon
from apps.coupons.services import CouponService
from .commands import AddItemCommand
from .dtos import CartDTO, CartSummaryDTO
from .exceptions import CartNotAllowedError, ResellerPriceError
from .mappers import CartMapper
from .models import Cart, CartItem
from .pricing import CartTotals, PricedLine, compute_totals, price_lines, resolve_variant
from .protocols import (
    CartItemRepositoryProtocol,
    CartRepositoryProtocol,
    ProductLookupProtocol,
    UserLookupProtocol,
)

logger = get_logger(__name__).bind(component="carts", layer="service")

ServiceError = Tuple[str, str, Optional[Dict[str, Any]]]


@dataclass
class CartQuote:
    """Priced snapshot of (part of) a cart, used by the summary and checkout."""

    user: Any
    cart: Cart
    lines: List[PricedLine]
    totals: CartTotals
    coupon: Optional[Coupon]


class CartService:
    def __init__(
        self,
        carts: CartRepositoryProtocol,
        items: CartItemRepositoryProtocol,
        products: ProductLookupProtocol,
        users: UserLookupProtocol,
        coupons: CouponService,
        rules: Optional[StoreRules] = None,
    ):
        self.carts = carts
        self.items = items
        self.products = products
        self.users = users
        self.coupons = coupons
        self.rules = rules or get_store_rules()
        self.logger = logger.bind(service="CartService")

    # Loading
    def open_cart(self, user_id: int) -> Tuple[Any, Cart]:
        """The customer and their cart, creating the cart on first use."""
        user = self.users.get(id=user_id)
        if user is None:
            raise ApplicationError("NOT_FOUND", "User not found", details={"userId": str(user_id)})
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            self.logger.warning("Cart requested for staff account", user_id=user_id)
            raise CartNotAllowedError(
                message="Staff and admin accounts cannot own carts",
                details={"userId": str(user_id)},
            )
        cart, created = self.carts.get_or_create_for_user(user.id)
        if created:
            self.logger.info("Cart created", user_id=user.id, cart_id=cart.id)
        return user, cart

    def lines_for(self, cart: Cart) -> List[PricedLine]:
        return price_lines(self.items.list_for_cart(cart.id))

    def _get_item(self, cart: Cart, item_id: int) -> Optional[CartItem]:
        return self.items.get(id=item_id, cart_id=cart.id)

    # Pricing
    def _resolve_coupon(self, user: Any, cart: Cart, subtotal: Decimal) -> Tuple[Optional[Coupon], Decimal]:
        if cart.applied_coupon:
            try:
                return self.coupons.evaluate(cart.applied_coupon, user.id, subtotal)
            except CouponInvalidError as exc:
                self.logger.info(
                    "Dropping coupon that no longer applies",
                    user_id=user.id,
                    code=cart.applied_coupon,
                    reason=exc.title,
                )
                self.carts.update(cart, applied_coupon="")
                return None, ZERO
        if cart.coupon_dismissed:
            return None, ZERO
        coupon = self.coupons.auto_apply_new_user_coupon(user.id, "", subtotal)
        if coupon is None:
            return None, ZERO
        self.carts.update(cart, applied_coupon=coupon.code)
        return coupon, self.coupons.compute_discount(coupon, subtotal)

    def quote(self, user: Any, cart: Cart, lines: List[PricedLine]) -> CartQuote:
        subtotal = money(sum((line.line_total for line in lines), ZERO))
        coupon, discount = self._resolve_coupon(user, cart, subtotal)
        totals = compute_totals(
            lines,
            self.rules,
            coupon_code=coupon.code if coupon else "",
            coupon_discount=discount,
            coins_to_redeem=cart.coins_to_redeem,
            coin_balance=getattr(user, "coin_balance", 0),
        )
        return CartQuote(user=user, cart=cart, lines=lines, totals=totals, coupon=coupon)

    def _to_dto(self, user: Any, cart: Cart) -> CartDTO:
        quote = self.quote(user, cart, self.lines_for(cart))
        return CartMapper.to_dto(cart, quote.lines, quote.totals, getattr(user, "coin_balance", 0))

    # Reads
    def get_cart(self, user_id: int) -> CartDTO:
        user, cart = self.open_cart(user_id)
        self.logger.debug("Fetching cart", user_id=user_id, cart_id=cart.id)
        return self._to_dto(user, cart)

    def summary(self, user_id: int) -> CartSummaryDTO:
        user, cart = self.open_cart(user_id)
        quote = self.quote(user, cart, self.lines_for(cart))
        return CartMapper.summary_to_dto(
            quote.totals, getattr(user, "coin_balance", 0), cart.coins_to_redeem
        )

    # Line items
    def add_item(
        self, user_id: int, data: Union[Dict[str, Any], AddItemCommand]
    ) -> Tuple[Optional[CartDTO], Optional[ServiceError]]:
        cmd = data if isinstance(data, AddItemCommand) else AddItemCommand.from_raw(data)
        if cmd is None:
            return None, ("VALIDATION_ERROR", "product_id is required", None)
        user, cart = self.open_cart(user_id)

        product = self.products.get(id=cmd.product_id, is_active=True)
        if product is None:
            self.logger.info("Add to cart failed: product not found", product_id=cmd.product_id)
            return None, ("NOT_FOUND", "Product not found", {"productId": str(cmd.product_id)})

        variant = match_variant(product, cmd.size, cmd.color)
        if variant is None and list(product.variants.all()):
            return None, (
                "VALIDATION_ERROR",
                "Selected size and color are not available",
                {"size": cmd.size, "color": cmd.color},
            )
        size = cmd.size or getattr(variant, "size", "") or ""
        color = cmd.color or getattr(variant, "color", "") or ""
        available = available_quantity(product, variant)
        if available <= 0:
            return None, ("OUT_OF_STOCK", "This item is out of stock", {"productId": str(product.id)})

        existing = self.items.find_line(cart.id, product.id, size, color)
        if existing is not None:
            merged = existing.quantity + cmd.quantity
            if merged > available:
                self.logger.info(
                    "Merge exceeds stock; quantity unchanged",
                    item_id=existing.id,
                    requested=merged,
                    available=available,
                )
                return None, (
                    "OUT_OF_STOCK",
                    f"Only {available} left in stock",
                    {"available": available, "inCart": existing.quantity},
                )
            self.items.update(existing, quantity=merged)
            self.logger.info("Cart line merged", item_id=existing.id, quantity=merged)
        else:
            quantity = min(cmd.quantity, available)
            item = self.items.create(
                cart=cart,
                product=product,
                variant=variant,
                size=size,
                color=color,
                quantity=quantity,
            )
            self.logger.info(
                "Cart line added", cart_id=cart.id, item_id=item.id, product_id=product.id, quantity=quantity
            )
        return self._to_dto(user, cart), None

    def update_quantity(
        self, user_id: int, item_id: int, quantity: int
    ) -> Tuple[Optional[CartDTO], Optional[ServiceError]]:
        user, cart = self.open_cart(user_id)
        item = self._get_item(cart, item_id)
        if item is None:
            return None, ("NOT_FOUND", "Cart item not found", {"id": str(item_id)})
        capped = min(int(quantity), available_quantity(item.product, resolve_variant(item)))
        if capped <= 0:
            self.items.delete(item)
            self.logger.info("Cart line removed by quantity update", item_id=item_id)
        else:
            self.items.update(item, quantity=capped)
            self.logger.info("Cart quantity updated", item_id=item_id, requested=quantity, quantity=capped)
        return self._to_dto(user, cart), None

    def remove_item(self, user_id: int, item_id: int) -> Tuple[Optional[CartDTO], Optional[ServiceError]]:
        user, cart = self.open_cart(user_id)
        item = self._get_item(cart, item_id)
        if item is None:
            return None, ("NOT_FOUND", "Cart item not found", {"id": str(item_id)})
        self.items.delete(item)
        self.logger.info("Cart line removed", item_id=item_id, cart_id=cart.id)
        return self._to_dto(user, cart), None

    def clear_cart(self, user_id: int) -> CartDTO:
        user, cart = self.open_cart(user_id)
        removed = self.items.delete_for_cart(cart.id)
        self.reset_discounts(cart)
        self.logger.info("Cart cleared", cart_id=cart.id, removed=removed)
        return self._to_dto(user, cart)

    def toggle_reseller(
        self,
        user_id: int,
        item_id: int,
        enabled: bool,
        reseller_price: Any = None,
    ) -> Tuple[Optional[CartDTO], Optional[ServiceError]]:
        """
        Mark a line as resold at ``reseller_price`` per unit. The price has
        to beat the base selling price; raises ``ResellerPriceError``.
        """
        user, cart = self.open_cart(user_id)
        item = self._get_item(cart, item_id)
        if item is None:
            return None, ("NOT_FOUND", "Cart item not found", {"id": str(item_id)})
        if enabled:
            base = item_pricing(item.product, resolve_variant(item)).rsp
            price = money(reseller_price)
            if price <= base:
                raise ResellerPriceError(
                    message=f"Reseller price must be greater than {base}",
                    details={"basePrice": str(base), "resellerPrice": str(price)},
                )
            self.items.update(item, is_reseller=True, reseller_price=price)
            self.logger.info("Reseller pricing enabled", item_id=item_id, reseller_price=price)
        else:
            self.items.update(item, is_reseller=False, reseller_price=None)
            self.logger.info("Reseller pricing disabled", item_id=item_id)
        return self._to_dto(user, cart), None

    # Discounts
    def apply_coupon(self, user_id: int, code: Optional[str]) -> CartDTO:
        """Evaluate ``code`` against the current subtotal; raises ``CouponInvalidError``."""
        user, cart = self.open_cart(user_id)
        lines = self.lines_for(cart)
        subtotal = money(sum((line.line_total for line in lines), ZERO))
        coupon, discount = self.coupons.evaluate(code, user.id, subtotal)
        self.carts.update(cart, applied_coupon=coupon.code, coupon_dismissed=False)
        self.logger.info("Coupon applied", user_id=user.id, code=coupon.code, discount=discount)
        return self._to_dto(user, cart)

    def remove_coupon(self, user_id: int) -> CartDTO:
        user, cart = self.open_cart(user_id)
        self.carts.update(cart, applied_coupon="", coupon_dismissed=True)
        self.logger.info("Coupon removed", user_id=user.id)
        return self._to_dto(user, cart)

    def apply_coins(self, user_id: int) -> Tuple[Optional[CartDTO], Optional[ServiceError]]:
        user, cart = self.open_cart(user_id)
        quote = self.quote(user, cart, self.lines_for(cart))
        eligible = quote.totals.eligible_coin_discount
        if eligible <= 0:
            return None, (
                "VALIDATION_ERROR",
                "No coins available to redeem",
                {
                    "coinBalance": int(getattr(user, "coin_balance", 0) or 0),
                    "subtotal": str(quote.totals.subtotal),
                },
            )
        self.carts.update(cart, coins_to_redeem=eligible)
        self.logger.info("Coins applied", user_id=user.id, coins=eligible)
        return self._to_dto(user, cart), None

    def remove_coins(self, user_id: int) -> CartDTO:
        user, cart = self.open_cart(user_id)
        self.carts.update(cart, coins_to_redeem=0)
        self.logger.info("Coins removed", user_id=user.id)
        return self._to_dto(user, cart)

    # Checkout support
    def remove_items(self, cart: Cart, item_ids: Sequence[int]) -> int:
        if not item_ids:
            return 0
        removed = self.items.delete_ids(cart.id, item_ids)
        self.logger.info("Processed cart lines removed", cart_id=cart.id, removed=removed)
        return removed

    def reset_discounts(self, cart: Cart) -> Cart:
        return self.carts.update(cart, applied_coupon="", coins_to_redeem=0, coupon_dismissed=False)
