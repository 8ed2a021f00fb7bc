"""
Checkout: turn the customer's cart into an order.

The flow is linear: check stock, park unavailable lines in a draft order,
verify the payment, write the order and its items while decrementing stock,
then settle coupon usage, coins and reseller bookkeeping.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Union

from django.db import DatabaseError, transaction

from apps.carts.exceptions import ResellerPriceError
from apps.carts.pricing import PricedLine
from apps.carts.services import CartQuote, CartService
from apps.common import get_logger
from apps.common.money import ZERO, money
from apps.coupons.services import CouponService
from apps.resellers.services import ResellerService
from apps.users.formatting import format_address
from .commands import CheckoutCommand
from .dtos import CheckoutResultDTO, DraftOrderDTO
from .exceptions import CheckoutError, PaymentVerificationError
from .mappers import DraftOrderMapper, OrderMapper
from .models import DraftOrder, Order, PaymentMethod, PaymentStatus
from .numbering import draft_order_number, order_number
from .payments import PaymentGatewayProtocol
from .protocols import (
    AddressLookupProtocol,
    CoinLedgerProtocol,
    DraftOrderRepositoryProtocol,
    ListingCacheProtocol,
    OrderRepositoryProtocol,
    StockRepositoryProtocol,
)
from .stock import StockEntry, check_stock

logger = get_logger(__name__).bind(component="orders", layer="checkout")


def _line_snapshot(line: PricedLine) -> Dict[str, Any]:
    item = line.item
    return {
        "product_id": item.product_id,
        "variant_id": getattr(line.variant, "id", None),
        "product_name": item.product.name,
        "product_image": item.product.image or "",
        "size": item.size or "",
        "color": item.color or "",
        "quantity": line.quantity,
        "unit_price": line.unit_price,
        "total_price": line.line_total,
        "is_reseller": line.is_reseller,
    }


class CheckoutService:
    def __init__(
        self,
        carts: CartService,
        coupons: CouponService,
        resellers: ResellerService,
        orders: OrderRepositoryProtocol,
        drafts: DraftOrderRepositoryProtocol,
        stock: StockRepositoryProtocol,
        addresses: AddressLookupProtocol,
        coins: CoinLedgerProtocol,
        gateway: PaymentGatewayProtocol,
        listing_cache: Optional[ListingCacheProtocol] = None,
    ):
        self.carts = carts
        self.coupons = coupons
        self.resellers = resellers
        self.orders = orders
        self.drafts = drafts
        self.stock = stock
        self.addresses = addresses
        self.coins = coins
        self.gateway = gateway
        self.listing_cache = listing_cache
        self.logger = logger.bind(service="CheckoutService")

    # Drafts
    def create_draft_order(
        self,
        user: Any,
        cart: Any,
        entries: List[StockEntry],
        address: Any,
        payment_method: str,
    ) -> DraftOrderDTO:
        """Park lines the shelf cannot cover and drop them from the cart."""
        rows = []
        for entry in entries:
            row = _line_snapshot(entry.line)
            row["available_quantity"] = entry.available_quantity
            rows.append(row)
        total = money(sum((row["total_price"] for row in rows), ZERO))
        shipping = format_address(address, getattr(user, "location", ""))
        with transaction.atomic():
            draft = self.drafts.create(
                order_number=draft_order_number(),
                user_id=user.id,
                total_amount=total,
                shipping_address=shipping,
                billing_address=shipping,
                payment_method=payment_method or PaymentMethod.COD,
                payment_status=PaymentStatus.PENDING,
                status=DraftOrder.Status.PENDING_APPROVAL,
                notes=f"Draft order for out-of-stock items. Total items: {len(rows)}",
            )
            self.drafts.add_items(draft, rows)
            self.carts.remove_items(cart, [entry.line.item.id for entry in entries])
        self.logger.info(
            "Draft order created",
            user_id=user.id,
            draft_id=draft.id,
            order_number=draft.order_number,
            items=len(rows),
        )
        return DraftOrderMapper.to_dto(self.drafts.get_with_items(id=draft.id) or draft)

    # Checkout
    def place_order(
        self, user_id: Optional[int], data: Union[Dict[str, Any], CheckoutCommand]
    ) -> CheckoutResultDTO:
        """
        Place an order for the in-stock part of the cart.

        Raises ``CheckoutError`` (missing address, empty cart, invalid
        amount, stock lost during the write), ``ResellerPriceError`` and
        ``PaymentVerificationError``. Out-of-stock lines become a draft
        order; when nothing is in stock only the draft is returned.
        """
        if user_id is None:
            raise CheckoutError("Login Required", "Please log in to place an order", code="UNAUTHORIZED")
        cmd = data if isinstance(data, CheckoutCommand) else CheckoutCommand.from_raw(data)
        if cmd.payment_method not in PaymentMethod.values:
            raise CheckoutError(
                "Invalid Payment Method",
                "Unsupported payment method",
                details={"allowed": list(PaymentMethod.values)},
            )

        user, cart = self.carts.open_cart(user_id)
        address = self.addresses.get_default(user.id)
        if address is None:
            raise CheckoutError("Address Required", "Please add a delivery address before placing an order")
        lines = self.carts.lines_for(cart)
        if not lines:
            raise CheckoutError("Cart Empty", "Your cart is empty")

        self._validate_reseller_lines(lines)

        in_stock, out_of_stock = check_stock(lines)
        draft = None
        if out_of_stock:
            try:
                draft = self.create_draft_order(user, cart, out_of_stock, address, cmd.payment_method)
            except DatabaseError as exc:
                self.logger.error(
                    "Draft order creation failed", user_id=user.id, items=len(out_of_stock), error=str(exc)
                )

        if not in_stock:
            self.logger.info("Nothing in stock; returning draft only", user_id=user.id)
            return CheckoutResultDTO(
                order=None,
                draft_order=draft,
                message="Items are out of stock; a draft order was created for review"
                if draft
                else "Items are out of stock",
            )

        quote = self.carts.quote(user, cart, [entry.line for entry in in_stock])
        totals = quote.totals
        online = cmd.is_online
        if online:
            if totals.total <= 0:
                raise CheckoutError("Invalid Amount", "Order total must be greater than zero for online payment")
            if not self.gateway.verify(cmd.gateway_order_id, cmd.payment_id, cmd.signature):
                self.logger.warning("Payment verification failed", user_id=user.id, payment_id=cmd.payment_id)
                raise PaymentVerificationError(
                    message="Payment verification failed",
                    details={"paymentId": cmd.payment_id},
                )

        order = self._write_order(user, address, quote, cmd, online)

        self.coupons.log_usage(totals.coupon_code, user.id, order.id, totals.coupon_discount)
        coins_used = int(totals.coin_discount)
        if coins_used > 0:
            balance = self.coins.adjust_coins(user.id, -coins_used)
            self.logger.info("Coins redeemed", user_id=user.id, coins=coins_used, balance=balance)
        self.carts.remove_items(cart, [entry.line.item.id for entry in in_stock])
        self.carts.reset_discounts(cart)
        if self.listing_cache is not None:
            self.listing_cache.invalidate_listing()

        self.logger.info(
            "Order placed",
            user_id=user.id,
            order_id=order.id,
            order_number=order.order_number,
            total=totals.total,
            drafted=len(out_of_stock),
        )
        return CheckoutResultDTO(
            order=OrderMapper.to_dto(self.orders.get_with_items(id=order.id) or order),
            draft_order=draft,
            coins_earned=totals.coins_earned,
            message="Order placed successfully",
        )

    def _validate_reseller_lines(self, lines: List[PricedLine]) -> None:
        for line in lines:
            name = line.item.product.name
            details = {"itemId": line.item.id, "basePrice": str(line.rsp)}
            if line.reseller_requested and not line.is_reseller:
                raise ResellerPriceError(
                    message=f'Set a selling price for "{name}" or turn off reseller mode', details=details
                )
            if line.is_reseller and line.unit_price <= line.rsp:
                raise ResellerPriceError(
                    message=f'Selling price must be greater than the original price for "{name}"',
                    details=details,
                )

    def _write_order(
        self, user: Any, address: Any, quote: CartQuote, cmd: CheckoutCommand, online: bool
    ) -> Order:
        totals = quote.totals
        original_total = money(sum((line.line_rsp for line in quote.lines), ZERO))
        has_reseller = any(line.is_reseller for line in quote.lines)
        margin = money(totals.subtotal - original_total) if has_reseller else ZERO
        margin_pct = (
            (margin / original_total * 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
            if has_reseller and original_total > 0
            else ZERO
        )

        rows = []
        for line in quote.lines:
            row = _line_snapshot(line)
            row["base_unit_price"] = line.rsp
            row["margin_amount"] = line.margin
            rows.append(row)

        with transaction.atomic():
            order = self.orders.create(
                order_number=order_number(),
                user_id=user.id,
                status=Order.Status.CONFIRMED if online else Order.Status.PENDING,
                payment_method=cmd.payment_method,
                payment_status=PaymentStatus.PAID if online else PaymentStatus.PENDING,
                payment_id=cmd.payment_id if online else "",
                subtotal=totals.subtotal,
                shipping_amount=totals.delivery_charge,
                tax_amount=ZERO,
                discount_amount=totals.coupon_discount,
                coupon_code=totals.coupon_code,
                coin_discount=totals.coin_discount,
                total_amount=totals.total,
                shipping_address=format_address(address, getattr(user, "location", "")),
                customer_name=getattr(address, "full_name", "") or getattr(user, "name", "") or user.username,
                customer_email=getattr(user, "email", "") or "",
                customer_phone=getattr(address, "phone", "") or getattr(user, "phone", "") or "",
                is_reseller_order=has_reseller,
                reseller_margin_percentage=margin_pct,
                reseller_margin_amount=margin,
                original_total=money(original_total - totals.coupon_discount) if has_reseller else ZERO,
                reseller_profit=margin,
            )
            self.orders.add_items(order, rows)
            try:
                for line in quote.lines:
                    self._decrement(line)
            except CheckoutError:
                if online:
                    self.logger.warning(
                        "Paid order rolled back; payment needs reconciliation",
                        user_id=user.id,
                        payment_id=cmd.payment_id,
                        payment_method=cmd.payment_method,
                        gateway_order_id=cmd.gateway_order_id,
                        total=totals.total,
                    )
                raise
            if has_reseller:
                self.resellers.record_checkout(user.id, margin)
        return order

    def _decrement(self, line: PricedLine) -> None:
        if line.variant is not None:
            ok = self.stock.decrement_variant(line.variant.id, line.quantity)
        else:
            ok = self.stock.decrement_product(line.item.product_id, line.quantity)
        if not ok:
            self.logger.warning(
                "Stock changed during checkout",
                product_id=line.item.product_id,
                variant_id=getattr(line.variant, "id", None),
                quantity=line.quantity,
            )
            raise CheckoutError(
                "Out of Stock",
                f'"{line.item.product.name}" just went out of stock',
                code="OUT_OF_STOCK",
                details={"productId": str(line.item.product_id)},
            )
