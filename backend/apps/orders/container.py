from __future__ import annotations

from apps.carts.container import build_cart_service
from apps.catalog.container import build_product_service
from apps.catalog.repositories import StockRepository
from apps.coupons.container import build_coupon_service
from apps.resellers.container import build_reseller_service
from apps.users.repositories import AddressRepository, UserRepository

from .cancellations import CancellationService
from .checkout import CheckoutService
from .payments import RazorpaySignatureVerifier
from .repositories import CancellationRepository, DraftOrderRepository, OrderRepository
from .services import OrderService


def build_order_service() -> OrderService:
    return OrderService(orders=OrderRepository(), drafts=DraftOrderRepository())


def build_checkout_service() -> CheckoutService:
    return CheckoutService(
        carts=build_cart_service(),
        coupons=build_coupon_service(),
        resellers=build_reseller_service(),
        orders=OrderRepository(),
        drafts=DraftOrderRepository(),
        stock=StockRepository(),
        addresses=AddressRepository(),
        coins=UserRepository(),
        gateway=RazorpaySignatureVerifier(),
        listing_cache=build_product_service(),
    )


def build_cancellation_service() -> CancellationService:
    return CancellationService(
        requests=CancellationRepository(),
        orders=OrderRepository(),
        stock=StockRepository(),
        listing_cache=build_product_service(),
    )
