from __future__ import annotations

from apps.catalog.repositories import ProductRepository
from apps.coupons.container import build_coupon_service
from apps.users.repositories import UserRepository

from .repositories import CartItemRepository, CartRepository
from .services import CartService


def build_cart_service() -> CartService:
    return CartService(
        carts=CartRepository(),
        items=CartItemRepository(),
        products=ProductRepository(),
        users=UserRepository(),
        coupons=build_coupon_service(),
    )
