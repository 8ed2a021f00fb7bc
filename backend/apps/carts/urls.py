from django.urls import path

from .views import (
    CartCoinsView,
    CartCouponView,
    CartItemDetailView,
    CartItemListView,
    CartItemResellerView,
    CartView,
)

urlpatterns = [
    path("", CartView.as_view(), name="cart"),
    path("items/", CartItemListView.as_view(), name="cart-items"),
    path("items/<int:item_id>/", CartItemDetailView.as_view(), name="cart-item-detail"),
    path("items/<int:item_id>/reseller/", CartItemResellerView.as_view(), name="cart-item-reseller"),
    path("coupon/", CartCouponView.as_view(), name="cart-coupon"),
    path("coins/", CartCoinsView.as_view(), name="cart-coins"),
]
