from django.urls import path

from .views import (
    WishlistItemDetailView,
    WishlistItemListView,
    WishlistSeenView,
    WishlistToggleView,
    WishlistView,
)

urlpatterns = [
    path("", WishlistView.as_view(), name="wishlist"),
    path("items/", WishlistItemListView.as_view(), name="wishlist-items"),
    path("items/<int:product_id>/", WishlistItemDetailView.as_view(), name="wishlist-item-detail"),
    path("items/<int:product_id>/toggle/", WishlistToggleView.as_view(), name="wishlist-item-toggle"),
    path("seen/", WishlistSeenView.as_view(), name="wishlist-seen"),
]
