from django.urls import include, path

urlpatterns = [
    path("products/", include("apps.catalog.urls")),
    path("users/", include("apps.users.urls")),
    path("cart/", include("apps.carts.urls")),
    path("wishlist/", include("apps.wishlist.urls")),
    path("coupons/", include("apps.coupons.urls")),
    path("orders/", include("apps.orders.urls")),
    path("resellers/", include("apps.resellers.urls")),
    path("auth/", include("apps.auth.urls")),
]
