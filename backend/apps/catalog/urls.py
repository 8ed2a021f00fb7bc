from django.urls import path

from .views import ProductDetailView, ProductListView, VariantStockView

urlpatterns = [
    path("", ProductListView.as_view(), name="products-list"),
    path("<int:product_id>/", ProductDetailView.as_view(), name="products-detail"),
    path(
        "<int:product_id>/variants/<int:variant_id>/stock/",
        VariantStockView.as_view(),
        name="products-variant-stock",
    ),
]
