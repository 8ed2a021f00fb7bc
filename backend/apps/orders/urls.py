from django.urls import path

from .views import (
    CancellationDetailView,
    CancellationListView,
    CheckoutView,
    DraftOrderListView,
    DraftOrderStatusView,
    OrderCancellationView,
    OrderDetailView,
    OrderListView,
    OrderStatusView,
)

urlpatterns = [
    path("", OrderListView.as_view(), name="order-list"),
    path("checkout/", CheckoutView.as_view(), name="order-checkout"),
    path("<int:order_id>/", OrderDetailView.as_view(), name="order-detail"),
    path("<int:order_id>/status/", OrderStatusView.as_view(), name="order-status"),
    path("<int:order_id>/cancel/", OrderCancellationView.as_view(), name="order-cancel"),
    path("cancellations/", CancellationListView.as_view(), name="cancellation-list"),
    path(
        "cancellations/<int:cancellation_id>/",
        CancellationDetailView.as_view(),
        name="cancellation-detail",
    ),
    path("drafts/", DraftOrderListView.as_view(), name="draft-order-list"),
    path("drafts/<int:draft_id>/status/", DraftOrderStatusView.as_view(), name="draft-order-status"),
]
