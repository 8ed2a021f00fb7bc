import types
from decimal import Decimal
from unittest.mock import patch

from rest_framework.test import APIRequestFactory

from apps.api.middleware import RequestValidationMiddleware
from apps.api.validation import VIEW_RULES, _extract_request_data, validate_request_context
from apps.carts.views import CartView
from apps.catalog.views import ProductDetailView, ProductListView
from apps.coupons.views import AvailableCouponListView, CouponListView
from apps.orders.views import (
    CancellationDetailView,
    CancellationListView,
    CheckoutView,
    DraftOrderStatusView,
    OrderCancellationView,
    OrderDetailView,
    OrderListView,
)
from apps.users.views import UserAddressListView, UserProfileView

factory = APIRequestFactory()


def _user(user_id, *, staff=False, superuser=False):
    return types.SimpleNamespace(
        id=user_id, is_authenticated=True, is_staff=staff, is_superuser=superuser
    )


def test_every_rule_names_an_api_view():
    assert "CheckoutView" in VIEW_RULES
    assert "ProductListView" in VIEW_RULES
    assert "UnknownView" not in VIEW_RULES


def test_cart_sets_validated_user_id():
    request = factory.get("/api/cart/")
    request.user = _user(42)
    response = validate_request_context(request, CartView, {})
    assert response is None
    assert request.validated_user_id == 42
    assert request.is_privileged_user is False


def test_cart_requires_auth():
    response = validate_request_context(factory.get("/api/cart/"), CartView, {})
    assert response.status_code == 401
    assert response.data["error"]["code"] == "UNAUTHORIZED"


def test_cart_forbidden_for_staff_and_superusers():
    for user in (_user(1, staff=True), _user(2, superuser=True)):
        request = factory.get("/api/cart/")
        request.user = user
        response = validate_request_context(request, CartView, {})
        assert response.status_code == 403
        assert response.data["error"]["message"] == "Staff and admin accounts cannot own carts"


def test_checkout_forbidden_for_staff():
    request = factory.post("/api/orders/checkout/", {}, format="json")
    request.user = _user(1, staff=True)
    response = validate_request_context(request, CheckoutView, {})
    assert response.status_code == 403
    assert response.data["error"]["message"] == "Staff and admin accounts cannot place orders"


def test_product_listing_is_public():
    request = factory.get("/api/products/")
    response = validate_request_context(request, ProductListView, {})
    assert response is None
    assert request.validated_user_id is None
    assert request.is_privileged_user is False


def test_product_listing_marks_staff_as_privileged():
    request = factory.get("/api/products/")
    request.user = _user(3, staff=True)
    assert validate_request_context(request, ProductListView, {}) is None
    assert request.is_privileged_user is True


def test_product_writes_require_staff():
    request = factory.post("/api/products/", {"name": "Kurta"}, format="json")
    assert validate_request_context(request, ProductListView, {}).status_code == 401

    request = factory.patch("/api/products/1/", {"price": "10"}, format="json")
    request.user = _user(8)
    response = validate_request_context(request, ProductDetailView, {"product_id": 1})
    assert response.status_code == 403
    assert response.data["error"]["message"] == "You do not have permission to manage products"

    request = factory.delete("/api/products/1/")
    request.user = _user(1, superuser=True)
    assert validate_request_context(request, ProductDetailView, {"product_id": 1}) is None


def test_coupon_management_requires_staff():
    request = factory.get("/api/coupons/")
    request.user = _user(8)
    response = validate_request_context(request, CouponListView, {})
    assert response.status_code == 403


def test_available_coupons_parses_subtotal():
    request = factory.get("/api/coupons/available/", {"subtotal": "1250.50"})
    request.user = _user(8)
    assert validate_request_context(request, AvailableCouponListView, {}) is None
    assert request.coupon_subtotal == Decimal("1250.50")


def test_available_coupons_rejects_bad_subtotal():
    for raw in ("abc", "-5", "NaN"):
        request = factory.get("/api/coupons/available/", {"subtotal": raw})
        request.user = _user(8)
        response = validate_request_context(request, AvailableCouponListView, {})
        assert response.status_code == 400
        assert response.data["error"]["details"] == {"subtotal": raw}


def test_order_list_status_filter():
    request = factory.get("/api/orders/", {"status": " Delivered "})
    request.user = _user(8)
    assert validate_request_context(request, OrderListView, {}) is None
    assert request.order_status_filter == "delivered"

    request = factory.get("/api/orders/", {"status": "lost"})
    request.user = _user(8)
    response = validate_request_context(request, OrderListView, {})
    assert response.status_code == 400
    assert "delivered" in response.data["error"]["details"]["allowed"]


def test_cancellation_list_status_filter():
    request = factory.get("/api/orders/cancellations/", {"status": "Pending"})
    request.user = _user(8)
    assert validate_request_context(request, CancellationListView, {}) is None
    assert request.cancellation_status_filter == "pending"

    request = factory.get("/api/orders/cancellations/", {"status": "shipped"})
    request.user = _user(8)
    response = validate_request_context(request, CancellationListView, {})
    assert response.status_code == 400
    assert response.data["error"]["message"] == "Unknown cancellation status"


def test_cancellation_request_is_customer_only():
    request = factory.post("/api/orders/3/cancel/", {}, format="json")
    request.user = _user(1, staff=True)
    response = validate_request_context(request, OrderCancellationView, {"order_id": 3})
    assert response.status_code == 403
    assert response.data["error"]["message"] == "Staff and admin accounts cannot request cancellations"


def test_cancellation_review_requires_staff():
    request = factory.get("/api/orders/cancellations/4/")
    request.user = _user(8)
    assert validate_request_context(request, CancellationDetailView, {"cancellation_id": 4}) is None

    request = factory.patch("/api/orders/cancellations/4/", {"status": "approved"}, format="json")
    request.user = _user(8)
    response = validate_request_context(request, CancellationDetailView, {"cancellation_id": 4})
    assert response.status_code == 403
    assert response.data["error"]["message"] == "You do not have permission to review cancellations"


def test_order_detail_requires_auth():
    response = validate_request_context(factory.get("/api/orders/3/"), OrderDetailView, {"order_id": 3})
    assert response.status_code == 401


def test_draft_review_requires_staff():
    request = factory.patch("/api/orders/drafts/2/status/", {"status": "approved"}, format="json")
    request.user = _user(8)
    response = validate_request_context(request, DraftOrderStatusView, {"draft_id": 2})
    assert response.status_code == 403
    assert response.data["error"]["message"] == "You do not have permission to manage draft orders"


def test_address_list_requires_auth():
    response = validate_request_context(factory.get("/api/users/me/addresses/"), UserAddressListView, {})
    assert response.status_code == 401


@patch("apps.api.validation.User.objects")
def test_profile_update_rejects_taken_email(mock_user_manager):
    mock_user_manager.filter.return_value.exclude.return_value.exists.return_value = True
    request = factory.patch("/api/users/me/", {"email": "taken@example.com"}, format="json")
    request.data = {"email": "taken@example.com"}
    request.user = _user(5)
    response = validate_request_context(request, UserProfileView, {})
    assert response.status_code == 400
    assert response.data["error"]["details"] == {"field": "email", "value": "taken@example.com"}
    mock_user_manager.filter.assert_called_once_with(email__iexact="taken@example.com")
    mock_user_manager.filter.return_value.exclude.assert_called_once_with(id=5)


@patch("apps.api.validation.User.objects")
def test_profile_read_skips_email_check(mock_user_manager):
    request = factory.get("/api/users/me/")
    request.user = _user(5)
    assert validate_request_context(request, UserProfileView, {}) is None
    mock_user_manager.filter.assert_not_called()


def test_views_without_rules_pass_through():
    class PlainView:
        pass

    assert validate_request_context(factory.get("/anything/"), PlainView, {}) is None


def test_middleware_no_view_class_returns_none():
    middleware = RequestValidationMiddleware(lambda req: None)
    request = factory.get("/health/live")
    assert middleware.process_view(request, lambda req: req, [], {}) is None


def test_middleware_renders_blocked_request():
    middleware = RequestValidationMiddleware(lambda req: None)
    request = factory.get("/api/cart/")
    response = middleware.process_view(request, CartView.as_view(), [], {})
    assert response.status_code == 401
    assert response.accepted_media_type == "application/json"


def test_extract_request_data_handles_invalid_json():
    request = types.SimpleNamespace(content_type="application/json", body=b"\xff", data=None, POST={})
    assert _extract_request_data(request) == {}


def test_extract_request_data_form_payload():
    request = factory.post("/api/users/me/", {"email": "form@example.com"})
    assert _extract_request_data(request).get("email") == "form@example.com"


def test_extract_request_data_without_post_attribute():
    request = types.SimpleNamespace(content_type="", data=None)
    assert _extract_request_data(request) == {}
