import json
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Optional, Tuple

from django.http import HttpRequest
from rest_framework.exceptions import AuthenticationFailed as DRFAuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken

from apps.api.utils import error_response
from apps.common import get_logger
from apps.orders.models import CancellationRequest, Order
from apps.users.models import User

logger = get_logger(__name__).bind(component="api", layer="validation")

_jwt_authenticator = JWTAuthentication()

ALL_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")
WRITE_METHODS = ("POST", "PUT", "PATCH", "DELETE")


@dataclass(frozen=True)
class ViewRule:
    """Access requirements for one view, keyed by HTTP method."""

    auth: Tuple[str, ...] = ()
    staff: Tuple[str, ...] = ()
    customer: Tuple[str, ...] = ()
    staff_message: str = "You do not have permission to perform this action"
    customer_message: str = "Staff and admin accounts cannot use this endpoint"

    def requires_auth(self, method: str) -> bool:
        return method in self.auth or method in self.staff or method in self.customer


_CART_RULE = ViewRule(
    customer=ALL_METHODS,
    customer_message="Staff and admin accounts cannot own carts",
)

VIEW_RULES: Dict[str, ViewRule] = {
    "UserProfileView": ViewRule(auth=ALL_METHODS),
    "UserAddressListView": ViewRule(auth=ALL_METHODS),
    "UserAddressDetailView": ViewRule(auth=ALL_METHODS),
    "UserDefaultAddressView": ViewRule(auth=ALL_METHODS),
    "ProductListView": ViewRule(
        staff=("POST",), staff_message="You do not have permission to manage products"
    ),
    "ProductDetailView": ViewRule(
        staff=WRITE_METHODS, staff_message="You do not have permission to manage products"
    ),
    "VariantStockView": ViewRule(
        staff=WRITE_METHODS, staff_message="You do not have permission to manage products"
    ),
    "CartView": _CART_RULE,
    "CartItemListView": _CART_RULE,
    "CartItemDetailView": _CART_RULE,
    "CartItemResellerView": _CART_RULE,
    "CartCouponView": _CART_RULE,
    "CartCoinsView": _CART_RULE,
    "CheckoutView": ViewRule(
        customer=ALL_METHODS,
        customer_message="Staff and admin accounts cannot place orders",
    ),
    "WishlistView": ViewRule(auth=ALL_METHODS),
    "WishlistItemListView": ViewRule(auth=ALL_METHODS),
    "WishlistItemDetailView": ViewRule(auth=ALL_METHODS),
    "WishlistToggleView": ViewRule(auth=ALL_METHODS),
    "WishlistSeenView": ViewRule(auth=ALL_METHODS),
    "AvailableCouponListView": ViewRule(auth=ALL_METHODS),
    "ReferralInviteView": ViewRule(auth=ALL_METHODS),
    "CouponListView": ViewRule(
        staff=ALL_METHODS, staff_message="You do not have permission to manage coupons"
    ),
    "CouponDetailView": ViewRule(
        staff=ALL_METHODS, staff_message="You do not have permission to manage coupons"
    ),
    "OrderListView": ViewRule(auth=ALL_METHODS),
    "OrderDetailView": ViewRule(auth=("GET",)),
    "OrderStatusView": ViewRule(
        staff=ALL_METHODS, staff_message="You do not have permission to manage orders"
    ),
    "OrderCancellationView": ViewRule(
        customer=ALL_METHODS,
        customer_message="Staff and admin accounts cannot request cancellations",
    ),
    "CancellationListView": ViewRule(auth=ALL_METHODS),
    "CancellationDetailView": ViewRule(
        auth=("GET",),
        staff=("PATCH",),
        staff_message="You do not have permission to review cancellations",
    ),
    "DraftOrderListView": ViewRule(auth=ALL_METHODS),
    "DraftOrderStatusView": ViewRule(
        staff=ALL_METHODS, staff_message="You do not have permission to manage draft orders"
    ),
    "ResellerProfileView": ViewRule(auth=ALL_METHODS),
    "ResellerDashboardView": ViewRule(auth=ALL_METHODS),
}


def _is_authenticated_user(request: HttpRequest) -> bool:
    user = getattr(request, "user", None)
    if user and getattr(user, "is_authenticated", False) and getattr(user, "id", None):
        return True

    # The middleware runs before DRF authenticates, so bearer tokens are
    # resolved here.
    meta = getattr(request, "META", {}) or {}
    auth_header = meta.get("HTTP_AUTHORIZATION") if hasattr(meta, "get") else None
    if not auth_header:
        return False

    try:
        authenticated = _jwt_authenticator.authenticate(request)
    except (InvalidToken, DRFAuthenticationFailed) as exc:
        logger.warning("JWT authentication failed", detail=str(exc))
        return False

    if not authenticated:
        return False

    user, token = authenticated
    if not getattr(user, "is_authenticated", False) or not getattr(user, "id", None):
        return False

    request.user = user
    request.auth = token
    request.is_privileged_user = _is_privileged_user(user)
    logger.debug("Authenticated user from bearer token", user_id=user.id)
    return True


def _set_validated_user(request: HttpRequest, user_id: Optional[int]) -> None:
    request.validated_user_id = user_id
    if hasattr(request, "user"):
        request.is_privileged_user = _is_privileged_user(getattr(request, "user", None))


def _is_privileged_user(user: Any) -> bool:
    return bool(getattr(user, "is_staff", False) or getattr(user, "is_superuser", False))


def _extract_request_data(request: HttpRequest) -> Dict[str, Any]:
    data = getattr(request, "data", None)
    if data not in (None, {}):
        return data
    if request.content_type == "application/json":
        try:
            body = request.body.decode("utf-8") if hasattr(request, "body") else None
            return json.loads(body) if body else {}
        except (ValueError, AttributeError, UnicodeDecodeError):
            return {}
    if hasattr(request, "POST"):
        post = request.POST
        if hasattr(post, "dict"):
            return post.dict()
        return dict(post)
    return {}


def _validate_email_uniqueness(request: HttpRequest, view_kwargs) -> Any:
    if request.method not in ("PUT", "PATCH"):
        return None
    data = _extract_request_data(request) or {}
    email = data.get("email")
    if not email:
        return None
    user_id = getattr(request, "validated_user_id", None)
    qs = User.objects.filter(email__iexact=email)
    if user_id:
        qs = qs.exclude(id=user_id)
    if qs.exists():
        logger.info("Email uniqueness validation failed", email=email, user_id=user_id)
        return error_response(
            "VALIDATION_ERROR",
            "Email already exists",
            {"field": "email", "value": email},
        )
    return None


def _parse_coupon_subtotal(request: HttpRequest, view_kwargs) -> Any:
    raw = request.GET.get("subtotal")
    request.coupon_subtotal = None
    if raw in (None, ""):
        return None
    try:
        value = Decimal(str(raw))
    except (InvalidOperation, ValueError):
        value = None
    if value is None or not value.is_finite() or value < 0:
        logger.warning("Invalid subtotal query parameter", value=raw)
        return error_response(
            "VALIDATION_ERROR",
            "subtotal must be a non-negative number",
            {"subtotal": raw},
        )
    request.coupon_subtotal = value
    return None


def _status_filter(attribute: str, allowed, label: str) -> Callable[[HttpRequest, Dict[str, Any]], Any]:
    """Build a check that parses ``?status=`` into ``request.<attribute>``."""

    def check(request: HttpRequest, view_kwargs) -> Any:
        raw = request.GET.get("status")
        setattr(request, attribute, None)
        if raw in (None, ""):
            return None
        status_value = str(raw).strip().lower()
        if status_value not in allowed:
            logger.warning("Invalid status filter", kind=label, value=raw)
            return error_response(
                "VALIDATION_ERROR",
                f"Unknown {label} status",
                {"status": raw, "allowed": list(allowed)},
            )
        setattr(request, attribute, status_value)
        return None

    return check


_EXTRA_CHECKS: Dict[str, Callable[[HttpRequest, Dict[str, Any]], Any]] = {
    "UserProfileView": _validate_email_uniqueness,
    "AvailableCouponListView": _parse_coupon_subtotal,
    "OrderListView": _status_filter("order_status_filter", Order.Status.values, "order"),
    "CancellationListView": _status_filter(
        "cancellation_status_filter", CancellationRequest.Status.values, "cancellation"
    ),
}


def validate_request_context(request: HttpRequest, view_class, view_kwargs) -> Any:
    """
    Performs request level validation for the API views listed in VIEW_RULES.
    Returns a DRF Response when validation fails; otherwise None and
    attaches the validated user to the request instance.
    """
    view_name = getattr(view_class, "__name__", "")
    rule = VIEW_RULES.get(view_name)
    if rule is None:
        return None

    method = (getattr(request, "method", "") or "").upper()
    logger.debug("Running request context validation", view=view_name, method=method)

    if rule.requires_auth(method):
        if not _is_authenticated_user(request):
            logger.warning("Authentication required", view=view_name, method=method)
            return error_response("UNAUTHORIZED", "Authentication required")
        _set_validated_user(request, int(request.user.id))
    elif _is_authenticated_user(request):
        # Anonymous access is allowed; staff still get their wider view.
        _set_validated_user(request, int(request.user.id))
    else:
        request.validated_user_id = None
        request.is_privileged_user = False

    is_privileged = bool(getattr(request, "is_privileged_user", False))
    actor_id = getattr(request, "validated_user_id", None)
    if method in rule.staff and not is_privileged:
        logger.warning("Staff-only request forbidden", view=view_name, method=method, user_id=actor_id)
        return error_response("FORBIDDEN", rule.staff_message)
    if method in rule.customer and is_privileged:
        logger.warning("Customer-only request forbidden", view=view_name, method=method, user_id=actor_id)
        return error_response("FORBIDDEN", rule.customer_message)

    check = _EXTRA_CHECKS.get(view_name)
    if check is not None:
        response = check(request, view_kwargs or {})
        if response is not None:
            return response

    logger.debug(
        "Validated request context",
        view=view_name,
        method=method,
        user_id=actor_id,
        privileged=is_privileged,
    )
    return None
