import types
import unittest
from unittest.mock import Mock, patch

from rest_framework.test import APIRequestFactory, force_authenticate

from apps.api.validation import validate_request_context
from apps.carts.dtos import CartDTO, CartSummaryDTO
from apps.carts.exceptions import ResellerPriceError
from apps.carts.views import CartCouponView, CartItemListView, CartItemResellerView, CartView
from apps.coupons.exceptions import CouponInvalidError


def make_cart_dto(user_id=7):
    summary = CartSummaryDTO(
        subtotal_mrp="0.00",
        subtotal_rsp="0.00",
        subtotal="0.00",
        savings="0.00",
        reseller_profit="0.00",
        coupon_code="",
        coupon_discount="0.00",
        coin_balance=0,
        coins_to_redeem=0,
        eligible_coin_discount=0,
        coin_discount="0.00",
        payable_subtotal="0.00",
        delivery_charge="0.00",
        total="0.00",
        coins_earned=0,
        item_count=0,
    )
    return CartDTO(id=1, user_id=user_id, items=[], summary=summary)


class CartViewsUnitTests(unittest.TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()

    def dispatch(self, request, view_cls, **kwargs):
        pre_response = validate_request_context(request, view_cls, kwargs)
        if pre_response is not None:
            return pre_response
        view = view_cls.as_view()
        return view(request, **kwargs)

    def authenticate(self, request, user):
        request.user = user
        force_authenticate(request, user=user)

    @staticmethod
    def _user(user_id, *, staff=False):
        return types.SimpleNamespace(
            id=user_id, is_authenticated=True, is_staff=staff, is_superuser=False
        )

    def test_anonymous_request_rejected(self):
        with patch.object(CartView, "service", Mock()) as service_mock:
            response = self.dispatch(self.factory.get("/api/cart/"), CartView)
        self.assertEqual(response.status_code, 401)
        service_mock.get_cart.assert_not_called()

    def test_staff_cannot_use_cart(self):
        with patch.object(CartView, "service", Mock()) as service_mock:
            request = self.factory.get("/api/cart/")
            self.authenticate(request, self._user(1, staff=True))
            response = self.dispatch(request, CartView)
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data["error"]["message"], "Staff and admin accounts cannot own carts")
        service_mock.get_cart.assert_not_called()

    def test_get_cart_for_customer(self):
        service_mock = Mock()
        service_mock.get_cart.return_value = make_cart_dto()
        with patch.object(CartView, "service", service_mock):
            request = self.factory.get("/api/cart/")
            self.authenticate(request, self._user(7))
            response = self.dispatch(request, CartView)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["user_id"], 7)
        self.assertEqual(response.data["summary"]["total"], "0.00")
        service_mock.get_cart.assert_called_once_with(7)

    def test_add_item_passes_defaults(self):
        service_mock = Mock()
        service_mock.add_item.return_value = (make_cart_dto(), None)
        with patch.object(CartItemListView, "service", service_mock):
            request = self.factory.post("/api/cart/items/", {"product_id": 3}, format="json")
            self.authenticate(request, self._user(7))
            response = self.dispatch(request, CartItemListView)
        self.assertEqual(response.status_code, 200)
        user_id, payload = service_mock.add_item.call_args[0]
        self.assertEqual(user_id, 7)
        self.assertEqual(dict(payload), {"product_id": 3, "size": "", "color": "", "quantity": 1})

    def test_add_item_out_of_stock(self):
        service_mock = Mock()
        service_mock.add_item.return_value = (
            None,
            ("OUT_OF_STOCK", "Only 2 left in stock", {"available": 2, "inCart": 2}),
        )
        with patch.object(CartItemListView, "service", service_mock):
            request = self.factory.post(
                "/api/cart/items/", {"product_id": 3, "quantity": 1}, format="json"
            )
            self.authenticate(request, self._user(7))
            response = self.dispatch(request, CartItemListView)
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["error"]["details"]["available"], 2)

    def test_rejected_coupon_carries_reason(self):
        service_mock = Mock()
        service_mock.apply_coupon.side_effect = CouponInvalidError(
            "Coupon Expired", "This coupon has expired", code="OLD"
        )
        with patch.object(CartCouponView, "service", service_mock):
            request = self.factory.put("/api/cart/coupon/", {"code": "old"}, format="json")
            self.authenticate(request, self._user(7))
            response = self.dispatch(request, CartCouponView)
        self.assertEqual(response.status_code, 400)
        error = response.data["error"]
        self.assertEqual(error["message"], "This coupon has expired")
        self.assertEqual(error["details"], {"reason": "Coupon Expired", "couponCode": "OLD"})

    def test_reseller_price_rejection(self):
        service_mock = Mock()
        service_mock.toggle_reseller.side_effect = ResellerPriceError(
            message="Reseller price must be greater than 800.00",
            details={"basePrice": "800.00", "resellerPrice": "700.00"},
        )
        with patch.object(CartItemResellerView, "service", service_mock):
            request = self.factory.put(
                "/api/cart/items/4/reseller/", {"reseller_price": "700"}, format="json"
            )
            self.authenticate(request, self._user(7))
            response = self.dispatch(request, CartItemResellerView, item_id=4)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["details"]["basePrice"], "800.00")
