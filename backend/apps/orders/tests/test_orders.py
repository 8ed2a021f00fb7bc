from decimal import Decimal

from django.test import override_settings
from rest_framework import status
from rest_framework.test import APITestCase

from apps.carts.models import CartItem
from apps.catalog.models import Product, ProductVariant
from apps.orders.models import CancellationRequest, DraftOrder, Order
from apps.orders.payments import RazorpaySignatureVerifier
from apps.users.models import Address, User


@override_settings(RAZORPAY_KEY_SECRET="test-secret")
class TestOrderApi(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="meera", email="meera@example.com", password="Secret#123"
        )
        Address.objects.create(
            user=self.user,
            full_name="Meera Nair",
            phone="9000000002",
            line1="4 Beach Road",
            city="Kochi",
            state="Kerala",
            postal_code="682001",
            is_default=True,
        )
        self.product = Product.objects.create(name="Kurta", sku="KUR-1", price=Decimal("700"))
        self.variant = ProductVariant.objects.create(
            product=self.product,
            size="M",
            color="Green",
            quantity=4,
            mrp_price=Decimal("1000"),
            rsp_price=Decimal("600"),
        )
        self._login("meera")

    def _login(self, username, staff=False):
        login = self.client.post(
            "/api/auth/login/staff/" if staff else "/api/auth/login/",
            {"username": username, "password": "Secret#123"},
            format="json",
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['access']}")

    def _add_to_cart(self, quantity=2):
        response = self.client.post(
            "/api/cart/items/",
            {"product_id": self.product.id, "size": "M", "color": "Green", "quantity": quantity},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_cash_on_delivery_checkout(self):
        self._add_to_cart()

        response = self.client.post("/api/orders/checkout/", {"payment_method": "cod"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        order = response.data["order"]
        self.assertEqual(order["status"], "pending")
        self.assertEqual(order["total_amount"], "1200.00")
        self.assertEqual(order["shipping_address"], "4 Beach Road, Kochi, Kerala - 682001")
        self.variant.refresh_from_db()
        self.assertEqual(self.variant.quantity, 2)
        self.assertFalse(CartItem.objects.exists())

        listed = self.client.get("/api/orders/")
        self.assertEqual([o["id"] for o in listed.data], [order["id"]])

    def test_online_checkout_with_signed_payment(self):
        self._add_to_cart()
        signature = RazorpaySignatureVerifier("test-secret").sign("order_1", "pay_1")

        response = self.client.post(
            "/api/orders/checkout/",
            {
                "payment_method": "online",
                "payment": {
                    "razorpay_order_id": "order_1",
                    "razorpay_payment_id": "pay_1",
                    "razorpay_signature": signature,
                },
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["order"]["payment_status"], "paid")

    def test_bad_signature_rejected(self):
        self._add_to_cart()
        response = self.client.post(
            "/api/orders/checkout/",
            {"payment_method": "online", "payment": {"order_id": "o", "payment_id": "p", "signature": "x"}},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_402_PAYMENT_REQUIRED)
        self.assertFalse(Order.objects.exists())

    def test_out_of_stock_cart_becomes_draft(self):
        self._add_to_cart(quantity=3)
        ProductVariant.objects.filter(id=self.variant.id).update(quantity=1)

        response = self.client.post("/api/orders/checkout/", {"payment_method": "cod"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data["order"])
        draft = DraftOrder.objects.get()
        self.assertEqual(draft.items.get().available_quantity, 1)

        drafts = self.client.get("/api/orders/drafts/")
        self.assertEqual(drafts.data[0]["order_number"], draft.order_number)

    def test_checkout_without_address(self):
        Address.objects.all().delete()
        self._add_to_cart()
        response = self.client.post("/api/orders/checkout/", {"payment_method": "cod"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["details"]["reason"], "Address Required")

    def test_other_customers_order_is_forbidden(self):
        self._add_to_cart()
        order_id = self.client.post(
            "/api/orders/checkout/", {"payment_method": "cod"}, format="json"
        ).data["order"]["id"]

        User.objects.create_user(username="ravi", email="ravi@example.com", password="Secret#123")
        self._login("ravi")
        response = self.client.get(f"/api/orders/{order_id}/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_staff_updates_status(self):
        self._add_to_cart()
        order_id = self.client.post(
            "/api/orders/checkout/", {"payment_method": "cod"}, format="json"
        ).data["order"]["id"]

        User.objects.create_user(
            username="ops", email="ops@example.com", password="Secret#123", is_staff=True
        )
        self._login("ops", staff=True)
        response = self.client.patch(
            f"/api/orders/{order_id}/status/", {"status": "shipped"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Order.objects.get(id=order_id).status, "shipped")

    def _place_order(self):
        self._add_to_cart()
        return self.client.post(
            "/api/orders/checkout/", {"payment_method": "cod"}, format="json"
        ).data["order"]["id"]

    def test_cancellation_approved_by_staff(self):
        order_id = self._place_order()

        requested = self.client.post(
            f"/api/orders/{order_id}/cancel/", {"reason": "Changed my mind"}, format="json"
        )
        self.assertEqual(requested.status_code, status.HTTP_201_CREATED)
        self.assertEqual(requested.data["status"], "pending")
        again = self.client.post(f"/api/orders/{order_id}/cancel/", {}, format="json")
        self.assertEqual(again.status_code, status.HTTP_409_CONFLICT)

        User.objects.create_user(
            username="ops", email="ops@example.com", password="Secret#123", is_staff=True
        )
        self._login("ops", staff=True)
        listed = self.client.get("/api/orders/cancellations/", {"status": "pending"})
        self.assertEqual([r["id"] for r in listed.data], [requested.data["id"]])

        response = self.client.patch(
            f"/api/orders/cancellations/{requested.data['id']}/", {"status": "approved"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["order_status"], "cancelled")
        self.assertEqual(Order.objects.get(id=order_id).status, "cancelled")
        self.variant.refresh_from_db()
        self.assertEqual(self.variant.quantity, 4)

    def test_cancellation_rejected_by_staff(self):
        order_id = self._place_order()
        request_id = self.client.post(f"/api/orders/{order_id}/cancel/", {}, format="json").data["id"]

        User.objects.create_user(
            username="ops", email="ops@example.com", password="Secret#123", is_staff=True
        )
        self._login("ops", staff=True)
        response = self.client.patch(
            f"/api/orders/cancellations/{request_id}/",
            {"status": "rejected", "rejection_reason": "Already dispatched"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "rejected")
        self.assertEqual(Order.objects.get(id=order_id).status, "pending")
        self.assertEqual(
            CancellationRequest.objects.get(id=request_id).rejection_reason, "Already dispatched"
        )
        self.variant.refresh_from_db()
        self.assertEqual(self.variant.quantity, 2)

    def test_customer_cannot_review_cancellation(self):
        order_id = self._place_order()
        request_id = self.client.post(f"/api/orders/{order_id}/cancel/", {}, format="json").data["id"]

        response = self.client.patch(
            f"/api/orders/cancellations/{request_id}/", {"status": "approved"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(Order.objects.get(id=order_id).status, "pending")
