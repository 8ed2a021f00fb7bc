import unittest
from types import SimpleNamespace
from unittest.mock import patch

from apps.coupons.tests.test_services import DummyAtomic
from apps.orders.cancellations import CancellationService
from apps.orders.tests.fakes import (
    NOW,
    FakeCancellationRepository,
    FakeListingCache,
    FakeOrderRepository,
    FakeStockRepository,
)
from apps.orders.tests.test_services import _order_fields


@patch("apps.orders.cancellations.transaction.atomic", DummyAtomic())
class CancellationServiceTests(unittest.TestCase):
    def setUp(self):
        self.variant = SimpleNamespace(id=11, quantity=1)
        self.mug = SimpleNamespace(id=2, stock_quantity=0)
        self.orders = FakeOrderRepository()
        self.requests = FakeCancellationRepository()
        self.stock = FakeStockRepository(variants=[self.variant], products=[self.mug])
        self.listing_cache = FakeListingCache()
        self.service = CancellationService(
            self.requests,
            self.orders,
            self.stock,
            listing_cache=self.listing_cache,
            clock=lambda: NOW,
        )
        self.order = self.orders.create(**_order_fields(5))
        self.orders.add_items(
            self.order,
            [
                {"product_id": 1, "variant_id": 11, "quantity": 2},
                {"product_id": 2, "variant_id": None, "quantity": 3},
            ],
        )

    def test_customer_requests_cancellation(self):
        dto, error = self.service.request_cancellation(5, self.order.id, "  Ordered the wrong size ")
        self.assertIsNone(error)
        self.assertEqual(dto.status, "pending")
        self.assertEqual(dto.reason, "Ordered the wrong size")
        self.assertEqual(dto.order_number, self.order.order_number)

    def test_other_customers_order_is_hidden(self):
        _, error = self.service.request_cancellation(8, self.order.id)
        self.assertEqual(error[0], "NOT_FOUND")

    def test_only_pending_or_confirmed_orders(self):
        self.order.status = "shipped"
        _, error = self.service.request_cancellation(5, self.order.id)
        self.assertEqual(error[0], "VALIDATION_ERROR")

        self.order.status = "confirmed"
        _, error = self.service.request_cancellation(5, self.order.id)
        self.assertIsNone(error)

    def test_one_open_request_per_order(self):
        self.service.request_cancellation(5, self.order.id)
        _, error = self.service.request_cancellation(5, self.order.id)
        self.assertEqual(error[0], "CONFLICT")

    def test_approval_cancels_order_and_restocks(self):
        dto, _ = self.service.request_cancellation(5, self.order.id)

        reviewed, error = self.service.review_cancellation(dto.id, approve=True, reviewer_id=1)

        self.assertIsNone(error)
        self.assertEqual(reviewed.status, "approved")
        self.assertEqual(reviewed.order_status, "cancelled")
        self.assertEqual(reviewed.reviewed_by_id, 1)
        self.assertEqual(reviewed.reviewed_at, NOW.isoformat())
        self.assertEqual(self.order.status, "cancelled")
        self.assertEqual(self.variant.quantity, 3)
        self.assertEqual(self.mug.stock_quantity, 3)
        self.assertEqual(self.listing_cache.invalidations, 1)

    def test_rejection_leaves_order_alone(self):
        dto, _ = self.service.request_cancellation(5, self.order.id)

        reviewed, error = self.service.review_cancellation(
            dto.id, approve=False, reviewer_id=1, rejection_reason=" Already packed "
        )

        self.assertIsNone(error)
        self.assertEqual(reviewed.status, "rejected")
        self.assertEqual(reviewed.rejection_reason, "Already packed")
        self.assertEqual(self.order.status, "pending")
        self.assertEqual(self.stock.calls, [])
        self.assertEqual(self.listing_cache.invalidations, 0)

    def test_reviewed_request_cannot_be_reviewed_again(self):
        dto, _ = self.service.request_cancellation(5, self.order.id)
        self.service.review_cancellation(dto.id, approve=False)

        _, error = self.service.review_cancellation(dto.id, approve=True)

        self.assertEqual(error[0], "CONFLICT")
        self.assertEqual(self.order.status, "pending")

    def test_approval_fails_once_order_has_shipped(self):
        dto, _ = self.service.request_cancellation(5, self.order.id)
        self.order.status = "shipped"

        _, error = self.service.review_cancellation(dto.id, approve=True)

        self.assertEqual(error[0], "VALIDATION_ERROR")
        self.assertEqual(self.requests.storage[dto.id].status, "pending")

    def test_list_and_get_scoped_to_owner(self):
        other = self.orders.create(**_order_fields(8))
        mine, _ = self.service.request_cancellation(5, self.order.id)
        theirs, _ = self.service.request_cancellation(8, other.id)

        self.assertEqual([r.id for r in self.service.list_cancellations(5)], [mine.id])
        self.assertEqual(len(self.service.list_cancellations(1, is_privileged=True)), 2)
        self.assertEqual(
            [r.id for r in self.service.list_cancellations(1, is_privileged=True, status="rejected")], []
        )

        _, error = self.service.get_cancellation(5, theirs.id)
        self.assertEqual(error[0], "NOT_FOUND")
        dto, error = self.service.get_cancellation(1, theirs.id, is_privileged=True)
        self.assertIsNone(error)
        self.assertEqual(dto.user_id, 8)
