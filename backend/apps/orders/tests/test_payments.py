import re
import unittest
from datetime import datetime, timezone as dt_timezone

from django.test import override_settings

from apps.orders.numbering import draft_order_number, order_number
from apps.orders.payments import RazorpaySignatureVerifier


class RazorpaySignatureVerifierTests(unittest.TestCase):
    def setUp(self):
        self.verifier = RazorpaySignatureVerifier("s3cret")

    def test_valid_signature(self):
        signature = self.verifier.sign("order_abc", "pay_123")
        self.assertTrue(self.verifier.verify("order_abc", "pay_123", signature))

    def test_signature_bound_to_order_and_payment(self):
        signature = self.verifier.sign("order_abc", "pay_123")
        self.assertFalse(self.verifier.verify("order_xyz", "pay_123", signature))
        self.assertFalse(self.verifier.verify("order_abc", "pay_999", signature))

    def test_missing_parts_fail(self):
        self.assertFalse(self.verifier.verify("order_abc", "", "sig"))
        self.assertFalse(self.verifier.verify("order_abc", "pay_123", ""))

    def test_reads_secret_from_settings_at_verify_time(self):
        verifier = RazorpaySignatureVerifier()
        signature = RazorpaySignatureVerifier("rotated").sign("order_abc", "pay_123")
        with override_settings(RAZORPAY_KEY_SECRET="rotated"):
            self.assertTrue(verifier.verify("order_abc", "pay_123", signature))
        with override_settings(RAZORPAY_KEY_SECRET="other"):
            self.assertFalse(verifier.verify("order_abc", "pay_123", signature))

    @override_settings(RAZORPAY_KEY_SECRET="")
    def test_unconfigured_secret_fails_closed(self):
        verifier = RazorpaySignatureVerifier()
        self.assertFalse(verifier.verify("order_abc", "pay_123", "anything"))


class OrderNumberTests(unittest.TestCase):
    def test_order_number_carries_date(self):
        now = datetime(2024, 2, 9, 8, 30, tzinfo=dt_timezone.utc)
        self.assertRegex(order_number(now), r"^ORD-20240209-[A-Z0-9]{6}$")

    def test_draft_number_carries_millis(self):
        now = datetime(2024, 2, 9, 8, 30, tzinfo=dt_timezone.utc)
        number = draft_order_number(now)
        match = re.match(r"^DRAFT-(\d+)-([A-Z0-9]{9})$", number)
        self.assertIsNotNone(match)
        self.assertEqual(int(match.group(1)), int(now.timestamp() * 1000))

    def test_numbers_differ(self):
        self.assertNotEqual(order_number(), order_number())
