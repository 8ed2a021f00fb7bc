import unittest
from decimal import Decimal

from apps.carts.pricing import compute_totals, eligible_coin_discount, price_line, price_lines
from apps.carts.tests.factories import make_item, make_product, make_variant
from apps.common.rules import StoreRules

RULES = StoreRules.from_mapping()


class PriceLineTests(unittest.TestCase):
    def test_variant_prices_and_discount(self):
        variant = make_variant(1, "M", "Red", 5, "1000", "800")
        line = price_line(make_item(1, make_product(1, variants=[variant]), 2, variant, "M", "Red"))
        self.assertEqual(line.mrp, Decimal("1000.00"))
        self.assertEqual(line.rsp, Decimal("800.00"))
        self.assertEqual(line.discount_pct, 20)
        self.assertEqual(line.line_total, Decimal("1600.00"))
        self.assertEqual(line.margin, Decimal("0.00"))
        self.assertEqual(line.available, 5)

    def test_variant_resolved_from_size_and_color(self):
        variants = [
            make_variant(1, "S", "Red", 1, "600", "500"),
            make_variant(2, "M", "Blue", 4, "900", "700"),
        ]
        line = price_line(make_item(1, make_product(1, variants=variants), 1, None, " m ", "BLUE"))
        self.assertEqual(line.variant.id, 2)
        self.assertEqual(line.rsp, Decimal("700.00"))

    def test_reseller_price_is_per_unit(self):
        variant = make_variant(1, "", "", 9, "350", "300")
        item = make_item(1, make_product(1, variants=[variant]), 2, variant, reseller_price="400")
        line = price_line(item)
        self.assertTrue(line.is_reseller)
        self.assertEqual(line.unit_price, Decimal("400.00"))
        self.assertEqual(line.line_total, Decimal("800.00"))
        self.assertEqual(line.margin, Decimal("200.00"))

    def test_zero_reseller_price_falls_back_to_rsp(self):
        product = make_product(1, price="250", stock=3)
        line = price_line(make_item(1, product, 1, reseller_price="0"))
        self.assertFalse(line.is_reseller)
        self.assertEqual(line.unit_price, Decimal("250.00"))


class ComputeTotalsTests(unittest.TestCase):
    def test_full_breakdown(self):
        shirt = make_variant(1, "M", "Red", 5, "1000", "800")
        socks = make_variant(2, "", "", 9, "350", "300")
        lines = price_lines(
            [
                make_item(1, make_product(1, variants=[shirt]), 1, shirt),
                make_item(2, make_product(2, variants=[socks]), 2, socks, reseller_price="400"),
            ]
        )
        totals = compute_totals(
            lines,
            RULES,
            coupon_code="SAVE",
            coupon_discount="160",
            coins_to_redeem=100,
            coin_balance=250,
        )
        self.assertEqual(totals.subtotal_mrp, Decimal("1700.00"))
        self.assertEqual(totals.subtotal_rsp, Decimal("1400.00"))
        self.assertEqual(totals.subtotal, Decimal("1600.00"))
        self.assertEqual(totals.savings, Decimal("300.00"))
        self.assertEqual(totals.reseller_profit, Decimal("200.00"))
        self.assertEqual(totals.coupon_discount, Decimal("160.00"))
        self.assertEqual(totals.eligible_coin_discount, 100)
        self.assertEqual(totals.coin_discount, Decimal("100.00"))
        self.assertEqual(totals.payable_subtotal, Decimal("1340.00"))
        self.assertEqual(totals.delivery_charge, Decimal("0.00"))
        self.assertEqual(totals.total, Decimal("1340.00"))
        self.assertEqual(totals.coins_earned, 134)
        self.assertEqual(totals.item_count, 3)

    def test_delivery_charged_up_to_threshold(self):
        lines = price_lines([make_item(1, make_product(1, price="500"), 1)])
        totals = compute_totals(lines, RULES)
        self.assertEqual(totals.delivery_charge, Decimal("40.00"))
        self.assertEqual(totals.total, Decimal("540.00"))
        self.assertEqual(totals.coins_earned, 50)

    def test_empty_cart_has_no_delivery(self):
        totals = compute_totals([], RULES, coins_to_redeem=100, coin_balance=500)
        self.assertEqual(totals.total, Decimal("0.00"))
        self.assertEqual(totals.delivery_charge, Decimal("0.00"))
        self.assertEqual(totals.coin_discount, Decimal("0.00"))

    def test_coins_never_exceed_eligibility(self):
        lines = price_lines([make_item(1, make_product(1, price="1250"), 1)])
        totals = compute_totals(lines, RULES, coins_to_redeem=300, coin_balance=1000)
        self.assertEqual(totals.eligible_coin_discount, 100)
        self.assertEqual(totals.coin_discount, Decimal("100.00"))

    def test_coins_earned_rounds_half_up(self):
        lines = price_lines([make_item(1, make_product(1, price="125"), 1)])
        self.assertEqual(compute_totals(lines, RULES).coins_earned, 13)

    def test_discounts_cannot_push_payable_below_zero(self):
        lines = price_lines([make_item(1, make_product(1, price="90"), 1)])
        totals = compute_totals(lines, RULES, coupon_code="BIG", coupon_discount="500")
        self.assertEqual(totals.coupon_discount, Decimal("90.00"))
        self.assertEqual(totals.payable_subtotal, Decimal("0.00"))
        self.assertEqual(totals.total, Decimal("40.00"))


class EligibleCoinTests(unittest.TestCase):
    def test_brackets_and_balance(self):
        self.assertEqual(eligible_coin_discount("2999.99", 1000, RULES), 200)
        self.assertEqual(eligible_coin_discount("2999.99", 50, RULES), 50)
        self.assertEqual(eligible_coin_discount("999.99", 1000, RULES), 0)
        self.assertEqual(eligible_coin_discount("5000", 0, RULES), 0)
