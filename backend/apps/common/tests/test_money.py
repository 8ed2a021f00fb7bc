import unittest
from decimal import Decimal

from apps.common.money import money, positive_or, round_units
from apps.common.rules import StoreRules


class MoneyTests(unittest.TestCase):
    def test_blank_values_are_zero(self):
        self.assertEqual(money(None), Decimal("0.00"))
        self.assertEqual(money(""), Decimal("0.00"))
        self.assertEqual(money("abc"), Decimal("0.00"))

    def test_rounds_half_up_to_cents(self):
        self.assertEqual(money("10.005"), Decimal("10.01"))
        self.assertEqual(money(2.675), Decimal("2.68"))
        self.assertEqual(money(7), Decimal("7.00"))

    def test_round_units(self):
        self.assertEqual(round_units("12.5"), Decimal("13.00"))
        self.assertEqual(round_units("12.49"), Decimal("12.00"))
        self.assertEqual(round_units(Decimal("0.495")), Decimal("0.00"))

    def test_positive_or_falls_back(self):
        self.assertEqual(positive_or("0", "15"), Decimal("15.00"))
        self.assertEqual(positive_or(None, 9), Decimal("9.00"))
        self.assertEqual(positive_or("4", 9), Decimal("4.00"))


class StoreRulesTests(unittest.TestCase):
    def test_defaults(self):
        rules = StoreRules.from_mapping({})
        self.assertEqual(rules.free_delivery_threshold, Decimal("500.00"))
        self.assertEqual(rules.delivery_charge, Decimal("40.00"))
        self.assertEqual(rules.coin_bracket_value, 100)
        self.assertEqual(rules.coin_earn_rate, Decimal("0.10"))

    def test_overrides(self):
        rules = StoreRules.from_mapping({"DELIVERY_CHARGE": "55", "COIN_EARN_RATE": "0.05"})
        self.assertEqual(rules.delivery_charge, Decimal("55.00"))
        self.assertEqual(rules.coin_earn_rate, Decimal("0.05"))
