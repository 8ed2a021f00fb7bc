import unittest

from apps.carts.pricing import price_line
from apps.carts.tests.factories import make_item, make_product, make_variant
from apps.orders.stock import check_stock


class CheckStockTests(unittest.TestCase):
    def test_splits_lines_by_available_quantity(self):
        small = make_variant(11, "S", "Red", 2, "1000", "800")
        shirt = make_product(1, variants=[small])
        mug = make_product(2, price="300", stock=0)
        lines = [
            price_line(make_item(1, shirt, 2, variant=small)),
            price_line(make_item(2, shirt, 3, variant=small)),
            price_line(make_item(3, mug, 1)),
        ]

        in_stock, out_of_stock = check_stock(lines)

        self.assertEqual([e.line.item.id for e in in_stock], [1])
        self.assertEqual([e.line.item.id for e in out_of_stock], [2, 3])
        self.assertEqual(out_of_stock[0].requested_quantity, 3)
        self.assertEqual(out_of_stock[0].available_quantity, 2)
        self.assertEqual(out_of_stock[1].available_quantity, 0)

    def test_unmatched_variant_falls_back_to_product_stock(self):
        jacket = make_product(3, stock=4, variants=[make_variant(31, "L", "Black", 0, "900", "700")])
        line = price_line(make_item(1, jacket, 4, size="XL", color="Black"))
        in_stock, out_of_stock = check_stock([line])
        self.assertEqual(len(in_stock), 1)
        self.assertEqual(out_of_stock, [])
