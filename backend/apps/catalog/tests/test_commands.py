import unittest
from decimal import Decimal

from apps.catalog.commands import ProductCreateCommand, ProductUpdateCommand, VariantCommand


class ProductCommandTests(unittest.TestCase):
    def test_create_command_normalizes_fields_and_strips_id(self):
        cmd = ProductCreateCommand.from_raw(
            {
                "id": 999,
                "name": "  Kurti  ",
                "sku": " kur-1 ",
                "price": "10",
                "stock_quantity": "-4",
                "variants": [{"size": " M ", "color": "Red", "quantity": 3, "mrp_price": "20", "rsp_price": "15"}],
            }
        )
        self.assertEqual(cmd.name, "Kurti")
        self.assertEqual(cmd.sku, "KUR-1")
        self.assertEqual(cmd.price, Decimal("10.00"))
        self.assertEqual(cmd.stock_quantity, 0)
        self.assertTrue(cmd.is_active)
        self.assertEqual(cmd.variants[0].size, "M")
        self.assertIsNone(getattr(cmd, "id", None))

    def test_update_command_only_sets_given_fields(self):
        cmd = ProductUpdateCommand.from_raw(5, {"name": "New", "is_active": False})
        self.assertEqual(cmd.product_id, 5)
        self.assertEqual(cmd.scalar_fields(), {"name": "New", "is_active": False})
        self.assertIsNone(cmd.variants)

    def test_update_command_empty_variant_list_clears_variants(self):
        cmd = ProductUpdateCommand.from_raw(5, {"variants": []})
        self.assertEqual(cmd.variants, [])

    def test_variant_command_clamps_discount_and_blank_sku(self):
        cmd = VariantCommand.from_raw(
            {"sku": "  ", "quantity": "bad", "mrp_price": "100", "rsp_price": "90", "discount_percentage": 250}
        )
        self.assertIsNone(cmd.sku)
        self.assertEqual(cmd.quantity, 0)
        self.assertEqual(cmd.discount_percentage, 100)
        self.assertEqual(cmd.as_fields()["rsp_price"], Decimal("90.00"))
