import types
import unittest
from decimal import Decimal

from apps.catalog.mappers import ProductMapper, VariantMapper


class StubVariantManager:
    def __init__(self, variants=None):
        self._variants = list(variants or [])

    def all(self):
        return list(self._variants)


def make_product(variants=None, **overrides):
    fields = dict(
        id=1,
        name="Cotton Kurti",
        sku="KUR-1",
        description="Straight cut",
        image="kurti.jpg",
        price=Decimal("650.00"),
        stock_quantity=0,
        is_active=True,
    )
    fields.update(overrides)
    return types.SimpleNamespace(variants=StubVariantManager(variants), **fields)


def make_variant(variant_id, size, color, quantity, mrp="999.00", rsp="699.00", pct=0):
    return types.SimpleNamespace(
        id=variant_id,
        sku=None,
        size=size,
        color=color,
        quantity=quantity,
        mrp_price=Decimal(mrp),
        rsp_price=Decimal(rsp),
        discount_percentage=pct,
    )


class MapperTests(unittest.TestCase):
    def test_variant_mapper_stringifies_prices(self):
        dto = VariantMapper.to_dto(make_variant(4, "L", "Green", 2))
        self.assertEqual(dto.id, 4)
        self.assertEqual(dto.mrp_price, "999.00")
        self.assertEqual(dto.rsp_price, "699.00")
        self.assertIsNone(dto.sku)

    def test_product_mapper_uses_stored_discount_and_dedupes_options(self):
        product = make_product(
            [
                make_variant(1, "M", "Red", 0, pct=35),
                make_variant(2, "M", "Blue", 0),
                make_variant(3, " L ", "Red", 0),
            ]
        )
        dto = ProductMapper.to_dto(product)
        self.assertEqual(dto.discount_pct, 35)
        self.assertEqual(dto.sizes, ["M", "L"])
        self.assertEqual(dto.colors, ["Red", "Blue"])
        self.assertFalse(dto.in_stock)
        self.assertEqual(len(dto.variants), 3)

    def test_product_without_variants_falls_back_to_product_fields(self):
        dto = ProductMapper.to_dto(make_product(stock_quantity=3))
        self.assertEqual(dto.rsp, "650.00")
        self.assertEqual(dto.mrp, "0.00")
        self.assertEqual(dto.discount_pct, 0)
        self.assertTrue(dto.in_stock)
        self.assertEqual(dto.variants, [])

    def test_many_to_dto(self):
        dtos = ProductMapper.many_to_dto([make_product(id=1), make_product(id=2, sku="KUR-2")])
        self.assertEqual([d.id for d in dtos], [1, 2])
