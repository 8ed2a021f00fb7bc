from typing import Any, Dict, List

from django.db.models import F

from apps.common.repository import GenericRepository
from .models import Product, ProductVariant


class ProductRepository(GenericRepository[Product]):
    def __init__(self):
        super().__init__(Product)

    def list(self, **filters):  # type: ignore[override]
        """Products with variants prefetched so DTO mapping stays O(1) queries."""
        return self.model.objects.filter(**filters).prefetch_related("variants")

    def get(self, **filters):
        return self.list(**filters).first()

    def replace_variants(self, product: Product, variants: List[Dict[str, Any]]) -> None:
        product.variants.all().delete()
        ProductVariant.objects.bulk_create(
            [ProductVariant(product=product, **fields) for fields in variants]
        )


class VariantRepository(GenericRepository[ProductVariant]):
    def __init__(self):
        super().__init__(ProductVariant)


class StockRepository:
    """F()-based stock moves; a decrement only touches a row when enough stock remains."""

    def decrement_variant(self, variant_id: int, quantity: int) -> bool:
        updated = ProductVariant.objects.filter(
            id=variant_id, quantity__gte=quantity
        ).update(quantity=F("quantity") - quantity)
        return updated == 1

    def decrement_product(self, product_id: int, quantity: int) -> bool:
        updated = Product.objects.filter(
            id=product_id, stock_quantity__gte=quantity
        ).update(stock_quantity=F("stock_quantity") - quantity)
        return updated == 1

    def restock_variant(self, variant_id: int, quantity: int) -> bool:
        updated = ProductVariant.objects.filter(id=variant_id).update(
            quantity=F("quantity") + quantity
        )
        return updated == 1

    def restock_product(self, product_id: int, quantity: int) -> bool:
        updated = Product.objects.filter(id=product_id).update(
            stock_quantity=F("stock_quantity") + quantity
        )
        return updated == 1
