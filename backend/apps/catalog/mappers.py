from typing import Iterable, List

from .dtos import ProductDTO, VariantDTO
from .models import Product, ProductVariant
from .pricing import item_pricing


def _distinct(values: Iterable[str]) -> List[str]:
    out: List[str] = []
    for value in values:
        value = (value or "").strip()
        if value and value not in out:
            out.append(value)
    return out


class VariantMapper:
    @staticmethod
    def to_dto(variant: ProductVariant) -> VariantDTO:
        return VariantDTO(
            id=variant.id,
            sku=variant.sku,
            size=variant.size,
            color=variant.color,
            quantity=variant.quantity,
            mrp_price=str(variant.mrp_price),
            rsp_price=str(variant.rsp_price),
            discount_percentage=variant.discount_percentage,
        )


class ProductMapper:
    @staticmethod
    def to_dto(product: Product) -> ProductDTO:
        variants = list(product.variants.all())
        headline = item_pricing(product, variants[0] if variants else None)
        if variants:
            in_stock = any(v.quantity > 0 for v in variants)
        else:
            in_stock = product.stock_quantity > 0
        return ProductDTO(
            id=product.id,
            name=product.name,
            sku=product.sku,
            description=product.description,
            image=product.image,
            price=str(product.price),
            stock_quantity=product.stock_quantity,
            is_active=product.is_active,
            mrp=str(headline.mrp),
            rsp=str(headline.rsp),
            discount_pct=headline.discount_pct,
            in_stock=in_stock,
            sizes=_distinct(v.size for v in variants),
            colors=_distinct(v.color for v in variants),
            variants=[VariantMapper.to_dto(v) for v in variants],
        )

    @staticmethod
    def many_to_dto(products: Iterable[Product]) -> List[ProductDTO]:
        return [ProductMapper.to_dto(p) for p in products]
