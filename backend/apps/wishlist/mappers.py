from typing import Any, Iterable, List

from apps.catalog.pricing import item_pricing
from .dtos import WishlistDTO, WishlistItemDTO
from .models import WishlistItem


def _variants(product: Any) -> List[Any]:
    manager = getattr(product, "variants", None)
    if manager is None:
        return []
    return list(manager.all() if hasattr(manager, "all") else manager)


class WishlistItemMapper:
    @staticmethod
    def to_dto(item: WishlistItem) -> WishlistItemDTO:
        product = item.product
        variants = _variants(product)
        headline = item_pricing(product, variants[0] if variants else None)
        if variants:
            in_stock = any(v.quantity > 0 for v in variants)
        else:
            in_stock = product.stock_quantity > 0
        return WishlistItemDTO(
            id=item.id,
            product_id=item.product_id,
            name=product.name,
            image=product.image,
            mrp=str(headline.mrp),
            rsp=str(headline.rsp),
            discount_pct=headline.discount_pct,
            in_stock=in_stock,
            is_seen=item.is_seen,
            added_at=item.created_at.isoformat() if item.created_at else None,
        )


class WishlistMapper:
    @staticmethod
    def to_dto(user_id: int, items: Iterable[WishlistItem]) -> WishlistDTO:
        dtos = [WishlistItemMapper.to_dto(item) for item in items]
        return WishlistDTO(
            user_id=user_id,
            items=dtos,
            count=len(dtos),
            unseen_count=sum(1 for dto in dtos if not dto.is_seen),
        )
