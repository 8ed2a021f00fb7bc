"""Variant matching and per-unit pricing shared by carts, checkout and drafts."""
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional

from apps.common.money import ZERO, money


@dataclass(frozen=True)
class ItemPricing:
    mrp: Decimal
    rsp: Decimal
    discount_pct: int

    @property
    def savings(self) -> Decimal:
        return max(ZERO, self.mrp - self.rsp) if self.mrp > 0 else ZERO


def _norm(value: Any) -> str:
    return str(value or "").strip().lower()


def _variants_of(product: Any) -> Iterable[Any]:
    manager = getattr(product, "variants", None)
    if manager is None:
        return []
    return manager.all() if hasattr(manager, "all") else list(manager)


def match_variant(product: Any, size: Optional[str], color: Optional[str]) -> Optional[Any]:
    """
    First variant whose size and color equal the requested ones, compared
    trimmed and case-insensitively. A blank requested size or color matches
    any value.
    """
    wanted_size, wanted_color = _norm(size), _norm(color)
    for variant in _variants_of(product):
        if wanted_size and _norm(variant.size) != wanted_size:
            continue
        if wanted_color and _norm(variant.color) != wanted_color:
            continue
        return variant
    return None


def item_pricing(product: Any, variant: Optional[Any]) -> ItemPricing:
    mrp = money(getattr(variant, "mrp_price", None)) if variant is not None else ZERO
    if mrp < 0:
        mrp = ZERO
    rsp = money(getattr(variant, "rsp_price", None)) if variant is not None else ZERO
    if rsp <= 0:
        rsp = money(getattr(product, "price", None))

    stored_pct = int(getattr(variant, "discount_percentage", 0) or 0) if variant is not None else 0
    if stored_pct > 0:
        discount_pct = stored_pct
    elif mrp > rsp > 0:
        ratio = (mrp - rsp) / mrp * 100
        discount_pct = int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    else:
        discount_pct = 0
    return ItemPricing(mrp=mrp, rsp=rsp, discount_pct=discount_pct)


def available_quantity(product: Any, variant: Optional[Any]) -> int:
    if variant is not None:
        return int(getattr(variant, "quantity", 0) or 0)
    return int(getattr(product, "stock_quantity", 0) or 0)
