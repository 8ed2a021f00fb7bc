from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

from apps.common.money import money


def _to_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class AddItemCommand:
    product_id: int
    size: str
    color: str
    quantity: int

    @staticmethod
    def from_raw(raw: Dict[str, Any]) -> Optional["AddItemCommand"]:
        if not isinstance(raw, dict):
            return None
        product_id = _to_int(raw.get("product_id") or raw.get("productId"))
        if product_id <= 0:
            return None
        return AddItemCommand(
            product_id=product_id,
            size=str(raw.get("size") or "").strip(),
            color=str(raw.get("color") or "").strip(),
            quantity=max(1, _to_int(raw.get("quantity"), 1)),
        )


@dataclass
class ResellerToggleCommand:
    enabled: bool
    reseller_price: Optional[Decimal] = None

    @staticmethod
    def from_raw(raw: Dict[str, Any], enabled: bool = True) -> "ResellerToggleCommand":
        raw = raw or {}
        price = raw.get("reseller_price", raw.get("resellerPrice"))
        return ResellerToggleCommand(
            enabled=enabled,
            reseller_price=money(price) if enabled and price not in (None, "") else None,
        )
