from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from apps.common.money import money


def _text(value: Any) -> str:
    return str(value if value is not None else "").strip()


def _int(value: Any, default: int = 0) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return default


@dataclass
class VariantCommand:
    size: str
    color: str
    quantity: int
    mrp_price: Decimal
    rsp_price: Decimal
    discount_percentage: int = 0
    sku: Optional[str] = None

    @staticmethod
    def from_raw(raw: Dict[str, Any]) -> "VariantCommand":
        sku = _text(raw.get("sku")) or None
        return VariantCommand(
            size=_text(raw.get("size")),
            color=_text(raw.get("color")),
            quantity=_int(raw.get("quantity")),
            mrp_price=money(raw.get("mrp_price")),
            rsp_price=money(raw.get("rsp_price")),
            discount_percentage=min(100, _int(raw.get("discount_percentage"))),
            sku=sku,
        )

    def as_fields(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "color": self.color,
            "quantity": self.quantity,
            "mrp_price": self.mrp_price,
            "rsp_price": self.rsp_price,
            "discount_percentage": self.discount_percentage,
            "sku": self.sku,
        }


@dataclass
class ProductCreateCommand:
    name: str
    sku: str
    price: Decimal
    description: str = ""
    image: str = ""
    stock_quantity: int = 0
    is_active: bool = True
    variants: List[VariantCommand] = field(default_factory=list)

    @staticmethod
    def from_raw(payload: Dict[str, Any]) -> "ProductCreateCommand":
        data = dict(payload or {})
        data.pop("id", None)
        return ProductCreateCommand(
            name=_text(data.get("name")),
            sku=_text(data.get("sku")).upper(),
            price=money(data.get("price")),
            description=_text(data.get("description")),
            image=_text(data.get("image")),
            stock_quantity=_int(data.get("stock_quantity")),
            is_active=bool(data.get("is_active", True)),
            variants=[VariantCommand.from_raw(v) for v in data.get("variants") or []],
        )


@dataclass
class ProductUpdateCommand:
    product_id: int
    name: Optional[str] = None
    sku: Optional[str] = None
    price: Optional[Decimal] = None
    description: Optional[str] = None
    image: Optional[str] = None
    stock_quantity: Optional[int] = None
    is_active: Optional[bool] = None
    # None leaves variants untouched; a list replaces them
    variants: Optional[List[VariantCommand]] = None

    @staticmethod
    def from_raw(product_id: int, payload: Dict[str, Any]) -> "ProductUpdateCommand":
        data = dict(payload or {})
        data.pop("id", None)
        variants = None
        if "variants" in data:
            variants = [VariantCommand.from_raw(v) for v in data.get("variants") or []]
        return ProductUpdateCommand(
            product_id=product_id,
            name=_text(data["name"]) if "name" in data else None,
            sku=_text(data["sku"]).upper() if "sku" in data else None,
            price=money(data["price"]) if "price" in data else None,
            description=_text(data["description"]) if "description" in data else None,
            image=_text(data["image"]) if "image" in data else None,
            stock_quantity=_int(data["stock_quantity"]) if "stock_quantity" in data else None,
            is_active=bool(data["is_active"]) if "is_active" in data else None,
            variants=variants,
        )

    def scalar_fields(self) -> Dict[str, Any]:
        fields = {
            "name": self.name,
            "sku": self.sku,
            "price": self.price,
            "description": self.description,
            "image": self.image,
            "stock_quantity": self.stock_quantity,
            "is_active": self.is_active,
        }
        return {k: v for k, v in fields.items() if v is not None}
