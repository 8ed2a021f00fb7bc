from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class VariantDTO:
    id: int
    sku: Optional[str]
    size: str
    color: str
    quantity: int
    mrp_price: str
    rsp_price: str
    discount_percentage: int


@dataclass
class ProductDTO:
    id: int
    name: str
    sku: str
    description: str
    image: str
    price: str
    stock_quantity: int
    is_active: bool
    # Headline pricing taken from the first variant
    mrp: str
    rsp: str
    discount_pct: int
    in_stock: bool
    sizes: List[str] = field(default_factory=list)
    colors: List[str] = field(default_factory=list)
    variants: List[VariantDTO] = field(default_factory=list)
