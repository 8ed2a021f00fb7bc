from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class WishlistItemDTO:
    id: int
    product_id: int
    name: str
    image: str
    mrp: str
    rsp: str
    discount_pct: int
    in_stock: bool
    is_seen: bool
    added_at: Optional[str]


@dataclass
class WishlistDTO:
    user_id: int
    items: List[WishlistItemDTO] = field(default_factory=list)
    count: int = 0
    unseen_count: int = 0


@dataclass
class WishlistMembershipDTO:
    product_id: int
    in_wishlist: bool
