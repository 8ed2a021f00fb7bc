from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from apps.common.money import money

_MONEY_FIELDS = ("discount_value", "max_discount_value", "min_order_value")
_PLAIN_FIELDS = (
    "description",
    "discount_type",
    "start_date",
    "end_date",
    "max_uses",
    "per_user_limit",
    "is_active",
)


@dataclass
class CouponCommand:
    """Staff coupon payload; only keys present in the request are kept when partial."""

    values: Dict[str, Any] = field(default_factory=dict)
    partial: bool = False

    @staticmethod
    def from_raw(raw: Dict[str, Any], partial: bool = False) -> "CouponCommand":
        data = dict(raw or {})
        data.pop("id", None)
        data.pop("uses_count", None)
        values: Dict[str, Any] = {}
        if "code" in data:
            values["code"] = str(data["code"] or "").strip().upper()
        for name in _MONEY_FIELDS:
            if name in data:
                raw_value = data[name]
                values[name] = None if raw_value is None and name == "max_discount_value" else money(raw_value)
        for name in _PLAIN_FIELDS:
            if name in data:
                values[name] = data[name]
        if not partial:
            values.setdefault("description", "")
            values.setdefault("min_order_value", money(0))
            values.setdefault("is_active", True)
        return CouponCommand(values=values, partial=partial)

    def fields(self) -> Dict[str, Any]:
        return dict(self.values)

    @property
    def code(self) -> Optional[str]:
        return self.values.get("code")
