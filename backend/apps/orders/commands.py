from dataclasses import dataclass
from typing import Any, Dict

from .models import PaymentMethod


def _first(raw: Dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = raw.get(key)
        if value not in (None, ""):
            return str(value).strip()
    return ""


@dataclass
class CheckoutCommand:
    payment_method: str
    gateway_order_id: str = ""
    payment_id: str = ""
    signature: str = ""

    @property
    def is_online(self) -> bool:
        return PaymentMethod.is_online(self.payment_method)

    @staticmethod
    def from_raw(raw: Dict[str, Any]) -> "CheckoutCommand":
        raw = dict(raw or {})
        method = str(raw.get("payment_method") or PaymentMethod.COD).strip().lower()
        payment = raw.get("payment") or {}
        return CheckoutCommand(
            payment_method=method,
            gateway_order_id=_first(payment, "gateway_order_id", "razorpay_order_id", "order_id"),
            payment_id=_first(payment, "payment_id", "razorpay_payment_id"),
            signature=_first(payment, "signature", "razorpay_signature"),
        )
