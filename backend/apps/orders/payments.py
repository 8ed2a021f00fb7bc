"""Payment reference verification. The gateway itself is called by the client."""
import hashlib
import hmac
from typing import Optional, Protocol

from django.conf import settings

from apps.common import get_logger

logger = get_logger(__name__).bind(component="orders", layer="payments")


class PaymentGatewayProtocol(Protocol):
    def verify(self, order_reference: str, payment_id: str, signature: str) -> bool: ...


class RazorpaySignatureVerifier:
    """Checks ``HMAC_SHA256(secret, "<order_id>|<payment_id>")`` against the signature."""

    def __init__(self, secret: Optional[str] = None):
        self._secret = secret

    @property
    def secret(self) -> str:
        if self._secret is not None:
            return self._secret
        return getattr(settings, "RAZORPAY_KEY_SECRET", "") or ""

    def sign(self, order_reference: str, payment_id: str) -> str:
        message = f"{order_reference}|{payment_id}".encode("utf-8")
        return hmac.new(self.secret.encode("utf-8"), message, hashlib.sha256).hexdigest()

    def verify(self, order_reference: str, payment_id: str, signature: str) -> bool:
        if not self.secret:
            logger.error("Payment secret is not configured")
            return False
        if not (order_reference and payment_id and signature):
            logger.warning("Incomplete payment reference", payment_id=payment_id)
            return False
        valid = hmac.compare_digest(self.sign(order_reference, payment_id), str(signature))
        if not valid:
            logger.warning("Payment signature mismatch", payment_id=payment_id)
        return valid
