from typing import Any, Dict, Optional

from apps.api.exceptions import ApplicationError


class CheckoutError(ApplicationError):
    """Checkout stopped before an order was written; ``title`` is the short reason."""

    default_code = "VALIDATION_ERROR"

    def __init__(
        self,
        title: str,
        message: str,
        *,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        payload = {"reason": title}
        payload.update(details or {})
        super().__init__(code, message, details=payload)
        self.title = title


class PaymentVerificationError(ApplicationError):
    default_code = "PAYMENT_FAILED"
