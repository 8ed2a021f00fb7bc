from typing import Any, Dict, Optional

from apps.api.exceptions import ApplicationError


class CouponInvalidError(ApplicationError):
    """A coupon code was rejected; ``title`` is the short reason shown to shoppers."""

    default_code = "VALIDATION_ERROR"

    def __init__(self, title: str, message: str, *, code: str = "", details: Optional[Dict[str, Any]] = None):
        payload = {"reason": title}
        if code:
            payload["couponCode"] = code
        payload.update(details or {})
        super().__init__(message=message, details=payload)
        self.title = title
        self.coupon_code = code


class ReferralCodeError(ApplicationError):
    default_code = "VALIDATION_ERROR"
