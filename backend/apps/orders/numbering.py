import secrets
import string
from datetime import datetime
from typing import Optional

from django.utils import timezone

_ALPHABET = string.ascii_uppercase + string.digits


def _random_token(length: int) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def order_number(now: Optional[datetime] = None) -> str:
    """``ORD-YYYYMMDD-XXXXXX``."""
    moment = now or timezone.now()
    return f"ORD-{moment:%Y%m%d}-{_random_token(6)}"


def draft_order_number(now: Optional[datetime] = None) -> str:
    """``DRAFT-<epoch ms>-<9 chars>``."""
    moment = now or timezone.now()
    return f"DRAFT-{int(moment.timestamp() * 1000)}-{_random_token(9)}"
