from typing import Any, List, Optional

NOT_PROVIDED = "Not provided"

_RESELLER_PARTS = ("line1", "line2", "landmark", "city", "state", "postal_code")


def _clean(value: Any) -> str:
    return str(value or "").strip()


def format_address(address: Any, fallback_location: Optional[str] = None) -> str:
    """
    One-line shipping address: ``"line1, city, state - postal_code"``.

    Without an address the user's free-text location is used, then
    ``"Not provided"``.
    """
    if address is None:
        return _clean(fallback_location) or NOT_PROVIDED
    line1 = _clean(getattr(address, "line1", ""))
    city = _clean(getattr(address, "city", ""))
    state = _clean(getattr(address, "state", ""))
    postal_code = _clean(getattr(address, "postal_code", ""))
    head = ", ".join(part for part in (line1, city, state) if part)
    if postal_code:
        return f"{head} - {postal_code}" if head else postal_code
    return head or _clean(fallback_location) or NOT_PROVIDED


def format_address_for_reseller(address: Any) -> Optional[str]:
    """Join the distinct, non-empty address parts with ``", "``; ``None`` when empty."""
    if address is None:
        return None
    seen: List[str] = []
    for attr in _RESELLER_PARTS:
        part = _clean(getattr(address, attr, ""))
        if part and part not in seen:
            seen.append(part)
    return ", ".join(seen) if seen else None
