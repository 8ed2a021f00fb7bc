from __future__ import annotations

from typing import Any, Optional, Protocol, Tuple


class UserRegistrationRepositoryProtocol(Protocol):
    def username_exists(self, username: str) -> bool: ...

    def email_exists(self, email: str) -> bool: ...

    def create_user(self, **data: Any) -> Any: ...


class ReferralProgramProtocol(Protocol):
    def resolve_referrer(self, code: Optional[str], new_user_id: Optional[int] = None) -> int: ...

    def ensure_referral_invite(self, user_id: int) -> Any: ...

    def redeem_referral_code(self, new_user_id: int, code: Optional[str]) -> Tuple[Any, Optional[Any]]: ...
