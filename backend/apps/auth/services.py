from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Tuple, Union

from django.contrib.auth.hashers import make_password
from django.db import DatabaseError, transaction
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import BlacklistedToken, OutstandingToken, RefreshToken

from apps.carts.utils import ensure_user_cart
from apps.common import get_logger
from apps.coupons.exceptions import ReferralCodeError
from .protocols import ReferralProgramProtocol, UserRegistrationRepositoryProtocol

logger = get_logger(__name__).bind(component="auth", service="RegistrationService")

ServiceError = Tuple[str, str, Optional[Dict[str, Any]]]


class RegistrationService:
    def __init__(
        self,
        users: UserRegistrationRepositoryProtocol,
        referrals: ReferralProgramProtocol,
        cart_provisioner: Optional[Callable[[Any], Any]] = None,
    ):
        self.users = users
        self.referrals = referrals
        self.cart_provisioner = cart_provisioner
        self.logger = logger

    def _build_payload(self, data: Dict[str, Any]) -> Dict[str, Any]:
        name = (data.get("name") or "").strip()
        first_name = (data.get("first_name") or "").strip()
        last_name = (data.get("last_name") or "").strip()
        if not name:
            name = " ".join(part for part in (first_name, last_name) if part)
        return {
            "username": data["username"].strip(),
            "email": data["email"].strip().lower(),
            "password": make_password(data["password"]),
            "name": name,
            "first_name": first_name,
            "last_name": last_name,
            "phone": (data.get("phone") or "").strip(),
        }

    def _check_uniqueness(self, username: str, email: str) -> Optional[ServiceError]:
        if self.users.username_exists(username):
            self.logger.info("Registration rejected: username already exists", username=username)
            return ("VALIDATION_ERROR", "Username already exists", {"username": username})
        if self.users.email_exists(email):
            self.logger.info("Registration rejected: email already exists", email=email)
            return ("VALIDATION_ERROR", "Email already exists", {"email": email})
        return None

    def _provision_cart(self, user: Any) -> None:
        provision = self.cart_provisioner or ensure_user_cart
        provision(user)

    def register(self, data: Dict[str, Any]) -> Union[Dict[str, Any], ServiceError]:
        """
        Create a customer account with its cart and referral invite.

        A referral code is checked before anything is written; when valid,
        the new user gets the welcome coupon and the referrer's reward grows.
        Returns the created user's public fields or a ``(code, message,
        details)`` error tuple.
        """
        username = data["username"].strip()
        email = data["email"].strip().lower()
        referral_code = (data.get("referral_code") or "").strip()
        self.logger.debug(
            "Received registration request",
            username=username,
            email=email,
            referred=bool(referral_code),
        )
        conflict = self._check_uniqueness(username, email)
        if conflict:
            return conflict

        if referral_code:
            try:
                self.referrals.resolve_referrer(referral_code)
            except ReferralCodeError as exc:
                self.logger.info("Registration rejected: bad referral code", code=referral_code)
                return exc.as_tuple()

        payload = self._build_payload(data)
        password = payload.pop("password")
        with transaction.atomic():
            user = self.users.create_user(password=password, **payload)
            self._provision_cart(user)
            invite = self.referrals.ensure_referral_invite(user.id)
            welcome = None
            if referral_code:
                welcome, _ = self.referrals.redeem_referral_code(user.id, referral_code)
        self.logger.info(
            "User registered successfully",
            user_id=user.id,
            username=user.username,
            referred=bool(referral_code),
        )
        return {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "name": getattr(user, "name", ""),
            "phone": getattr(user, "phone", ""),
            "referral_code": invite.code,
            "welcome_coupon": welcome.code if welcome else None,
        }

    def is_username_available(self, username: str) -> bool:
        normalized = username.strip()
        self.logger.debug("Checking username availability", username=normalized or username)
        return not self.users.username_exists(normalized)


class SessionService:
    def __init__(self):
        self.logger = get_logger(__name__).bind(component="auth", service="SessionService")

    def logout(self, refresh_token: Optional[str], actor_id: Optional[int]) -> Optional[ServiceError]:
        if not refresh_token:
            self.logger.warning("Logout rejected: missing refresh token", actor_id=actor_id)
            return ("VALIDATION_ERROR", "Invalid token", {"refresh": None})
        try:
            token = RefreshToken(refresh_token)
            token.blacklist()
        except TokenError as exc:
            self.logger.warning("Logout failed: token error", actor_id=actor_id, error=str(exc))
            return ("VALIDATION_ERROR", "Invalid token", {"error": str(exc)})
        self.logger.info("User logged out", actor_id=actor_id)
        return None

    def logout_all(self, user) -> Dict[str, Union[int, str]]:
        user_id = getattr(user, "id", None)
        invalidated = 0
        for token in OutstandingToken.objects.filter(user=user):
            try:
                BlacklistedToken.objects.get_or_create(token=token)
                invalidated += 1
            except DatabaseError as exc:
                self.logger.error(
                    "Failed to blacklist token during logout-all",
                    actor_id=user_id,
                    token_id=getattr(token, "id", None),
                    error=str(exc),
                )
        self.logger.info(
            "User logged out from all devices", actor_id=user_id, tokens_invalidated=invalidated
        )
        return {"detail": "Logged out from all devices", "tokens_invalidated": invalidated}
