from __future__ import annotations

from apps.coupons.container import build_referral_service

from .repositories import DjangoUserRegistrationRepository
from .services import RegistrationService, SessionService


def build_registration_service() -> RegistrationService:
    return RegistrationService(
        users=DjangoUserRegistrationRepository(), referrals=build_referral_service()
    )


def build_session_service() -> SessionService:
    return SessionService()
