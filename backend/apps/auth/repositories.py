from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model


class DjangoUserRegistrationRepository:
    def __init__(self) -> None:
        self.model = get_user_model()

    def username_exists(self, username: str) -> bool:
        return self.model.objects.filter(username__iexact=username).exists()

    def email_exists(self, email: str) -> bool:
        return self.model.objects.filter(email__iexact=email).exists()

    def create_user(self, **data: Any):
        return self.model.objects.create(**data)
