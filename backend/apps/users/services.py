from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from django.db import transaction

from apps.common import get_logger
from .dtos import AddressDTO, UserProfileDTO
from .mappers import AddressMapper, UserProfileMapper
from .models import Address
from .protocols import AddressRepositoryProtocol, UserRepositoryProtocol

logger = get_logger(__name__).bind(component="users", layer="service")

ServiceError = Tuple[str, str, Optional[Dict[str, Any]]]

ADDRESS_FIELDS = (
    "full_name",
    "phone",
    "line1",
    "line2",
    "landmark",
    "city",
    "state",
    "postal_code",
)
PROFILE_FIELDS = ("name", "email", "phone", "location")


class UserService:
    def __init__(
        self, users: UserRepositoryProtocol, addresses: AddressRepositoryProtocol
    ):
        self.users = users
        self.addresses = addresses
        self.logger = logger.bind(service="UserService")

    # Profile
    def get_profile(self, user_id: int) -> Optional[UserProfileDTO]:
        user = self.users.get(id=user_id)
        if not user:
            self.logger.info("Profile requested for missing user", user_id=user_id)
            return None
        return UserProfileMapper.to_dto(user, self.addresses.get_default(user_id))

    def update_profile(
        self, user_id: int, data: Dict[str, Any]
    ) -> Tuple[Optional[UserProfileDTO], Optional[ServiceError]]:
        user = self.users.get(id=user_id)
        if not user:
            self.logger.warning("Profile update failed: user not found", user_id=user_id)
            return None, ("NOT_FOUND", "User not found", {"userId": str(user_id)})
        changes = {
            field: str(data[field]).strip()
            for field in PROFILE_FIELDS
            if field in data and data[field] is not None
        }
        if changes:
            self.users.update(user, **changes)
            self.logger.info("Profile updated", user_id=user_id, fields=sorted(changes))
        return UserProfileMapper.to_dto(user, self.addresses.get_default(user_id)), None

    # Addresses
    def list_addresses(self, user_id: int) -> List[AddressDTO]:
        self.logger.debug("Listing addresses", user_id=user_id)
        return AddressMapper.many_to_dto(self.addresses.list_for_user(user_id))

    def get_default_address(self, user_id: int) -> Optional[Address]:
        return self.addresses.get_default(user_id)

    def create_address(self, user_id: int, data: Dict[str, Any]) -> AddressDTO:
        """
        Store a new address. The first address a user saves, or one saved with
        ``is_default=True``, becomes the single default address.
        """
        payload = {
            field: str(data.get(field) or "").strip() for field in ADDRESS_FIELDS
        }
        first = not self.addresses.has_any(user_id)
        wants_default = bool(data.get("is_default")) or first
        with transaction.atomic():
            address = self.addresses.create(user_id=user_id, is_default=False, **payload)
            if wants_default:
                self.addresses.make_default(address)
        self.logger.info(
            "Address created",
            user_id=user_id,
            address_id=address.id,
            is_default=wants_default,
        )
        return AddressMapper.to_dto(address)

    def set_default_address(
        self, user_id: int, address_id: int
    ) -> Tuple[Optional[AddressDTO], Optional[ServiceError]]:
        address = self.addresses.get(id=address_id, user_id=user_id)
        if not address:
            self.logger.info(
                "Default address change failed: not found",
                user_id=user_id,
                address_id=address_id,
            )
            return None, ("NOT_FOUND", "Address not found", {"id": str(address_id)})
        self.addresses.make_default(address)
        self.logger.info("Default address changed", user_id=user_id, address_id=address_id)
        return AddressMapper.to_dto(address), None

    def delete_address(
        self, user_id: int, address_id: int
    ) -> Tuple[bool, Optional[ServiceError]]:
        address = self.addresses.get(id=address_id, user_id=user_id)
        if not address:
            return False, ("NOT_FOUND", "Address not found", {"id": str(address_id)})
        was_default = address.is_default
        with transaction.atomic():
            self.addresses.delete(address)
            if was_default:
                successor = self.addresses.get_default(user_id)
                if successor is not None:
                    self.addresses.make_default(successor)
        self.logger.info(
            "Address deleted", user_id=user_id, address_id=address_id, was_default=was_default
        )
        return True, None
