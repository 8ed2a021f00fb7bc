from typing import Iterable, List, Optional

from .dtos import AddressDTO, UserProfileDTO
from .formatting import format_address
from .models import Address, User


class AddressMapper:
    @staticmethod
    def to_dto(address: Address) -> AddressDTO:
        return AddressDTO(
            id=address.id,
            full_name=address.full_name,
            phone=address.phone,
            line1=address.line1,
            line2=address.line2,
            landmark=address.landmark,
            city=address.city,
            state=address.state,
            postal_code=address.postal_code,
            is_default=address.is_default,
            formatted=format_address(address),
        )

    @staticmethod
    def many_to_dto(addresses: Iterable[Address]) -> List[AddressDTO]:
        return [AddressMapper.to_dto(a) for a in addresses]


class UserProfileMapper:
    @staticmethod
    def to_dto(user: User, default_address: Optional[Address] = None) -> UserProfileDTO:
        joined = getattr(user, "date_joined", None)
        return UserProfileDTO(
            id=user.id,
            username=user.username,
            email=user.email,
            name=user.name,
            phone=user.phone,
            location=user.location,
            coin_balance=user.coin_balance,
            is_staff=bool(user.is_staff or user.is_superuser),
            date_joined=joined.isoformat() if joined else None,
            default_address=AddressMapper.to_dto(default_address) if default_address else None,
        )
