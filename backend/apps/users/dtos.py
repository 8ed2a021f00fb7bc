from dataclasses import dataclass
from typing import Optional


@dataclass
class AddressDTO:
    id: int
    full_name: str
    phone: str
    line1: str
    line2: str
    landmark: str
    city: str
    state: str
    postal_code: str
    is_default: bool
    formatted: str


@dataclass
class UserProfileDTO:
    id: int
    username: str
    email: str
    name: str
    phone: str
    location: str
    coin_balance: int
    is_staff: bool
    date_joined: Optional[str]
    default_address: Optional[AddressDTO]
