import types
import unittest
from unittest.mock import patch

from apps.users.services import UserService


class DummyAtomic:
    def __call__(self, *args, **kwargs):
        return self

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class FakeAddress(types.SimpleNamespace):
    def save(self, **kwargs):
        return self


class FakeAddressRepository:
    def __init__(self):
        self.storage = {}
        self._next_id = 1

    def list_for_user(self, user_id):
        return [a for a in self.storage.values() if a.user_id == user_id]

    def get(self, **filters):
        for address in self.storage.values():
            if all(getattr(address, k) == v for k, v in filters.items()):
                return address
        return None

    def create(self, **data):
        address = FakeAddress(id=self._next_id, **data)
        self.storage[address.id] = address
        self._next_id += 1
        return address

    def get_default(self, user_id):
        owned = self.list_for_user(user_id)
        owned.sort(key=lambda a: (not a.is_default, -a.id))
        return owned[0] if owned else None

    def has_any(self, user_id):
        return bool(self.list_for_user(user_id))

    def make_default(self, address):
        for other in self.list_for_user(address.user_id):
            other.is_default = other.id == address.id
        return address

    def delete(self, address):
        self.storage.pop(address.id, None)


class FakeUserRepository:
    def __init__(self, users=None):
        self.storage = {u.id: u for u in (users or [])}

    def get(self, **filters):
        return self.storage.get(filters.get("id"))

    def update(self, user, **data):
        for key, value in data.items():
            setattr(user, key, value)
        return user


def make_address_payload(**overrides):
    payload = {
        "full_name": "Asha Rao",
        "phone": "9876543210",
        "line1": "12 MG Road",
        "line2": "",
        "landmark": "Near Metro",
        "city": "Bengaluru",
        "state": "Karnataka",
        "postal_code": "560001",
    }
    payload.update(overrides)
    return payload


class UserServiceAddressTests(unittest.TestCase):
    def setUp(self):
        self.addresses = FakeAddressRepository()
        self.user = types.SimpleNamespace(
            id=1,
            username="asha",
            email="asha@example.com",
            name="Asha",
            phone="",
            location="Bengaluru",
            coin_balance=0,
            is_staff=False,
            is_superuser=False,
            date_joined=None,
        )
        self.service = UserService(
            users=FakeUserRepository([self.user]), addresses=self.addresses
        )
        self.atomic_patch = patch("apps.users.services.transaction.atomic", DummyAtomic())
        self.atomic_patch.start()

    def tearDown(self):
        self.atomic_patch.stop()

    def test_first_address_becomes_default(self):
        dto = self.service.create_address(1, make_address_payload())
        self.assertTrue(dto.is_default)
        self.assertEqual(dto.formatted, "12 MG Road, Bengaluru, Karnataka - 560001")

    def test_second_address_is_not_default_unless_requested(self):
        self.service.create_address(1, make_address_payload())
        second = self.service.create_address(1, make_address_payload(line1="5 Park St"))
        self.assertFalse(second.is_default)
        third = self.service.create_address(
            1, make_address_payload(line1="9 Hill Rd", is_default=True)
        )
        self.assertTrue(third.is_default)
        defaults = [a for a in self.addresses.list_for_user(1) if a.is_default]
        self.assertEqual([a.id for a in defaults], [third.id])

    def test_set_default_address_switches_flag(self):
        first = self.service.create_address(1, make_address_payload())
        second = self.service.create_address(1, make_address_payload(line1="5 Park St"))
        dto, error = self.service.set_default_address(1, second.id)
        self.assertIsNone(error)
        self.assertTrue(dto.is_default)
        self.assertFalse(self.addresses.storage[first.id].is_default)

    def test_set_default_address_for_other_user_is_not_found(self):
        created = self.service.create_address(1, make_address_payload())
        dto, error = self.service.set_default_address(2, created.id)
        self.assertIsNone(dto)
        self.assertEqual(error[0], "NOT_FOUND")

    def test_deleting_default_promotes_remaining_address(self):
        first = self.service.create_address(1, make_address_payload())
        second = self.service.create_address(1, make_address_payload(line1="5 Park St"))
        deleted, error = self.service.delete_address(1, first.id)
        self.assertTrue(deleted)
        self.assertIsNone(error)
        self.assertTrue(self.addresses.storage[second.id].is_default)

    def test_profile_includes_default_address(self):
        self.service.create_address(1, make_address_payload())
        profile = self.service.get_profile(1)
        self.assertEqual(profile.username, "asha")
        self.assertEqual(profile.default_address.city, "Bengaluru")

    def test_update_profile_trims_values(self):
        dto, error = self.service.update_profile(1, {"name": "  Asha R ", "location": "Mysuru"})
        self.assertIsNone(error)
        self.assertEqual(dto.name, "Asha R")
        self.assertEqual(dto.location, "Mysuru")

    def test_update_profile_missing_user(self):
        dto, error = self.service.update_profile(99, {"name": "x"})
        self.assertIsNone(dto)
        self.assertEqual(error[0], "NOT_FOUND")

    def test_list_and_default_lookup(self):
        self.assertEqual(self.service.list_addresses(1), [])
        self.assertIsNone(self.service.get_default_address(1))
        first = self.service.create_address(1, make_address_payload())
        self.service.create_address(1, make_address_payload(line1="5 Park St"))
        self.assertEqual(len(self.service.list_addresses(1)), 2)
        self.assertEqual(self.service.get_default_address(1).id, first.id)
