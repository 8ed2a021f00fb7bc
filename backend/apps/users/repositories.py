from django.db import transaction
from django.db.models import F
from django.db.models.functions import Greatest

from apps.common.repository import GenericRepository
from .models import Address, User


class UserRepository(GenericRepository[User]):
    def __init__(self):
        super().__init__(User)

    def adjust_coins(self, user_id: int, delta: int) -> int:
        """Atomically add ``delta`` (may be negative) to the balance, flooring at 0."""
        self.model.objects.filter(id=user_id).update(
            coin_balance=Greatest(F("coin_balance") + delta, 0)
        )
        balance = (
            self.model.objects.filter(id=user_id)
            .values_list("coin_balance", flat=True)
            .first()
        )
        return int(balance or 0)


class AddressRepository(GenericRepository[Address]):
    def __init__(self):
        super().__init__(Address)

    def list_for_user(self, user_id: int):
        return self.model.objects.filter(user_id=user_id)

    def get_default(self, user_id: int):
        return (
            self.model.objects.filter(user_id=user_id)
            .order_by("-is_default", "-created_at", "-id")
            .first()
        )

    def has_any(self, user_id: int) -> bool:
        return self.model.objects.filter(user_id=user_id).exists()

    def make_default(self, address: Address) -> Address:
        with transaction.atomic():
            self.model.objects.filter(user_id=address.user_id, is_default=True).exclude(
                id=address.id
            ).update(is_default=False)
            if not address.is_default:
                address.is_default = True
                address.save(update_fields=["is_default"])
        return address
