from apps.common.repository import GenericRepository
from .models import WishlistItem


class WishlistRepository(GenericRepository[WishlistItem]):
    def __init__(self):
        super().__init__(WishlistItem)

    def list_for_user(self, user_id: int):
        return (
            self.model.objects.filter(user_id=user_id)
            .select_related("product")
            .prefetch_related("product__variants")
        )

    def mark_seen(self, user_id: int) -> int:
        return self.model.objects.filter(user_id=user_id, is_seen=False).update(is_seen=True)
