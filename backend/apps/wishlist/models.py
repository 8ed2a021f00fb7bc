from django.db import models

from apps.catalog.models import Product
from apps.users.models import User


class WishlistItem(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="wishlist_items")
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="+")
    # Cleared when the customer opens the wishlist; drives the badge count
    is_seen = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["user", "product"], name="wishlist_user_product_unique"),
        ]

    def __str__(self):
        return f"{self.user_id} likes {self.product_id}"
