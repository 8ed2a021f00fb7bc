from django.db import models

from apps.catalog.models import Product, ProductVariant
from apps.users.models import User


class Cart(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="cart")
    # Code of the coupon the customer applied; re-validated on every summary
    applied_coupon = models.CharField(max_length=50, blank=True, default="")
    coins_to_redeem = models.PositiveIntegerField(default=0)
    # Set when the customer removes a coupon so the welcome coupon is not re-applied
    coupon_dismissed = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Cart {self.id} for {self.user_id}"


class CartItem(models.Model):
    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="+")
    variant = models.ForeignKey(
        ProductVariant,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    size = models.CharField(max_length=32, blank=True, default="")
    color = models.CharField(max_length=32, blank=True, default="")
    quantity = models.PositiveIntegerField(default=1)
    is_reseller = models.BooleanField(default=False)
    # Per-unit price the reseller charges their customer
    reseller_price = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["cart", "product"], name="cart_item_lookup_idx"),
        ]

    def __str__(self):
        return f"{self.product_id} x{self.quantity}"
