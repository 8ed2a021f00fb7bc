from django.db import models


class Product(models.Model):
    name = models.CharField(max_length=255)
    sku = models.CharField(max_length=64, unique=True)
    description = models.TextField(blank=True, default="")
    image = models.TextField(blank=True, default="")
    # Fallback selling price when a variant carries no RSP
    price = models.DecimalField(max_digits=10, decimal_places=2)
    stock_quantity = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["name"], name="product_name_idx"),
            models.Index(fields=["is_active"], name="product_active_idx"),
        ]

    def __str__(self):
        return self.name


class ProductVariant(models.Model):
    product = models.ForeignKey(
        Product, on_delete=models.CASCADE, related_name="variants"
    )
    sku = models.CharField(max_length=64, unique=True, null=True, blank=True)
    size = models.CharField(max_length=32, blank=True, default="")
    color = models.CharField(max_length=32, blank=True, default="")
    quantity = models.PositiveIntegerField(default=0)
    mrp_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    rsp_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    discount_percentage = models.PositiveSmallIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["product", "size", "color"], name="variant_lookup_idx"),
        ]

    def __str__(self):
        return f"{self.product_id}:{self.size}/{self.color}"
