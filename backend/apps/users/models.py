from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    # username, password, is_staff, is_superuser, groups etc. come from AbstractUser
    name = models.CharField(max_length=150, blank=True, default="")
    phone = models.CharField(max_length=20, blank=True, default="")
    email = models.EmailField(unique=True)
    coin_balance = models.PositiveIntegerField(default=0)
    location = models.CharField(max_length=255, blank=True, default="")

    def __str__(self):
        return self.username

    @property
    def is_customer(self) -> bool:
        return not (self.is_staff or self.is_superuser)


class Address(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="addresses")
    full_name = models.CharField(max_length=150, blank=True, default="")
    phone = models.CharField(max_length=20, blank=True, default="")
    line1 = models.CharField(max_length=255)
    line2 = models.CharField(max_length=255, blank=True, default="")
    landmark = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    postal_code = models.CharField(max_length=20)
    is_default = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-is_default", "-created_at", "-id"]
        indexes = [
            models.Index(fields=["user", "is_default"], name="address_user_default_idx"),
        ]

    def __str__(self):
        return f"{self.line1}, {self.city}"
