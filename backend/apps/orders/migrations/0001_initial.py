import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

PAYMENT_METHOD_CHOICES = [
    ("cod", "Cash on delivery"),
    ("online", "Online"),
    ("upi", "UPI"),
    ("card", "Card"),
]
PAYMENT_STATUS_CHOICES = [
    ("pending", "Pending"),
    ("paid", "Paid"),
    ("failed", "Failed"),
    ("refunded", "Refunded"),
]
ORDER_STATUS_CHOICES = [
    ("pending", "Pending"),
    ("confirmed", "Confirmed"),
    ("processing", "Processing"),
    ("shipped", "Shipped"),
    ("out_for_delivery", "Out for delivery"),
    ("delivered", "Delivered"),
    ("completed", "Completed"),
    ("cancelled", "Cancelled"),
]
DRAFT_STATUS_CHOICES = [
    ("pending_approval", "Pending approval"),
    ("approved", "Approved"),
    ("rejected", "Rejected"),
]


def _money(**kwargs):
    return models.DecimalField(decimal_places=2, max_digits=12, **kwargs)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("catalog", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("order_number", models.CharField(max_length=32, unique=True)),
                ("status", models.CharField(choices=ORDER_STATUS_CHOICES, default="pending", max_length=20)),
                ("payment_method", models.CharField(choices=PAYMENT_METHOD_CHOICES, default="cod", max_length=20)),
                ("payment_status", models.CharField(choices=PAYMENT_STATUS_CHOICES, default="pending", max_length=20)),
                ("payment_id", models.CharField(blank=True, default="", max_length=100)),
                ("subtotal", _money(default=0)),
                ("shipping_amount", _money(default=0)),
                ("tax_amount", _money(default=0)),
                ("discount_amount", _money(default=0)),
                ("coupon_code", models.CharField(blank=True, default="", max_length=50)),
                ("coin_discount", _money(default=0)),
                ("total_amount", _money(default=0)),
                ("shipping_address", models.TextField(blank=True, default="")),
                ("customer_name", models.CharField(blank=True, default="", max_length=150)),
                ("customer_email", models.EmailField(blank=True, default="", max_length=254)),
                ("customer_phone", models.CharField(blank=True, default="", max_length=20)),
                ("is_reseller_order", models.BooleanField(default=False)),
                ("reseller_margin_percentage", models.DecimalField(decimal_places=2, default=0, max_digits=7)),
                ("reseller_margin_amount", _money(default=0)),
                ("original_total", _money(default=0)),
                ("reseller_profit", _money(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["user", "status"], name="order_user_status_idx"),
                    models.Index(fields=["is_reseller_order", "status"], name="order_reseller_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("product_name", models.CharField(max_length=255)),
                ("product_image", models.TextField(blank=True, default="")),
                ("size", models.CharField(blank=True, default="", max_length=32)),
                ("color", models.CharField(blank=True, default="", max_length=32)),
                ("quantity", models.PositiveIntegerField()),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("total_price", _money()),
                ("base_unit_price", models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ("is_reseller", models.BooleanField(default=False)),
                ("margin_amount", _money(default=0)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="orders.order",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="catalog.product",
                    ),
                ),
                (
                    "variant",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="catalog.productvariant",
                    ),
                ),
            ],
            options={"ordering": ["id"]},
        ),
        migrations.CreateModel(
            name="DraftOrder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("order_number", models.CharField(max_length=40, unique=True)),
                ("total_amount", _money(default=0)),
                ("shipping_address", models.TextField(blank=True, default="")),
                ("billing_address", models.TextField(blank=True, default="")),
                ("payment_method", models.CharField(choices=PAYMENT_METHOD_CHOICES, default="cod", max_length=20)),
                ("payment_status", models.CharField(choices=PAYMENT_STATUS_CHOICES, default="pending", max_length=20)),
                ("status", models.CharField(choices=DRAFT_STATUS_CHOICES, default="pending_approval", max_length=20)),
                ("notes", models.TextField(blank=True, default="")),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("rejection_reason", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "approved_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="approved_draft_orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="draft_orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"ordering": ["-created_at", "-id"]},
        ),
        migrations.CreateModel(
            name="DraftOrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("product_name", models.CharField(max_length=255)),
                ("product_image", models.TextField(blank=True, default="")),
                ("size", models.CharField(blank=True, default="", max_length=32)),
                ("color", models.CharField(blank=True, default="", max_length=32)),
                ("quantity", models.PositiveIntegerField()),
                ("available_quantity", models.PositiveIntegerField(default=0)),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("total_price", _money()),
                ("is_reseller", models.BooleanField(default=False)),
                (
                    "draft_order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="orders.draftorder",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="catalog.product",
                    ),
                ),
                (
                    "variant",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="catalog.productvariant",
                    ),
                ),
            ],
            options={"ordering": ["id"]},
        ),
    ]
