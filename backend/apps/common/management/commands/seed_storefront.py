from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.carts.models import Cart, CartItem
from apps.catalog.models import Product, ProductVariant
from apps.coupons.models import Coupon
from apps.users.models import Address, User

# (name, sku, fallback price, description, variants)
# variant: (size, color, quantity, mrp, rsp)
PRODUCTS = [
    (
        "Cotton Straight Kurti",
        "KUR-001",
        "699.00",
        "Breathable cotton kurti with a straight cut and three-quarter sleeves.",
        [
            ("S", "Red", 12, "999.00", "699.00"),
            ("M", "Red", 8, "999.00", "699.00"),
            ("L", "Blue", 0, "999.00", "749.00"),
        ],
    ),
    (
        "Banarasi Silk Saree",
        "SAR-014",
        "2499.00",
        "Handwoven silk saree with zari border and matching blouse piece.",
        [
            ("Free", "Maroon", 4, "3999.00", "2499.00"),
            ("Free", "Green", 2, "3999.00", "2699.00"),
        ],
    ),
    (
        "Printed Palazzo Pants",
        "PAL-203",
        "449.00",
        "Flowy rayon palazzo with an elastic waistband.",
        [
            ("M", "Black", 20, "599.00", "449.00"),
            ("XL", "Black", 6, "599.00", "449.00"),
        ],
    ),
    (
        "Embroidered Dupatta",
        "DUP-031",
        "299.00",
        "Chiffon dupatta with thread embroidery.",
        [],
    ),
]

USERS = [
    {
        "username": "priya",
        "email": "priya@example.com",
        "name": "Priya Sharma",
        "phone": "9876543210",
        "password": "Customer#123",
    },
    {
        "username": "rahul",
        "email": "rahul@example.com",
        "name": "Rahul Verma",
        "phone": "9123456780",
        "password": "Customer#123",
    },
    {
        "username": "staff",
        "email": "staff@example.com",
        "name": "Store Staff",
        "password": "StaffPass123!",
        "is_staff": True,
    },
    {
        "username": "admin",
        "email": "admin@example.com",
        "name": "Store Admin",
        "password": "AdminPass123!",
        "is_superuser": True,
    },
]

ADDRESSES = {
    "priya": ("Priya Sharma", "9876543210", "12 MG Road", "Pune", "Maharashtra", "411001"),
    "rahul": ("Rahul Verma", "9123456780", "44 Park Street", "Kolkata", "West Bengal", "700016"),
}

COUPONS = [
    ("FESTIVE10", "Festive season: 10% off", Coupon.DiscountType.PERCENTAGE, "10", "500", "300"),
    ("FLAT150", "Flat 150 off on orders above 1499", Coupon.DiscountType.FIXED, "150", "1499", None),
]


class Command(BaseCommand):
    help = "Seed a demo storefront: products with variants, users, addresses and coupons."

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush", action="store_true", help="Delete existing data before seeding"
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options["flush"]:
            self.stdout.write("Flushing existing data...")
            CartItem.objects.all().delete()
            Cart.objects.all().delete()
            Address.objects.all().delete()
            Coupon.objects.all().delete()
            ProductVariant.objects.all().delete()
            Product.objects.all().delete()
            User.objects.all().delete()

        self.stdout.write("Seeding products...")
        for name, sku, price, description, variants in PRODUCTS:
            product, created = Product.objects.get_or_create(
                sku=sku,
                defaults={
                    "name": name,
                    "price": Decimal(price),
                    "description": description,
                    "stock_quantity": 0 if variants else 15,
                },
            )
            if not created:
                continue
            for size, color, quantity, mrp, rsp in variants:
                ProductVariant.objects.create(
                    product=product,
                    sku=f"{sku}-{size}-{color}".upper(),
                    size=size,
                    color=color,
                    quantity=quantity,
                    mrp_price=Decimal(mrp),
                    rsp_price=Decimal(rsp),
                )

        self.stdout.write("Seeding users...")
        for payload in USERS:
            attrs = dict(payload)
            raw_password = attrs.pop("password")
            is_superuser = attrs.pop("is_superuser", False)
            # Superusers must also be staff
            is_staff = attrs.pop("is_staff", False) or is_superuser
            user, _ = User.objects.update_or_create(
                username=attrs.pop("username"),
                defaults={**attrs, "is_staff": is_staff, "is_superuser": is_superuser},
            )
            user.set_password(raw_password)
            user.save()

        self.stdout.write("Seeding addresses...")
        for username, (full_name, phone, line1, city, state, postal_code) in ADDRESSES.items():
            user = User.objects.get(username=username)
            Address.objects.get_or_create(
                user=user,
                line1=line1,
                defaults={
                    "full_name": full_name,
                    "phone": phone,
                    "city": city,
                    "state": state,
                    "postal_code": postal_code,
                    "is_default": True,
                },
            )

        self.stdout.write("Seeding coupons...")
        for code, description, kind, value, min_order, cap in COUPONS:
            Coupon.objects.get_or_create(
                code=code,
                created_by=None,
                defaults={
                    "description": description,
                    "discount_type": kind,
                    "discount_value": Decimal(value),
                    "min_order_value": Decimal(min_order),
                    "max_discount_value": Decimal(cap) if cap else None,
                },
            )

        self.stdout.write("Ensuring carts for customers...")
        for user in User.objects.filter(is_staff=False, is_superuser=False):
            Cart.objects.get_or_create(user=user)

        self.stdout.write(self.style.SUCCESS("Storefront seed completed."))
