from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from apps.carts.models import Cart
from apps.catalog.models import Product, ProductVariant
from apps.coupons.models import Coupon
from apps.users.models import Address, User


class SeedStorefrontCommandTests(TestCase):
    def _seed(self, *args):
        out = StringIO()
        call_command("seed_storefront", *args, stdout=out)
        return out.getvalue()

    def test_seeds_catalog_users_and_carts(self):
        output = self._seed()
        self.assertIn("Storefront seed completed.", output)
        self.assertEqual(Product.objects.count(), 4)
        self.assertEqual(ProductVariant.objects.filter(product__sku="KUR-001").count(), 3)
        self.assertTrue(User.objects.get(username="admin").is_staff)
        self.assertTrue(Address.objects.get(user__username="priya").is_default)
        self.assertTrue(Coupon.objects.filter(code="FESTIVE10").exists())
        self.assertEqual(set(Cart.objects.values_list("user__username", flat=True)), {"priya", "rahul"})

    def test_running_twice_is_idempotent(self):
        self._seed()
        self._seed()
        self.assertEqual(Product.objects.count(), 4)
        self.assertEqual(ProductVariant.objects.count(), 7)
        self.assertEqual(Coupon.objects.count(), 2)
        self.assertEqual(User.objects.count(), 4)

    def test_flush_recreates_data(self):
        self._seed()
        self._seed("--flush")
        self.assertEqual(Product.objects.count(), 4)
        self.assertEqual(Address.objects.count(), 2)
