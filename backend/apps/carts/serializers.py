from rest_framework import serializers


class CartItemReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    product_id = serializers.IntegerField()
    variant_id = serializers.IntegerField(allow_null=True)
    name = serializers.CharField()
    image = serializers.CharField(allow_blank=True)
    size = serializers.CharField(allow_blank=True)
    color = serializers.CharField(allow_blank=True)
    quantity = serializers.IntegerField()
    available_quantity = serializers.IntegerField()
    mrp = serializers.CharField()
    rsp = serializers.CharField()
    discount_percentage = serializers.IntegerField()
    unit_price = serializers.CharField()
    line_total = serializers.CharField()
    is_reseller = serializers.BooleanField()
    reseller_price = serializers.CharField(allow_null=True)
    reseller_margin = serializers.CharField()


class CartSummarySerializer(serializers.Serializer):
    subtotal_mrp = serializers.CharField()
    subtotal_rsp = serializers.CharField()
    subtotal = serializers.CharField()
    savings = serializers.CharField()
    reseller_profit = serializers.CharField()
    coupon_code = serializers.CharField(allow_blank=True)
    coupon_discount = serializers.CharField()
    coin_balance = serializers.IntegerField()
    coins_to_redeem = serializers.IntegerField()
    eligible_coin_discount = serializers.IntegerField()
    coin_discount = serializers.CharField()
    payable_subtotal = serializers.CharField()
    delivery_charge = serializers.CharField()
    total = serializers.CharField()
    coins_earned = serializers.IntegerField()
    item_count = serializers.IntegerField()


class CartReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    user_id = serializers.IntegerField()
    items = CartItemReadSerializer(many=True)
    summary = CartSummarySerializer()


class CartItemAddSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    size = serializers.CharField(required=False, allow_blank=True, default="")
    color = serializers.CharField(required=False, allow_blank=True, default="")
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)


class CartItemQuantitySerializer(serializers.Serializer):
    # Zero or less removes the line
    quantity = serializers.IntegerField()


class ResellerPriceSerializer(serializers.Serializer):
    reseller_price = serializers.DecimalField(max_digits=10, decimal_places=2)


class CouponApplySerializer(serializers.Serializer):
    code = serializers.CharField(allow_blank=True)
