from rest_framework import serializers

from .models import CancellationRequest, DraftOrder, Order, PaymentMethod


class OrderItemReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    product_id = serializers.IntegerField(allow_null=True)
    variant_id = serializers.IntegerField(allow_null=True)
    product_name = serializers.CharField()
    product_image = serializers.CharField(allow_blank=True)
    size = serializers.CharField(allow_blank=True)
    color = serializers.CharField(allow_blank=True)
    quantity = serializers.IntegerField()
    unit_price = serializers.CharField()
    total_price = serializers.CharField()
    base_unit_price = serializers.CharField()
    is_reseller = serializers.BooleanField()
    margin_amount = serializers.CharField()


class OrderReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    order_number = serializers.CharField()
    user_id = serializers.IntegerField()
    status = serializers.CharField()
    payment_method = serializers.CharField()
    payment_status = serializers.CharField()
    payment_id = serializers.CharField(allow_blank=True)
    subtotal = serializers.CharField()
    shipping_amount = serializers.CharField()
    tax_amount = serializers.CharField()
    discount_amount = serializers.CharField()
    coupon_code = serializers.CharField(allow_blank=True)
    coin_discount = serializers.CharField()
    total_amount = serializers.CharField()
    shipping_address = serializers.CharField(allow_blank=True)
    customer_name = serializers.CharField(allow_blank=True)
    customer_email = serializers.CharField(allow_blank=True)
    customer_phone = serializers.CharField(allow_blank=True)
    is_reseller_order = serializers.BooleanField()
    reseller_margin_percentage = serializers.CharField()
    reseller_margin_amount = serializers.CharField()
    original_total = serializers.CharField()
    reseller_profit = serializers.CharField()
    created_at = serializers.CharField(allow_null=True)
    items = OrderItemReadSerializer(many=True)


class DraftOrderItemReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    product_id = serializers.IntegerField(allow_null=True)
    variant_id = serializers.IntegerField(allow_null=True)
    product_name = serializers.CharField()
    product_image = serializers.CharField(allow_blank=True)
    size = serializers.CharField(allow_blank=True)
    color = serializers.CharField(allow_blank=True)
    quantity = serializers.IntegerField()
    available_quantity = serializers.IntegerField()
    unit_price = serializers.CharField()
    total_price = serializers.CharField()
    is_reseller = serializers.BooleanField()


class DraftOrderReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    order_number = serializers.CharField()
    user_id = serializers.IntegerField()
    status = serializers.CharField()
    total_amount = serializers.CharField()
    shipping_address = serializers.CharField(allow_blank=True)
    billing_address = serializers.CharField(allow_blank=True)
    payment_method = serializers.CharField()
    payment_status = serializers.CharField()
    notes = serializers.CharField(allow_blank=True)
    approved_at = serializers.CharField(allow_null=True)
    approved_by_id = serializers.IntegerField(allow_null=True)
    rejection_reason = serializers.CharField(allow_blank=True)
    created_at = serializers.CharField(allow_null=True)
    items = DraftOrderItemReadSerializer(many=True)


class CheckoutResultSerializer(serializers.Serializer):
    order = OrderReadSerializer(allow_null=True)
    draft_order = DraftOrderReadSerializer(allow_null=True)
    coins_earned = serializers.IntegerField()
    message = serializers.CharField(allow_blank=True)


class PaymentReferenceSerializer(serializers.Serializer):
    gateway_order_id = serializers.CharField(required=False, allow_blank=True)
    payment_id = serializers.CharField(required=False, allow_blank=True)
    signature = serializers.CharField(required=False, allow_blank=True)


class CheckoutSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, default=PaymentMethod.COD)
    payment = PaymentReferenceSerializer(required=False)

    def to_internal_value(self, data):
        # Accept the gateway's own field names alongside ours
        if hasattr(data, "get") and isinstance(data.get("payment"), dict):
            payment = dict(data["payment"])
            for ours, theirs in (
                ("gateway_order_id", "razorpay_order_id"),
                ("payment_id", "razorpay_payment_id"),
                ("signature", "razorpay_signature"),
            ):
                if not payment.get(ours) and payment.get(theirs):
                    payment[ours] = payment[theirs]
                payment.pop(theirs, None)
            data = {**data, "payment": payment}
        return super().to_internal_value(data)


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices)


class DraftOrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=DraftOrder.Status.choices)
    rejection_reason = serializers.CharField(required=False, allow_blank=True, max_length=1000)


class CancellationReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    order_id = serializers.IntegerField()
    order_number = serializers.CharField()
    order_status = serializers.CharField()
    user_id = serializers.IntegerField()
    reason = serializers.CharField(allow_blank=True)
    status = serializers.CharField()
    reviewed_at = serializers.CharField(allow_null=True)
    reviewed_by_id = serializers.IntegerField(allow_null=True)
    rejection_reason = serializers.CharField(allow_blank=True)
    created_at = serializers.CharField(allow_null=True)


class CancellationCreateSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="", max_length=1000)


class CancellationReviewSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[
            (CancellationRequest.Status.APPROVED.value, CancellationRequest.Status.APPROVED.label),
            (CancellationRequest.Status.REJECTED.value, CancellationRequest.Status.REJECTED.label),
        ]
    )
    rejection_reason = serializers.CharField(required=False, allow_blank=True, max_length=1000)
