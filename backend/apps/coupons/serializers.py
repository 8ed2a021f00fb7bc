from rest_framework import serializers

from .models import Coupon


class CouponReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    code = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    discount_type = serializers.CharField()
    discount_value = serializers.CharField()
    max_discount_value = serializers.CharField(allow_null=True)
    min_order_value = serializers.CharField()
    start_date = serializers.CharField(allow_null=True)
    end_date = serializers.CharField(allow_null=True)
    max_uses = serializers.IntegerField(allow_null=True)
    uses_count = serializers.IntegerField()
    per_user_limit = serializers.IntegerField(allow_null=True)
    is_active = serializers.BooleanField()
    created_by_id = serializers.IntegerField(allow_null=True)


class ReferralRewardSerializer(serializers.Serializer):
    couponId = serializers.IntegerField(source="coupon_id")
    couponCode = serializers.CharField(source="coupon_code")
    referralCount = serializers.IntegerField(source="referral_count")
    maxDiscount = serializers.CharField(source="max_discount")
    potentialDiscount = serializers.CharField(source="potential_discount")


class AvailableCouponsSerializer(serializers.Serializer):
    coupons = CouponReadSerializer(many=True)
    referralReward = ReferralRewardSerializer(source="referral_reward", allow_null=True)


class ReferralInviteSerializer(serializers.Serializer):
    code = serializers.CharField()
    discount_value = serializers.CharField()
    description = serializers.CharField()


class CouponWriteSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)
    description = serializers.CharField(required=False, allow_blank=True)
    discount_type = serializers.ChoiceField(choices=Coupon.DiscountType.choices)
    discount_value = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    max_discount_value = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    min_order_value = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False
    )
    start_date = serializers.DateTimeField(required=False, allow_null=True)
    end_date = serializers.DateTimeField(required=False, allow_null=True)
    max_uses = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    per_user_limit = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    is_active = serializers.BooleanField(required=False)

    def validate_code(self, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise serializers.ValidationError("code must not be blank")
        return value

    def validate(self, attrs):
        start, end = attrs.get("start_date"), attrs.get("end_date")
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": "end_date must be after start_date"})
        if (
            attrs.get("discount_type") == Coupon.DiscountType.PERCENTAGE
            and attrs.get("discount_value") is not None
            and attrs["discount_value"] > 100
        ):
            raise serializers.ValidationError(
                {"discount_value": "A percentage discount cannot exceed 100"}
            )
        return attrs
