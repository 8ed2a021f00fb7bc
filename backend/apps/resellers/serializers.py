from rest_framework import serializers


class ResellerReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    user_id = serializers.IntegerField()
    business_name = serializers.CharField(allow_blank=True)
    business_type = serializers.CharField(allow_blank=True)
    phone = serializers.CharField(allow_blank=True)
    email = serializers.CharField(allow_blank=True)
    city = serializers.CharField(allow_blank=True)
    state = serializers.CharField(allow_blank=True)
    pincode = serializers.CharField(allow_blank=True)
    bank_account_name = serializers.CharField(allow_blank=True)
    bank_account_number = serializers.CharField(allow_blank=True)
    bank_ifsc = serializers.CharField(allow_blank=True)
    upi_id = serializers.CharField(allow_blank=True)
    is_verified = serializers.BooleanField()
    is_active = serializers.BooleanField()
    commission_rate = serializers.CharField()
    total_orders = serializers.IntegerField()
    total_earnings = serializers.CharField()
    pending_earnings = serializers.CharField()
    created_at = serializers.CharField(allow_null=True)


class ResellerRegistrationSerializer(serializers.Serializer):
    business_name = serializers.CharField(max_length=255)
    business_type = serializers.CharField(max_length=100, required=False, allow_blank=True)
    phone = serializers.RegexField(r"^\+?\d{10,15}$", required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    state = serializers.CharField(max_length=100, required=False, allow_blank=True)
    pincode = serializers.RegexField(r"^\d{6}$", required=False, allow_blank=True)
    bank_account_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    bank_account_number = serializers.RegexField(r"^\d{9,18}$", required=False, allow_blank=True)
    bank_ifsc = serializers.RegexField(r"^[A-Za-z]{4}0[A-Za-z0-9]{6}$", required=False, allow_blank=True)
    upi_id = serializers.CharField(max_length=100, required=False, allow_blank=True)


class ResellerOrderSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    order_number = serializers.CharField()
    status = serializers.CharField()
    total_amount = serializers.CharField()
    reseller_commission = serializers.CharField()
    created_at = serializers.CharField(allow_null=True)


class ResellerDashboardSerializer(serializers.Serializer):
    total_orders = serializers.IntegerField()
    pending_orders = serializers.IntegerField()
    total_earnings = serializers.CharField()
    pending_earnings = serializers.CharField()
    this_month_earnings = serializers.CharField()
    last_month_earnings = serializers.CharField()
    recent_orders = ResellerOrderSerializer(many=True)
