from rest_framework import serializers

from .validators import validate_phone, validate_postal_code


class AddressSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    full_name = serializers.CharField()
    phone = serializers.CharField()
    line1 = serializers.CharField()
    line2 = serializers.CharField()
    landmark = serializers.CharField()
    city = serializers.CharField()
    state = serializers.CharField()
    postal_code = serializers.CharField()
    is_default = serializers.BooleanField()
    formatted = serializers.CharField()


class AddressWriteSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=150)
    phone = serializers.CharField(max_length=20)
    line1 = serializers.CharField(max_length=255)
    line2 = serializers.CharField(max_length=255, required=False, allow_blank=True)
    landmark = serializers.CharField(max_length=255, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    postal_code = serializers.CharField(max_length=20)
    is_default = serializers.BooleanField(required=False, default=False)

    def validate_phone(self, value: str) -> str:
        return validate_phone(value)

    def validate_postal_code(self, value: str) -> str:
        return validate_postal_code(value)


class UserProfileSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField()
    email = serializers.EmailField()
    name = serializers.CharField(allow_blank=True)
    phone = serializers.CharField(allow_blank=True)
    location = serializers.CharField(allow_blank=True)
    coin_balance = serializers.IntegerField()
    is_staff = serializers.BooleanField()
    date_joined = serializers.CharField(allow_null=True)
    default_address = AddressSerializer(allow_null=True)


class UserProfileUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    email = serializers.EmailField(required=False)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)

    def validate_phone(self, value: str) -> str:
        return validate_phone(value)
