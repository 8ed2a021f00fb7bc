from rest_framework import serializers
from rest_framework.exceptions import ValidationError
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from apps.users.validators import (
    validate_password as validate_password_rules,
    validate_phone as validate_phone_rules,
    validate_username as validate_username_rules,
)


class RegisterRequestSerializer(serializers.Serializer):
    username = serializers.CharField()
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    first_name = serializers.CharField(required=False, allow_blank=True)
    last_name = serializers.CharField(required=False, allow_blank=True)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    referralCode = serializers.CharField(
        source="referral_code", max_length=50, required=False, allow_blank=True
    )

    def validate_username(self, value: str) -> str:
        return validate_username_rules(value)

    def validate_password(self, value: str) -> str:
        return validate_password_rules(value)

    def validate_phone(self, value: str) -> str:
        return validate_phone_rules(value)

    def validate(self, attrs):
        if not (attrs.get("name") or attrs.get("first_name") or attrs.get("last_name")):
            raise serializers.ValidationError({"name": "Name is required."})
        return attrs


class RegisterResponseSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField()
    email = serializers.EmailField()
    name = serializers.CharField(allow_blank=True)
    phone = serializers.CharField(allow_blank=True)
    referral_code = serializers.CharField()
    welcome_coupon = serializers.CharField(allow_null=True)


class UsernameAvailabilityRequestSerializer(serializers.Serializer):
    username = serializers.CharField(min_length=1)

    def validate_username(self, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise serializers.ValidationError("Username cannot be blank.")
        return trimmed


class UsernameAvailabilityResponseSerializer(serializers.Serializer):
    username = serializers.CharField()
    available = serializers.BooleanField()


class MeResponseSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField()
    email = serializers.EmailField()
    name = serializers.CharField(allow_blank=True)
    phone = serializers.CharField(allow_blank=True)
    location = serializers.CharField(allow_blank=True)
    coin_balance = serializers.IntegerField()
    last_login = serializers.DateTimeField(allow_null=True)
    date_joined = serializers.DateTimeField()
    is_staff = serializers.BooleanField()
    is_superuser = serializers.BooleanField()


class LogoutRequestSerializer(serializers.Serializer):
    refresh = serializers.CharField()


class DetailResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()


class LogoutAllResponseSerializer(DetailResponseSerializer):
    tokens_invalidated = serializers.IntegerField()


class CustomerTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Shopper login; staff and admin accounts are sent to the staff endpoint."""

    def validate(self, attrs):
        data = super().validate(attrs)
        if getattr(self.user, "is_staff", False) or getattr(self.user, "is_superuser", False):
            raise ValidationError("Staff and admin accounts must use the staff login endpoint.")
        return data


class StaffTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        if not (getattr(self.user, "is_staff", False) or getattr(self.user, "is_superuser", False)):
            raise ValidationError("Only staff or admin accounts may use this endpoint.")
        return data
