import re
import string

from rest_framework import serializers

_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
_PHONE_PATTERN = re.compile(r"^\+?[0-9]{10,15}$")
_POSTAL_CODE_PATTERN = re.compile(r"^[0-9]{6}$")


def validate_username(value: str) -> str:
    """At least 4 characters; letters, digits and underscores only."""
    if value is None:
        raise serializers.ValidationError("Username is required.")
    trimmed = value.strip()
    if len(trimmed) < 4:
        raise serializers.ValidationError("Username must be at least 4 characters long.")
    if not _USERNAME_PATTERN.match(trimmed):
        raise serializers.ValidationError(
            "Username may contain only letters, numbers and underscores."
        )
    return trimmed


def validate_password(value: str) -> str:
    """
    Password complexity:
    - minimum length of 8 characters
    - at least one letter and one number
    - at least one special character
    """
    if value is None:
        raise serializers.ValidationError("Password is required.")
    if len(value) < 8:
        raise serializers.ValidationError("Password must be at least 8 characters long.")
    if not any(ch.isalpha() for ch in value):
        raise serializers.ValidationError("Password must include at least one letter.")
    if not any(ch.isdigit() for ch in value):
        raise serializers.ValidationError("Password must include at least one number.")
    if not any(ch in string.punctuation for ch in value):
        raise serializers.ValidationError(
            "Password must include at least one special character."
        )
    return value


def validate_phone(value: str) -> str:
    cleaned = re.sub(r"[\s-]", "", value or "")
    if cleaned and not _PHONE_PATTERN.match(cleaned):
        raise serializers.ValidationError("Enter a valid phone number.")
    return cleaned


def validate_postal_code(value: str) -> str:
    cleaned = (value or "").strip()
    if not _POSTAL_CODE_PATTERN.match(cleaned):
        raise serializers.ValidationError("Postal code must be 6 digits.")
    return cleaned
