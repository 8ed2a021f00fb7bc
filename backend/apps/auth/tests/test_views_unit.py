import types
import unittest
from datetime import datetime, timezone as dt_timezone
from unittest.mock import Mock, patch

from rest_framework import status
from rest_framework.exceptions import ValidationError

from apps.auth.serializers import CustomerTokenObtainPairSerializer, StaffTokenObtainPairSerializer
from apps.auth.views import LogoutAllView, LogoutView, MeView, RegisterView, UsernameAvailabilityView


class DummyRequest:
    def __init__(self, data=None, query_params=None, user=None):
        self.data = data or {}
        self.query_params = query_params if query_params is not None else dict(self.data)
        self.user = user


def _fake_validate(staff):
    def validate(self, attrs):
        self.user = types.SimpleNamespace(is_staff=staff, is_superuser=False)
        return {"access": "a", "refresh": "b"}

    return validate


class TokenSerializerTests(unittest.TestCase):
    def test_customer_serializer_rejects_staff(self):
        with patch("apps.auth.serializers.TokenObtainPairSerializer.validate", _fake_validate(True)):
            with self.assertRaises(ValidationError):
                CustomerTokenObtainPairSerializer().validate({})

    def test_staff_serializer_accepts_staff(self):
        with patch("apps.auth.serializers.TokenObtainPairSerializer.validate", _fake_validate(True)):
            data = StaffTokenObtainPairSerializer().validate({})
        self.assertIn("access", data)

    def test_staff_serializer_rejects_customers(self):
        with patch("apps.auth.serializers.TokenObtainPairSerializer.validate", _fake_validate(False)):
            with self.assertRaises(ValidationError):
                StaffTokenObtainPairSerializer().validate({})


class AuthViewsUnitTests(unittest.TestCase):
    def _register_view(self, service):
        view = RegisterView()
        view.service = service
        return view

    def test_register_forwards_referral_code(self):
        service = Mock()
        service.register.return_value = {
            "id": 1,
            "username": "newuser",
            "email": "new@example.com",
            "name": "New User",
            "phone": "9876543210",
            "referral_code": "REF1A2B3C4D",
            "welcome_coupon": "NEWUSER000000011234",
        }
        request = DummyRequest(
            {
                "username": "newuser",
                "email": "new@example.com",
                "password": "Secret#123",
                "name": "New User",
                "phone": "98765 43210",
                "referralCode": "REFABCDEF12",
            }
        )
        response = self._register_view(service).post(request)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["referral_code"], "REF1A2B3C4D")
        data = service.register.call_args[0][0]
        self.assertEqual(data["referral_code"], "REFABCDEF12")
        self.assertEqual(data["phone"], "9876543210")

    def test_register_service_error(self):
        service = Mock()
        service.register.return_value = ("VALIDATION_ERROR", "Invalid referral code", {"referralCode": "X"})
        request = DummyRequest(
            {"username": "someone", "email": "s@example.com", "password": "Secret#123", "name": "S"}
        )
        response = self._register_view(service).post(request)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["message"], "Invalid referral code")

    def test_register_requires_a_name(self):
        service = Mock()
        request = DummyRequest({"username": "someone", "email": "s@example.com", "password": "Secret#123"})
        with self.assertRaises(ValidationError):
            self._register_view(service).post(request)
        service.register.assert_not_called()

    def test_register_rejects_bad_username_and_password(self):
        service = Mock()
        view = self._register_view(service)
        for overrides in ({"username": "bad!"}, {"password": "weakpw"}, {"phone": "12ab"}):
            payload = {"username": "goodname", "email": "t@example.com", "password": "Secret#123", "name": "T"}
            payload.update(overrides)
            with self.assertRaises(ValidationError):
                view.post(DummyRequest(payload))
        service.register.assert_not_called()

    def test_me_view_returns_storefront_profile(self):
        user = types.SimpleNamespace(
            id=1,
            username="me",
            email="me@example.com",
            name="Me",
            phone="9000000000",
            location="Pune",
            coin_balance=120,
            last_login=None,
            date_joined=datetime(2024, 1, 1, tzinfo=dt_timezone.utc),
            is_staff=False,
            is_superuser=False,
        )
        response = MeView().get(DummyRequest(user=user))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["coin_balance"], 120)
        self.assertEqual(response.data["location"], "Pune")
        self.assertIsNone(response.data["last_login"])

    def test_username_availability(self):
        service = Mock()
        service.is_username_available.return_value = False
        view = UsernameAvailabilityView()
        view.service = service
        response = view.get(DummyRequest(query_params={"username": " taken "}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["available"])
        service.is_username_available.assert_called_once_with("taken")

    def test_logout_view_success_and_failure(self):
        request = DummyRequest({"refresh": "abc"}, user=types.SimpleNamespace(id=5))
        view = LogoutView()
        view.service = Mock()
        view.service.logout.return_value = None
        self.assertEqual(view.post(request).status_code, status.HTTP_200_OK)
        view.service.logout.assert_called_once_with("abc", 5)

        view.service.logout.return_value = ("VALIDATION_ERROR", "Invalid token", {"error": "boom"})
        response = view.post(request)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "VALIDATION_ERROR")

    def test_logout_all(self):
        view = LogoutAllView()
        view.service = Mock()
        view.service.logout_all.return_value = {"detail": "Logged out from all devices", "tokens_invalidated": 2}
        actor = types.SimpleNamespace(id=10)
        response = view.post(DummyRequest(user=actor))
        self.assertEqual(response.data["tokens_invalidated"], 2)
        view.service.logout_all.assert_called_once_with(actor)
