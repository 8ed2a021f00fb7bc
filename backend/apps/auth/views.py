from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from apps.api.schemas import error_responses
from apps.api.utils import service_error_response
from apps.common import get_logger
from .container import build_registration_service, build_session_service
from .serializers import (
    CustomerTokenObtainPairSerializer,
    DetailResponseSerializer,
    LogoutAllResponseSerializer,
    LogoutRequestSerializer,
    MeResponseSerializer,
    RegisterRequestSerializer,
    RegisterResponseSerializer,
    StaffTokenObtainPairSerializer,
    UsernameAvailabilityRequestSerializer,
    UsernameAvailabilityResponseSerializer,
)

logger = get_logger(__name__).bind(component="auth", layer="view")


@extend_schema(tags=["Auth"])
class UsernameAvailabilityView(APIView):
    permission_classes = [AllowAny]
    service = build_registration_service()
    log = logger.bind(view="UsernameAvailabilityView")

    @extend_schema(
        summary="Check username availability",
        parameters=[
            OpenApiParameter(
                name="username",
                type=str,
                location=OpenApiParameter.QUERY,
                required=True,
                description="Username to check for uniqueness",
            )
        ],
        responses={
            200: UsernameAvailabilityResponseSerializer,
            **error_responses(400),
        },
    )
    def get(self, request):
        serializer = UsernameAvailabilityRequestSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        username = serializer.validated_data["username"]
        available = self.service.is_username_available(username)
        self.log.debug("Username availability checked", username=username, available=available)
        payload = {"username": username, "available": available}
        return Response(UsernameAvailabilityResponseSerializer(payload).data)


@extend_schema(tags=["Auth"])
class RegisterView(APIView):
    permission_classes = [AllowAny]
    service = build_registration_service()
    log = logger.bind(view="RegisterView")

    @extend_schema(
        summary="Register customer",
        description=(
            "Creates the account, its cart and its referral invite code. A valid "
            "referralCode also grants the welcome coupon and rewards the referrer."
        ),
        request=RegisterRequestSerializer,
        responses={
            201: RegisterResponseSerializer,
            **error_responses(400),
        },
    )
    def post(self, request):
        serializer = RegisterRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.log.info(
            "Processing registration request", username=serializer.validated_data.get("username")
        )
        result = self.service.register(serializer.validated_data)
        if isinstance(result, tuple):
            self.log.warning("Registration failed", code=result[0], detail=result[1])
            return service_error_response(result)
        self.log.info("Registration completed", user_id=result["id"])
        return Response(RegisterResponseSerializer(result).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Auth"], summary="Customer login (JWT obtain pair)")
class LoginView(TokenObtainPairView):
    permission_classes = [AllowAny]
    serializer_class = CustomerTokenObtainPairSerializer


@extend_schema(tags=["Auth"], summary="Refresh JWT")
class RefreshView(TokenRefreshView):
    permission_classes = [AllowAny]


@extend_schema(tags=["Auth"], summary="Staff/Admin login (JWT obtain pair)")
class StaffLoginView(TokenObtainPairView):
    permission_classes = [AllowAny]
    serializer_class = StaffTokenObtainPairSerializer


@extend_schema(tags=["Auth"], summary="Get current user", responses={200: MeResponseSerializer})
class MeView(APIView):
    permission_classes = [IsAuthenticated]
    log = logger.bind(view="MeView")

    def get(self, request):
        user = request.user
        self.log.debug("Returning current user profile", user_id=user.id)
        payload = {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "name": getattr(user, "name", ""),
            "phone": getattr(user, "phone", ""),
            "location": getattr(user, "location", ""),
            "coin_balance": getattr(user, "coin_balance", 0),
            "last_login": getattr(user, "last_login", None),
            "date_joined": user.date_joined,
            "is_staff": user.is_staff,
            "is_superuser": user.is_superuser,
        }
        return Response(MeResponseSerializer(payload).data)


@extend_schema(tags=["Auth"])
class LogoutView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_session_service()
    log = logger.bind(view="LogoutView")

    @extend_schema(
        summary="Logout (blacklist refresh)",
        request=LogoutRequestSerializer,
        responses={
            200: DetailResponseSerializer,
            **error_responses(400),
        },
    )
    def post(self, request):
        error = self.service.logout(request.data.get("refresh"), getattr(request.user, "id", None))
        if error:
            return service_error_response(error)
        return Response({"detail": "Logged out"})


@extend_schema(tags=["Auth"])
class LogoutAllView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_session_service()
    log = logger.bind(view="LogoutAllView")

    @extend_schema(
        summary="Logout from all devices",
        request=None,
        responses={
            200: LogoutAllResponseSerializer,
            **error_responses(401),
        },
    )
    def post(self, request):
        return Response(LogoutAllResponseSerializer(self.service.logout_all(request.user)).data)
