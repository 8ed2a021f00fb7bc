from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import error_response, service_error_response
from apps.common import get_logger
from .container import build_reseller_service
from .serializers import (
    ResellerDashboardSerializer,
    ResellerReadSerializer,
    ResellerRegistrationSerializer,
)

logger = get_logger(__name__).bind(component="resellers", layer="view")


@extend_schema(tags=["Resellers"])
class ResellerProfileView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_reseller_service()
    log = logger.bind(view="ResellerProfileView")

    @extend_schema(
        summary="My reseller profile",
        responses={200: ResellerReadSerializer, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def get(self, request):
        user_id = getattr(request, "validated_user_id", None)
        dto = self.service.get_for_user(user_id)
        if dto is None:
            return error_response("NOT_FOUND", "Reseller profile not found", {"userId": str(user_id)})
        return Response(ResellerReadSerializer(dto).data)

    @extend_schema(
        summary="Register as reseller",
        description="Creates the caller's reseller profile, or updates it when it already exists.",
        request=ResellerRegistrationSerializer,
        responses={
            201: ResellerReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            409: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = ResellerRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        existed = self.service.get_for_user(request.user.id) is not None
        dto, error = self.service.register(request.user, serializer.validated_data)
        if error:
            return service_error_response(error)
        self.log.info("Reseller registration handled", user_id=request.user.id, existed=existed)
        code = status.HTTP_200_OK if existed else status.HTTP_201_CREATED
        return Response(ResellerReadSerializer(dto).data, status=code)


@extend_schema(tags=["Resellers"])
class ResellerDashboardView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_reseller_service()
    log = logger.bind(view="ResellerDashboardView")

    @extend_schema(
        summary="Reseller earnings dashboard",
        description=(
            "Totals over the caller's reseller orders. Earnings are realized once an "
            "order is delivered or completed; a profile is created on first visit."
        ),
        responses={200: ResellerDashboardSerializer},
    )
    def get(self, request):
        self.service.ensure_for_user(request.user)
        dto = self.service.dashboard(request.user.id)
        return Response(ResellerDashboardSerializer(dto).data)
