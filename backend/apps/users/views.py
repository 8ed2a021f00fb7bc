from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import error_response, service_error_response
from apps.common import get_logger
from .container import build_user_service
from .serializers import (
    AddressSerializer,
    AddressWriteSerializer,
    UserProfileSerializer,
    UserProfileUpdateSerializer,
)

logger = get_logger(__name__).bind(component="users", layer="view")


@extend_schema(tags=["Users"])
class UserProfileView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_user_service()
    log = logger.bind(view="UserProfileView")

    @extend_schema(
        summary="Get my profile",
        responses={200: UserProfileSerializer, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def get(self, request):
        user_id = getattr(request, "validated_user_id", None)
        dto = self.service.get_profile(user_id)
        if dto is None:
            return error_response("NOT_FOUND", "User not found", {"userId": str(user_id)})
        return Response(UserProfileSerializer(dto).data)

    @extend_schema(
        summary="Update my profile",
        request=UserProfileUpdateSerializer,
        responses={
            200: UserProfileSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def patch(self, request):
        serializer = UserProfileUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        dto, error = self.service.update_profile(
            getattr(request, "validated_user_id", None), serializer.validated_data
        )
        if error:
            return service_error_response(error)
        return Response(UserProfileSerializer(dto).data)


@extend_schema(tags=["Users"])
class UserAddressListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_user_service()
    log = logger.bind(view="UserAddressListView")

    @extend_schema(summary="List my addresses", responses={200: AddressSerializer(many=True)})
    def get(self, request):
        data = self.service.list_addresses(getattr(request, "validated_user_id", None))
        return Response(AddressSerializer(data, many=True).data)

    @extend_schema(
        summary="Add an address",
        description="The first address, or one sent with is_default=true, becomes the default.",
        request=AddressWriteSerializer,
        responses={
            201: AddressSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = AddressWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user_id = getattr(request, "validated_user_id", None)
        dto = self.service.create_address(user_id, serializer.validated_data)
        self.log.info("Address added via API", user_id=user_id, address_id=dto.id)
        return Response(AddressSerializer(dto).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Users"])
class UserAddressDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_user_service()
    log = logger.bind(view="UserAddressDetailView")

    @extend_schema(
        summary="Delete an address",
        parameters=[OpenApiParameter("address_id", int, OpenApiParameter.PATH)],
        responses={204: None, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def delete(self, request, address_id: int):
        _, error = self.service.delete_address(getattr(request, "validated_user_id", None), address_id)
        if error:
            return service_error_response(error)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["Users"])
class UserDefaultAddressView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_user_service()
    log = logger.bind(view="UserDefaultAddressView")

    @extend_schema(
        summary="Make an address the default",
        request=None,
        parameters=[OpenApiParameter("address_id", int, OpenApiParameter.PATH)],
        responses={200: AddressSerializer, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def post(self, request, address_id: int):
        dto, error = self.service.set_default_address(getattr(request, "validated_user_id", None), address_id)
        if error:
            return service_error_response(error)
        return Response(AddressSerializer(dto).data)
