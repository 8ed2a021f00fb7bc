from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import error_response, service_error_response
from apps.common import get_logger
from .container import build_coupon_service, build_referral_service
from .dtos import ReferralInviteDTO
from .serializers import (
    AvailableCouponsSerializer,
    CouponReadSerializer,
    CouponWriteSerializer,
    ReferralInviteSerializer,
)

logger = get_logger(__name__).bind(component="coupons", layer="view")


@extend_schema(tags=["Coupons"])
class AvailableCouponListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_coupon_service()
    log = logger.bind(view="AvailableCouponListView")

    @extend_schema(
        summary="Coupons I can apply",
        description=(
            "Active coupons created for the caller. The referral reward coupon is "
            "returned separately with the discount it would grant on ?subtotal."
        ),
        parameters=[
            OpenApiParameter(name="subtotal", description="Cart subtotal used for previews", required=False, type=str),
        ],
        responses={200: AvailableCouponsSerializer, 400: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def get(self, request):
        user_id = getattr(request, "validated_user_id", None)
        subtotal = getattr(request, "coupon_subtotal", None)
        dto = self.service.list_available(user_id, subtotal)
        return Response(AvailableCouponsSerializer(dto).data)


@extend_schema(tags=["Coupons"])
class ReferralInviteView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_referral_service()
    log = logger.bind(view="ReferralInviteView")

    @extend_schema(summary="My shareable referral code", responses={200: ReferralInviteSerializer})
    def get(self, request):
        coupon = self.service.ensure_referral_invite(getattr(request, "validated_user_id", None))
        dto = ReferralInviteDTO(
            code=coupon.code,
            discount_value=str(coupon.discount_value),
            description=coupon.description,
        )
        return Response(ReferralInviteSerializer(dto).data)


@extend_schema(tags=["Coupons"])
class CouponListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_coupon_service()
    log = logger.bind(view="CouponListView")

    @extend_schema(summary="List coupons (staff)", responses={200: CouponReadSerializer(many=True)})
    def get(self, request):
        return Response(CouponReadSerializer(self.service.list_coupons(), many=True).data)

    @extend_schema(
        summary="Create coupon (staff)",
        request=CouponWriteSerializer,
        responses={201: CouponReadSerializer, 400: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def post(self, request):
        serializer = CouponWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = self.service.create_coupon(
            serializer.validated_data, created_by_id=getattr(request, "validated_user_id", None)
        )
        self.log.info("Coupon created via API", coupon_id=dto.id, code=dto.code)
        return Response(CouponReadSerializer(dto).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Coupons"])
class CouponDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_coupon_service()
    log = logger.bind(view="CouponDetailView")

    @extend_schema(
        summary="Get coupon (staff)",
        parameters=[OpenApiParameter("coupon_id", int, OpenApiParameter.PATH)],
        responses={200: CouponReadSerializer, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def get(self, request, coupon_id: int):
        dto = self.service.get_coupon(coupon_id)
        if dto is None:
            return error_response("NOT_FOUND", "Coupon not found", {"id": str(coupon_id)})
        return Response(CouponReadSerializer(dto).data)

    @extend_schema(
        summary="Update coupon (staff)",
        request=CouponWriteSerializer,
        responses={200: CouponReadSerializer, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def patch(self, request, coupon_id: int):
        serializer = CouponWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        dto, error = self.service.update_coupon(coupon_id, serializer.validated_data)
        if error:
            return service_error_response(error)
        return Response(CouponReadSerializer(dto).data)

    @extend_schema(
        summary="Delete coupon (staff)",
        responses={204: None, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def delete(self, request, coupon_id: int):
        _, error = self.service.delete_coupon(coupon_id)
        if error:
            return service_error_response(error)
        return Response(status=status.HTTP_204_NO_CONTENT)
