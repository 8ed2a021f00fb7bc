from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.exceptions import ApplicationError
from apps.api.schemas import error_responses
from apps.api.utils import service_error_response
from apps.common import get_logger
from .container import build_cancellation_service, build_checkout_service, build_order_service
from .models import CancellationRequest, Order
from .serializers import (
    CancellationCreateSerializer,
    CancellationReadSerializer,
    CancellationReviewSerializer,
    CheckoutResultSerializer,
    CheckoutSerializer,
    DraftOrderReadSerializer,
    DraftOrderStatusSerializer,
    OrderReadSerializer,
    OrderStatusSerializer,
)

logger = get_logger(__name__).bind(component="orders", layer="view")

ORDER_ID_PARAM = OpenApiParameter("order_id", int, OpenApiParameter.PATH)
DRAFT_ID_PARAM = OpenApiParameter("draft_id", int, OpenApiParameter.PATH)
CANCELLATION_ID_PARAM = OpenApiParameter("cancellation_id", int, OpenApiParameter.PATH)
ERROR_RESPONSES = error_responses(400, 403, 404)


@extend_schema(tags=["Orders"])
class CheckoutView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_checkout_service()
    log = logger.bind(view="CheckoutView")

    @extend_schema(
        summary="Place order",
        description=(
            "Orders the in-stock part of the cart. Lines the shelf cannot cover are "
            "moved into a draft order for staff review. Online methods need a "
            "verified payment reference; cash on delivery does not."
        ),
        request=CheckoutSerializer,
        responses={
            201: CheckoutResultSerializer,
            200: OpenApiResponse(response=CheckoutResultSerializer, description="Only a draft order was created"),
            **error_responses(400, 402, 403, 404, 409),
        },
    )
    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user_id = getattr(request, "validated_user_id", None)
        try:
            result = self.service.place_order(user_id, serializer.validated_data)
        except ApplicationError as exc:
            self.log.info("Checkout rejected", user_id=user_id, code=exc.code, details=exc.details)
            return exc.to_response()
        code = status.HTTP_201_CREATED if result.order else status.HTTP_200_OK
        return Response(CheckoutResultSerializer(result).data, status=code)


@extend_schema(tags=["Orders"])
class OrderListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()
    log = logger.bind(view="OrderListView")

    @extend_schema(
        summary="List orders",
        description="The caller's orders, newest first. Staff see every order.",
        parameters=[
            OpenApiParameter("status", str, OpenApiParameter.QUERY, enum=list(Order.Status.values)),
        ],
        responses={200: OrderReadSerializer(many=True), **error_responses(400)},
    )
    def get(self, request):
        dtos = self.service.list_orders(
            getattr(request, "validated_user_id", None),
            is_privileged=bool(getattr(request, "is_privileged_user", False)),
            status=getattr(request, "order_status_filter", None),
        )
        return Response(OrderReadSerializer(dtos, many=True).data)


@extend_schema(tags=["Orders"])
class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()
    log = logger.bind(view="OrderDetailView")

    @extend_schema(
        summary="Order detail",
        parameters=[ORDER_ID_PARAM],
        responses={200: OrderReadSerializer, **ERROR_RESPONSES},
    )
    def get(self, request, order_id: int):
        dto, error = self.service.get_order(
            getattr(request, "validated_user_id", None),
            order_id,
            is_privileged=bool(getattr(request, "is_privileged_user", False)),
        )
        if error:
            return service_error_response(error)
        return Response(OrderReadSerializer(dto).data)


@extend_schema(tags=["Orders"])
class OrderStatusView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()
    log = logger.bind(view="OrderStatusView")

    @extend_schema(
        summary="Change order status",
        parameters=[ORDER_ID_PARAM],
        request=OrderStatusSerializer,
        responses={200: OrderReadSerializer, **ERROR_RESPONSES},
    )
    def patch(self, request, order_id: int):
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto, error = self.service.update_order_status(order_id, serializer.validated_data["status"])
        if error:
            return service_error_response(error)
        self.log.info("Order status updated via API", order_id=order_id, status=dto.status)
        return Response(OrderReadSerializer(dto).data)


@extend_schema(tags=["Orders"])
class DraftOrderListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()
    log = logger.bind(view="DraftOrderListView")

    @extend_schema(
        summary="List draft orders",
        description="Out-of-stock requests awaiting review. Staff see every draft.",
        responses={200: DraftOrderReadSerializer(many=True)},
    )
    def get(self, request):
        dtos = self.service.list_draft_orders(
            getattr(request, "validated_user_id", None),
            is_privileged=bool(getattr(request, "is_privileged_user", False)),
        )
        return Response(DraftOrderReadSerializer(dtos, many=True).data)


@extend_schema(tags=["Orders"])
class DraftOrderStatusView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()
    log = logger.bind(view="DraftOrderStatusView")

    @extend_schema(
        summary="Approve or reject draft order",
        parameters=[DRAFT_ID_PARAM],
        request=DraftOrderStatusSerializer,
        responses={200: DraftOrderReadSerializer, **ERROR_RESPONSES},
    )
    def patch(self, request, draft_id: int):
        serializer = DraftOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto, error = self.service.update_draft_status(
            draft_id,
            serializer.validated_data["status"],
            approved_by_id=getattr(request, "validated_user_id", None),
            rejection_reason=serializer.validated_data.get("rejection_reason"),
        )
        if error:
            return service_error_response(error)
        self.log.info("Draft order reviewed", draft_id=draft_id, status=dto.status)
        return Response(DraftOrderReadSerializer(dto).data)


@extend_schema(tags=["Orders"])
class OrderCancellationView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cancellation_service()
    log = logger.bind(view="OrderCancellationView")

    @extend_schema(
        summary="Request cancellation",
        description="Asks staff to cancel one of the caller's pending or confirmed orders.",
        parameters=[ORDER_ID_PARAM],
        request=CancellationCreateSerializer,
        responses={201: CancellationReadSerializer, **error_responses(400, 403, 404, 409)},
    )
    def post(self, request, order_id: int):
        serializer = CancellationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto, error = self.service.request_cancellation(
            getattr(request, "validated_user_id", None), order_id, serializer.validated_data["reason"]
        )
        if error:
            return service_error_response(error)
        return Response(CancellationReadSerializer(dto).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Orders"])
class CancellationListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cancellation_service()
    log = logger.bind(view="CancellationListView")

    @extend_schema(
        summary="List cancellation requests",
        description="The caller's requests, newest first. Staff see every request.",
        parameters=[
            OpenApiParameter(
                "status", str, OpenApiParameter.QUERY, enum=list(CancellationRequest.Status.values)
            ),
        ],
        responses={200: CancellationReadSerializer(many=True), **error_responses(400)},
    )
    def get(self, request):
        dtos = self.service.list_cancellations(
            getattr(request, "validated_user_id", None),
            is_privileged=bool(getattr(request, "is_privileged_user", False)),
            status=getattr(request, "cancellation_status_filter", None),
        )
        return Response(CancellationReadSerializer(dtos, many=True).data)


@extend_schema(tags=["Orders"])
class CancellationDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cancellation_service()
    log = logger.bind(view="CancellationDetailView")

    @extend_schema(
        summary="Cancellation request detail",
        parameters=[CANCELLATION_ID_PARAM],
        responses={200: CancellationReadSerializer, **ERROR_RESPONSES},
    )
    def get(self, request, cancellation_id: int):
        dto, error = self.service.get_cancellation(
            getattr(request, "validated_user_id", None),
            cancellation_id,
            is_privileged=bool(getattr(request, "is_privileged_user", False)),
        )
        if error:
            return service_error_response(error)
        return Response(CancellationReadSerializer(dto).data)

    @extend_schema(
        summary="Approve or reject cancellation",
        description="Approval cancels the order and returns its items to stock.",
        parameters=[CANCELLATION_ID_PARAM],
        request=CancellationReviewSerializer,
        responses={200: CancellationReadSerializer, **error_responses(400, 403, 404, 409)},
    )
    def patch(self, request, cancellation_id: int):
        serializer = CancellationReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto, error = self.service.review_cancellation(
            cancellation_id,
            approve=serializer.validated_data["status"] == CancellationRequest.Status.APPROVED,
            reviewer_id=getattr(request, "validated_user_id", None),
            rejection_reason=serializer.validated_data.get("rejection_reason"),
        )
        if error:
            return service_error_response(error)
        self.log.info("Cancellation reviewed", cancellation_id=cancellation_id, status=dto.status)
        return Response(CancellationReadSerializer(dto).data)
