from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import error_responses
from apps.api.utils import service_error_response
from apps.common import get_logger
from apps.coupons.exceptions import CouponInvalidError
from .container import build_cart_service
from .exceptions import ResellerPriceError
from .serializers import (
    CartItemAddSerializer,
    CartItemQuantitySerializer,
    CartReadSerializer,
    CouponApplySerializer,
    ResellerPriceSerializer,
)

logger = get_logger(__name__).bind(component="carts", layer="view")

ITEM_ID_PARAM = OpenApiParameter("item_id", int, OpenApiParameter.PATH)
ERROR_RESPONSES = error_responses(400, 403, 404)


def _cart_response(dto, error=None):
    if error:
        return service_error_response(error)
    return Response(CartReadSerializer(dto).data)


@extend_schema(tags=["Cart"])
class CartView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartView")

    @extend_schema(
        summary="My cart",
        description=(
            "Cart lines with the pricing summary. The applied coupon is re-validated "
            "and dropped when it no longer applies; an unused welcome coupon is "
            "applied automatically."
        ),
        responses={200: CartReadSerializer, **ERROR_RESPONSES},
    )
    def get(self, request):
        return _cart_response(self.service.get_cart(getattr(request, "validated_user_id", None)))

    @extend_schema(summary="Empty my cart", responses={200: CartReadSerializer, **ERROR_RESPONSES})
    def delete(self, request):
        dto = self.service.clear_cart(getattr(request, "validated_user_id", None))
        self.log.info("Cart cleared via API", user_id=getattr(request, "validated_user_id", None))
        return _cart_response(dto)


@extend_schema(tags=["Cart"])
class CartItemListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartItemListView")

    @extend_schema(
        summary="Add to cart",
        description=(
            "Adds a product in the given size and color. Lines with the same "
            "product, size and color are merged; quantities are capped at stock."
        ),
        request=CartItemAddSerializer,
        responses={200: CartReadSerializer, **error_responses(400, 403, 404, 409)},
    )
    def post(self, request):
        serializer = CartItemAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto, error = self.service.add_item(getattr(request, "validated_user_id", None), serializer.validated_data)
        return _cart_response(dto, error)


@extend_schema(tags=["Cart"])
class CartItemDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartItemDetailView")

    @extend_schema(
        summary="Change line quantity",
        parameters=[ITEM_ID_PARAM],
        request=CartItemQuantitySerializer,
        responses={200: CartReadSerializer, **ERROR_RESPONSES},
    )
    def patch(self, request, item_id: int):
        serializer = CartItemQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto, error = self.service.update_quantity(
            getattr(request, "validated_user_id", None), item_id, serializer.validated_data["quantity"]
        )
        return _cart_response(dto, error)

    @extend_schema(
        summary="Remove line", parameters=[ITEM_ID_PARAM], responses={200: CartReadSerializer, **ERROR_RESPONSES}
    )
    def delete(self, request, item_id: int):
        dto, error = self.service.remove_item(getattr(request, "validated_user_id", None), item_id)
        return _cart_response(dto, error)


@extend_schema(tags=["Cart"])
class CartItemResellerView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartItemResellerView")

    @extend_schema(
        summary="Resell line",
        description="Sell this line on at a per-unit price above the base selling price.",
        parameters=[ITEM_ID_PARAM],
        request=ResellerPriceSerializer,
        responses={200: CartReadSerializer, **ERROR_RESPONSES},
    )
    def put(self, request, item_id: int):
        serializer = ResellerPriceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto, error = self.service.toggle_reseller(
                getattr(request, "validated_user_id", None),
                item_id,
                True,
                serializer.validated_data["reseller_price"],
            )
        except ResellerPriceError as exc:
            self.log.info("Reseller price rejected", item_id=item_id, details=exc.details)
            return exc.to_response()
        return _cart_response(dto, error)

    @extend_schema(
        summary="Stop reselling line", parameters=[ITEM_ID_PARAM], responses={200: CartReadSerializer, **ERROR_RESPONSES}
    )
    def delete(self, request, item_id: int):
        dto, error = self.service.toggle_reseller(getattr(request, "validated_user_id", None), item_id, False)
        return _cart_response(dto, error)


@extend_schema(tags=["Cart"])
class CartCouponView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartCouponView")

    @extend_schema(
        summary="Apply coupon",
        description="Rejections carry the short reason in details.reason.",
        request=CouponApplySerializer,
        responses={200: CartReadSerializer, **ERROR_RESPONSES},
    )
    def put(self, request):
        serializer = CouponApplySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = self.service.apply_coupon(getattr(request, "validated_user_id", None), serializer.validated_data["code"])
        except CouponInvalidError as exc:
            self.log.info("Coupon rejected", reason=exc.title, code=exc.coupon_code)
            return exc.to_response()
        return _cart_response(dto)

    @extend_schema(summary="Remove coupon", responses={200: CartReadSerializer, **ERROR_RESPONSES})
    def delete(self, request):
        return _cart_response(self.service.remove_coupon(getattr(request, "validated_user_id", None)))


@extend_schema(tags=["Cart"])
class CartCoinsView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartCoinsView")

    @extend_schema(
        summary="Redeem coins",
        description="Redeems every eligible coin: 100 per full 1000 of subtotal, up to the balance.",
        request=None,
        responses={200: CartReadSerializer, **ERROR_RESPONSES},
    )
    def put(self, request):
        dto, error = self.service.apply_coins(getattr(request, "validated_user_id", None))
        return _cart_response(dto, error)

    @extend_schema(summary="Stop redeeming coins", request=None, responses={200: CartReadSerializer, **ERROR_RESPONSES})
    def delete(self, request):
        return _cart_response(self.service.remove_coins(getattr(request, "validated_user_id", None)))
