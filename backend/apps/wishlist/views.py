from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import error_responses
from apps.api.utils import service_error_response
from apps.common import get_logger
from .container import build_wishlist_service
from .serializers import WishlistAddSerializer, WishlistMembershipSerializer, WishlistReadSerializer

logger = get_logger(__name__).bind(component="wishlist", layer="view")

PRODUCT_ID_PARAM = OpenApiParameter("product_id", int, OpenApiParameter.PATH)


def _wishlist_response(dto, error=None):
    if error:
        return service_error_response(error)
    return Response(WishlistReadSerializer(dto).data)


@extend_schema(tags=["Wishlist"])
class WishlistView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_wishlist_service()
    log = logger.bind(view="WishlistView")

    @extend_schema(summary="My wishlist", responses={200: WishlistReadSerializer, **error_responses(401)})
    def get(self, request):
        return _wishlist_response(self.service.get_wishlist(getattr(request, "validated_user_id", None)))

    @extend_schema(summary="Empty my wishlist", responses={200: WishlistReadSerializer, **error_responses(401)})
    def delete(self, request):
        return _wishlist_response(self.service.clear(getattr(request, "validated_user_id", None)))


@extend_schema(tags=["Wishlist"])
class WishlistItemListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_wishlist_service()
    log = logger.bind(view="WishlistItemListView")

    @extend_schema(
        summary="Save product",
        description="Adds a product to the wishlist. Saving it twice keeps a single entry.",
        request=WishlistAddSerializer,
        responses={200: WishlistReadSerializer, **error_responses(400, 404)},
    )
    def post(self, request):
        serializer = WishlistAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto, error = self.service.add_item(
            getattr(request, "validated_user_id", None), serializer.validated_data["product_id"]
        )
        return _wishlist_response(dto, error)


@extend_schema(tags=["Wishlist"])
class WishlistItemDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_wishlist_service()
    log = logger.bind(view="WishlistItemDetailView")

    @extend_schema(
        summary="Is product saved",
        parameters=[PRODUCT_ID_PARAM],
        responses={200: WishlistMembershipSerializer, **error_responses(401)},
    )
    def get(self, request, product_id: int):
        dto = self.service.contains(getattr(request, "validated_user_id", None), product_id)
        return Response(WishlistMembershipSerializer(dto).data)

    @extend_schema(
        summary="Remove saved product",
        parameters=[PRODUCT_ID_PARAM],
        responses={200: WishlistReadSerializer, **error_responses(404)},
    )
    def delete(self, request, product_id: int):
        dto, error = self.service.remove_item(getattr(request, "validated_user_id", None), product_id)
        return _wishlist_response(dto, error)


@extend_schema(tags=["Wishlist"])
class WishlistToggleView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_wishlist_service()
    log = logger.bind(view="WishlistToggleView")

    @extend_schema(
        summary="Toggle saved product",
        parameters=[PRODUCT_ID_PARAM],
        request=None,
        responses={200: WishlistMembershipSerializer, **error_responses(404)},
    )
    def post(self, request, product_id: int):
        dto, error = self.service.toggle_item(getattr(request, "validated_user_id", None), product_id)
        if error:
            return service_error_response(error)
        return Response(WishlistMembershipSerializer(dto).data)


@extend_schema(tags=["Wishlist"])
class WishlistSeenView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_wishlist_service()
    log = logger.bind(view="WishlistSeenView")

    @extend_schema(
        summary="Mark wishlist seen",
        request=None,
        responses={200: WishlistReadSerializer, **error_responses(401)},
    )
    def post(self, request):
        return _wishlist_response(self.service.mark_all_seen(getattr(request, "validated_user_id", None)))
