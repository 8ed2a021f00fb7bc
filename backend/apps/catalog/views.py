from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import error_responses, paginated_response
from apps.api.utils import error_response, service_error_response
from apps.common import get_logger
from .container import build_product_service
from .pagination import ProductListPagination
from .serializers import (
    ProductReadSerializer,
    ProductWriteSerializer,
    VariantStockSerializer,
)

logger = get_logger(__name__).bind(component="catalog", layer="view")


@extend_schema(tags=["Catalog"])
class ProductListView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]
    service = build_product_service()
    log = logger.bind(view="ProductListView")

    @extend_schema(
        operation_id="products_list",
        summary="List products",
        description="Supports ?page, ?limit and ?q (name or SKU). Results may be served from cache.",
        parameters=[
            OpenApiParameter(name="q", description="Search by name or SKU", required=False, type=str),
        ],
        responses={200: paginated_response(ProductReadSerializer)},
    )
    def get(self, request):
        query = request.query_params.get("q")
        include_inactive = bool(getattr(request, "is_privileged_user", False))
        self.log.debug("Handling product list request", query=query)
        return self.service.list_products_paginated(
            request,
            query=query,
            include_inactive=include_inactive,
            paginator_class=ProductListPagination,
            serializer_class=ProductReadSerializer,
            view=self,
        )

    @extend_schema(
        summary="Create product (staff)",
        request=ProductWriteSerializer,
        responses={
            201: ProductReadSerializer,
            **error_responses(400, 409),
        },
    )
    def post(self, request):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto, error = self.service.create_product(serializer.validated_data)
        if error:
            return service_error_response(error)
        self.log.info("Product created via API", product_id=dto.id)
        return Response(ProductReadSerializer(dto).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Catalog"])
class ProductDetailView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]
    service = build_product_service()
    log = logger.bind(view="ProductDetailView")

    @extend_schema(
        operation_id="products_retrieve",
        summary="Get product with variants",
        parameters=[OpenApiParameter("product_id", int, OpenApiParameter.PATH)],
        responses={200: ProductReadSerializer, **error_responses(404)},
    )
    def get(self, request, product_id: int):
        dto = self.service.get_product(
            product_id, include_inactive=bool(getattr(request, "is_privileged_user", False))
        )
        if not dto:
            return error_response("NOT_FOUND", "Product not found", {"id": str(product_id)})
        return Response(ProductReadSerializer(dto).data)

    @extend_schema(
        summary="Update product (staff)",
        description="Sending `variants` replaces the whole variant list.",
        request=ProductWriteSerializer,
        responses={
            200: ProductReadSerializer,
            **error_responses(404, 409),
        },
    )
    def patch(self, request, product_id: int):
        serializer = ProductWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        self.log.info("Patching product", product_id=product_id)
        dto, error = self.service.update_product(product_id, serializer.validated_data)
        if error:
            return service_error_response(error)
        return Response(ProductReadSerializer(dto).data)

    @extend_schema(
        summary="Delete product (staff)",
        responses={204: None, **error_responses(404)},
    )
    def delete(self, request, product_id: int):
        _, error = self.service.delete_product(product_id)
        if error:
            return service_error_response(error)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["Catalog"])
class VariantStockView(APIView):
    permission_classes = [IsAuthenticatedOrReadOnly]
    service = build_product_service()
    log = logger.bind(view="VariantStockView")

    @extend_schema(
        summary="Set variant stock (staff)",
        request=VariantStockSerializer,
        parameters=[
            OpenApiParameter("product_id", int, OpenApiParameter.PATH),
            OpenApiParameter("variant_id", int, OpenApiParameter.PATH),
        ],
        responses={200: ProductReadSerializer, **error_responses(404)},
    )
    def put(self, request, product_id: int, variant_id: int):
        serializer = VariantStockSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto, error = self.service.set_variant_stock(
            product_id, variant_id, serializer.validated_data["quantity"]
        )
        if error:
            return service_error_response(error)
        return Response(ProductReadSerializer(dto).data)
