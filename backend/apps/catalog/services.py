from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, Type, Union

from django.db import IntegrityError, transaction
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from apps.common import get_logger
from .commands import ProductCreateCommand, ProductUpdateCommand
from .dtos import ProductDTO
from .mappers import ProductMapper
from .protocols import (
    CacheBackendProtocol,
    ProductRepositoryProtocol,
    VariantRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="catalog", layer="service")

ServiceError = Tuple[str, str, Optional[Dict[str, Any]]]


class ProductService:
    def __init__(
        self,
        products: ProductRepositoryProtocol,
        variants: VariantRepositoryProtocol,
        cache_backend: CacheBackendProtocol,
        disable_cache: bool = False,
    ):
        self.products = products
        self.variants = variants
        self.cache = cache_backend
        self.disable_cache = disable_cache
        self.logger = logger.bind(service="ProductService")
        self._cache_prefix = "products:list"
        self._cache_version_key = f"{self._cache_prefix}:version"
        self._default_version = 1

    # Cache helpers
    def _get_cache_version(self) -> int:
        return self.cache.get(self._cache_version_key) or self._default_version

    def invalidate_listing(self) -> None:
        """Bump the listing version so every cached page key goes stale."""
        version = self._get_cache_version() + 1
        self.cache.set(self._cache_version_key, version, timeout=None)
        self.logger.debug("Bumped product cache version", new_version=version)

    def _cache_key(self, include_inactive: bool) -> str:
        scope = "all" if include_inactive else "active"
        return f"{self._cache_prefix}:v{self._get_cache_version()}:{scope}"

    # Reads
    def list_products(self, *, include_inactive: bool = False) -> List[ProductDTO]:
        filters = {} if include_inactive else {"is_active": True}
        if self.disable_cache:
            return ProductMapper.many_to_dto(self.products.list(**filters))
        key = self._cache_key(include_inactive)
        cached = self.cache.get(key)
        if cached is not None:
            self.logger.debug("Product list cache hit", cache_key=key)
            return cached
        self.logger.debug("Product list cache miss", cache_key=key)
        data = ProductMapper.many_to_dto(self.products.list(**filters))
        self.cache.set(key, data)
        return data

    def search_products(
        self, query: Optional[str] = None, *, include_inactive: bool = False
    ) -> List[ProductDTO]:
        products = self.list_products(include_inactive=include_inactive)
        needle = (query or "").strip().lower()
        if not needle:
            return products
        return [
            p
            for p in products
            if needle in p.name.lower() or needle in p.sku.lower()
        ]

    def list_products_paginated(
        self,
        request,
        *,
        query: Optional[str] = None,
        include_inactive: bool = False,
        paginator_class: Optional[Type[PageNumberPagination]] = None,
        serializer_class=None,
        view=None,
    ):
        """Paginate the cached DTO list and return the paginator's response."""
        paginator = (paginator_class or PageNumberPagination)()
        dtos = self.search_products(query, include_inactive=include_inactive)
        page = paginator.paginate_queryset(dtos, request, view=view)
        if serializer_class is None:
            from .serializers import ProductReadSerializer  # Avoid circular import

            serializer_class = ProductReadSerializer
        if page is None:
            return Response(serializer_class(dtos, many=True).data)
        return paginator.get_paginated_response(serializer_class(page, many=True).data)

    def get_product(self, product_id: int, *, include_inactive: bool = False) -> Optional[ProductDTO]:
        self.logger.debug("Fetching product", product_id=product_id)
        filters: Dict[str, Any] = {"id": product_id}
        if not include_inactive:
            filters["is_active"] = True
        product = self.products.get(**filters)
        if not product:
            self.logger.info("Product not found", product_id=product_id)
            return None
        return ProductMapper.to_dto(product)

    # Staff mutations
    def create_product(
        self, data: Union[Dict[str, Any], ProductCreateCommand]
    ) -> Tuple[Optional[ProductDTO], Optional[ServiceError]]:
        cmd = data if isinstance(data, ProductCreateCommand) else ProductCreateCommand.from_raw(data)
        self.logger.info("Creating product", sku=cmd.sku, variants=len(cmd.variants))
        try:
            with transaction.atomic():
                product = self.products.create(
                    name=cmd.name,
                    sku=cmd.sku,
                    price=cmd.price,
                    description=cmd.description,
                    image=cmd.image,
                    stock_quantity=cmd.stock_quantity,
                    is_active=cmd.is_active,
                )
                if cmd.variants:
                    self.products.replace_variants(
                        product, [v.as_fields() for v in cmd.variants]
                    )
        except IntegrityError as exc:
            self.logger.warning("Product creation conflict", sku=cmd.sku, error=str(exc))
            return None, ("CONFLICT", "A product or variant with this SKU already exists", {"sku": cmd.sku})
        self.invalidate_listing()
        created = self.products.get(id=product.id)
        self.logger.info("Product created", product_id=product.id)
        return ProductMapper.to_dto(created), None

    def update_product(
        self, product_id: int, data: Union[Dict[str, Any], ProductUpdateCommand]
    ) -> Tuple[Optional[ProductDTO], Optional[ServiceError]]:
        cmd = (
            data
            if isinstance(data, ProductUpdateCommand)
            else ProductUpdateCommand.from_raw(product_id, data)
        )
        product = self.products.get(id=product_id)
        if not product:
            self.logger.warning("Product update failed: not found", product_id=product_id)
            return None, ("NOT_FOUND", "Product not found", {"id": str(product_id)})
        try:
            with transaction.atomic():
                self.products.update(product, **cmd.scalar_fields())
                if cmd.variants is not None:
                    self.products.replace_variants(
                        product, [v.as_fields() for v in cmd.variants]
                    )
        except IntegrityError as exc:
            self.logger.warning("Product update conflict", product_id=product_id, error=str(exc))
            return None, ("CONFLICT", "A product or variant with this SKU already exists", {"id": str(product_id)})
        self.invalidate_listing()
        self.logger.info("Product updated", product_id=product_id)
        return ProductMapper.to_dto(self.products.get(id=product_id)), None

    def delete_product(self, product_id: int) -> Tuple[bool, Optional[ServiceError]]:
        product = self.products.get(id=product_id)
        if not product:
            self.logger.warning("Product deletion failed: not found", product_id=product_id)
            return False, ("NOT_FOUND", "Product not found", {"id": str(product_id)})
        self.products.delete(product)
        self.invalidate_listing()
        self.logger.info("Product deleted", product_id=product_id)
        return True, None

    def set_variant_stock(
        self, product_id: int, variant_id: int, quantity: int
    ) -> Tuple[Optional[ProductDTO], Optional[ServiceError]]:
        if quantity < 0:
            return None, ("VALIDATION_ERROR", "quantity must be zero or more", {"quantity": quantity})
        variant = self.variants.get(id=variant_id, product_id=product_id)
        if not variant:
            self.logger.info(
                "Variant stock update failed: not found",
                product_id=product_id,
                variant_id=variant_id,
            )
            return None, ("NOT_FOUND", "Variant not found", {"variantId": str(variant_id)})
        self.variants.update(variant, quantity=quantity)
        self.invalidate_listing()
        self.logger.info(
            "Variant stock set", product_id=product_id, variant_id=variant_id, quantity=quantity
        )
        return ProductMapper.to_dto(self.products.get(id=product_id)), None
