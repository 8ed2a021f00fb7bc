from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Protocol

from .models import Product, ProductVariant


class ProductRepositoryProtocol(Protocol):
    def list(self, **filters) -> Iterable[Product]: ...

    def get(self, **filters) -> Optional[Product]: ...

    def create(self, **data) -> Product: ...

    def update(self, product: Product, **data) -> Product: ...

    def delete(self, product: Product) -> None: ...

    def replace_variants(
        self, product: Product, variants: List[Dict[str, Any]]
    ) -> None: ...


class VariantRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional[ProductVariant]: ...

    def update(self, variant: ProductVariant, **data) -> ProductVariant: ...


class CacheBackendProtocol(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None: ...
