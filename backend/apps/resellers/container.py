from __future__ import annotations

from .repositories import ResellerOrderRepository, ResellerRepository
from .services import ResellerService


def build_reseller_service() -> ResellerService:
    return ResellerService(resellers=ResellerRepository(), orders=ResellerOrderRepository())
