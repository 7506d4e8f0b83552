"""
core/shared/aws/price_bulk - AWS Price List Bulk API

공개 가격표 파일(``https://pricing.us-east-1.amazonaws.com``)을 조회하는
Cacheable 클라이언트와 응답 타입을 제공합니다. API 키나 자격 증명이 필요 없습니다.

모듈 구성:
    - client: ServiceIndexClient, RegionIndexClient, PricingListClient, SavingsPlanListClient
    - types: 응답 dataclass 및 PriceBulkOffer / PriceBulkSavingsPlan

사용법:
    from core.cache import FileBackedCacheableBuilder
    from core.shared.aws.price_bulk import PriceBulkOffer, PricingListClient

    cached = FileBackedCacheableBuilder().build(PricingListClient())
    loaded = cached.load(PriceBulkOffer("AmazonEC2", "20240312153724", "ap-northeast-1"))
    prices = loaded.result.on_demand_prices()
"""

from .client import (
    DEFAULT_BASE_URL,
    PricingListClient,
    RegionIndexClient,
    SavingsPlanListClient,
    ServiceIndexClient,
    load_etag,
    send_request,
)
from .types import (
    ContractLength,
    Currency,
    PriceBulkOffer,
    PriceBulkSavingsPlan,
    PriceDimension,
    PriceOffering,
    PricingListResponse,
    PurchaseOption,
    RegionIndexResponse,
    RIOfferingClass,
    SavingsPlanListResponse,
    SavingsPlanProductAttributes,
    SavingsPlanTermRate,
    ServiceListResponse,
)

__all__ = [
    # Clients
    "DEFAULT_BASE_URL",
    "ServiceIndexClient",
    "RegionIndexClient",
    "PricingListClient",
    "SavingsPlanListClient",
    "load_etag",
    "send_request",
    # Types
    "ContractLength",
    "Currency",
    "PriceBulkOffer",
    "PriceBulkSavingsPlan",
    "PriceDimension",
    "PriceOffering",
    "PricingListResponse",
    "PurchaseOption",
    "RegionIndexResponse",
    "RIOfferingClass",
    "SavingsPlanListResponse",
    "SavingsPlanProductAttributes",
    "SavingsPlanTermRate",
    "ServiceListResponse",
]
