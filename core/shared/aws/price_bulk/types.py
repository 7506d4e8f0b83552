"""
core/shared/aws/price_bulk/types.py - Price List Bulk API 응답 타입

AWS Price List Bulk API(``https://pricing.us-east-1.amazonaws.com``)의
JSON 응답을 dataclass로 표현한다. 모든 응답 타입은 ``from_dict`` / ``to_dict`` 를
제공하며, 파일 캐시에는 ``to_dict`` 결과(원본 응답과 같은 camelCase 키)가 저장된다.

응답 종류:
    - ServiceListResponse: ``/offers/v1.0/aws/index.json``
    - RegionIndexResponse: ``/offers/v1.0/aws/{service}/current/region_index.json``
    - PricingListResponse: ``/offers/v1.0/aws/{service}/{version}/{region}/index.json``
    - SavingsPlanListResponse: ``/savingsPlan/v1.0/aws/{service}/{version}/{region}/index.json``

입력 타입:
    - PriceBulkOffer: 가격표 오퍼 파일 위치 (서비스/버전/리전/파일명)
    - PriceBulkSavingsPlan: Savings Plan 파일 위치
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

# /{kind}/v1.0/aws/{service_code}/{offer_version}/{region}/{filename}
OFFER_RESOURCE_REGEX = re.compile(r"^/([^/]+)/v1\.0/aws/([^/]+)/([^/]+)/([^/]+)/([^/]+)$")


def _parse_datetime(value: str) -> datetime:
    """``2024-03-12T15:37:24Z`` 형식 문자열을 UTC datetime으로 변환"""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _format_datetime(value: datetime) -> str:
    """UTC ``Z`` 형식 문자열 (소수 초가 있으면 마이크로초까지 유지)"""
    value = value.astimezone(timezone.utc)
    if value.microsecond:
        return value.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


# =============================================================================
# 열거형
# =============================================================================


class ContractLength(Enum):
    """약정 기간"""

    ONE_YEAR = "1yr"
    THREE_YEAR = "3yr"

    @classmethod
    def parse(cls, value: str) -> ContractLength:
        normalized = value.replace(" ", "").lower()
        aliases = {"1yr": cls.ONE_YEAR, "oneyear": cls.ONE_YEAR, "3yr": cls.THREE_YEAR, "threeyear": cls.THREE_YEAR}
        if normalized not in aliases:
            raise ValueError(f"알 수 없는 약정 기간: {value}")
        return aliases[normalized]


class PurchaseOption(Enum):
    """선결제 옵션"""

    NO_UPFRONT = "No Upfront"
    PARTIAL_UPFRONT = "Partial Upfront"
    ALL_UPFRONT = "All Upfront"

    @classmethod
    def parse(cls, value: str) -> PurchaseOption:
        normalized = value.replace(" ", "").lower()
        for member in cls:
            if member.value.replace(" ", "").lower() == normalized:
                return member
        raise ValueError(f"알 수 없는 선결제 옵션: {value}")


class RIOfferingClass(Enum):
    """Reserved Instance 오퍼링 클래스"""

    STANDARD = "standard"
    CONVERTIBLE = "convertible"

    @classmethod
    def parse(cls, value: str) -> RIOfferingClass:
        return cls(value.lower())


class Currency(Enum):
    USD = "USD"


# =============================================================================
# 입력 타입 (캐시 키 / URL 구성)
# =============================================================================


@dataclass(frozen=True)
class PriceBulkOffer:
    """가격표 오퍼 파일 위치

    Attributes:
        service_code: 서비스 코드 (예: "AmazonEC2")
        offer_version: 오퍼 버전 (예: "20240312153724")
        region: 리전 코드 (예: "ap-northeast-1")
        filename: 파일명 (예: "index.json")
    """

    service_code: str
    offer_version: str
    region: str
    filename: str = "index.json"

    PATH_PREFIX = "offers"

    def path(self) -> str:
        """base URL 기준 상대 경로"""
        return (
            f"{self.PATH_PREFIX}/v1.0/aws/{self.service_code}/{self.offer_version}/{self.region}/{self.filename}"
        )

    def tag(self) -> str:
        """캐시 content_key로 쓰는 ``{region}-{service}-{version}`` 태그"""
        return f"{self.region}-{self.service_code}-{self.offer_version}"

    @classmethod
    def parse(cls, resource_path: str) -> PriceBulkOffer:
        """``/offers/v1.0/aws/{service}/{version}/{region}/{file}`` 경로 파싱

        Raises:
            ValueError: 형식이 맞지 않는 경로
        """
        match = OFFER_RESOURCE_REGEX.match(resource_path)
        if not match:
            raise ValueError(f"잘못된 오퍼 리소스 경로: {resource_path}")
        _, service_code, offer_version, region, filename = match.groups()
        return cls(
            service_code=service_code,
            offer_version=offer_version,
            region=region,
            filename=filename,
        )

    def to_resource_path(self) -> str:
        return f"/{self.path()}"


@dataclass(frozen=True)
class PriceBulkSavingsPlan(PriceBulkOffer):
    """Savings Plan 파일 위치 (경로 prefix만 다름)"""

    PATH_PREFIX = "savingsPlan"


# =============================================================================
# 서비스/리전 인덱스
# =============================================================================


@dataclass
class ServiceListOffer:
    offer_code: str
    version_index_url: str | None = None
    current_version_url: str | None = None
    current_region_index_url: str | None = None
    savings_plan_version_index_url: str | None = None
    current_savings_plan_index_url: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ServiceListOffer:
        return cls(
            offer_code=data["offerCode"],
            version_index_url=data.get("versionIndexUrl"),
            current_version_url=data.get("currentVersionUrl"),
            current_region_index_url=data.get("currentRegionIndexUrl"),
            savings_plan_version_index_url=data.get("savingsPlanVersionIndexUrl"),
            current_savings_plan_index_url=data.get("currentSavingsPlanIndexUrl"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "offerCode": self.offer_code,
            "versionIndexUrl": self.version_index_url,
            "currentVersionUrl": self.current_version_url,
            "currentRegionIndexUrl": self.current_region_index_url,
            "savingsPlanVersionIndexUrl": self.savings_plan_version_index_url,
            "currentSavingsPlanIndexUrl": self.current_savings_plan_index_url,
        }


@dataclass
class ServiceListResponse:
    format_version: str
    publication_date: datetime
    offers: dict[str, ServiceListOffer]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ServiceListResponse:
        return cls(
            format_version=data["formatVersion"],
            publication_date=_parse_datetime(data["publicationDate"]),
            offers={k: ServiceListOffer.from_dict(v) for k, v in data["offers"].items()},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "formatVersion": self.format_version,
            "publicationDate": _format_datetime(self.publication_date),
            "offers": {k: v.to_dict() for k, v in self.offers.items()},
        }


@dataclass
class RegionIndexRegion:
    region_code: str
    current_version_url: PriceBulkOffer

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RegionIndexRegion:
        return cls(
            region_code=data["regionCode"],
            current_version_url=PriceBulkOffer.parse(data["currentVersionUrl"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "regionCode": self.region_code,
            "currentVersionUrl": self.current_version_url.to_resource_path(),
        }


@dataclass
class RegionIndexResponse:
    format_version: str
    publication_date: datetime
    regions: dict[str, RegionIndexRegion]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RegionIndexResponse:
        return cls(
            format_version=data["formatVersion"],
            publication_date=_parse_datetime(data["publicationDate"]),
            regions={k: RegionIndexRegion.from_dict(v) for k, v in data["regions"].items()},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "formatVersion": self.format_version,
            "publicationDate": _format_datetime(self.publication_date),
            "regions": {k: v.to_dict() for k, v in self.regions.items()},
        }


# =============================================================================
# 가격표 (On-Demand / Reserved)
# =============================================================================


@dataclass
class PriceDimension:
    rate_code: str
    description: str
    unit: str
    price_per_unit: dict[str, str]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PriceDimension:
        return cls(
            rate_code=data["rateCode"],
            description=data["description"],
            unit=data["unit"],
            price_per_unit=dict(data["pricePerUnit"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "rateCode": self.rate_code,
            "description": self.description,
            "unit": self.unit,
            "pricePerUnit": self.price_per_unit,
        }

    @property
    def usd(self) -> float:
        return float(self.price_per_unit.get(Currency.USD.value, "0"))


@dataclass
class RITermAttributes:
    lease_contract_length: ContractLength
    offering_class: RIOfferingClass
    purchase_option: PurchaseOption

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RITermAttributes:
        return cls(
            lease_contract_length=ContractLength.parse(data["LeaseContractLength"]),
            offering_class=RIOfferingClass.parse(data["OfferingClass"]),
            purchase_option=PurchaseOption.parse(data["PurchaseOption"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "LeaseContractLength": self.lease_contract_length.value,
            "OfferingClass": self.offering_class.value,
            "PurchaseOption": self.purchase_option.value,
        }


@dataclass
class PriceOffering:
    """sku 하나의 가격 조건 (termAttributes는 On-Demand면 dict, Reserved면 RITermAttributes)"""

    offer_term_code: str
    sku: str
    effective_date: datetime
    price_dimensions: dict[str, PriceDimension]
    term_attributes: dict[str, str] | RITermAttributes

    @classmethod
    def from_dict(cls, data: dict[str, Any], reserved: bool = False) -> PriceOffering:
        term_attributes: dict[str, str] | RITermAttributes
        if reserved:
            term_attributes = RITermAttributes.from_dict(data["termAttributes"])
        else:
            term_attributes = dict(data.get("termAttributes") or {})
        return cls(
            offer_term_code=data["offerTermCode"],
            sku=data["sku"],
            effective_date=_parse_datetime(data["effectiveDate"]),
            price_dimensions={k: PriceDimension.from_dict(v) for k, v in data["priceDimensions"].items()},
            term_attributes=term_attributes,
        )

    def to_dict(self) -> dict[str, Any]:
        term_attributes = (
            self.term_attributes.to_dict()
            if isinstance(self.term_attributes, RITermAttributes)
            else self.term_attributes
        )
        return {
            "offerTermCode": self.offer_term_code,
            "sku": self.sku,
            "effectiveDate": _format_datetime(self.effective_date),
            "priceDimensions": {k: v.to_dict() for k, v in self.price_dimensions.items()},
            "termAttributes": term_attributes,
        }


@dataclass
class PricingListProduct:
    product_family: str
    sku: str
    attributes: dict[str, str]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PricingListProduct:
        return cls(
            product_family=data.get("productFamily", ""),
            sku=data["sku"],
            attributes=dict(data.get("attributes") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "productFamily": self.product_family,
            "sku": self.sku,
            "attributes": self.attributes,
        }


def _terms_from_dict(
    data: dict[str, Any], reserved: bool
) -> dict[str, dict[str, PriceOffering]]:
    return {
        sku: {code: PriceOffering.from_dict(offering, reserved=reserved) for code, offering in offerings.items()}
        for sku, offerings in data.items()
    }


def _terms_to_dict(terms: dict[str, dict[str, PriceOffering]]) -> dict[str, Any]:
    return {sku: {code: o.to_dict() for code, o in offerings.items()} for sku, offerings in terms.items()}


@dataclass
class PricingListTerms:
    on_demand: dict[str, dict[str, PriceOffering]] = field(default_factory=dict)
    reserved: dict[str, dict[str, PriceOffering]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PricingListTerms:
        return cls(
            on_demand=_terms_from_dict(data.get("OnDemand") or {}, reserved=False),
            reserved=_terms_from_dict(data.get("Reserved") or {}, reserved=True),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "OnDemand": _terms_to_dict(self.on_demand),
            "Reserved": _terms_to_dict(self.reserved),
        }


@dataclass
class PricingListResponse:
    format_version: str
    publication_date: datetime
    version: str
    products: dict[str, PricingListProduct]
    terms: PricingListTerms

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PricingListResponse:
        return cls(
            format_version=data["formatVersion"],
            publication_date=_parse_datetime(data["publicationDate"]),
            version=data["version"],
            products={k: PricingListProduct.from_dict(v) for k, v in data["products"].items()},
            terms=PricingListTerms.from_dict(data["terms"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "formatVersion": self.format_version,
            "publicationDate": _format_datetime(self.publication_date),
            "version": self.version,
            "products": {k: v.to_dict() for k, v in self.products.items()},
            "terms": self.terms.to_dict(),
        }

    def on_demand_prices(self, attribute: str = "instanceType") -> dict[str, float]:
        """On-Demand 시간당 USD 가격을 ``{attribute 값: price}`` 로 반환

        같은 attribute 값이 여러 sku에 있으면 먼저 나온 0이 아닌 가격을 사용한다.
        """
        prices: dict[str, float] = {}
        for sku, offerings in self.terms.on_demand.items():
            product = self.products.get(sku)
            if product is None:
                continue
            name = product.attributes.get(attribute)
            if not name or name in prices:
                continue
            for offering in offerings.values():
                for dim in offering.price_dimensions.values():
                    if dim.usd > 0:
                        prices[name] = dim.usd
                        break
                if name in prices:
                    break
        return prices


# =============================================================================
# Savings Plan
# =============================================================================


@dataclass
class SavingsPlanProductAttributes:
    purchase_option: PurchaseOption
    product_family: str
    region_code: str | None
    service_code: str
    granularity: str
    instance_type: str | None
    location_type: str
    purchase_term: ContractLength
    location: str
    usage_type: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SavingsPlanProductAttributes:
        return cls(
            purchase_option=PurchaseOption.parse(data["purchaseOption"]),
            product_family=data["productFamily"],
            region_code=data.get("regionCode"),
            service_code=data["serviceCode"],
            granularity=data["granularity"],
            instance_type=data.get("instanceType"),
            location_type=data["locationType"],
            purchase_term=ContractLength.parse(data["purchaseTerm"]),
            location=data["location"],
            usage_type=data["usageType"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "purchaseOption": self.purchase_option.value,
            "productFamily": self.product_family,
            "regionCode": self.region_code,
            "serviceCode": self.service_code,
            "granularity": self.granularity,
            "instanceType": self.instance_type,
            "locationType": self.location_type,
            "purchaseTerm": self.purchase_term.value,
            "location": self.location,
            "usageType": self.usage_type,
        }


@dataclass
class SavingsPlanProduct:
    sku: str
    product_family: str
    service_code: str
    usage_type: str
    operation: str
    attributes: SavingsPlanProductAttributes

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SavingsPlanProduct:
        return cls(
            sku=data["sku"],
            product_family=data["productFamily"],
            service_code=data["serviceCode"],
            usage_type=data["usageType"],
            operation=data["operation"],
            attributes=SavingsPlanProductAttributes.from_dict(data["attributes"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "sku": self.sku,
            "productFamily": self.product_family,
            "serviceCode": self.service_code,
            "usageType": self.usage_type,
            "operation": self.operation,
            "attributes": self.attributes.to_dict(),
        }


@dataclass(frozen=True)
class LeaseContractLength:
    duration: int
    unit: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LeaseContractLength:
        return cls(duration=int(data["duration"]), unit=data["unit"])

    def to_dict(self) -> dict[str, Any]:
        return {"duration": self.duration, "unit": self.unit}


@dataclass(frozen=True)
class DiscountedRate:
    price: str
    currency: Currency

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DiscountedRate:
        return cls(price=data["price"], currency=Currency(data["currency"].upper()))

    def to_dict(self) -> dict[str, Any]:
        return {"price": self.price, "currency": self.currency.value}


@dataclass
class SavingsPlanTermRate:
    discounted_sku: str
    discounted_usage_type: str
    discounted_operation: str
    discounted_service_code: str
    rate_code: str
    unit: str
    discounted_rate: DiscountedRate

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SavingsPlanTermRate:
        return cls(
            discounted_sku=data["discountedSku"],
            discounted_usage_type=data["discountedUsageType"],
            discounted_operation=data["discountedOperation"],
            discounted_service_code=data["discountedServiceCode"],
            rate_code=data["rateCode"],
            unit=data["unit"],
            discounted_rate=DiscountedRate.from_dict(data["discountedRate"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "discountedSku": self.discounted_sku,
            "discountedUsageType": self.discounted_usage_type,
            "discountedOperation": self.discounted_operation,
            "discountedServiceCode": self.discounted_service_code,
            "rateCode": self.rate_code,
            "unit": self.unit,
            "discountedRate": self.discounted_rate.to_dict(),
        }


@dataclass
class SavingsPlanTerm:
    sku: str
    description: str
    effective_date: datetime
    lease_contract_length: LeaseContractLength
    rates: list[SavingsPlanTermRate]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SavingsPlanTerm:
        return cls(
            sku=data["sku"],
            description=data["description"],
            effective_date=_parse_datetime(data["effectiveDate"]),
            lease_contract_length=LeaseContractLength.from_dict(data["leaseContractLength"]),
            rates=[SavingsPlanTermRate.from_dict(r) for r in data.get("rates") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "sku": self.sku,
            "description": self.description,
            "effectiveDate": _format_datetime(self.effective_date),
            "leaseContractLength": self.lease_contract_length.to_dict(),
            "rates": [r.to_dict() for r in self.rates],
        }


@dataclass
class SavingsPlanListResponse:
    format_version: str
    publication_date: datetime
    version: str
    products: list[SavingsPlanProduct]
    terms: list[SavingsPlanTerm]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SavingsPlanListResponse:
        return cls(
            format_version=data["formatVersion"],
            publication_date=_parse_datetime(data["publicationDate"]),
            version=data["version"],
            products=[SavingsPlanProduct.from_dict(p) for p in data["products"]],
            terms=[SavingsPlanTerm.from_dict(t) for t in data["terms"].get("savingsPlan") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "formatVersion": self.format_version,
            "publicationDate": _format_datetime(self.publication_date),
            "version": self.version,
            "products": [p.to_dict() for p in self.products],
            "terms": {"savingsPlan": [t.to_dict() for t in self.terms]},
        }
