"""
core/shared/aws/price_bulk/client.py - Price List Bulk API Cacheable 클라이언트

``requests`` 로 AWS Price List Bulk API를 조회하는 Cacheable 구현체들.
캐시 키의 content_hash는 HEAD 요청으로 얻은 ETag(따옴표 제거)이므로,
AWS가 파일을 갱신하면 새 캐시 파일이 생기고 기존 파일은 더 이상 참조되지 않는다.

클라이언트별 캐시 키:
    - ServiceIndexClient:    (None, etag)
    - RegionIndexClient:     (service_code, etag)
    - PricingListClient:     (offer.tag(), etag)
    - SavingsPlanListClient: (plan.tag(), etag)

사용법:
    import requests
    from core.cache import FileBackedCacheableBuilder
    from core.shared.aws.price_bulk import RegionIndexClient

    builder = FileBackedCacheableBuilder()
    cached = builder.build(RegionIndexClient(requests.Session()))
    index = cached.load("AmazonEC2").result
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

import requests

from core.cache import Cacheable, CacheKey
from core.config import settings
from core.exceptions import (
    PriceBulkDecodeError,
    PriceBulkError,
    PriceBulkHttpError,
    PriceBulkResponseError,
)

from .types import (
    PriceBulkOffer,
    PriceBulkSavingsPlan,
    PricingListResponse,
    RegionIndexResponse,
    SavingsPlanListResponse,
    ServiceListResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = settings.PRICE_BULK_BASE_URL

I = TypeVar("I")  # noqa: E741
R = TypeVar("R")


def load_etag(session: requests.Session, url: str, timeout: int = settings.HTTP_TIMEOUT) -> str | None:
    """HEAD 요청으로 ETag를 조회한다 (따옴표 제거).

    Returns:
        ETag 문자열. 헤더가 없으면 None

    Raises:
        PriceBulkHttpError: 요청 자체가 실패한 경우
    """
    try:
        response = session.head(url, timeout=timeout, allow_redirects=True)
    except requests.RequestException as e:
        raise PriceBulkHttpError(url, cause=e) from e

    etag = response.headers.get("etag")
    if not etag:
        return None
    return etag.strip('"')


def send_request(session: requests.Session, url: str, timeout: int = settings.HTTP_TIMEOUT) -> requests.Response:
    """GET 요청 후 2xx가 아니면 예외를 던진다.

    Raises:
        PriceBulkHttpError: 연결/타임아웃 등 요청 실패
        PriceBulkResponseError: 응답 상태 코드가 2xx가 아님
    """
    logger.debug(f"Requesting URL: {url}")
    try:
        response = session.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise PriceBulkHttpError(url, cause=e) from e

    try:
        response.raise_for_status()
    except requests.HTTPError as e:
        raise PriceBulkResponseError(url, response.status_code, cause=e) from e
    return response


class _PriceBulkCacheable(Cacheable[I, R, PriceBulkError], Generic[I, R]):
    """Price List Bulk API 공통 구현

    하위 클래스는 ``CATEGORY_KEY``, ``response_type``, ``request_url``, ``content_key`` 를 정의한다.
    """

    CATEGORY_KEY: str = ""
    response_type: Any = None

    fetch_errors = (PriceBulkError,)

    def __init__(
        self,
        session: requests.Session | None = None,
        base_url: str | None = None,
        timeout: int = settings.HTTP_TIMEOUT,
    ):
        self.session = session or requests.Session()
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout

    def request_url(self, input: I) -> str:  # noqa: A002
        raise NotImplementedError

    def content_key(self, input: I) -> str | None:  # noqa: A002
        return None

    def get_cache_key(self, input: I) -> CacheKey:  # noqa: A002
        url = self.request_url(input)
        return CacheKey(
            content_key=self.content_key(input),
            content_hash=load_etag(self.session, url, self.timeout),
        )

    def load(self, input: I) -> R:  # noqa: A002
        url = self.request_url(input)
        logger.info(f"{type(self).__name__}: 조회 {url}")
        response = send_request(self.session, url, self.timeout)
        try:
            return self.response_type.from_dict(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise PriceBulkDecodeError(url, cause=e) from e

    def category_key(self) -> str:
        return self.CATEGORY_KEY

    def encode(self, value: R) -> Any:
        return value.to_dict()  # type: ignore[attr-defined]

    def decode(self, data: Any) -> R:
        return self.response_type.from_dict(data)


class ServiceIndexClient(_PriceBulkCacheable[None, ServiceListResponse]):
    """전체 서비스 오퍼 인덱스 (``/offers/v1.0/aws/index.json``)"""

    CATEGORY_KEY = "aws/bulk/service_index"
    response_type = ServiceListResponse

    def request_url(self, input: None = None) -> str:  # noqa: A002
        return f"{self.base_url}/offers/v1.0/aws/index.json"


class RegionIndexClient(_PriceBulkCacheable[str, RegionIndexResponse]):
    """서비스별 리전 인덱스 (입력: 서비스 코드)"""

    CATEGORY_KEY = "aws/bulk/region_index"
    response_type = RegionIndexResponse

    def request_url(self, service_code: str) -> str:  # type: ignore[override]
        return f"{self.base_url}/offers/v1.0/aws/{service_code}/current/region_index.json"

    def content_key(self, service_code: str) -> str:  # type: ignore[override]
        return service_code


class PricingListClient(_PriceBulkCacheable[PriceBulkOffer, PricingListResponse]):
    """리전/버전별 가격표 (입력: PriceBulkOffer)"""

    CATEGORY_KEY = "aws/bulk/pricing_list"
    response_type = PricingListResponse

    def request_url(self, offer: PriceBulkOffer) -> str:  # type: ignore[override]
        return f"{self.base_url}/{offer.path()}"

    def content_key(self, offer: PriceBulkOffer) -> str:  # type: ignore[override]
        return offer.tag()


class SavingsPlanListClient(_PriceBulkCacheable[PriceBulkSavingsPlan, SavingsPlanListResponse]):
    """리전/버전별 Savings Plan 요율표 (입력: PriceBulkSavingsPlan)"""

    CATEGORY_KEY = "aws/bulk/savings_plan_list"
    response_type = SavingsPlanListResponse

    def request_url(self, plan: PriceBulkSavingsPlan) -> str:  # type: ignore[override]
        return f"{self.base_url}/{plan.path()}"

    def content_key(self, plan: PriceBulkSavingsPlan) -> str:  # type: ignore[override]
        return plan.tag()
