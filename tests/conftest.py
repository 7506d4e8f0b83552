"""
tests/conftest.py - pytest 공통 픽스처

캐시 디렉토리, 가짜 Cacheable, HTTP/boto3 모킹 헬퍼를 제공합니다.

Usage:
    def test_something(cache_root, fake_cacheable):
        # cache_root: 테스트별 임시 캐시 루트
        # fake_cacheable: 호출 횟수를 기록하는 Cacheable
        pass
"""

import sys
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Optional
from unittest.mock import MagicMock

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from core.cache import Cacheable, CacheKey  # noqa: E402

# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """테스트 환경 설정"""
    # 테스트용 환경 변수 설정
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    # 캐시 관련 설정은 테스트마다 명시적으로 지정
    monkeypatch.delenv("APC_CACHE_ROOT", raising=False)
    monkeypatch.delenv("APC_CACHE_MAX_AGE_DAYS", raising=False)
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.delenv("APC_CACHE_REFRESH", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_FORMAT", raising=False)

    yield


# =============================================================================
# 캐시 픽스처
# =============================================================================


class FakeCacheable(Cacheable[str, Dict[str, Any], RuntimeError]):
    """호출 횟수를 기록하는 테스트용 Cacheable

    Attributes:
        key_calls: get_cache_key 호출 횟수
        load_calls: load 호출 횟수
        content_hash: 캐시 키에 사용할 hash (변경하면 새 파일)
    """

    fetch_errors = (RuntimeError,)

    def __init__(self, category: str = "test", content_hash: Optional[str] = "deadbeef"):
        self.category = category
        self.content_hash = content_hash
        self.key_calls = 0
        self.load_calls = 0
        self.key_error: Optional[Exception] = None
        self.load_error: Optional[Exception] = None

    def get_cache_key(self, input: str) -> CacheKey:  # noqa: A002
        self.key_calls += 1
        if self.key_error is not None:
            raise self.key_error
        return CacheKey(content_key=input, content_hash=self.content_hash)

    def load(self, input: str) -> Dict[str, Any]:  # noqa: A002
        self.load_calls += 1
        if self.load_error is not None:
            raise self.load_error
        return {"input": input, "value": self.load_calls}

    def category_key(self) -> str:
        return self.category


@pytest.fixture
def cache_root(tmp_path) -> Path:
    """테스트별 임시 캐시 루트"""
    return tmp_path / "cache"


@pytest.fixture
def fake_cacheable() -> FakeCacheable:
    return FakeCacheable()


@pytest.fixture
def max_age() -> timedelta:
    return timedelta(days=7)


# =============================================================================
# HTTP 모킹 픽스처
# =============================================================================


def create_mock_http_response(
    json_data: Any = None,
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None,
) -> MagicMock:
    """requests.Response 모킹 헬퍼"""
    import requests

    response = MagicMock()
    response.status_code = status_code
    response.headers = headers or {}
    response.json.return_value = json_data
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error", response=response)
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def mock_http_session():
    """requests.Session 모킹 (head/get)"""
    session = MagicMock()
    session.head.return_value = create_mock_http_response(headers={"etag": '"etag-1"'})
    session.get.return_value = create_mock_http_response(json_data={})
    yield session


# =============================================================================
# boto3 모킹 헬퍼
# =============================================================================


def create_mock_regional_client(region: str) -> MagicMock:
    """meta.region_name이 설정된 boto3 client 모킹"""
    client = MagicMock()
    client.meta.region_name = region
    return client


def create_mock_client_error(
    error_code: str,
    error_message: str = "Test error",
) -> Exception:
    """ClientError 생성 헬퍼"""
    from botocore.exceptions import ClientError

    return ClientError(
        {
            "Error": {
                "Code": error_code,
                "Message": error_message,
            }
        },
        "TestOperation",
    )


# =============================================================================
# moto 통합 (선택적)
# =============================================================================


@pytest.fixture
def aws_credentials(monkeypatch):
    """moto 사용 시 AWS 자격 증명 설정"""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def moto_session(aws_credentials):
    """moto로 모킹된 boto3 Session"""
    moto = pytest.importorskip("moto")

    with moto.mock_aws():
        import boto3

        yield boto3.Session(region_name="us-east-1")


# =============================================================================
# Price List Bulk 샘플 응답
# =============================================================================


@pytest.fixture
def sample_service_list() -> Dict[str, Any]:
    return {
        "formatVersion": "v1.0",
        "disclaimer": "This pricing list is for informational purposes only.",
        "publicationDate": "2024-03-12T15:37:24Z",
        "offers": {
            "AmazonEC2": {
                "offerCode": "AmazonEC2",
                "versionIndexUrl": "/offers/v1.0/aws/AmazonEC2/index.json",
                "currentVersionUrl": "/offers/v1.0/aws/AmazonEC2/current/index.json",
                "currentRegionIndexUrl": "/offers/v1.0/aws/AmazonEC2/current/region_index.json",
                "savingsPlanVersionIndexUrl": None,
                "currentSavingsPlanIndexUrl": None,
            },
            "AmazonElastiCache": {
                "offerCode": "AmazonElastiCache",
                "versionIndexUrl": "/offers/v1.0/aws/AmazonElastiCache/index.json",
                "currentVersionUrl": "/offers/v1.0/aws/AmazonElastiCache/current/index.json",
                "currentRegionIndexUrl": "/offers/v1.0/aws/AmazonElastiCache/current/region_index.json",
            },
        },
    }


@pytest.fixture
def sample_region_index() -> Dict[str, Any]:
    return {
        "formatVersion": "v1.0",
        "disclaimer": "This pricing list is for informational purposes only.",
        "publicationDate": "2024-03-12T15:37:24Z",
        "regions": {
            "ap-northeast-1": {
                "regionCode": "ap-northeast-1",
                "currentVersionUrl": "/offers/v1.0/aws/AmazonEC2/20240312153724/ap-northeast-1/index.json",
            },
            "us-east-1": {
                "regionCode": "us-east-1",
                "currentVersionUrl": "/offers/v1.0/aws/AmazonEC2/20240312153724/us-east-1/index.json",
            },
        },
    }


def _on_demand_offering(sku: str, price: str) -> Dict[str, Any]:
    return {
        f"{sku}.JRTCKXETXF": {
            "offerTermCode": "JRTCKXETXF",
            "sku": sku,
            "effectiveDate": "2024-03-01T00:00:00Z",
            "priceDimensions": {
                f"{sku}.JRTCKXETXF.6YS6EN2CT7": {
                    "rateCode": f"{sku}.JRTCKXETXF.6YS6EN2CT7",
                    "description": "On Demand Linux",
                    "unit": "Hrs",
                    "pricePerUnit": {"USD": price},
                }
            },
            "termAttributes": {},
        }
    }


@pytest.fixture
def sample_pricing_list() -> Dict[str, Any]:
    return {
        "formatVersion": "v1.0",
        "disclaimer": "This pricing list is for informational purposes only.",
        "offerCode": "AmazonEC2",
        "version": "20240312153724",
        "publicationDate": "2024-03-12T15:37:24Z",
        "products": {
            "SKU1": {
                "sku": "SKU1",
                "productFamily": "Compute Instance",
                "attributes": {"instanceType": "m5.large", "operatingSystem": "Linux"},
            },
            "SKU2": {
                "sku": "SKU2",
                "productFamily": "Compute Instance",
                "attributes": {"instanceType": "t3.micro", "operatingSystem": "Linux"},
            },
            "SKU3": {
                "sku": "SKU3",
                "productFamily": "Compute Instance",
                "attributes": {"instanceType": "m5.large", "operatingSystem": "Linux"},
            },
        },
        "terms": {
            "OnDemand": {
                "SKU1": _on_demand_offering("SKU1", "0.1240000000"),
                "SKU2": _on_demand_offering("SKU2", "0.0136000000"),
                "SKU3": _on_demand_offering("SKU3", "0.5000000000"),
            },
            "Reserved": {
                "SKU1": {
                    "SKU1.4NA7Y494T4": {
                        "offerTermCode": "4NA7Y494T4",
                        "sku": "SKU1",
                        "effectiveDate": "2024-03-01T00:00:00Z",
                        "priceDimensions": {
                            "SKU1.4NA7Y494T4.6YS6EN2CT7": {
                                "rateCode": "SKU1.4NA7Y494T4.6YS6EN2CT7",
                                "description": "Linux/UNIX (Amazon VPC), m5.large reserved instance applied",
                                "unit": "Hrs",
                                "pricePerUnit": {"USD": "0.0780000000"},
                            }
                        },
                        "termAttributes": {
                            "LeaseContractLength": "1yr",
                            "OfferingClass": "standard",
                            "PurchaseOption": "No Upfront",
                        },
                    }
                }
            },
        },
    }


@pytest.fixture
def sample_savings_plan_list() -> Dict[str, Any]:
    return {
        "version": "20240312153724",
        "publicationDate": "2024-03-12T15:37:24Z",
        "formatVersion": "v1.0",
        "products": [
            {
                "sku": "SP1",
                "productFamily": "EC2InstanceSavingsPlans",
                "serviceCode": "ComputeSavingsPlans",
                "usageType": "EC2SP:m5.1yrNoUpfront",
                "operation": "",
                "attributes": {
                    "purchaseOption": "No Upfront",
                    "granularity": "hourly",
                    "instanceType": "m5",
                    "purchaseTerm": "1yr",
                    "locationType": "AWS Region",
                    "location": "Asia Pacific (Tokyo)",
                    "regionCode": "ap-northeast-1",
                    "productFamily": "EC2InstanceSavingsPlans",
                    "serviceCode": "ComputeSavingsPlans",
                    "usageType": "EC2SP:m5.1yrNoUpfront",
                },
            }
        ],
        "terms": {
            "savingsPlan": [
                {
                    "sku": "SP1",
                    "description": "1 year No Upfront m5 EC2 Instance Savings Plan in ap-northeast-1",
                    "effectiveDate": "2024-03-01T00:00:00Z",
                    "leaseContractLength": {"duration": 1, "unit": "year"},
                    "rates": [
                        {
                            "discountedSku": "SKU1",
                            "discountedUsageType": "APN1-BoxUsage:m5.large",
                            "discountedOperation": "RunInstances",
                            "discountedServiceCode": "AmazonEC2",
                            "rateCode": "SP1.SKU1",
                            "unit": "Hrs",
                            "discountedRate": {"price": "0.0830", "currency": "USD"},
                        },
                        {
                            "discountedSku": "SKU4",
                            "discountedUsageType": "APN1-BoxUsage:m5.xlarge",
                            "discountedOperation": "RunInstances",
                            "discountedServiceCode": "AmazonEC2",
                            "rateCode": "SP1.SKU4",
                            "unit": "Hrs",
                            "discountedRate": {"price": "0.1660", "currency": "USD"},
                        },
                    ],
                },
                {
                    "sku": "SP2",
                    "description": "empty term",
                    "effectiveDate": "2024-03-01T00:00:00Z",
                    "leaseContractLength": {"duration": 3, "unit": "year"},
                    "rates": [],
                },
            ]
        },
    }
