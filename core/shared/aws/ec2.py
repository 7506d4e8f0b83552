"""
core/shared/aws/ec2.py - EC2 인스턴스 타입 조회

주요 리전(settings.MAJOR_REGIONS)에 DescribeInstanceTypes를 병렬 호출하여
인스턴스 타입별 스펙을 하나의 딕셔너리로 합친다.

동작:
    - 리전별 boto3 EC2 client는 ClientSet으로 한 번만 생성
    - 리전 순서대로 제출한 작업 결과를 같은 순서로 병합 (먼저 나온 리전 값 유지)
    - 한 리전이라도 실패하면 첫 번째 실패가 그대로 전파 (재시도 없음)

사용법:
    from core.shared.aws.ec2 import Ec2Client

    client = Ec2Client()
    types = client.describe_all_instance_types()
    print(types["m5.large"]["VCpuInfo"]["DefaultVCpus"])

    # 파일 캐시 (TTL 기반, content_hash 없음)
    cached = FileBackedCacheableBuilder().build(InstanceTypesCacheable(client))
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError

from core.cache import Cacheable, CacheKey
from core.config import settings
from core.exceptions import AwsClientError, is_throttling
from core.parallel import ClientSet, create_session, regional_client_factory

if TYPE_CHECKING:
    import boto3

logger = logging.getLogger(__name__)

# {instance_type: InstanceTypeInfo}
InstanceTypeMap = dict[str, dict[str, Any]]


def build_client_set(session: boto3.Session | None = None) -> ClientSet[Any, Any]:
    """리전별 EC2 client를 만드는 ClientSet 생성"""
    return ClientSet(session or create_session(), regional_client_factory("ec2"))


def describe_instance_types(client: Any, instance_types: list[str] | None = None) -> InstanceTypeMap:
    """한 리전의 DescribeInstanceTypes 전체 페이지 조회

    Args:
        client: boto3 EC2 client
        instance_types: 조회할 인스턴스 타입 (None이면 전체)

    Returns:
        ``{instance_type: InstanceTypeInfo}`` 딕셔너리

    Raises:
        AwsClientError: API 호출 실패
    """
    region = client.meta.region_name
    request: dict[str, Any] = {}
    if instance_types:
        request["InstanceTypes"] = instance_types

    result: InstanceTypeMap = {}
    next_token: str | None = None
    while True:
        logger.info(f"Ec2Client: DescribeInstanceTypes 요청 (region={region})")
        if next_token:
            request["NextToken"] = next_token
        try:
            response = client.describe_instance_types(**request)
        except (ClientError, BotoCoreError) as e:
            if is_throttling(e):
                logger.warning(f"Ec2Client: API 제한 (region={region})")
            raise AwsClientError.from_boto_error("ec2", "describe_instance_types", e) from e

        items = response.get("InstanceTypes")
        if items is None:
            break
        logger.info(f"Ec2Client: DescribeInstanceTypes 응답 (region={region}, count={len(items)})")
        for item in items:
            instance_type = item.get("InstanceType")
            if instance_type:
                result[instance_type] = item

        next_token = response.get("NextToken")
        if not next_token:
            break
    return result


class Ec2Client:
    """주요 리전 EC2 조회 클라이언트

    Attributes:
        client_set: 리전별 boto3 EC2 client 풀
        regions: 조회 대상 리전 (기본: settings.MAJOR_REGIONS)
    """

    def __init__(
        self,
        session: boto3.Session | None = None,
        regions: tuple[str, ...] | list[str] | None = None,
        max_workers: int = settings.MAX_WORKERS,
        client_set: ClientSet[Any, Any] | None = None,
    ):
        self.client_set = client_set if client_set is not None else build_client_set(session)
        self.regions = tuple(regions) if regions else settings.MAJOR_REGIONS
        self.max_workers = max_workers

    def describe_all_instance_types(self) -> InstanceTypeMap:
        """모든 대상 리전의 인스턴스 타입을 병합하여 반환

        같은 인스턴스 타입이 여러 리전에 있으면 ``regions`` 순서상 먼저 나온 리전 값을 사용한다.

        Raises:
            AwsClientError: 어느 한 리전이라도 API 호출 실패
        """
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = []
            for region in self.regions:
                client = self.client_set.get(region)
                futures.append(executor.submit(describe_instance_types, client))

            result: InstanceTypeMap = {}
            for future in futures:
                for instance_type, info in future.result().items():
                    result.setdefault(instance_type, info)

        logger.info(f"Ec2Client: 인스턴스 타입 {len(result)}개 ({len(self.regions)}개 리전)")
        return result


class InstanceTypesCacheable(Cacheable[None, InstanceTypeMap, AwsClientError]):
    """전체 인스턴스 타입 목록 Cacheable (TTL 기반 캐시)

    content_hash를 쓰지 않으므로 유효 기간 동안은 같은 파일을 재사용한다.
    """

    fetch_errors = (AwsClientError,)

    def __init__(self, ec2_client: Ec2Client):
        self.ec2_client = ec2_client

    def get_cache_key(self, input: None = None) -> CacheKey:  # noqa: A002
        return CacheKey(content_key="-".join(self.ec2_client.regions))

    def load(self, input: None = None) -> InstanceTypeMap:  # noqa: A002
        return self.ec2_client.describe_all_instance_types()

    def category_key(self) -> str:
        return "aws/ec2/instance_types"
