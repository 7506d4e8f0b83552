"""
core/shared/aws/elasticache.py - ElastiCache 노드 타입별 기본 파라미터 조회

DescribeEngineDefaultParameters의 CacheNodeTypeSpecificParameters를 페이지 단위로 모아
``{node_type: {parameter_name: value}}`` 형태로 변환한다.
파라미터 기본값은 리전과 무관하므로 us-east-1에서만 조회한다.

사용법:
    from core.shared.aws.elasticache import ElasticacheClient

    client = ElasticacheClient()
    params = client.list_redis_type_specific_parameters()
    print(params["cache.r6g.large"]["maxmemory"])
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError

from core.exceptions import AwsClientError
from core.parallel import ClientSet, create_session, regional_client_factory

if TYPE_CHECKING:
    import boto3

logger = logging.getLogger(__name__)

PARAMETER_REGION = "us-east-1"
REDIS_PARAMETER_GROUP_FAMILY = "redis7"
MEMCACHED_PARAMETER_GROUP_FAMILY = "memcached1.6"

# {node_type: {parameter_name: value}}
TypeSpecificParameters = dict[str, dict[str, str]]


def build_client_set(session: boto3.Session | None = None) -> ClientSet[Any, Any]:
    """리전별 ElastiCache client를 만드는 ClientSet 생성"""
    return ClientSet(session or create_session(), regional_client_factory("elasticache"))


def list_cache_node_type_specific_parameters(client: Any, parameter_group_family: str) -> list[dict[str, Any]]:
    """DescribeEngineDefaultParameters 전체 페이지의 CacheNodeTypeSpecificParameters 조회

    Raises:
        AwsClientError: API 호출 실패
    """
    logger.info(f"ElasticacheClient: DescribeEngineDefaultParameters ({parameter_group_family})")
    paginator = client.get_paginator("describe_engine_default_parameters")

    result: list[dict[str, Any]] = []
    try:
        for page in paginator.paginate(CacheParameterGroupFamily=parameter_group_family):
            engine_defaults = page.get("EngineDefaults")
            if not engine_defaults:
                continue
            result.extend(engine_defaults.get("CacheNodeTypeSpecificParameters") or [])
    except (ClientError, BotoCoreError) as e:
        raise AwsClientError.from_boto_error("elasticache", "describe_engine_default_parameters", e) from e
    return result


class ElasticacheClient:
    """ElastiCache 조회 클라이언트

    Attributes:
        client_set: 리전별 boto3 ElastiCache client 풀
    """

    def __init__(
        self,
        session: boto3.Session | None = None,
        client_set: ClientSet[Any, Any] | None = None,
    ):
        self.client_set = client_set if client_set is not None else build_client_set(session)

    def list_redis_type_specific_parameters(self) -> TypeSpecificParameters:
        return self.list_cache_node_type_specific_parameters(REDIS_PARAMETER_GROUP_FAMILY)

    def list_memcached_type_specific_parameters(self) -> TypeSpecificParameters:
        return self.list_cache_node_type_specific_parameters(MEMCACHED_PARAMETER_GROUP_FAMILY)

    def list_cache_node_type_specific_parameters(self, parameter_group_family: str) -> TypeSpecificParameters:
        """노드 타입별 파라미터 기본값 조회

        이름, 노드 타입, 값 중 하나라도 없는 항목은 건너뛴다.

        Args:
            parameter_group_family: 파라미터 그룹 패밀리 (예: "redis7")

        Returns:
            ``{node_type: {parameter_name: value}}``
        """
        client = self.client_set.get(PARAMETER_REGION)
        parameters = list_cache_node_type_specific_parameters(client, parameter_group_family)

        result: TypeSpecificParameters = {}
        for parameter in parameters:
            parameter_name = parameter.get("ParameterName")
            if not parameter_name:
                continue
            for item in parameter.get("CacheNodeTypeSpecificValues") or []:
                node_type = item.get("CacheNodeType")
                value = item.get("Value")
                if node_type is None or value is None:
                    continue
                result.setdefault(node_type, {})[parameter_name] = value
        return result
