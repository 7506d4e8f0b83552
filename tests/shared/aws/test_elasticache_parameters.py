"""
tests/shared/aws/test_elasticache_parameters.py - ElastiCache 노드 타입별 파라미터 테스트
"""

from unittest.mock import MagicMock

import pytest

from conftest import create_mock_client_error
from core.exceptions import AwsClientError
from core.parallel import ClientSet
from core.shared.aws.elasticache import (
    MEMCACHED_PARAMETER_GROUP_FAMILY,
    PARAMETER_REGION,
    REDIS_PARAMETER_GROUP_FAMILY,
    ElasticacheClient,
    list_cache_node_type_specific_parameters,
)


def _page(*parameters) -> dict:
    return {"EngineDefaults": {"CacheParameterGroupFamily": "redis7", "CacheNodeTypeSpecificParameters": list(parameters)}}


def _parameter(name, values) -> dict:
    return {
        "ParameterName": name,
        "CacheNodeTypeSpecificValues": [{"CacheNodeType": node, "Value": value} for node, value in values],
    }


@pytest.fixture
def elasticache_client():
    """describe_engine_default_parameters 페이지네이터 모킹"""
    client = MagicMock()
    paginator = MagicMock()
    paginator.paginate.return_value = [
        _page(_parameter("maxmemory", [("cache.t3.micro", "536870912"), ("cache.r6g.large", "14037181030")])),
        _page(_parameter("databases", [("cache.t3.micro", "16")])),
    ]
    client.get_paginator.return_value = paginator
    return client


@pytest.fixture
def client_set(elasticache_client):
    regions = []

    def factory(_, region):
        regions.append(region)
        return elasticache_client

    clients = ClientSet(None, factory)
    clients.created_regions = regions
    return clients


class TestListCacheNodeTypeSpecificParameters:
    """페이지 수집 테스트"""

    def test_collects_all_pages(self, elasticache_client):
        result = list_cache_node_type_specific_parameters(elasticache_client, "redis7")

        assert [p["ParameterName"] for p in result] == ["maxmemory", "databases"]
        elasticache_client.get_paginator.assert_called_once_with("describe_engine_default_parameters")
        elasticache_client.get_paginator.return_value.paginate.assert_called_once_with(
            CacheParameterGroupFamily="redis7"
        )

    def test_page_without_engine_defaults(self):
        client = MagicMock()
        client.get_paginator.return_value.paginate.return_value = [{}, _page()]

        assert list_cache_node_type_specific_parameters(client, "redis7") == []

    def test_client_error(self):
        client = MagicMock()
        client.get_paginator.return_value.paginate.side_effect = create_mock_client_error("InvalidParameterValue")

        with pytest.raises(AwsClientError) as exc_info:
            list_cache_node_type_specific_parameters(client, "redis99")
        assert exc_info.value.service == "elasticache"


class TestElasticacheClient:
    """노드 타입 → 파라미터 맵 변환 테스트"""

    def test_keeps_empty_client_set(self, client_set):
        """아직 비어 있는 ClientSet도 그대로 사용"""
        assert len(client_set) == 0
        assert ElasticacheClient(client_set=client_set).client_set is client_set

    def test_redis(self, client_set, elasticache_client):
        result = ElasticacheClient(client_set=client_set).list_redis_type_specific_parameters()

        assert result == {
            "cache.t3.micro": {"maxmemory": "536870912", "databases": "16"},
            "cache.r6g.large": {"maxmemory": "14037181030"},
        }
        elasticache_client.get_paginator.return_value.paginate.assert_called_once_with(
            CacheParameterGroupFamily=REDIS_PARAMETER_GROUP_FAMILY
        )

    def test_memcached_family(self, client_set, elasticache_client):
        ElasticacheClient(client_set=client_set).list_memcached_type_specific_parameters()

        elasticache_client.get_paginator.return_value.paginate.assert_called_once_with(
            CacheParameterGroupFamily=MEMCACHED_PARAMETER_GROUP_FAMILY
        )

    def test_fixed_region(self, client_set):
        """파라미터 조회는 항상 us-east-1, client는 한 번만 생성"""
        client = ElasticacheClient(client_set=client_set)
        client.list_redis_type_specific_parameters()
        client.list_memcached_type_specific_parameters()

        assert client_set.created_regions == [PARAMETER_REGION]

    def test_skips_incomplete_entries(self, client_set, elasticache_client):
        """이름/노드 타입/값이 없는 항목은 제외"""
        elasticache_client.get_paginator.return_value.paginate.return_value = [
            _page(
                {"CacheNodeTypeSpecificValues": [{"CacheNodeType": "cache.t3.micro", "Value": "1"}]},
                {
                    "ParameterName": "maxmemory",
                    "CacheNodeTypeSpecificValues": [
                        {"CacheNodeType": "cache.t3.micro"},
                        {"Value": "2"},
                        {"CacheNodeType": "cache.m5.large", "Value": "3"},
                    ],
                },
                {"ParameterName": "empty"},
            )
        ]

        result = ElasticacheClient(client_set=client_set).list_cache_node_type_specific_parameters("redis7")

        assert result == {"cache.m5.large": {"maxmemory": "3"}}
