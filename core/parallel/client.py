"""
core/parallel/client.py - boto3 client 생성 헬퍼

Retry(adaptive 모드) + 타임아웃 + 연결 풀이 설정된 boto3 client를 생성하고,
ClientSet에 넘길 리전별 client factory를 제공합니다.

주요 구성 요소:
- get_client: retry 설정이 적용된 boto3 client 생성
- regional_client_factory: ``(session, region) -> client`` factory 생성
- create_session: 프로파일/리전 기반 boto3 Session 생성

Example:
    from core.parallel.client import get_client, regional_client_factory

    # 단일 client
    ec2 = get_client(session, "ec2", region_name="ap-northeast-1")

    # ClientSet용 factory
    clients = ClientSet(session, regional_client_factory("ec2"))
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Literal, cast

if TYPE_CHECKING:
    import boto3

# Retry mode 타입 (botocore TypedDict와 호환)
RetryMode = Literal["legacy", "standard", "adaptive"]

# 기본 retry 설정
DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_RETRY_MODE: RetryMode = "adaptive"  # adaptive: 동적 조정, standard: 고정
DEFAULT_CONNECT_TIMEOUT = 10  # 초
DEFAULT_READ_TIMEOUT = 30  # 초
DEFAULT_MAX_POOL_CONNECTIONS = 10


def create_session(profile_name: str | None = None, region_name: str | None = None) -> boto3.Session:
    """boto3 Session 생성

    Args:
        profile_name: AWS 프로파일 (None이면 기본 자격 증명 체인)
        region_name: 기본 리전 (None이면 환경/설정 파일 기본값)

    Returns:
        boto3 Session
    """
    import boto3

    return boto3.Session(profile_name=profile_name, region_name=region_name)


def get_client(
    session: boto3.Session,
    service_name: str,
    region_name: str | None = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    retry_mode: RetryMode = DEFAULT_RETRY_MODE,
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
    read_timeout: int = DEFAULT_READ_TIMEOUT,
    max_pool_connections: int = DEFAULT_MAX_POOL_CONNECTIONS,
    **kwargs: Any,
) -> Any:
    """Retry가 적용된 boto3 client 생성

    Args:
        session: boto3 Session
        service_name: AWS 서비스 이름 (ec2, elasticache 등)
        region_name: 리전 (None이면 세션 기본값)
        max_attempts: 최대 시도 횟수 (기본: 5)
        retry_mode: 재시도 모드 ('adaptive' 또는 'standard')
        connect_timeout: 연결 타임아웃 (초)
        read_timeout: 읽기 타임아웃 (초)
        max_pool_connections: HTTP 연결 풀 크기
        **kwargs: session.client()에 전달할 추가 인자

    Returns:
        boto3 client
    """
    from botocore.config import Config

    config = Config(
        retries={"max_attempts": max_attempts, "mode": retry_mode},  # pyright: ignore[reportArgumentType]
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
        max_pool_connections=max_pool_connections,
    )

    # 기존 config가 있으면 병합
    if "config" in kwargs:
        existing = kwargs.pop("config")
        config = config.merge(existing)

    # session.client은 문자열 서비스명을 받지만 boto3-stubs는 Literal 타입 요구
    return session.client(  # pyright: ignore[reportCallIssue]
        cast(Any, service_name),
        region_name=region_name,
        config=config,
        **kwargs,
    )


def regional_client_factory(service_name: str, **client_kwargs: Any) -> Callable[[boto3.Session, str], Any]:
    """기본 세션에서 리전만 바꿔 client를 만드는 factory 반환

    Args:
        service_name: AWS 서비스 이름
        **client_kwargs: get_client()에 전달할 추가 인자

    Returns:
        ``(session, region) -> client`` 함수
    """

    def factory(session: boto3.Session, region: str) -> Any:
        return get_client(session, service_name, region_name=region, **client_kwargs)

    return factory
