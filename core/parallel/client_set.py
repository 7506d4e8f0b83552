"""
core/parallel/client_set.py - 파티션 키별 클라이언트 풀

리전 같은 파티션 키마다 비싼 클라이언트 객체를 한 번만 생성하여 재사용합니다.

동작:
    - 단일 ``threading.Lock`` 이 조회, 생성, 등록 전체를 보호
    - 같은 키로 동시에 호출해도 factory는 키당 정확히 한 번만 호출
    - 생성은 설정 조립일 뿐 네트워크 호출이 아니므로 락 구간에 포함
    - factory가 예외를 던지면 아무것도 등록하지 않고 그대로 전파 (다음 호출에서 재시도)
    - 등록된 클라이언트는 프로세스 종료까지 유지 (eviction 없음)

boto3 Session은 스레드 안전하지 않으므로, 세션에서 client를 만드는 작업을
이 락 안에서 직렬화하는 것이 곧 안전한 사용법이기도 합니다.

Example:
    from core.parallel.client_set import ClientSet
    from core.parallel.client import regional_client_factory

    clients = ClientSet(boto3.Session(), regional_client_factory("ec2"))
    ec2 = clients.get("ap-northeast-1")
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K")
T = TypeVar("T")


class ClientSet(Generic[K, T]):
    """지연 생성 + 공유되는 키별 클라이언트 레지스트리

    Attributes:
        initial_data: factory에 전달되는 불변 기본 설정 (예: boto3.Session)
    """

    def __init__(self, initial_data: K, client_factory: Callable[[K, str], T]):
        """
        Args:
            initial_data: 모든 클라이언트가 공유하는 기본 설정
            client_factory: ``(initial_data, key) -> client`` 생성 함수
        """
        self.initial_data = initial_data
        self._client_factory = client_factory
        self._clients: dict[str, T] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> T:
        """키에 해당하는 클라이언트 반환 (없으면 생성 후 등록)

        Args:
            key: 파티션 키 (예: 리전 코드)

        Returns:
            키별로 공유되는 클라이언트 인스턴스
        """
        with self._lock:
            if key in self._clients:
                return self._clients[key]

            logger.debug(f"ClientSet: 새 클라이언트 생성 ({key})")
            client = self._client_factory(self.initial_data, key)
            self._clients[key] = client
            return client

    def keys(self) -> list[str]:
        """생성된 클라이언트의 키 목록"""
        with self._lock:
            return list(self._clients)

    def __len__(self) -> int:
        with self._lock:
            return len(self._clients)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._clients
