"""
core/cache/types.py - 파일 캐시 공통 타입

캐시 키(CacheKey), 조회 결과(CacheLoadResult), 그리고 캐시 대상 데이터 소스가
구현해야 하는 Cacheable 추상 클래스를 정의합니다.

CacheKey 2단계 구성:
    - content_key: 논리적 이름 (예: 서비스 코드, 리전/버전 태그)
    - content_hash: 원격 컨텐츠 지문 (예: ETag). 값이 바뀌면 파일명이 바뀌어
      기존 파일은 그대로 남고(orphan) 새 파일이 생성됩니다.

파일명 규칙:
    - 둘 다 있음      → ``{content_key}_{content_hash}``
    - content_key만   → ``{content_key}_``
    - content_hash만  → ``_{content_hash}``
    - 둘 다 없음      → InvalidCacheKeyError
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from core.exceptions import InvalidCacheKeyError

I = TypeVar("I")  # noqa: E741
O = TypeVar("O")  # noqa: E741
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class CacheKey:
    """캐시 아티팩트 식별자

    Attributes:
        content_key: 논리적 이름 (선택)
        content_hash: 원격 컨텐츠 지문 (선택)
    """

    content_key: str | None = None
    content_hash: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.content_key is not None or self.content_hash is not None

    def filename(self) -> str:
        """확장자를 제외한 캐시 파일명을 반환한다.

        Raises:
            InvalidCacheKeyError: content_key와 content_hash가 모두 없는 경우
        """
        if not self.is_valid:
            raise InvalidCacheKeyError()
        return f"{self.content_key or ''}_{self.content_hash or ''}"


@dataclass(frozen=True)
class CacheLoadResult(Generic[O]):
    """FileBackedCacheable.load() 결과

    Attributes:
        result: 조회된 값
        cache_key: 사용된 캐시 키
        cache_hit: 디스크 캐시에서 읽었으면 True
    """

    result: O
    cache_key: CacheKey
    cache_hit: bool


class Cacheable(ABC, Generic[I, O, E]):
    """파일 캐시에 참여하는 데이터 소스 인터페이스

    ``get_cache_key`` 는 HEAD 요청처럼 가벼운 조회여야 하며,
    ``load`` 는 실제 원격 조회와 디코딩을 수행한다.
    ``fetch_errors`` 에 선언된 예외만 CacheFetchFailedError로 감싸지고,
    그 외 예외(프로그래밍 오류)는 그대로 전파된다.

    JSON으로 바로 표현되지 않는 출력 타입(dataclass DTO 등)은
    ``encode`` / ``decode`` 를 재정의한다.
    """

    fetch_errors: tuple[type[E], ...] = (Exception,)  # type: ignore[assignment]

    @abstractmethod
    def get_cache_key(self, input: I) -> CacheKey:  # noqa: A002
        """입력에 대한 캐시 키 계산"""

    @abstractmethod
    def load(self, input: I) -> O:  # noqa: A002
        """원격 조회 후 출력 타입으로 디코딩"""

    @abstractmethod
    def category_key(self) -> str:
        """아티팩트 네임스페이스 (캐시 루트 하위 경로)"""

    def encode(self, value: O) -> Any:
        """출력 값을 JSON 직렬화 가능한 값으로 변환"""
        return value

    def decode(self, data: Any) -> O:
        """캐시 파일에서 읽은 JSON 값을 출력 타입으로 변환"""
        return data
