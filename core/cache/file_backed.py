"""
core/cache/file_backed.py - 파일 기반 캐시 엔진

임의의 Cacheable 앞단에서 디스크 캐시를 확인하고, 미스일 때만 원격 조회를 수행한다.

캐시 경로:
    ``{root}/{category_key}/{filename}.json``

조회 흐름:
    1. Cacheable.get_cache_key(input) → 실패 시 CacheFetchFailedError
    2. CacheKey → 파일명 (둘 다 없으면 InvalidCacheKeyError)
    3. 파일 확인
       - 없음 → 미스
       - mtime 기준 ``cache_max_age`` 초과 → 미스
       - JSON/디코딩 실패 → WARNING 로그 후 미스 (다음 저장 시 자동 복구)
       - 성공 → 히트
    4. 미스면 Cacheable.load(input) → 실패 시 CacheFetchFailedError
    5. 결과 저장 (truncate-and-write) → 실패 시 CacheSerializeError / CacheIOError

동시성:
    - 동일 키에 대한 동시 미스는 각각 원격 조회 후 각각 저장하며, 마지막 저장이 남는다.
    - 파일 쓰기만 ``filelock`` 으로 보호하여 두 writer의 바이트가 섞이지 않게 한다.
    - 서로 다른 키는 서로 다른 락 파일을 사용하므로 경합하지 않는다.

사용법:
    from core.cache import FileBackedCacheableBuilder

    builder = FileBackedCacheableBuilder()
    cached = builder.build(PricingListClient(session))
    loaded = cached.load(offer)
    print(loaded.cache_hit, loaded.cache_key)
"""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, Generic

from filelock import FileLock, Timeout

from core.config import get_cache_max_age, get_cache_root, settings
from core.exceptions import (
    CacheFetchFailedError,
    CacheIOError,
    CacheSerializeError,
    InvalidCacheKeyError,
)

from .types import E, I, O, Cacheable, CacheKey, CacheLoadResult

logger = logging.getLogger(__name__)

CACHE_FILE_SUFFIX = ".json"
LOCK_FILE_SUFFIX = ".lock"

_MISS = object()


@dataclass
class CacheStats:
    """캐시 통계 (스레드 안전)

    Attributes:
        hits: 캐시 히트 횟수
        misses: 캐시 미스 횟수 (파일 없음 + 만료 + 손상)
        stale: 만료로 인한 미스 횟수
        corrupted: 역직렬화 실패로 인한 미스 횟수
        writes: 캐시 저장 횟수
    """

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    hits: int = 0
    misses: int = 0
    stale: int = 0
    corrupted: int = 0
    writes: int = 0

    @property
    def hit_rate(self) -> float:
        """캐시 히트율 (0.0 ~ 1.0). 조회가 없으면 0.0"""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def add(self, name: str, count: int = 1) -> None:
        with self._lock:
            setattr(self, name, getattr(self, name) + count)

    def to_dict(self) -> dict[str, float | int]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "stale": self.stale,
            "corrupted": self.corrupted,
            "writes": self.writes,
            "hit_rate": round(self.hit_rate, 2),
        }


class FileBackedCacheable(Generic[I, O, E]):
    """Cacheable 하나를 감싸는 파일 캐시 엔진.

    Attributes:
        cacheable: 감싼 데이터 소스
        cache_directory: ``{root}/{category_key}`` 디렉토리
        cache_max_age: 캐시 유효 기간
        stats: 조회 통계
    """

    def __init__(
        self,
        cacheable: Cacheable[I, O, E],
        root_path: str | Path,
        cache_max_age: timedelta,
        lock_timeout: float = settings.CACHE_WRITE_LOCK_TIMEOUT,
    ):
        self.cacheable = cacheable
        self.category = cacheable.category_key()
        self.cache_directory = Path(root_path) / self.category
        self.cache_max_age = cache_max_age
        self.lock_timeout = lock_timeout
        self.stats = CacheStats()

    def cache_path(self, cache_key: CacheKey) -> Path:
        """캐시 키에 대응하는 파일 경로를 반환한다.

        Raises:
            InvalidCacheKeyError: content_key와 content_hash가 모두 없는 경우
        """
        try:
            filename = cache_key.filename()
        except InvalidCacheKeyError as e:
            raise InvalidCacheKeyError(category=self.category) from e
        return self.cache_directory / f"{filename}{CACHE_FILE_SUFFIX}"

    def load(self, input: I, refresh: bool = False) -> CacheLoadResult[O]:  # noqa: A002
        """캐시 우선 조회

        Args:
            input: Cacheable에 전달할 입력
            refresh: True이면 캐시 파일을 읽지 않고 원격 조회 후 덮어쓴다

        Returns:
            CacheLoadResult (result, cache_key, cache_hit)

        Raises:
            CacheFetchFailedError: 캐시 키 계산 또는 원격 조회 실패
            InvalidCacheKeyError: 캐시 키가 비어 있음
            CacheSerializeError: 결과를 JSON으로 직렬화하지 못함
            CacheIOError: 캐시 디렉토리/파일 쓰기 실패
        """
        try:
            cache_key = self.cacheable.get_cache_key(input)
        except self.cacheable.fetch_errors as e:
            raise CacheFetchFailedError("cache_key", e, category=self.category) from e
        logger.debug(f"캐시 키: {self.category}/{cache_key}")

        path = self.cache_path(cache_key)

        if not refresh:
            cached = self._read_cache(path)
            if cached is not _MISS:
                self.stats.add("hits")
                logger.debug(f"캐시 히트: {path}")
                return CacheLoadResult(result=cached, cache_key=cache_key, cache_hit=True)

        self.stats.add("misses")
        logger.debug(f"캐시 미스: {path}")

        try:
            result = self.cacheable.load(input)
        except self.cacheable.fetch_errors as e:
            raise CacheFetchFailedError("load", e, category=self.category) from e

        self._write_cache(path, result)
        return CacheLoadResult(result=result, cache_key=cache_key, cache_hit=False)

    def _read_cache(self, path: Path) -> Any:
        """유효한 캐시 값을 반환하고, 없거나 만료/손상이면 ``_MISS`` 를 반환한다."""
        try:
            mtime = path.stat().st_mtime
        except FileNotFoundError:
            return _MISS
        except OSError as e:
            raise CacheIOError(str(path), cause=e, category=self.category) from e

        age_seconds = time.time() - mtime
        if age_seconds > self.cache_max_age.total_seconds():
            self.stats.add("stale")
            logger.debug(f"캐시 만료: {path} ({age_seconds:.0f}s)")
            return _MISS

        try:
            with open(path, "rb") as f:
                raw = f.read()
        except FileNotFoundError:
            return _MISS
        except OSError as e:
            raise CacheIOError(str(path), cause=e, category=self.category) from e

        # decode 훅이 어떤 예외를 던지든 미스로 처리
        try:
            return self.cacheable.decode(json.loads(raw.decode("utf-8")))
        except Exception as e:
            self.stats.add("corrupted")
            logger.warning(f"캐시 역직렬화 실패, 미스로 처리: {path} ({type(e).__name__}: {e})")
            return _MISS

    def _write_cache(self, path: Path, value: O) -> None:
        """결과를 캐시 파일에 저장한다 (기존 파일 덮어쓰기)."""
        try:
            payload = json.dumps(self.cacheable.encode(value), ensure_ascii=False)
        except Exception as e:
            raise CacheSerializeError(str(path), cause=e, category=self.category) from e

        lock_path = path.with_name(path.name + LOCK_FILE_SUFFIX)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with FileLock(lock_path, timeout=self.lock_timeout):
                with open(path, "w", encoding="utf-8") as f:
                    f.write(payload)
        except (Timeout, OSError) as e:
            raise CacheIOError(str(path), cause=e, category=self.category) from e

        self.stats.add("writes")
        logger.debug(f"캐시 저장: {path} ({len(payload)} bytes)")


class FileBackedCacheableBuilder:
    """동일한 캐시 루트/유효 기간으로 여러 Cacheable을 감싸는 빌더

    Attributes:
        root_path: 캐시 루트 디렉토리 (기본: ``get_cache_root()``)
        cache_max_age: 캐시 유효 기간 (기본: ``get_cache_max_age()``, 7일)
    """

    def __init__(
        self,
        root_path: str | Path | None = None,
        cache_max_age: timedelta | None = None,
    ):
        self.root_path = Path(root_path) if root_path is not None else Path(get_cache_root())
        self.cache_max_age = cache_max_age if cache_max_age is not None else get_cache_max_age()

    def build(self, cacheable: Cacheable[I, O, E]) -> FileBackedCacheable[I, O, E]:
        return FileBackedCacheable(cacheable, self.root_path, self.cache_max_age)
