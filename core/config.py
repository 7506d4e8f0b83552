"""
core/config.py - 중앙 설정 관리

애플리케이션 전역 설정값과 환경변수 헬퍼를 제공합니다.

설정 우선순위:
    1. 환경변수 (APC_CACHE_ROOT, APC_CACHE_MAX_AGE_DAYS, LOG_LEVEL 등)
    2. Settings 데이터클래스 기본값

Usage:
    from core.config import settings, get_cache_max_age

    max_age = get_cache_max_age()  # timedelta(days=7)
    regions = settings.MAJOR_REGIONS
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


@dataclass(frozen=True)
class Settings:
    """불변 애플리케이션 설정

    Attributes:
        DEFAULT_REGION: 기본 AWS 리전
        CACHE_ROOT: 캐시 루트 디렉토리 (상대 경로는 실행 위치 기준)
        CACHE_MAX_AGE_DAYS: 캐시 유효 기간 (일)
        CACHE_WRITE_LOCK_TIMEOUT: 캐시 파일 쓰기 락 타임아웃 (초)
        PRICE_BULK_BASE_URL: Price List Bulk API 기본 URL
        HTTP_TIMEOUT: HTTP 요청 타임아웃 (초)
        MAX_WORKERS: 리전 병렬 조회 워커 수
        MAJOR_REGIONS: 인스턴스 타입 조회 대상 주요 리전
    """

    DEFAULT_REGION: str = "us-east-1"
    CACHE_ROOT: str = "cache"
    CACHE_MAX_AGE_DAYS: int = 7
    CACHE_WRITE_LOCK_TIMEOUT: int = 10
    PRICE_BULK_BASE_URL: str = "https://pricing.us-east-1.amazonaws.com"
    HTTP_TIMEOUT: int = 30
    MAX_WORKERS: int = 5
    MAJOR_REGIONS: tuple[str, ...] = field(
        default=(
            "us-west-2",
            "us-east-1",
            "us-east-2",
            "ap-northeast-1",
            "eu-central-1",
        )
    )


settings = Settings()


@dataclass
class LogConfig:
    """로깅 설정

    Attributes:
        level: 로그 레벨 이름
        format: logging 포맷 문자열
        date_format: 날짜 포맷 문자열
    """

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_env(cls) -> LogConfig:
        """환경변수(LOG_LEVEL, LOG_FORMAT)에서 로드"""
        default = cls()
        return cls(
            level=os.environ.get("LOG_LEVEL", default.level).upper(),
            format=os.environ.get("LOG_FORMAT", default.format),
            date_format=default.date_format,
        )

    def apply(self, handlers: list[logging.Handler] | None = None) -> None:
        """루트 로거에 설정 적용

        Args:
            handlers: 사용할 핸들러 (None이면 stderr StreamHandler)
        """
        logging.basicConfig(
            level=getattr(logging, self.level, logging.INFO),
            format=self.format,
            datefmt=self.date_format,
            handlers=handlers,
            force=True,
        )


# =============================================================================
# 환경변수 헬퍼
# =============================================================================


def get_env_bool(name: str, default: bool = False) -> bool:
    """환경변수를 bool로 변환

    Args:
        name: 환경변수 이름
        default: 누락되었거나 해석할 수 없을 때의 기본값

    Returns:
        bool 값
    """
    value = os.environ.get(name)
    if value is None:
        return default

    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return default


def get_env_int(name: str, default: int) -> int:
    """환경변수를 int로 변환 (실패 시 기본값)"""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.debug(f"정수 환경변수 해석 실패: {name}={value!r}")
        return default


def get_default_profile() -> str | None:
    """AWS_PROFILE > AWS_DEFAULT_PROFILE 순서로 기본 프로파일 반환"""
    return os.environ.get("AWS_PROFILE") or os.environ.get("AWS_DEFAULT_PROFILE")


def get_default_region() -> str:
    """AWS_REGION > AWS_DEFAULT_REGION > settings.DEFAULT_REGION 순서로 기본 리전 반환"""
    return os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION") or settings.DEFAULT_REGION


def get_cache_root() -> str:
    """캐시 루트 디렉토리 (APC_CACHE_ROOT 환경변수 우선)"""
    return os.environ.get("APC_CACHE_ROOT") or settings.CACHE_ROOT


def get_cache_max_age() -> timedelta:
    """캐시 유효 기간 (APC_CACHE_MAX_AGE_DAYS 환경변수 우선)"""
    return timedelta(days=get_env_int("APC_CACHE_MAX_AGE_DAYS", settings.CACHE_MAX_AGE_DAYS))


# =============================================================================
# 프로젝트 정보
# =============================================================================


def get_project_root() -> Path:
    """프로젝트 루트 경로 (core/ 의 상위 디렉토리)"""
    return Path(__file__).resolve().parent.parent


@lru_cache(maxsize=1)
def get_version() -> str:
    """version.txt에서 버전 문자열을 읽어 반환

    Returns:
        버전 문자열 (파일이 없으면 ``"0.0.0"``)
    """
    version_file = get_project_root() / "version.txt"
    try:
        return version_file.read_text(encoding="utf-8").strip() or "0.0.0"
    except OSError:
        return "0.0.0"
