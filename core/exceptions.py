"""
core/exceptions.py - 통합 예외 계층 구조

애플리케이션 전체에서 사용되는 예외 클래스들을 정의합니다.
어느 단계(캐시 키 계산, 원격 조회, 캐시 저장)에서 실패했는지
호출자가 구분할 수 있도록 일관된 에러 메시지를 제공합니다.

예외 계층 구조:
    APCError (베이스)
    ├── CacheError (파일 캐시)
    │   ├── CacheFetchFailedError
    │   ├── CacheSerializeError
    │   ├── CacheIOError
    │   └── InvalidCacheKeyError
    ├── PriceBulkError (Price List Bulk API)
    │   ├── PriceBulkHttpError
    │   ├── PriceBulkResponseError
    │   └── PriceBulkDecodeError
    ├── AwsClientError (boto3 SDK 호출)
    └── TransformError (응답 데이터 변환)

Usage:
    from core.exceptions import CacheFetchFailedError

    try:
        result = cached.load(offer)
    except CacheFetchFailedError as e:
        logger.warning(f"가격표 조회 실패 [{e.stage}]: {e.cause}")
"""

from typing import Any, Dict, Optional

# =============================================================================
# 베이스 예외
# =============================================================================


class APCError(Exception):
    """AWS Price Cache 기본 예외 클래스

    모든 커스텀 예외의 베이스 클래스입니다.

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
    """

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# 파일 캐시 관련 예외
# =============================================================================


class CacheError(APCError):
    """파일 캐시 관련 예외"""

    def __init__(
        self,
        message: str,
        category: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, cause)
        self.category = category
        if category:
            self.details["category"] = category


class CacheFetchFailedError(CacheError):
    """Cacheable의 캐시 키 계산 또는 원격 조회 실패

    원인 예외는 가공하지 않고 ``cause`` 로 그대로 전달합니다.

    Attributes:
        stage: 실패 단계 (``"cache_key"`` 또는 ``"load"``)
    """

    def __init__(
        self,
        stage: str,
        cause: Exception,
        category: Optional[str] = None,
    ):
        super().__init__(f"캐시 조회 실패 [{stage}]", category=category, cause=cause)
        self.stage = stage
        self.details["stage"] = stage


class CacheSerializeError(CacheError):
    """캐시 저장용 JSON 직렬화 실패"""

    def __init__(
        self,
        path: str,
        cause: Optional[Exception] = None,
        category: Optional[str] = None,
    ):
        super().__init__(f"캐시 직렬화 실패 [{path}]", category=category, cause=cause)
        self.path = path
        self.details["path"] = path


class CacheIOError(CacheError):
    """캐시 디렉토리 생성/파일 쓰기 실패

    읽기 시 파일이 없는 경우는 예외가 아니라 캐시 미스로 처리됩니다.
    """

    def __init__(
        self,
        path: str,
        cause: Optional[Exception] = None,
        category: Optional[str] = None,
    ):
        super().__init__(f"캐시 I/O 실패 [{path}]", category=category, cause=cause)
        self.path = path
        self.details["path"] = path


class InvalidCacheKeyError(CacheError):
    """content_key와 content_hash가 모두 없는 캐시 키"""

    def __init__(self, category: Optional[str] = None):
        super().__init__(
            "잘못된 캐시 키: content_key 또는 content_hash 중 하나는 필요합니다",
            category=category,
        )


# =============================================================================
# Price List Bulk API 관련 예외
# =============================================================================


class PriceBulkError(APCError):
    """Price List Bulk API 관련 예외"""

    def __init__(
        self,
        url: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        super().__init__(f"{message} [{url}]", cause)
        self.url = url
        self.details["url"] = url


class PriceBulkHttpError(PriceBulkError):
    """HTTP 요청 자체가 실패 (연결, 타임아웃 등)"""

    def __init__(self, url: str, cause: Optional[Exception] = None):
        super().__init__(url, "HTTP 요청 실패", cause)


class PriceBulkResponseError(PriceBulkError):
    """HTTP 응답 상태 코드가 2xx가 아님"""

    def __init__(
        self,
        url: str,
        status_code: int,
        cause: Optional[Exception] = None,
    ):
        super().__init__(url, f"HTTP 응답 오류 ({status_code})", cause)
        self.status_code = status_code
        self.details["status_code"] = status_code


class PriceBulkDecodeError(PriceBulkError):
    """응답 본문을 JSON 또는 DTO로 변환하지 못함"""

    def __init__(self, url: str, cause: Optional[Exception] = None):
        super().__init__(url, "응답 디코딩 실패", cause)


# =============================================================================
# AWS SDK 관련 예외
# =============================================================================


class AwsClientError(APCError):
    """AWS API 호출 관련 예외

    boto3/botocore의 ClientError, BotoCoreError를 래핑하여 일관된 예외 처리를 제공합니다.
    """

    def __init__(
        self,
        service: str,
        operation: str,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        message = f"{service}.{operation}"
        if error_code:
            message = f"{message} 실패 ({error_code})"
        else:
            message = f"{message} 실패"
        if error_message:
            message = f"{message}: {error_message}"

        super().__init__(message, cause)
        self.service = service
        self.operation = operation
        self.error_code = error_code
        self.error_message = error_message
        self.details.update(
            {
                "service": service,
                "operation": operation,
                "error_code": error_code,
            }
        )

    @classmethod
    def from_boto_error(
        cls,
        service: str,
        operation: str,
        error: Exception,
    ) -> "AwsClientError":
        """botocore 예외로부터 생성

        Args:
            service: AWS 서비스 이름
            operation: API 작업 이름
            error: ClientError 또는 BotoCoreError 예외

        Returns:
            AwsClientError 인스턴스
        """
        error_code = None
        error_message = None

        # ClientError 형식 파싱
        if hasattr(error, "response"):
            error_info = error.response.get("Error", {})
            error_code = error_info.get("Code")
            error_message = error_info.get("Message")

        return cls(
            service=service,
            operation=operation,
            error_code=error_code,
            error_message=error_message,
            cause=error,
        )


# =============================================================================
# 데이터 변환 관련 예외
# =============================================================================


class TransformError(APCError):
    """응답 데이터 변환(pivot 등) 실패"""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, cause)
        self.key = key
        if key:
            self.details["key"] = key


# =============================================================================
# 예외 유틸리티 함수
# =============================================================================


def is_throttling(error: Exception) -> bool:
    """스로틀링 오류인지 확인

    Args:
        error: 확인할 예외

    Returns:
        스로틀링 오류이면 True
    """
    throttling_codes = {
        "Throttling",
        "ThrottlingException",
        "RequestLimitExceeded",
        "TooManyRequestsException",
        "RateExceeded",
    }

    if isinstance(error, AwsClientError):
        return error.error_code in throttling_codes

    if hasattr(error, "response") and isinstance(error.response, dict):
        error_code = error.response.get("Error", {}).get("Code", "")
        return error_code in throttling_codes

    return False
