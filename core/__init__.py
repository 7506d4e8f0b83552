# core/__init__.py
"""
core - AWS 가격표/인벤토리 캐시 인프라

파일 캐시 엔진, 리전별 클라이언트 풀, AWS 조회 클라이언트를 포함하는 최상위 패키지입니다.

아키텍처:
    core/
    ├── cache/          # 파일 캐시 (Cacheable, FileBackedCacheable)
    ├── parallel/       # 리전별 boto3 client 풀 (ClientSet)
    ├── shared/aws/     # Price List Bulk, EC2, ElastiCache, Savings Plan
    ├── config.py       # 중앙 설정 관리
    └── exceptions.py   # 통합 예외 계층

Usage:
    # 설정 사용
    from core.config import settings, get_cache_max_age
    max_age = get_cache_max_age()  # timedelta(days=7)

    # 캐시 경유 조회
    from core.cache import FileBackedCacheableBuilder
    from core.shared.aws.price_bulk import RegionIndexClient

    cached = FileBackedCacheableBuilder().build(RegionIndexClient())
    loaded = cached.load("AmazonEC2")
    print(loaded.cache_hit, loaded.result.regions.keys())

    # 예외 처리
    from core.exceptions import CacheFetchFailedError
    try:
        cached.load("AmazonEC2")
    except CacheFetchFailedError as e:
        print(e.stage, e.cause)
"""

from core import cache, config, exceptions, parallel

__all__: list[str] = [
    # 서브패키지
    "cache",
    "parallel",
    # 모듈
    "config",
    "exceptions",
]
