"""
core/cache - 파일 기반 캐시

원격 조회 결과를 ``{root}/{category_key}/{filename}.json`` 으로 저장하고,
mtime 기반 유효 기간(기본 7일) 안에서는 원격 조회 없이 재사용합니다.

구조:
    cache/                              ← 캐시 루트 (APC_CACHE_ROOT)
    └── aws/bulk/
        ├── service_index/_{etag}.json
        ├── region_index/{service}_{etag}.json
        ├── pricing_list/{region}-{service}-{version}_{etag}.json
        └── savings_plan_list/{region}-{service}-{version}_{etag}.json

사용법:
    from core.cache import FileBackedCacheableBuilder

    builder = FileBackedCacheableBuilder(root_path="cache")
    cached = builder.build(RegionIndexClient(session))
    loaded = cached.load("AmazonEC2")
"""

from .file_backed import CacheStats, FileBackedCacheable, FileBackedCacheableBuilder
from .path import clear_cache, get_cache_dir, get_cache_info
from .types import Cacheable, CacheKey, CacheLoadResult

__all__ = [
    "Cacheable",
    "CacheKey",
    "CacheLoadResult",
    "CacheStats",
    "FileBackedCacheable",
    "FileBackedCacheableBuilder",
    "clear_cache",
    "get_cache_dir",
    "get_cache_info",
]
