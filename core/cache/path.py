"""캐시 디렉토리 조회/정리 유틸리티.

FileBackedCacheable이 만든 ``{root}/{category_key}/{filename}.json`` 파일들을
카테고리 단위로 조회하거나 삭제합니다. category_key는 ``aws/bulk/pricing_list``
처럼 ``/`` 로 중첩될 수 있습니다.
"""

from __future__ import annotations

import logging
import time
from datetime import timedelta
from pathlib import Path
from typing import Any

from core.config import get_cache_max_age, get_cache_root

logger = logging.getLogger(__name__)


def resolve_cache_root(root: str | Path | None = None) -> Path:
    """캐시 루트 경로 반환 (None이면 설정값)"""
    return Path(root) if root is not None else Path(get_cache_root())


def get_cache_dir(category: str = "", root: str | Path | None = None) -> Path:
    """카테고리 캐시 디렉토리 경로 반환

    Args:
        category: 카테고리 키 (예: "aws/bulk/region_index").
                  빈 문자열이면 루트 디렉토리 반환
        root: 캐시 루트 (None이면 설정값)

    Example:
        >>> get_cache_dir("aws/bulk/region_index", root="cache")
        PosixPath('cache/aws/bulk/region_index')
    """
    cache_root = resolve_cache_root(root)
    return cache_root / category if category else cache_root


def get_cache_info(
    root: str | Path | None = None,
    cache_max_age: timedelta | None = None,
) -> dict[str, Any]:
    """캐시 상태 정보를 반환한다.

    Returns:
        캐시 상태 딕셔너리::

            {
                "cache_dir": str,
                "max_age_days": float,
                "files": [
                    {
                        "category": str,     # 예: "aws/bulk/pricing_list"
                        "name": str,         # 예: "ap-northeast-1-AmazonEC2-2024_abc.json"
                        "size": int,         # bytes
                        "age_days": float,
                        "expired": bool,
                    },
                    ...
                ],
            }
    """
    cache_root = resolve_cache_root(root)
    max_age = cache_max_age if cache_max_age is not None else get_cache_max_age()

    files: list[dict[str, Any]] = []
    info: dict[str, Any] = {
        "cache_dir": str(cache_root),
        "max_age_days": max_age.total_seconds() / 86400,
        "files": files,
    }

    if not cache_root.exists():
        return info

    now = time.time()
    for f in sorted(cache_root.rglob("*.json")):
        try:
            stat = f.stat()
        except OSError as e:
            logger.debug("캐시 파일 상태 조회 실패 %s: %s", f, e)
            continue
        age_seconds = now - stat.st_mtime
        files.append(
            {
                "category": f.parent.relative_to(cache_root).as_posix(),
                "name": f.name,
                "size": stat.st_size,
                "age_days": round(age_seconds / 86400, 2),
                "expired": age_seconds > max_age.total_seconds(),
            }
        )

    return info


def clear_cache(category: str | None = None, root: str | Path | None = None) -> int:
    """캐시 파일(및 쓰기 락 파일)을 삭제한다.

    Args:
        category: 카테고리 키 (None이면 전체, 하위 카테고리 포함)
        root: 캐시 루트 (None이면 설정값)

    Returns:
        삭제된 캐시 파일 수 (락 파일 제외)
    """
    target = get_cache_dir(category or "", root)
    if not target.exists():
        return 0

    count = 0
    for f in target.rglob("*.json"):
        f.unlink()
        count += 1
    for f in target.rglob("*.json.lock"):
        f.unlink(missing_ok=True)

    logger.info(f"캐시 삭제: {target} ({count}개)")
    return count
