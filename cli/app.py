"""
cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.
가격표/인벤토리 조회를 파일 캐시를 거쳐 실행하고 결과를 Rich 테이블로 출력합니다.

명령어 구조:
    apc --version
    apc test service-list
    apc test region-index --service AmazonEC2
    apc test pricing-list --service AmazonEC2 --region ap-northeast-1 --version 20240312153724
    apc test savings-plan-list --service AWSComputeSavingsPlan --version 20240312234047 --region ap-northeast-1
    apc test ec2-all-instance-types
    apc test redis-type-specific-parameters
    apc test memcached-type-specific-parameters
    apc cache info
    apc cache clear [--category aws/bulk/pricing_list]

공통 옵션:
    --cache-dir      캐시 루트 디렉토리 (기본: APC_CACHE_ROOT 또는 ./cache)
    --max-age-days   캐시 유효 기간 (기본: APC_CACHE_MAX_AGE_DAYS 또는 7)
    --refresh        캐시를 무시하고 다시 조회 (APC_CACHE_REFRESH=true 와 동일)
    -v, --verbose    DEBUG 로그 출력

Usage:
    $ apc test service-list
    $ python -m cli.app cache info
"""

import functools
import logging
import os
from datetime import timedelta
from typing import Any, Callable

import click
from click import Context
from rich.markup import escape

from cli.ui import (
    console,
    get_log_handler,
    print_error,
    print_info,
    print_results_json,
    print_success,
    print_table,
    print_warning,
)
from core.cache import CacheLoadResult, FileBackedCacheable, FileBackedCacheableBuilder, clear_cache, get_cache_info
from core.config import LogConfig, get_default_profile, get_default_region, get_env_bool, get_version
from core.exceptions import APCError

logger = logging.getLogger(__name__)

VERSION = get_version()

# 테이블 출력 기본 행 수
DEFAULT_LIMIT = 20

# test 명령 기본 조회 대상
DEFAULT_SERVICE_CODE = "AmazonEC2"
DEFAULT_REGION_CODE = "ap-northeast-1"
DEFAULT_OFFER_VERSION = "20240312153724"
DEFAULT_SAVINGS_PLAN_CODE = "AWSComputeSavingsPlan"
DEFAULT_SAVINGS_PLAN_VERSION = "20240312234047"

# CLI 로그 기본값 (LOG_LEVEL/LOG_FORMAT 미설정 시)
CLI_LOG_LEVEL = "WARNING"
CLI_LOG_FORMAT = "%(message)s"


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """APCError를 에러 메시지로 출력하고 종료 코드 1로 끝낸다."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except APCError as e:
            logger.debug("명령 실행 실패", exc_info=True)
            print_error(str(e))
            raise SystemExit(1) from e

    return wrapper


def _setup_logging(verbose: bool) -> LogConfig:
    """LOG_LEVEL/LOG_FORMAT 환경변수를 반영해 Rich 핸들러로 로깅을 구성한다."""
    env_config = LogConfig.from_env()
    level = env_config.level if "LOG_LEVEL" in os.environ else CLI_LOG_LEVEL
    log_config = LogConfig(
        level="DEBUG" if verbose else level,
        format=env_config.format if "LOG_FORMAT" in os.environ else CLI_LOG_FORMAT,
        date_format=env_config.date_format,
    )
    log_config.apply(handlers=[get_log_handler()])
    return log_config


def _load(ctx: Context, cacheable: Any, input: Any = None) -> CacheLoadResult:  # noqa: A002
    """컨텍스트의 빌더로 Cacheable을 감싸 조회하고 캐시 상태를 출력한다."""
    builder: FileBackedCacheableBuilder = ctx.obj["builder"]
    cached: FileBackedCacheable = builder.build(cacheable)
    loaded = cached.load(input, refresh=ctx.obj["refresh"])

    path = cached.cache_path(loaded.cache_key)
    if loaded.cache_hit:
        print_info(f"캐시 히트: {path}")
    else:
        print_info(f"원격 조회 후 저장: {path}")
    return loaded


def _session(ctx: Context) -> Any:
    from core.parallel import create_session

    return create_session(profile_name=ctx.obj["profile"], region_name=get_default_region())


@click.group()
@click.version_option(VERSION, prog_name="apc")
@click.option("--cache-dir", default=None, help="캐시 루트 디렉토리")
@click.option("--max-age-days", type=click.IntRange(min=0), default=None, help="캐시 유효 기간 (일)")
@click.option("--refresh", is_flag=True, help="캐시를 무시하고 다시 조회")
@click.option("-p", "--profile", default=None, help="AWS 프로파일 (SDK 조회 명령용)")
@click.option("-v", "--verbose", is_flag=True, help="DEBUG 로그 출력")
@click.pass_context
def cli(
    ctx: Context,
    cache_dir: str | None,
    max_age_days: int | None,
    refresh: bool,
    profile: str | None,
    verbose: bool,
) -> None:
    """APC - AWS 가격표/인벤토리 캐시 CLI"""
    _setup_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["builder"] = FileBackedCacheableBuilder(
        root_path=cache_dir,
        cache_max_age=timedelta(days=max_age_days) if max_age_days is not None else None,
    )
    ctx.obj["refresh"] = refresh or get_env_bool("APC_CACHE_REFRESH")
    ctx.obj["profile"] = profile or get_default_profile()


# =============================================================================
# test: 데이터 소스 조회
# =============================================================================


@cli.group("test")
def test_cmd() -> None:
    """데이터 소스 조회 (캐시 경유)

    \b
    Examples:
        apc test service-list
        apc test region-index --service AmazonEC2
        apc test ec2-all-instance-types
    """


@test_cmd.command("service-list")
@click.pass_context
@handle_errors
def service_list(ctx: Context) -> None:
    """Price List Bulk 서비스 목록"""
    from core.shared.aws.price_bulk import ServiceIndexClient

    response = _load(ctx, ServiceIndexClient()).result

    rows = [[code, offer.current_version_url or "-"] for code, offer in sorted(response.offers.items())]
    print_table(f"서비스 목록 ({response.publication_date:%Y-%m-%d})", ["Offer Code", "Current Version URL"], rows)


@test_cmd.command("region-index")
@click.option("-s", "--service", "service_code", default=DEFAULT_SERVICE_CODE, show_default=True, help="서비스 코드")
@click.pass_context
@handle_errors
def region_index(ctx: Context, service_code: str) -> None:
    """서비스별 리전 인덱스"""
    from core.shared.aws.price_bulk import RegionIndexClient

    response = _load(ctx, RegionIndexClient(), service_code).result

    rows = [
        [code, region.current_version_url.offer_version, region.current_version_url.path()]
        for code, region in sorted(response.regions.items())
    ]
    print_table(f"{service_code} 리전 인덱스", ["Region", "Version", "Path"], rows)


@test_cmd.command("pricing-list")
@click.option("-s", "--service", "service_code", default=DEFAULT_SERVICE_CODE, show_default=True, help="서비스 코드")
@click.option("-r", "--region", default=DEFAULT_REGION_CODE, show_default=True, help="리전 코드")
@click.option(
    "--version", "offer_version", default=DEFAULT_OFFER_VERSION, show_default=True, help="오퍼 버전 (region-index 결과 참고)"
)
@click.option("--attribute", default="instanceType", show_default=True, help="온디맨드 가격 그룹 기준 속성")
@click.option("-n", "--limit", type=int, default=DEFAULT_LIMIT, show_default=True, help="출력 행 수")
@click.pass_context
@handle_errors
def pricing_list(
    ctx: Context,
    service_code: str,
    region: str,
    offer_version: str,
    attribute: str,
    limit: int,
) -> None:
    """리전/버전별 가격표와 온디맨드 시간당 가격"""
    from core.shared.aws.price_bulk import PriceBulkOffer, PricingListClient

    offer = PriceBulkOffer(service_code, offer_version, region)
    response = _load(ctx, PricingListClient(), offer).result

    print_success(
        f"{offer.tag()}: products={len(response.products)}, "
        f"on_demand={len(response.terms.on_demand)}, reserved={len(response.terms.reserved)}"
    )
    prices = response.on_demand_prices(attribute)
    rows = [[name, f"${price:.4f}"] for name, price in sorted(prices.items())[:limit]]
    print_table(f"온디맨드 가격 ({len(prices)}개 중 {len(rows)}개)", [attribute, "USD"], rows)


@test_cmd.command("savings-plan-list")
@click.option("-s", "--service", "service_code", default=DEFAULT_SAVINGS_PLAN_CODE, show_default=True, help="Savings Plan 코드")
@click.option("--version", "offer_version", default=DEFAULT_SAVINGS_PLAN_VERSION, show_default=True, help="오퍼 버전")
@click.option("-r", "--region", default=DEFAULT_REGION_CODE, show_default=True, help="리전 코드")
@click.option("-n", "--limit", type=int, default=DEFAULT_LIMIT, show_default=True, help="출력 행 수")
@click.pass_context
@handle_errors
def savings_plan_list(ctx: Context, service_code: str, offer_version: str, region: str, limit: int) -> None:
    """Savings Plan 요율표 (요율 단위로 평탄화)"""
    from core.shared.aws.price_bulk import PriceBulkSavingsPlan, SavingsPlanListClient
    from core.shared.aws.savings_plan import pivot

    plan = PriceBulkSavingsPlan(service_code, offer_version, region)
    response = _load(ctx, SavingsPlanListClient(), plan).result

    rows = pivot(response)
    print_success(f"{plan.tag()}: products={len(response.products)}, rates={len(rows)}")
    print_table(
        f"Savings Plan 요율 ({len(rows)}개 중 {min(limit, len(rows))}개)",
        ["SKU", "Term", "Purchase Option", "Usage Type", "Rate"],
        [
            [
                row.savings_plan_sku,
                f"{row.lease_contract_length.duration}{row.lease_contract_length.unit}",
                row.savings_plan_attributes.purchase_option.value,
                row.term_rate.discounted_usage_type,
                f"{row.term_rate.discounted_rate.price} {row.term_rate.discounted_rate.currency.value}",
            ]
            for row in rows[:limit]
        ],
    )


@test_cmd.command("ec2-all-instance-types")
@click.option("-n", "--limit", type=int, default=DEFAULT_LIMIT, show_default=True, help="출력 행 수")
@click.pass_context
@handle_errors
def ec2_all_instance_types(ctx: Context, limit: int) -> None:
    """주요 리전의 EC2 인스턴스 타입 (병합)"""
    from core.shared.aws.ec2 import Ec2Client, InstanceTypesCacheable

    ec2_client = Ec2Client(session=_session(ctx))
    instance_types = _load(ctx, InstanceTypesCacheable(ec2_client)).result

    rows = []
    for name, info in sorted(instance_types.items())[:limit]:
        rows.append(
            [
                name,
                info.get("VCpuInfo", {}).get("DefaultVCpus", "-"),
                info.get("MemoryInfo", {}).get("SizeInMiB", "-"),
                info.get("CurrentGeneration", "-"),
            ]
        )
    print_table(
        f"EC2 인스턴스 타입 ({len(instance_types)}개, {', '.join(ec2_client.regions)})",
        ["Instance Type", "vCPU", "Memory (MiB)", "Current Gen"],
        rows,
    )


@test_cmd.command("redis-type-specific-parameters")
@click.pass_context
@handle_errors
def redis_type_specific_parameters(ctx: Context) -> None:
    """Redis 노드 타입별 기본 파라미터"""
    from core.shared.aws.elasticache import ElasticacheClient

    print_results_json(ElasticacheClient(session=_session(ctx)).list_redis_type_specific_parameters())


@test_cmd.command("memcached-type-specific-parameters")
@click.pass_context
@handle_errors
def memcached_type_specific_parameters(ctx: Context) -> None:
    """Memcached 노드 타입별 기본 파라미터"""
    from core.shared.aws.elasticache import ElasticacheClient

    print_results_json(ElasticacheClient(session=_session(ctx)).list_memcached_type_specific_parameters())


# =============================================================================
# cache: 캐시 관리
# =============================================================================


@cli.group("cache")
def cache_cmd() -> None:
    """캐시 디렉토리 관리

    \b
    Examples:
        apc cache info
        apc cache clear -c aws/bulk/pricing_list
    """


@cache_cmd.command("info")
@click.option("--json", "as_json", is_flag=True, help="JSON 형식으로 출력")
@click.pass_context
def cache_info(ctx: Context, as_json: bool) -> None:
    """캐시 파일 목록과 만료 여부"""
    builder: FileBackedCacheableBuilder = ctx.obj["builder"]
    info = get_cache_info(builder.root_path, builder.cache_max_age)

    if as_json:
        print_results_json(info)
        return

    if not info["files"]:
        console.print(f"[dim]캐시 파일 없음: {escape(info['cache_dir'])}[/dim]")
        return

    rows = [
        [
            f["category"],
            f["name"],
            f"{f['size'] / 1024:.1f} KB",
            f"{f['age_days']:.1f}",
            "만료" if f["expired"] else "유효",
        ]
        for f in info["files"]
    ]
    print_table(
        f"캐시 ({info['cache_dir']}, 유효 기간 {info['max_age_days']}일)",
        ["Category", "File", "Size", "Age (days)", "Status"],
        rows,
    )


@cache_cmd.command("clear")
@click.option("-c", "--category", default=None, help="삭제할 카테고리 (예: aws/bulk/pricing_list)")
@click.option("-y", "--yes", is_flag=True, help="확인 없이 삭제")
@click.pass_context
def cache_clear(ctx: Context, category: str | None, yes: bool) -> None:
    """캐시 파일 삭제"""
    builder: FileBackedCacheableBuilder = ctx.obj["builder"]
    target = category or "전체"

    if not yes and not click.confirm(f"캐시 삭제: {target} ({builder.root_path})", default=False):
        print_warning("취소됨")
        return

    count = clear_cache(category, builder.root_path)
    print_success(f"캐시 {count}개 삭제 ({target})")


if __name__ == "__main__":
    cli()
