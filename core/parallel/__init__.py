"""
core/parallel - 병렬 처리 모듈

리전별 AWS 작업을 병렬로 안전하게 처리합니다.

주요 구성 요소:
- ClientSet: 파티션 키(리전)별 클라이언트 지연 생성/공유
- get_client: retry 설정이 적용된 boto3 client 생성
- regional_client_factory: ClientSet용 리전별 client factory

Example:
    from core.parallel import ClientSet, regional_client_factory

    clients = ClientSet(session, regional_client_factory("ec2"))
    with ThreadPoolExecutor(max_workers=5) as executor:
        futures = [executor.submit(work, clients.get(r)) for r in regions]
"""

from .client import create_session, get_client, regional_client_factory
from .client_set import ClientSet

__all__: list[str] = [
    "ClientSet",
    "create_session",
    "get_client",
    "regional_client_factory",
]
