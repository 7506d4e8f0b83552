"""
tests/core/parallel/test_client_set.py - ClientSet 테스트

키별 클라이언트가 정확히 한 번만 생성되고 공유되는지 검증합니다.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from core.parallel import ClientSet


class CountingFactory:
    """호출 횟수를 키별로 기록하는 factory"""

    def __init__(self):
        self.calls: dict[str, int] = {}
        self._lock = threading.Lock()

    def __call__(self, initial_data, key):
        with self._lock:
            self.calls[key] = self.calls.get(key, 0) + 1
        return {"base": initial_data, "key": key}


class TestClientSet:
    """ClientSet 기본 동작"""

    def test_same_key_returns_same_instance(self):
        factory = CountingFactory()
        clients = ClientSet("base", factory)

        first = clients.get("us-east-1")
        second = clients.get("us-east-1")

        assert first is second
        assert factory.calls == {"us-east-1": 1}

    def test_factory_receives_initial_data(self):
        clients = ClientSet("base", CountingFactory())
        assert clients.get("eu-central-1") == {"base": "base", "key": "eu-central-1"}

    def test_different_keys(self):
        factory = CountingFactory()
        clients = ClientSet("base", factory)

        a = clients.get("us-east-1")
        b = clients.get("us-west-2")

        assert a is not b
        assert factory.calls == {"us-east-1": 1, "us-west-2": 1}
        assert sorted(clients.keys()) == ["us-east-1", "us-west-2"]
        assert len(clients) == 2
        assert "us-east-1" in clients
        assert "ap-northeast-1" not in clients

    def test_none_client_is_cached(self):
        """factory가 None을 반환해도 재생성하지 않음"""
        calls = []

        def factory(initial_data, key):
            calls.append(key)
            return None

        clients = ClientSet(None, factory)
        clients.get("a")
        clients.get("a")

        assert calls == ["a"]

    def test_factory_error_not_cached(self):
        """factory 예외는 그대로 전파되고 다음 호출에서 재시도"""
        attempts = []

        def factory(initial_data, key):
            attempts.append(key)
            if len(attempts) == 1:
                raise RuntimeError("생성 실패")
            return object()

        clients = ClientSet(None, factory)

        with pytest.raises(RuntimeError):
            clients.get("a")
        assert "a" not in clients

        client = clients.get("a")
        assert clients.get("a") is client
        assert attempts == ["a", "a"]


class TestClientSetConcurrency:
    """동시 접근 테스트"""

    def test_concurrent_same_key_single_creation(self):
        """같은 키 동시 요청 → factory 1회, 모두 같은 인스턴스"""
        factory = CountingFactory()
        clients = ClientSet("base", factory)
        barrier = threading.Barrier(16)

        def worker(_):
            barrier.wait()
            return clients.get("us-east-1")

        with ThreadPoolExecutor(max_workers=16) as executor:
            results = list(executor.map(worker, range(16)))

        assert factory.calls == {"us-east-1": 1}
        assert all(r is results[0] for r in results)

    def test_concurrent_many_keys(self):
        factory = CountingFactory()
        clients = ClientSet("base", factory)
        keys = [f"region-{i % 4}" for i in range(40)]

        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(clients.get, keys))

        assert factory.calls == {f"region-{i}": 1 for i in range(4)}
