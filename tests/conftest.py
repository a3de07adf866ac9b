"""
Pytest configuration and shared fixtures.
"""

import asyncio
from collections.abc import Generator

import pytest
from prometheus_client import CollectorRegistry
from redis.exceptions import ConnectionError as RedisConnectionError

from job_lock.config import get_settings
from job_lock.jobs import registry
from job_lock.observability import metrics as metrics_module
from job_lock.observability.metrics import MetricsCollector
from job_lock.store import redis_store

START_TIME = 1_700_000_000


class FakeClock:
    """Controllable epoch clock."""

    def __init__(self, now: float = START_TIME):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryLockStore:
    """
    LockStore test double.

    Each operation is atomic, but yields to the event loop first so that
    concurrent callers interleave between operations the way separate
    workers do against Redis.
    """

    def __init__(self):
        self.data: dict[str, int] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_delete = False

    async def set_if_absent(self, key: str, value: int) -> bool:
        await asyncio.sleep(0)
        self.calls.append(("set_if_absent", key))
        if key in self.data:
            return False
        self.data[key] = value
        return True

    async def get(self, key: str) -> int | None:
        await asyncio.sleep(0)
        self.calls.append(("get", key))
        return self.data.get(key)

    async def get_and_set(self, key: str, value: int) -> int | None:
        await asyncio.sleep(0)
        self.calls.append(("get_and_set", key))
        previous = self.data.get(key)
        self.data[key] = value
        return previous

    async def delete(self, key: str) -> None:
        await asyncio.sleep(0)
        self.calls.append(("delete", key))
        if self.fail_delete:
            raise RedisConnectionError("Connection refused")
        self.data.pop(key, None)


@pytest.fixture
def clock() -> FakeClock:
    """A clock frozen at a fixed epoch second."""
    return FakeClock()


@pytest.fixture
def store() -> InMemoryLockStore:
    """An empty in-memory lock store."""
    return InMemoryLockStore()


@pytest.fixture
def metrics_registry() -> CollectorRegistry:
    """A private Prometheus registry."""
    return CollectorRegistry()


@pytest.fixture(autouse=True)
def metrics(
    monkeypatch: pytest.MonkeyPatch,
    metrics_registry: CollectorRegistry,
) -> MetricsCollector:
    """Route the global metrics collector to a private registry."""
    collector = MetricsCollector(registry=metrics_registry)
    monkeypatch.setattr(metrics_module, "_metrics", collector)
    return collector


@pytest.fixture(autouse=True)
def isolated_state(store: InMemoryLockStore) -> Generator[None]:
    """Reset settings, the default store and the job registry around each test."""
    get_settings.cache_clear()
    saved_jobs = dict(registry._jobs)
    redis_store.set_lock_store(store)

    yield

    registry._jobs.clear()
    registry._jobs.update(saved_jobs)
    redis_store.set_lock_store(None)
    get_settings.cache_clear()
