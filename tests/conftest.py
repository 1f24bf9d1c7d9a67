"""
Pytest configuration and shared fixtures.
"""

import os
import time
from collections.abc import AsyncGenerator
from uuid import uuid4

import fakeredis
import pytest
import pytest_asyncio
import redis.asyncio as redis

from rsmq.config import Settings
from rsmq.engine import RedisSMQ

# Real Redis for tests when set, otherwise an in-process fake with Lua support
TEST_REDIS_URL = os.getenv("TEST_REDIS_URL")


class FakeClock:
    """Controllable clock returning whole seconds."""

    def __init__(self, start: float | None = None):
        self.now = float(int(start if start is not None else time.time()))

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Create a clock tests can move forward."""
    return FakeClock()


@pytest.fixture
def namespace() -> str:
    """Generate a namespace no other test uses."""
    return f"test{uuid4().hex[:8]}"


@pytest.fixture
def test_settings(namespace: str) -> Settings:
    """Create test settings."""
    return Settings(
        namespace=namespace,
        log_level="DEBUG",
        log_format="console",
    )


@pytest_asyncio.fixture
async def redis_client() -> AsyncGenerator[redis.Redis]:
    """Create a Redis client for tests."""
    if TEST_REDIS_URL:
        client = redis.from_url(TEST_REDIS_URL)
    else:
        client = fakeredis.FakeAsyncRedis()

    yield client

    await client.aclose()


@pytest_asyncio.fixture
async def rsmq(
    redis_client: redis.Redis,
    namespace: str,
    clock: FakeClock,
    test_settings: Settings,
) -> AsyncGenerator[RedisSMQ]:
    """Create a queue engine on the shared test client."""
    engine = RedisSMQ(client=redis_client, ns=namespace, clock=clock, settings=test_settings)

    yield engine

    for qname in await engine.list_queues():
        await engine.delete_queue(qname)
    await engine.quit()


@pytest.fixture
def qname() -> str:
    """Generate a queue name."""
    return f"q-{uuid4().hex[:8]}"
