from __future__ import annotations

import os
import uuid

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.core.config import Settings
from app.main import create_app
from app.storage.memory import InMemoryRankStore
from app.storage.redis import RedisRankStore, create_redis_client


def make_settings(**overrides) -> Settings:
    values = {"storage_backend": "memory", "log_level": "WARNING"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture()
def client():
    app = create_app(make_settings())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def accumulate_client():
    app = create_app(make_settings(update_mode="Accumulate"))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def memory_store() -> InMemoryRankStore:
    return InMemoryRankStore()


@pytest.fixture(scope="session")
def redis_url() -> str:
    return os.getenv("REDIS_URL", "redis://localhost:6379/0")


@pytest_asyncio.fixture()
async def redis_store(redis_url: str):
    redis_client: Redis = create_redis_client(redis_url)
    try:
        await redis_client.ping()
    except (RedisError, OSError):
        await redis_client.aclose()
        pytest.skip(f"Redis not reachable at {redis_url}")

    store = RedisRankStore(redis_client, name=f"test_{uuid.uuid4().hex}")
    try:
        yield store
    finally:
        await store.delete_all()
        await redis_client.aclose()


@pytest.fixture()
def app_factory():
    def factory(**overrides):
        return create_app(make_settings(**overrides))

    return factory
