from datetime import date, timedelta
from typing import Any, Generator
import pytest
from docker.errors import DockerException  # type: ignore
from fastapi.testclient import TestClient
from pytest_mock import MockerFixture
from sqlalchemy import create_engine
from testcontainers.postgres import PostgresContainer  # type: ignore
from testcontainers.redis import RedisContainer  # type: ignore

from taskapi.common.redis import create_redis_client
from taskapi.config import Settings
from taskapi.tasks.dates import today_utc
from taskapi.tasks.registry import ValidationRegistry, create_default_registry
from taskapi.tasks.service import TaskService
from taskapi.tasks.store.memory import InMemoryTaskStore
from taskapi.tasks.store.postgres.model import TaskModel


@pytest.fixture
def today() -> date:
    return today_utc()


@pytest.fixture
def tomorrow(today: date) -> date:
    return today + timedelta(days=1)


@pytest.fixture
def yesterday(today: date) -> date:
    return today - timedelta(days=1)


@pytest.fixture
def registry() -> ValidationRegistry:
    return create_default_registry()


@pytest.fixture
def memory_store() -> InMemoryTaskStore:
    return InMemoryTaskStore()


@pytest.fixture
def task_service(
    memory_store: InMemoryTaskStore, registry: ValidationRegistry
) -> TaskService:
    return TaskService(store=memory_store, registry=registry)


@pytest.fixture(scope="session")
def redis_container() -> Generator[RedisContainer, None, None]:
    try:
        container = RedisContainer(image="redis:7-alpine").start()
    except DockerException as e:
        pytest.skip(f"Docker is not available: {e}")
    yield container
    container.stop()


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    try:
        container = PostgresContainer("postgres:17-alpine").start()
    except DockerException as e:
        pytest.skip(f"Docker is not available: {e}")
    yield container
    container.stop()


@pytest.fixture
def redis_url(redis_container: RedisContainer) -> str:
    """URL of the Redis container, emptied before each test."""
    host = redis_container.get_container_host_ip()
    port = redis_container.get_exposed_port(6379)
    url = f"redis://{host}:{port}"
    redis_client = create_redis_client(url)
    redis_client.flushdb()
    redis_client.close()
    return url


@pytest.fixture
def postgres_url(postgres_container: PostgresContainer) -> str:
    """URL of the Postgres container, with the task table dropped before each test."""
    url: str = postgres_container.get_connection_url()
    engine = create_engine(url)
    TaskModel.__table__.drop(engine, checkfirst=True)  # type: ignore[attr-defined]
    engine.dispose()
    return url


@pytest.fixture(params=["memory", "redis", "postgres"])
def test_settings(request: pytest.FixtureRequest) -> Settings:
    backend: str = request.param
    common_settings: dict[str, Any] = {
        "TASK_STORE_BACKEND": backend,
        "TASK_STORE_FALLBACK_TO_MEMORY": False,
        "TASK_STORE_LOGGING_ENABLED": True,
        "OTEL_ENABLED": False,
        "CORS_ENABLED": False,
    }
    if backend == "memory":
        return Settings(**common_settings)
    elif backend == "redis":
        return Settings(
            REDIS_URL=request.getfixturevalue("redis_url"), **common_settings
        )
    elif backend == "postgres":
        return Settings(
            POSTGRES_URL=request.getfixturevalue("postgres_url"), **common_settings
        )
    else:
        raise ValueError(f"Unknown backend: {backend}")


@pytest.fixture
def test_client(
    test_settings: Settings, mocker: MockerFixture
) -> Generator[TestClient, None, None]:
    from taskapi.config import get_settings
    from taskapi.main import app

    mocker.patch("taskapi.main.settings", test_settings)
    app.dependency_overrides[get_settings] = lambda: test_settings

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
