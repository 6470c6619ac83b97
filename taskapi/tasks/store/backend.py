import logging

from taskapi.config import Settings
from taskapi.common.redis import RedisClient
from taskapi.tasks.store.base import TaskStore
from taskapi.tasks.store.logging_store import LoggingTaskStore
from taskapi.tasks.store.memory import InMemoryTaskStore
from taskapi.tasks.store.postgres.store import PostgresTaskStore
from taskapi.tasks.store.redis.store import RedisTaskStore

logger = logging.getLogger(__name__)


def get_task_store_backend(
    redis_client: RedisClient | None,
    settings: Settings,
) -> TaskStore:
    if settings.TASK_STORE_BACKEND == "memory":
        return InMemoryTaskStore()
    elif settings.TASK_STORE_BACKEND == "postgres":
        return PostgresTaskStore(
            database_url=settings.POSTGRES_URL,
            timeout=settings.STORE_TIMEOUT_SECONDS,
        )
    elif settings.TASK_STORE_BACKEND == "redis":
        if redis_client is None:
            raise ValueError("The redis task store backend requires a Redis client")
        return RedisTaskStore(
            redis_client=redis_client,
            key_prefix=settings.TASK_STORE_NAMESPACE,
        )
    else:
        raise ValueError(
            f"Unsupported task store backend: {settings.TASK_STORE_BACKEND}"
        )


def create_task_store(
    redis_client: RedisClient | None,
    settings: Settings,
) -> TaskStore:
    """Build the store the app serves from.

    A persistent backend that cannot be reached at startup is replaced by the
    in-memory store when TASK_STORE_FALLBACK_TO_MEMORY is set.
    """
    try:
        store = get_task_store_backend(redis_client, settings)
        store.ping()
        logger.info(f"Using {settings.TASK_STORE_BACKEND} task store")
    except Exception as e:
        if (
            settings.TASK_STORE_BACKEND == "memory"
            or not settings.TASK_STORE_FALLBACK_TO_MEMORY
        ):
            raise
        logger.warning(
            f"Failed to connect to the {settings.TASK_STORE_BACKEND} task store: {e}"
        )
        logger.info("Falling back to in-memory task store")
        store = InMemoryTaskStore()

    if settings.TASK_STORE_LOGGING_ENABLED:
        return LoggingTaskStore(store)
    return store
