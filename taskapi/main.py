import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from redis.exceptions import RedisError
from sqlalchemy.exc import OperationalError

from taskapi.common.exceptions import (
    KnownException,
    ResourceNotFoundException,
    known_exception_handler,
    resource_not_found_handler,
    unexpected_exception_handler,
    redis_exception_handler,
    database_exception_handler,
    validation_exception_handler,
    service_unavailable_response,
    internal_error_response,
    validation_error_response,
)
from taskapi.common.opentelemetry import setup_opentelemetry
from taskapi.common.redis import create_redis_client
from taskapi.config import get_settings
from taskapi.healthcheck.router import router as health_router
from taskapi.tasks.registry import create_default_registry
from taskapi.tasks.router import router as tasks_router
from taskapi.tasks.store.backend import create_task_store

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
)

logger = logging.getLogger(__name__)

# Rules added here before startup apply to every update request.
validation_registry = create_default_registry()


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.redis_client = (
        create_redis_client(settings.REDIS_URL, timeout=settings.STORE_TIMEOUT_SECONDS)
        if settings.TASK_STORE_BACKEND == "redis"
        else None
    )
    app.state.task_store = create_task_store(app.state.redis_client, settings)
    app.state.validation_registry = validation_registry
    yield
    if app.state.redis_client:
        app.state.redis_client.close()


app = FastAPI(
    title=settings.API_NAME,
    summary=settings.API_SUMMARY,
    lifespan=lifespan,
    responses={
        **service_unavailable_response,
        **internal_error_response,
        **validation_error_response,
    },
    version=settings.TASKAPI_VERSION,
)

if settings.OTEL_ENABLED:
    setup_opentelemetry(settings.OTEL_SERVICE_NAME, app)

if settings.CORS_ENABLED:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.exception_handler(RequestValidationError)(validation_exception_handler)
app.exception_handler(ResourceNotFoundException)(resource_not_found_handler)
app.exception_handler(KnownException)(known_exception_handler)
app.exception_handler(RedisError)(redis_exception_handler)
app.exception_handler(OperationalError)(database_exception_handler)
app.exception_handler(Exception)(unexpected_exception_handler)


app.include_router(health_router)
app.include_router(tasks_router)
