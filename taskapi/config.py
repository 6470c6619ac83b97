from functools import lru_cache
from typing import Any, Literal
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application Configuration
    TASKAPI_VERSION: str = "v0.1.x"
    API_NAME: str = "Tasks API"
    API_SUMMARY: str = "A task-tracking service with validated updates"

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    CORS_ENABLED: bool = False
    CORS_ORIGINS: list[str] = ["*"]

    # Task Store Configuration
    TASK_STORE_BACKEND: Literal["memory", "redis", "postgres"] = "memory"
    TASK_STORE_NAMESPACE: str = "tasks"
    TASK_STORE_FALLBACK_TO_MEMORY: bool = True
    TASK_STORE_LOGGING_ENABLED: bool = True
    STORE_TIMEOUT_SECONDS: int = 10

    # Database Configuration
    REDIS_URL: str = "redis://localhost:6379"
    POSTGRES_URL: str = "postgresql://localhost:5432/taskapi"  # Assumes a local Postgres db named 'taskapi' exists

    # OpenTelemetry Settings
    OTEL_ENABLED: bool = False
    OTEL_SERVICE_NAME: str = "taskapi"

    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: Any):
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("TASK_STORE_BACKEND", mode="before")
    def normalize_store_backend(cls, v: Any):
        if isinstance(v, str):
            return v.lower()
        return v

    @field_validator("CORS_ORIGINS", mode="before")
    def validate_list_from_string(cls, v: Any):
        if isinstance(v, str):
            return [item.strip() for item in v.split(",")]
        return v

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings():
    return Settings()
