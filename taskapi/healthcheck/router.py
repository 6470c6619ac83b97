from typing import Any
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from taskapi.config import Settings, get_settings
from taskapi.tasks.dependencies import get_task_store
from taskapi.tasks.store.base import TaskStore

router = APIRouter()


@router.get(
    "/healthcheck",
    tags=["Healthcheck"],
    status_code=status.HTTP_200_OK,
    responses={
        200: {
            "description": "Healthcheck status",
            "content": {
                "application/json": {
                    "example": {
                        "api": {"status": "ok"},
                        "task_store": {"status": "ok", "backend": "redis"},
                    }
                }
            },
        },
        503: {
            "description": "Service unavailable",
            "content": {
                "application/json": {
                    "example": {
                        "api": {"status": "ok"},
                        "task_store": {
                            "status": "error",
                            "backend": "redis",
                            "message": "Connection error",
                        },
                    }
                }
            },
        },
    },
)
def healthcheck(
    settings: Settings = Depends(get_settings),
    task_store: TaskStore = Depends(get_task_store),
) -> JSONResponse:
    health_status: dict[str, Any] = {
        "api": {"status": "ok"},
        "task_store": {"status": "ok", "backend": settings.TASK_STORE_BACKEND},
    }
    has_error = False

    # Check task store connection
    try:
        task_store.ping()
    except Exception as e:
        health_status["task_store"].update({"status": "error", "message": str(e)})
        has_error = True

    if has_error:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=health_status
        )

    return JSONResponse(status_code=status.HTTP_200_OK, content=health_status)
