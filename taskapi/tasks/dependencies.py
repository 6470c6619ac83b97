from fastapi import Depends, Request

from taskapi.tasks.registry import ValidationRegistry
from taskapi.tasks.service import TaskService
from taskapi.tasks.store.base import TaskStore


def get_task_store(request: Request) -> TaskStore:
    return request.app.state.task_store


def get_validation_registry(request: Request) -> ValidationRegistry:
    return request.app.state.validation_registry


def get_task_service(
    store: TaskStore = Depends(get_task_store),
    registry: ValidationRegistry = Depends(get_validation_registry),
) -> TaskService:
    return TaskService(store=store, registry=registry)
