from typing import Any
from fastapi import APIRouter, Body, Depends, status

from taskapi.common.exceptions import (
    ResourceType,
    bad_request_response,
    business_rule_response,
    resource_not_found_response,
)
from taskapi.tasks.dependencies import get_task_service
from taskapi.tasks.schemas import CreateTaskRequest, Task, TaskListResponse
from taskapi.tasks.service import TaskService


router = APIRouter(
    prefix="/tasks",
    tags=["Tasks"],
)


@router.get("", responses={**bad_request_response})
def list_tasks(
    status: str | None = None,
    priority: str | None = None,
    due_date: str | None = None,
    task_service: TaskService = Depends(get_task_service),
) -> TaskListResponse:
    return task_service.list_tasks(
        status=status,
        priority=priority,
        due_date=due_date,
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={**bad_request_response},
)
def create_task(
    task_input: CreateTaskRequest,
    task_service: TaskService = Depends(get_task_service),
) -> Task:
    return task_service.create_task(task_input)


@router.get("/{task_id}", responses={**resource_not_found_response(ResourceType.TASK)})
def get_task(
    task_id: str, task_service: TaskService = Depends(get_task_service)
) -> Task:
    return task_service.get_task(task_id)


@router.put(
    "/{task_id}",
    responses={
        **bad_request_response,
        **resource_not_found_response(ResourceType.TASK),
        **business_rule_response,
    },
)
def update_task(
    task_id: str,
    patch: dict[str, Any] = Body(...),
    task_service: TaskService = Depends(get_task_service),
) -> Task:
    return task_service.update_task(task_id, patch)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**resource_not_found_response(ResourceType.TASK)},
)
def delete_task(
    task_id: str, task_service: TaskService = Depends(get_task_service)
):
    task_service.delete_task(task_id)
