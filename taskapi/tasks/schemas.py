from datetime import date, datetime
from enum import Enum
from typing import Any
from pydantic import BaseModel, field_validator


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Field name -> proposed value. Values are strings as decoded from the request,
# or dates once the due_date validator has normalized them.
TaskPatch = dict[str, Any]

UPDATABLE_FIELDS = ("title", "description", "status", "priority", "due_date")


class Task(BaseModel):
    # Plain strings so rule violations are reported by the task service.
    id: str = ""
    title: str = ""
    description: str = ""
    status: str = ""
    priority: str = ""
    due_date: date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CreateTaskRequest(BaseModel):
    title: str = ""
    description: str = ""
    status: str = ""
    priority: str = ""
    due_date: str | None = None

    @field_validator("title", "description", "status", "priority", mode="before")
    def null_as_empty(cls, v: Any):
        if v is None:
            return ""
        return v


class TaskListResponse(BaseModel):
    tasks: list[Task]
    total_items: int
