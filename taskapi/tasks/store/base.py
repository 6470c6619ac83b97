from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any

from taskapi.tasks.dates import parse_date, to_date
from taskapi.tasks.schemas import Task, TaskPatch

TEXT_FIELDS = ("title", "description", "status", "priority")


class TaskStore(ABC):
    @abstractmethod
    def create_task(self, task: Task) -> Task:
        pass

    @abstractmethod
    def list_tasks(self) -> list[Task]:
        pass

    @abstractmethod
    def get_task(self, task_id: str) -> Task:
        pass

    @abstractmethod
    def update_task(self, task_id: str, patch: TaskPatch) -> Task:
        pass

    @abstractmethod
    def delete_task(self, task_id: str) -> None:
        pass

    def ping(self) -> None:
        pass


def normalize_due_date(value: date | datetime | None) -> date | None:
    return to_date(value) if value is not None else None


def build_field_updates(patch: TaskPatch) -> dict[str, Any]:
    """Pick the storable values out of a patch.

    Unknown keys and text values of the wrong type are ignored, a None
    due_date clears the field and a malformed due_date string raises
    ValueError. Every backend applies patches through this so
    they all accept the same value types.
    """
    updates: dict[str, Any] = {}

    for field_name in TEXT_FIELDS:
        value = patch.get(field_name)
        if isinstance(value, str):
            updates[field_name] = value

    if "due_date" in patch:
        value = patch["due_date"]
        if value is None:
            updates["due_date"] = None
        elif isinstance(value, date):
            updates["due_date"] = to_date(value)
        elif isinstance(value, str):
            updates["due_date"] = parse_date(value)

    return updates
