from contextlib import contextmanager
import threading
from typing import Iterator
from uuid import uuid4

from taskapi.common.current_datetime import get_current_datetime
from taskapi.common.exceptions import ResourceNotFoundException, ResourceType
from taskapi.tasks.schemas import Task, TaskPatch
from taskapi.tasks.store.base import (
    TaskStore,
    build_field_updates,
    normalize_due_date,
)


class ReadWriteLock:
    """Many readers or one writer. Waiting writers block new readers."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class InMemoryTaskStore(TaskStore):
    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._items: dict[str, Task] = {}

    def create_task(self, task: Task) -> Task:
        stored = task.model_copy(
            update={
                "id": uuid4().hex,
                "due_date": normalize_due_date(task.due_date),
                "created_at": get_current_datetime(),
                "updated_at": None,
            }
        )
        with self._lock.write():
            self._items[stored.id] = stored
        return stored.model_copy()

    def list_tasks(self) -> list[Task]:
        with self._lock.read():
            return [task.model_copy() for task in self._items.values()]

    def get_task(self, task_id: str) -> Task:
        with self._lock.read():
            task = self._items.get(task_id)
        if task is None:
            raise ResourceNotFoundException(ResourceType.TASK, task_id)
        return task.model_copy()

    def update_task(self, task_id: str, patch: TaskPatch) -> Task:
        updates = build_field_updates(patch)
        with self._lock.write():
            task = self._items.get(task_id)
            if task is None:
                raise ResourceNotFoundException(ResourceType.TASK, task_id)
            updated = task.model_copy(
                update={**updates, "updated_at": get_current_datetime()}
            )
            self._items[task_id] = updated
        return updated.model_copy()

    def delete_task(self, task_id: str) -> None:
        with self._lock.write():
            if task_id not in self._items:
                raise ResourceNotFoundException(ResourceType.TASK, task_id)
            del self._items[task_id]
