import logging
import time
from typing import Any, Callable, TypeVar

from taskapi.tasks.schemas import Task, TaskPatch
from taskapi.tasks.store.base import TaskStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LoggingTaskStore(TaskStore):
    """Wraps a task store and logs every call with its duration."""

    def __init__(self, store: TaskStore):
        self.store = store

    def _timed(self, operation: str, func: Callable[[], T], **context: Any) -> T:
        details = ", ".join(f"{key}={value}" for key, value in context.items())
        logger.info(f"[STORE] {operation} started: {details}")

        start = time.perf_counter()
        try:
            result = func()
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.warning(
                f"[STORE] {operation} failed: {details}, error={e}, duration={duration_ms:.2f}ms"
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"[STORE] {operation} finished: {details}, duration={duration_ms:.2f}ms"
        )
        return result

    def create_task(self, task: Task) -> Task:
        created = self._timed(
            "create_task",
            lambda: self.store.create_task(task),
            title=task.title,
            status=task.status,
        )
        logger.info(f"[STORE] Created task: id={created.id}")
        return created

    def list_tasks(self) -> list[Task]:
        tasks = self._timed("list_tasks", self.store.list_tasks)
        logger.info(f"[STORE] Listed {len(tasks)} tasks")
        return tasks

    def get_task(self, task_id: str) -> Task:
        return self._timed("get_task", lambda: self.store.get_task(task_id), id=task_id)

    def update_task(self, task_id: str, patch: TaskPatch) -> Task:
        return self._timed(
            "update_task",
            lambda: self.store.update_task(task_id, patch),
            id=task_id,
            fields=sorted(patch),
        )

    def delete_task(self, task_id: str) -> None:
        self._timed("delete_task", lambda: self.store.delete_task(task_id), id=task_id)

    def ping(self) -> None:
        self.store.ping()
