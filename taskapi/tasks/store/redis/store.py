from datetime import datetime
from typing import Any
from uuid import uuid4
from redis.client import Pipeline

from taskapi.common.current_datetime import get_current_datetime
from taskapi.common.exceptions import ResourceNotFoundException, ResourceType
from taskapi.common.redis import RedisClient
from taskapi.tasks.dates import format_date, parse_date
from taskapi.tasks.schemas import Task, TaskPatch
from taskapi.tasks.store.base import (
    TaskStore,
    build_field_updates,
    normalize_due_date,
)


class RedisTaskStore(TaskStore):
    """Stores each task document as a Redis hash at ``<prefix>:<id>``.

    Fields that are unset (due_date, updated_at) are left out of the hash.
    Every operation is a single Redis command or one WATCH/MULTI transaction,
    so no in-process locking is needed.
    """

    def __init__(self, *, redis_client: RedisClient, key_prefix: str):
        self.client = redis_client
        self.key_prefix = key_prefix

    def _get_task_key(self, task_id: str) -> str:
        return f"{self.key_prefix}:{task_id}"

    def _serialize_task(self, task: Task) -> dict[str, str]:
        mapping = {
            "id": task.id,
            "title": task.title,
            "description": task.description,
            "status": task.status,
            "priority": task.priority,
        }
        if task.due_date is not None:
            mapping["due_date"] = format_date(task.due_date)
        if task.created_at is not None:
            mapping["created_at"] = task.created_at.isoformat()
        if task.updated_at is not None:
            mapping["updated_at"] = task.updated_at.isoformat()
        return mapping

    def _deserialize_task(self, data: dict[str, str]) -> Task:
        due_date = data.get("due_date")
        updated_at = data.get("updated_at")
        return Task(
            id=data["id"],
            title=data.get("title", ""),
            description=data.get("description", ""),
            status=data.get("status", ""),
            priority=data.get("priority", ""),
            due_date=parse_date(due_date) if due_date else None,
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        )

    def create_task(self, task: Task) -> Task:
        stored = task.model_copy(
            update={
                "id": uuid4().hex,
                "due_date": normalize_due_date(task.due_date),
                "created_at": get_current_datetime(),
                "updated_at": None,
            }
        )

        self.client.hset(
            self._get_task_key(stored.id),
            mapping=self._serialize_task(stored),
        )

        return stored

    def list_tasks(self) -> list[Task]:
        task_keys = self.client.keys(f"{self.key_prefix}:*")
        tasks: list[Task] = []
        for key in task_keys:
            data = self.client.hgetall(key)
            # Deleted between KEYS and HGETALL.
            if data:
                tasks.append(self._deserialize_task(data))
        return tasks

    def get_task(self, task_id: str) -> Task:
        data = self.client.hgetall(self._get_task_key(task_id))
        if not data:
            raise ResourceNotFoundException(ResourceType.TASK, task_id)
        return self._deserialize_task(data)

    def update_task(self, task_id: str, patch: TaskPatch) -> Task:
        task_key = self._get_task_key(task_id)
        updates = build_field_updates(patch)

        update_mapping: dict[str, Any] = {
            "updated_at": get_current_datetime().isoformat()
        }
        removed_fields: list[str] = []

        for field_name, value in updates.items():
            if field_name == "due_date":
                if value is None:
                    removed_fields.append(field_name)
                else:
                    update_mapping[field_name] = format_date(value)
            else:
                update_mapping[field_name] = value

        def apply_update(pipe: Pipeline) -> None:
            if not pipe.exists(task_key):
                raise ResourceNotFoundException(ResourceType.TASK, task_id)
            pipe.multi()
            pipe.hset(task_key, mapping=update_mapping)
            if removed_fields:
                pipe.hdel(task_key, *removed_fields)
            pipe.hgetall(task_key)

        results = self.client.transaction(apply_update, task_key)

        return self._deserialize_task(results[-1])

    def delete_task(self, task_id: str) -> None:
        deleted = self.client.delete(self._get_task_key(task_id))
        if not deleted:
            raise ResourceNotFoundException(ResourceType.TASK, task_id)

    def ping(self) -> None:
        self.client.ping()
