from datetime import datetime, timezone
from typing import Any
from uuid import uuid4
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker

from taskapi.common.current_datetime import get_current_datetime
from taskapi.common.exceptions import ResourceNotFoundException, ResourceType
from taskapi.tasks.schemas import Task, TaskPatch
from taskapi.tasks.store.base import (
    TaskStore,
    build_field_updates,
    normalize_due_date,
)
from taskapi.tasks.store.postgres.model import Base, TaskModel


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite drops the offset of timezone-aware columns.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PostgresTaskStore(TaskStore):
    def __init__(self, database_url: str, timeout: int | None = None):
        engine_options: dict[str, Any] = {"pool_pre_ping": True}
        if timeout and database_url.startswith("postgresql"):
            engine_options["connect_args"] = {
                "connect_timeout": timeout,
                "options": f"-c statement_timeout={timeout * 1000}",
            }

        self.engine = create_engine(database_url, **engine_options)
        self.Session = sessionmaker(bind=self.engine)
        Base.metadata.create_all(self.engine)

    def _to_task(self, model: TaskModel) -> Task:
        return Task(
            id=model.id,
            title=model.title,
            description=model.description,
            status=model.status,
            priority=model.priority,
            due_date=model.due_date,
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
        )

    def create_task(self, task: Task) -> Task:
        with self.Session() as session:
            new_task = TaskModel(
                id=uuid4().hex,
                title=task.title,
                description=task.description,
                status=task.status,
                priority=task.priority,
                due_date=normalize_due_date(task.due_date),
                created_at=get_current_datetime(),
            )
            session.add(new_task)
            session.commit()

            return self._to_task(new_task)

    def list_tasks(self) -> list[Task]:
        with self.Session() as session:
            return [self._to_task(task) for task in session.query(TaskModel).all()]

    def get_task(self, task_id: str) -> Task:
        with self.Session() as session:
            task = session.get(TaskModel, task_id)

            if not task:
                raise ResourceNotFoundException(ResourceType.TASK, task_id)

            return self._to_task(task)

    def update_task(self, task_id: str, patch: TaskPatch) -> Task:
        updates = build_field_updates(patch)

        with self.Session() as session:
            task = (
                session.query(TaskModel).filter_by(id=task_id).with_for_update().first()
            )

            if not task:
                raise ResourceNotFoundException(ResourceType.TASK, task_id)

            for field_name, value in updates.items():
                setattr(task, field_name, value)

            task.updated_at = get_current_datetime()
            session.commit()

            return self._to_task(task)

    def delete_task(self, task_id: str) -> None:
        with self.Session() as session:
            deleted = session.query(TaskModel).filter_by(id=task_id).delete()

            if not deleted:
                raise ResourceNotFoundException(ResourceType.TASK, task_id)

            session.commit()

    def ping(self) -> None:
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
