from datetime import date, datetime, timezone

from taskapi.common.exceptions import ValidationException
from taskapi.tasks.dates import parse_date
from taskapi.tasks.registry import ValidationRegistry
from taskapi.tasks.schemas import (
    UPDATABLE_FIELDS,
    CreateTaskRequest,
    Task,
    TaskListResponse,
    TaskPatch,
)
from taskapi.tasks.store.base import TaskStore

NULL_FILTER = "null"


def _parse_date(value: str) -> date:
    try:
        return parse_date(value)
    except ValueError as e:
        raise ValidationException("invalid date format, expected YYYY-MM-DD") from e


class TaskService:
    def __init__(self, store: TaskStore, registry: ValidationRegistry):
        self.store = store
        self.registry = registry

    def _run_field_validator(
        self, field_name: str, value: object, patch: TaskPatch
    ) -> None:
        validator = self.registry.get_field_validator(field_name)
        if validator:
            validator(value, patch, field_name)

    def validate_create(self, task: Task) -> None:
        """Check a candidate task before it is stored.

        Validators write into a scratch patch; the task itself is stored as
        given.
        """
        if not task.title:
            raise ValidationException("title is required")
        if not task.status:
            raise ValidationException("status is required")

        patch: TaskPatch = {}

        self._run_field_validator("title", task.title, patch)
        self._run_field_validator("status", task.status, patch)
        if task.priority:
            self._run_field_validator("priority", task.priority, patch)
        if task.due_date is not None:
            self._run_field_validator("due_date", task.due_date, patch)

    def validate_update(self, task: Task, patch: TaskPatch) -> None:
        """Check a patch against the current task and normalize it in place.

        Business rules run first and take precedence over field errors. The
        patch is only rewritten once every field has passed.
        """
        for rule in self.registry.business_rules:
            rule(task, patch)

        if not patch:
            raise ValidationException("no fields to update")

        normalized: TaskPatch = dict(patch)
        for field_name, value in patch.items():
            if field_name not in UPDATABLE_FIELDS:
                raise ValidationException(f"unknown field: {field_name}")
            self._run_field_validator(field_name, value, normalized)

        patch.update(normalized)

    def _normalize_due_date(self, value: str) -> date:
        patch: TaskPatch = {}
        self._run_field_validator("due_date", value, patch)
        normalized = patch.get("due_date", value)
        if isinstance(normalized, date):
            return normalized
        return _parse_date(normalized)

    def create_task(self, task_input: CreateTaskRequest) -> Task:
        task = Task(
            title=task_input.title,
            description=task_input.description,
            status=task_input.status,
            priority=task_input.priority,
            due_date=(
                self._normalize_due_date(task_input.due_date)
                if task_input.due_date
                else None
            ),
        )
        self.validate_create(task)

        return self.store.create_task(task)

    def list_tasks(
        self,
        status: str | None = None,
        priority: str | None = None,
        due_date: str | None = None,
    ) -> TaskListResponse:
        due_date_filter: date | None = None
        if due_date and due_date != NULL_FILTER:
            due_date_filter = _parse_date(due_date)

        tasks = self.store.list_tasks()

        if status:
            tasks = [task for task in tasks if task.status == status]
        if priority:
            tasks = [task for task in tasks if task.priority == priority]
        if due_date == NULL_FILTER:
            tasks = [task for task in tasks if task.due_date is None]
        elif due_date_filter is not None:
            tasks = [task for task in tasks if task.due_date == due_date_filter]

        epoch = datetime.min.replace(tzinfo=timezone.utc)
        tasks.sort(key=lambda task: task.created_at or epoch)

        return TaskListResponse(tasks=tasks, total_items=len(tasks))

    def get_task(self, task_id: str) -> Task:
        return self.store.get_task(task_id)

    def update_task(self, task_id: str, patch: TaskPatch) -> Task:
        current_task = self.store.get_task(task_id)

        self.validate_update(current_task, patch)

        return self.store.update_task(task_id, patch)

    def delete_task(self, task_id: str) -> None:
        self.store.delete_task(task_id)
