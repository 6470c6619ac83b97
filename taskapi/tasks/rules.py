from typing import Callable

from taskapi.common.exceptions import BusinessRuleException
from taskapi.tasks.schemas import Task, TaskPatch
from taskapi.tasks.validation import is_completed_task

BusinessRule = Callable[[Task, TaskPatch], None]


def prevent_completed_task_edits(task: Task, patch: TaskPatch) -> None:
    if is_completed_task(task.status):
        raise BusinessRuleException("completed tasks cannot be edited")


DEFAULT_BUSINESS_RULES: list[BusinessRule] = [prevent_completed_task_edits]
