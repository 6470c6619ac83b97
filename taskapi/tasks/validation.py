from datetime import date, datetime

from taskapi.tasks.dates import to_date, today_utc
from taskapi.tasks.schemas import TaskPriority, TaskStatus

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 100

VALID_STATUSES = [s.value for s in TaskStatus]
VALID_PRIORITIES = [p.value for p in TaskPriority]


def is_valid_status(status: str) -> bool:
    return status in VALID_STATUSES


def is_valid_priority(priority: str) -> bool:
    return priority in VALID_PRIORITIES


def is_valid_title(title: str) -> bool:
    return TITLE_MIN_LENGTH <= len(title) <= TITLE_MAX_LENGTH


def is_valid_due_date(due_date: date | datetime, today: date | None = None) -> bool:
    # Today counts as valid, only strictly past days are rejected.
    return to_date(due_date) >= (today or today_utc())


def is_completed_task(status: str) -> bool:
    return status == TaskStatus.COMPLETED
