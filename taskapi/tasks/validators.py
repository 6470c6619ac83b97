"""Field validators shared by the create and update paths.

A validator receives the proposed value, the patch to write the normalized
value into, and the field name. It raises ValidationException when the value
is rejected.
"""

from datetime import date
from typing import Any, Callable

from taskapi.common.exceptions import ValidationException
from taskapi.tasks.dates import parse_date, to_date
from taskapi.tasks.schemas import TaskPatch
from taskapi.tasks.validation import (
    VALID_PRIORITIES,
    VALID_STATUSES,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
    is_valid_due_date,
    is_valid_priority,
    is_valid_status,
    is_valid_title,
)

FieldValidator = Callable[[Any, TaskPatch, str], None]


def validate_status_field(value: Any, patch: TaskPatch, field_name: str) -> None:
    if not isinstance(value, str) or not is_valid_status(value):
        raise ValidationException(
            f"invalid status, allowed: {', '.join(VALID_STATUSES)}"
        )
    patch[field_name] = value


def validate_priority_field(value: Any, patch: TaskPatch, field_name: str) -> None:
    if not isinstance(value, str) or not is_valid_priority(value):
        raise ValidationException(
            f"invalid priority, allowed: {', '.join(VALID_PRIORITIES)}"
        )
    patch[field_name] = value


def validate_due_date_field(value: Any, patch: TaskPatch, field_name: str) -> None:
    if isinstance(value, str):
        try:
            parsed = parse_date(value)
        except ValueError as e:
            raise ValidationException(
                "invalid date format, expected YYYY-MM-DD"
            ) from e
    elif isinstance(value, date):
        parsed = to_date(value)
    else:
        raise ValidationException(
            f"{field_name} must be a YYYY-MM-DD string or date"
        )

    # The message says "future" but today is accepted.
    if not is_valid_due_date(parsed):
        raise ValidationException("date should be in the future")
    patch[field_name] = parsed


def validate_title_field(value: Any, patch: TaskPatch, field_name: str) -> None:
    if not isinstance(value, str):
        raise ValidationException(f"{field_name} must be a string")
    if not is_valid_title(value):
        raise ValidationException(
            f"invalid title length, it should be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH}"
        )
    patch[field_name] = value


def validate_string_field(value: Any, patch: TaskPatch, field_name: str) -> None:
    if not isinstance(value, str):
        raise ValidationException(f"{field_name} must be a string")


DEFAULT_FIELD_VALIDATORS: dict[str, FieldValidator] = {
    "status": validate_status_field,
    "priority": validate_priority_field,
    "due_date": validate_due_date_field,
    "title": validate_title_field,
    "description": validate_string_field,
}
