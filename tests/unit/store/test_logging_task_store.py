import logging
import pytest
from pytest_mock import MockerFixture

from taskapi.common.exceptions import ResourceNotFoundException
from taskapi.tasks.schemas import Task
from taskapi.tasks.store.base import TaskStore
from taskapi.tasks.store.logging_store import LoggingTaskStore
from taskapi.tasks.store.memory import InMemoryTaskStore

LOGGER_NAME = "taskapi.tasks.store.logging_store"


@pytest.fixture
def logging_store() -> LoggingTaskStore:
    return LoggingTaskStore(InMemoryTaskStore())


def test_logs_create(logging_store: LoggingTaskStore, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        created = logging_store.create_task(Task(title="Task A", status="pending"))

    assert "create_task started: title=Task A, status=pending" in caplog.text
    assert "create_task finished" in caplog.text
    assert f"Created task: id={created.id}" in caplog.text
    assert "duration=" in caplog.text


def test_logs_list(logging_store: LoggingTaskStore, caplog: pytest.LogCaptureFixture) -> None:
    logging_store.create_task(Task(title="Task A", status="pending"))

    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        logging_store.list_tasks()

    assert "Listed 1 tasks" in caplog.text


def test_logs_update_fields(
    logging_store: LoggingTaskStore, caplog: pytest.LogCaptureFixture
) -> None:
    created = logging_store.create_task(Task(title="Task A", status="pending"))

    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        logging_store.update_task(created.id, {"title": "Task B", "priority": "low"})

    assert f"update_task finished: id={created.id}, fields=['priority', 'title']" in caplog.text


def test_logs_and_reraises_failures(
    logging_store: LoggingTaskStore, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
        with pytest.raises(ResourceNotFoundException):
            logging_store.get_task("missing")
        with pytest.raises(ResourceNotFoundException):
            logging_store.delete_task("missing")

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 2
    assert "get_task failed: id=missing" in warnings[0].getMessage()
    assert "Task 'missing' not found" in warnings[0].getMessage()
    assert "delete_task failed: id=missing" in warnings[1].getMessage()


def test_delegates_to_wrapped_store(mocker: MockerFixture) -> None:
    wrapped = mocker.Mock(spec=TaskStore)
    wrapped.get_task.return_value = Task(id="task-1", title="Task A", status="pending")
    store = LoggingTaskStore(wrapped)

    assert store.get_task("task-1").id == "task-1"
    store.update_task("task-1", {"title": "Task B"})
    store.delete_task("task-1")
    store.ping()

    wrapped.get_task.assert_called_once_with("task-1")
    wrapped.update_task.assert_called_once_with("task-1", {"title": "Task B"})
    wrapped.delete_task.assert_called_once_with("task-1")
    wrapped.ping.assert_called_once_with()
