"""Tests for TaskService orchestration and error translation."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest

from taskmanager.exceptions import InvalidTaskError, StorageFailureError, TaskNotFoundError
from taskmanager.models import (
    CreateTaskRequest,
    SortDirection,
    SortField,
    SortOption,
    Task,
    TaskPriority,
    TaskStatus,
)
from taskmanager.services import TaskService

from .fakes import FakeTaskRepository


def _stored(repo: FakeTaskRepository, **overrides) -> Task:
    fields = {
        "name": "Stored",
        "description": None,
        "due_date": None,
        "priority": TaskPriority.MEDIUM,
        "tags": {"seed"},
    }
    fields.update(overrides)
    status = fields.pop("status", TaskStatus.NOT_STARTED)
    task = Task.create_new(**fields).model_copy(update={"status": status})
    return repo.save(task)


# ---- create ----


def test_create_task_scenario(service: TaskService, repo: FakeTaskRepository, create_request) -> None:
    task = service.create_task(create_request)

    assert task.id
    assert task.status is TaskStatus.NOT_STARTED
    assert len(task.tags) == 2
    assert task.priority is TaskPriority.MEDIUM
    assert task.name == "Test Task"
    assert task.description == "Test Description"
    assert task.due_date == create_request.due_date
    assert repo.tasks[task.id] == task


def test_create_task_assigns_unique_ids(service: TaskService, create_request) -> None:
    first = service.create_task(create_request)
    second = service.create_task(create_request)
    assert first.id != second.id


@pytest.mark.parametrize(
    "request_fields",
    [
        {"name": "", "tags": {"a"}},
        {"name": "   ", "tags": {"a"}},
        {"name": "x" * 256, "tags": {"a"}},
        {"name": "ok", "description": "d" * 1001, "tags": {"a"}},
        {"name": "ok", "tags": set()},
    ],
)
def test_create_task_invalid_never_saves(
    service: TaskService, repo: FakeTaskRepository, request_fields: dict
) -> None:
    with pytest.raises(InvalidTaskError):
        service.create_task(CreateTaskRequest(**request_fields))
    assert repo.saved == []


def test_create_task_none(service: TaskService) -> None:
    with pytest.raises(InvalidTaskError, match="Task request cannot be null"):
        service.create_task(None)


def test_create_task_wraps_storage_errors(
    service: TaskService, repo: FakeTaskRepository, create_request, caplog
) -> None:
    boom = RuntimeError("connection refused")
    repo.fail_with = boom

    with caplog.at_level(logging.ERROR), pytest.raises(StorageFailureError) as exc_info:
        service.create_task(create_request)

    assert exc_info.value.cause is boom
    assert exc_info.value.__cause__ is boom
    assert exc_info.value.operation == "create task"
    assert "Failed to create task" in caplog.text


# ---- get ----


def test_get_task_by_id_returns_stored_task(service: TaskService, repo: FakeTaskRepository) -> None:
    stored = _stored(repo)
    assert service.get_task_by_id(stored.id) == stored


def test_get_task_by_id_missing(service: TaskService) -> None:
    with pytest.raises(TaskNotFoundError, match="Task not found with id: nope"):
        service.get_task_by_id("nope")


def test_get_task_by_id_none(service: TaskService) -> None:
    with pytest.raises(InvalidTaskError, match="Task ID cannot be null"):
        service.get_task_by_id(None)


def test_get_task_by_id_storage_failure(service: TaskService, repo: FakeTaskRepository) -> None:
    repo.fail_with = OSError("disk I/O error")
    with pytest.raises(StorageFailureError):
        service.get_task_by_id("any")


# ---- update ----


def test_update_task_to_in_progress(service: TaskService, repo: FakeTaskRepository, tomorrow) -> None:
    stored = _stored(repo, due_date=tomorrow)
    changed = stored.model_copy(update={"status": TaskStatus.IN_PROGRESS})

    updated = service.update_task(stored.id, changed)

    assert updated.status is TaskStatus.IN_PROGRESS
    assert updated.id == stored.id
    assert updated.name == stored.name
    assert updated.due_date == stored.due_date
    assert updated.tags == stored.tags
    assert repo.tasks[stored.id].status is TaskStatus.IN_PROGRESS


def test_update_task_is_full_replacement(service: TaskService, repo: FakeTaskRepository) -> None:
    stored = _stored(repo, description="keep me?")
    replacement = Task(id=stored.id, name="Renamed", tags=frozenset({"new"}))

    updated = service.update_task(stored.id, replacement)

    assert updated.description is None
    assert updated.tags == frozenset({"new"})
    assert updated.priority is TaskPriority.MEDIUM


def test_update_task_stores_under_path_id(service: TaskService, repo: FakeTaskRepository) -> None:
    stored = _stored(repo)
    replacement = Task(id="other-id", name="Renamed", tags=frozenset({"new"}))

    updated = service.update_task(stored.id, replacement)

    assert updated.id == stored.id
    assert "other-id" not in repo.tasks


def test_update_task_allows_any_status_transition(service: TaskService, repo: FakeTaskRepository) -> None:
    stored = _stored(repo, status=TaskStatus.DONE)
    reopened = stored.model_copy(update={"status": TaskStatus.NOT_STARTED})
    assert service.update_task(stored.id, reopened).status is TaskStatus.NOT_STARTED


def test_update_task_too_many_tags(service: TaskService, repo: FakeTaskRepository) -> None:
    stored = _stored(repo)
    changed = stored.model_copy(update={"tags": frozenset(f"t{i}" for i in range(11))})
    with pytest.raises(InvalidTaskError, match="more than 10 tags"):
        service.update_task(stored.id, changed)
    assert len(repo.saved) == 1


def test_update_task_past_due_date(service: TaskService, repo: FakeTaskRepository) -> None:
    stored = _stored(repo)
    changed = stored.model_copy(
        update={"due_date": datetime.now(timezone.utc) - timedelta(minutes=1)}
    )
    with pytest.raises(InvalidTaskError, match="due date cannot be in the past"):
        service.update_task(stored.id, changed)


def test_update_task_missing(service: TaskService, repo: FakeTaskRepository) -> None:
    task = Task(id="ghost", name="Ghost", tags=frozenset({"a"}))
    with pytest.raises(TaskNotFoundError):
        service.update_task("ghost", task)
    assert repo.saved == []


def test_update_task_none_id(service: TaskService) -> None:
    task = Task(id="x", name="x", tags=frozenset({"a"}))
    with pytest.raises(InvalidTaskError, match="Task ID cannot be null"):
        service.update_task(None, task)


def test_update_task_none_task(service: TaskService) -> None:
    with pytest.raises(InvalidTaskError, match="Task cannot be null"):
        service.update_task("x", None)


# ---- delete ----


def test_delete_then_get_is_not_found(service: TaskService, repo: FakeTaskRepository) -> None:
    stored = _stored(repo)

    service.delete_task(stored.id)

    assert repo.deleted == [stored.id]
    with pytest.raises(TaskNotFoundError):
        service.get_task_by_id(stored.id)


def test_delete_task_missing(service: TaskService, repo: FakeTaskRepository) -> None:
    with pytest.raises(TaskNotFoundError):
        service.delete_task("ghost")
    assert repo.deleted == []


def test_delete_task_none(service: TaskService) -> None:
    with pytest.raises(InvalidTaskError):
        service.delete_task(None)


# ---- list ----


def test_get_tasks_without_filters(service: TaskService, repo: FakeTaskRepository) -> None:
    for i in range(7):
        _stored(repo, name=f"task {i}")

    page = service.get_tasks(page=0, size=10)

    assert len(page.content) == 7
    assert page.total_elements == 7
    assert page.total_pages == 1


def test_get_tasks_status_filter(service: TaskService, repo: FakeTaskRepository) -> None:
    _stored(repo, status=TaskStatus.IN_PROGRESS)
    _stored(repo, status=TaskStatus.DONE)
    _stored(repo, status=TaskStatus.IN_PROGRESS)

    page = service.get_tasks(status=TaskStatus.IN_PROGRESS)

    assert page.total_elements == 2
    assert all(t.status is TaskStatus.IN_PROGRESS for t in page.content)


def test_get_tasks_filters_are_anded(service: TaskService, repo: FakeTaskRepository) -> None:
    match = _stored(repo, status=TaskStatus.DONE, priority=TaskPriority.HIGH)
    _stored(repo, status=TaskStatus.DONE, priority=TaskPriority.LOW)
    _stored(repo, status=TaskStatus.NOT_STARTED, priority=TaskPriority.HIGH)

    page = service.get_tasks(status=TaskStatus.DONE, priority=TaskPriority.HIGH)

    assert [t.id for t in page.content] == [match.id]


def test_get_tasks_passes_arguments_through() -> None:
    calls = []

    class RecordingRepository(FakeTaskRepository):
        def find_tasks(self, *args):
            calls.append(args)
            return super().find_tasks(*args)

    sort = SortOption(SortField.PRIORITY, SortDirection.ASC)
    TaskService(RecordingRepository()).get_tasks("q", TaskStatus.DONE, TaskPriority.LOW, "x", 2, 5, sort)

    assert calls == [("q", TaskStatus.DONE, TaskPriority.LOW, "x", 2, 5, sort)]


def test_get_tasks_storage_failure_is_logged_with_context(repo: FakeTaskRepository) -> None:
    records: list[logging.LogRecord] = []

    class ListHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    injected = logging.getLogger("tests.injected")
    injected.addHandler(ListHandler())
    repo.fail_with = RuntimeError("timeout")

    with pytest.raises(StorageFailureError) as exc_info:
        TaskService(repo, logger=injected).get_tasks(search="report", tag="work")

    assert exc_info.value.operation == "find tasks"
    failure = [r for r in records if r.levelno == logging.ERROR][0]
    assert failure.operation == "find tasks"
    assert failure.context["search"] == "report"
    assert failure.context["tag"] == "work"
    assert failure.exc_info is not None


def test_get_tasks_sorted_by_due_date_puts_missing_dates_first(
    service: TaskService, repo: FakeTaskRepository, tomorrow
) -> None:
    later = _stored(repo, name="later", due_date=tomorrow + timedelta(days=1))
    undated = _stored(repo, name="undated")
    sooner = _stored(repo, name="sooner", due_date=tomorrow)

    asc = service.get_tasks(sort_option=SortOption(SortField.DUE_DATE, SortDirection.ASC))
    desc = service.get_tasks(sort_option=SortOption(SortField.DUE_DATE, SortDirection.DESC))

    assert [t.id for t in asc.content] == [undated.id, sooner.id, later.id]
    assert [t.id for t in desc.content] == [later.id, sooner.id, undated.id]


def test_get_tasks_sorted_by_priority_rank(service: TaskService, repo: FakeTaskRepository) -> None:
    _stored(repo, name="m", priority=TaskPriority.MEDIUM)
    _stored(repo, name="h", priority=TaskPriority.HIGH)
    _stored(repo, name="l", priority=TaskPriority.LOW)

    page = service.get_tasks(sort_option=SortOption(SortField.PRIORITY, SortDirection.ASC))

    assert [t.name for t in page.content] == ["l", "m", "h"]
