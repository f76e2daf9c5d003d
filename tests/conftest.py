"""Shared fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from taskmanager.db import TaskDocumentStore
from taskmanager.models import CreateTaskRequest, TaskPriority
from taskmanager.services import TaskService

from .fakes import FakeTaskRepository


@pytest.fixture()
def tomorrow() -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=1)


@pytest.fixture()
def create_request(tomorrow: datetime) -> CreateTaskRequest:
    return CreateTaskRequest(
        name="Test Task",
        description="Test Description",
        due_date=tomorrow,
        priority=TaskPriority.MEDIUM,
        tags={"test", "unit-test"},
    )


@pytest.fixture()
def repo() -> FakeTaskRepository:
    return FakeTaskRepository()


@pytest.fixture()
def service(repo: FakeTaskRepository) -> TaskService:
    return TaskService(repo)


@pytest.fixture()
def store(tmp_path: Path) -> TaskDocumentStore:
    """Real SQLite store in a per-test temporary directory."""
    store = TaskDocumentStore(tmp_path / "tasks.db")
    store.init_schema()
    return store
