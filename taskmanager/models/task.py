"""Pydantic models for tasks."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator
from ulid import ULID

from ..validation import validate_create_request, validate_task


class TaskStatus(str, Enum):
    """Task status enumeration.

    NOT_STARTED -> IN_PROGRESS -> DONE is the usual progression, but any
    status may be written by a full update.
    """

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"

    @property
    def rank(self) -> int:
        return list(TaskStatus).index(self)


class TaskPriority(str, Enum):
    """Task priority enumeration."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def rank(self) -> int:
        return list(TaskPriority).index(self)


def as_utc(value: datetime | None) -> datetime | None:
    """Normalize a timestamp to UTC, reading naive values as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CreateTaskRequest(BaseModel):
    """Request model for creating a task.

    Fields are deliberately loose so that business rules are reported by
    ``validate_create_request`` rather than by pydantic.
    """

    name: str | None = None
    description: str | None = None
    due_date: datetime | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    tags: set[str] | None = None

    @field_validator("due_date")
    @classmethod
    def _due_date_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)


class Task(BaseModel):
    """A stored task. Instances are immutable."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str | None = None
    due_date: datetime | None = None
    status: TaskStatus = TaskStatus.NOT_STARTED
    priority: TaskPriority = TaskPriority.MEDIUM
    tags: frozenset[str] = frozenset()
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("due_date", "created_at", "updated_at")
    @classmethod
    def _timestamps_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

    @field_serializer("tags")
    def _sorted_tags(self, tags: frozenset[str]) -> list[str]:
        return sorted(tags)

    @classmethod
    def create_new(
        cls,
        name: str | None,
        description: str | None,
        due_date: datetime | None,
        priority: TaskPriority,
        tags: set[str] | frozenset[str] | None,
    ) -> "Task":
        """Build a fresh NOT_STARTED task with a newly generated id.

        Raises InvalidTaskError when the creation rules reject the input.
        """
        validate_create_request(
            CreateTaskRequest(
                name=name,
                description=description,
                due_date=due_date,
                priority=priority,
                tags=set(tags) if tags is not None else None,
            )
        )
        return cls(
            id=str(ULID()),
            name=name,
            description=description,
            due_date=due_date,
            status=TaskStatus.NOT_STARTED,
            priority=priority,
            tags=frozenset(tags),
        )


class TaskReplace(BaseModel):
    """Request model for replacing a task in full.

    Loose for the same reason as ``CreateTaskRequest``: a missing name or
    missing tags is reported by ``validate_task``.
    """

    name: str | None = None
    description: str | None = None
    due_date: datetime | None = None
    status: TaskStatus = TaskStatus.NOT_STARTED
    priority: TaskPriority = TaskPriority.MEDIUM
    tags: set[str] | None = None

    @field_validator("due_date")
    @classmethod
    def _due_date_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

    def to_task(self, task_id: str) -> Task:
        """Build the replacement task stored under ``task_id``.

        Raises InvalidTaskError when the body breaks the replacement rules.
        """
        validate_task(self)
        return Task(id=task_id, **self.model_dump())
