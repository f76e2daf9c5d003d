"""Business rules for tasks.

Two policies are kept apart on purpose:

- ``validate_create_request`` checks an incoming creation request;
- ``validate_task`` checks a full task before it replaces a stored one and
  additionally caps the tag count and rejects due dates in the past.

The first failing rule wins.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from .exceptions import InvalidTaskError

if TYPE_CHECKING:
    from .models.task import CreateTaskRequest, Task, TaskReplace

MAX_NAME_LENGTH = 255
MAX_DESCRIPTION_LENGTH = 1000
MAX_TAGS = 10


def _check_fields(name: str | None, description: str | None, tags) -> None:
    if name is None or not name.strip():
        raise InvalidTaskError("Task name cannot be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidTaskError(
            f"Task name cannot be longer than {MAX_NAME_LENGTH} characters"
        )
    if description is not None and len(description) > MAX_DESCRIPTION_LENGTH:
        raise InvalidTaskError(
            f"Task description cannot be longer than {MAX_DESCRIPTION_LENGTH} characters"
        )
    if not tags:
        raise InvalidTaskError("Task must have at least one tag")


def validate_create_request(request: CreateTaskRequest | None) -> None:
    """Validate a creation request."""
    if request is None:
        raise InvalidTaskError("Task request cannot be null")
    _check_fields(request.name, request.description, request.tags)


def validate_task(task: Task | TaskReplace | None, now: datetime | None = None) -> None:
    """Validate a full task (or a replacement body) against the replacement rules."""
    if task is None:
        raise InvalidTaskError("Task cannot be null")
    _check_fields(task.name, task.description, task.tags)
    if len(task.tags) > MAX_TAGS:
        raise InvalidTaskError(f"Task cannot have more than {MAX_TAGS} tags")
    if task.due_date is not None:
        now = now or datetime.now(timezone.utc)
        if task.due_date < now:
            raise InvalidTaskError("Task due date cannot be in the past")
