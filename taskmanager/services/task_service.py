"""Task service: validation, existence checks and store delegation."""

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from ..db import TaskRepository
from ..exceptions import InvalidTaskError, StorageFailureError, TaskNotFoundError
from ..models import (
    CreateTaskRequest,
    Page,
    SortOption,
    Task,
    TaskPriority,
    TaskStatus,
)
from ..validation import validate_create_request, validate_task


class TaskService:
    """Stateless orchestrator over a TaskRepository.

    Domain errors (InvalidTaskError, TaskNotFoundError) propagate as they are.
    Anything else is logged and re-raised as StorageFailureError.

    Update and delete check for existence and then act in two separate store
    calls; a delete landing between the two lets an update recreate the task.
    """

    def __init__(self, repository: TaskRepository, logger: logging.Logger | None = None):
        self.repository = repository
        self.logger = logger or logging.getLogger(__name__)

    @contextmanager
    def _guard(self, operation: str, **context: Any) -> Iterator[None]:
        try:
            yield
        except (InvalidTaskError, TaskNotFoundError) as e:
            self.logger.debug("%s rejected: %s", operation, e)
            raise
        except Exception as e:
            self.logger.exception(
                "Failed to %s: %s",
                operation,
                context,
                extra={"operation": operation, "context": context},
            )
            raise StorageFailureError(operation, e) from e

    def create_task(self, request: CreateTaskRequest) -> Task:
        with self._guard("create task", request=request):
            validate_create_request(request)
            task = Task.create_new(
                request.name,
                request.description,
                request.due_date,
                request.priority,
                request.tags,
            )
            saved = self.repository.save(task)
        self.logger.info("Created task id=%s", saved.id)
        return saved

    def get_task_by_id(self, task_id: str | None) -> Task:
        with self._guard("get task", task_id=task_id):
            if task_id is None:
                raise InvalidTaskError("Task ID cannot be null")
            task = self.repository.find_by_id(task_id)
            if task is None:
                raise TaskNotFoundError(task_id)
            return task

    def update_task(self, task_id: str | None, task: Task | None) -> Task:
        """Replace the stored task with ``task`` in full (no field merge)."""
        with self._guard("update task", task_id=task_id):
            if task_id is None:
                raise InvalidTaskError("Task ID cannot be null")
            validate_task(task)

            if self.repository.find_by_id(task_id) is None:
                raise TaskNotFoundError(task_id)

            if task.id != task_id:
                task = task.model_copy(update={"id": task_id})
            saved = self.repository.save(task)
        self.logger.info("Updated task id=%s status=%s", saved.id, saved.status.value)
        return saved

    def delete_task(self, task_id: str | None) -> None:
        with self._guard("delete task", task_id=task_id):
            if task_id is None:
                raise InvalidTaskError("Task ID cannot be null")

            if self.repository.find_by_id(task_id) is None:
                raise TaskNotFoundError(task_id)

            self.repository.delete_by_id(task_id)
        self.logger.info("Deleted task id=%s", task_id)

    def get_tasks(
        self,
        search: str | None = None,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        tag: str | None = None,
        page: int = 0,
        size: int = 10,
        sort_option: SortOption | None = None,
    ) -> Page[Task]:
        sort_option = sort_option or SortOption()
        with self._guard(
            "find tasks",
            search=search,
            status=status,
            priority=priority,
            tag=tag,
            page=page,
            size=size,
            sort=str(sort_option),
        ):
            return self.repository.find_tasks(
                search, status, priority, tag, page, size, sort_option
            )
