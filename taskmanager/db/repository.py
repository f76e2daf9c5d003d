"""Storage port used by the task service."""

from typing import Protocol

from ..models import Page, SortOption, Task, TaskPriority, TaskStatus


class TaskRepository(Protocol):
    """Document-store-backed task persistence.

    ``find_by_id`` signals "not found" by returning None, never by raising.
    """

    def init_schema(self) -> None: ...

    def save(self, task: Task) -> Task: ...

    def find_by_id(self, task_id: str) -> Task | None: ...

    def delete_by_id(self, task_id: str) -> None: ...

    def find_tasks(
        self,
        search: str | None,
        status: TaskStatus | None,
        priority: TaskPriority | None,
        tag: str | None,
        page: int,
        size: int,
        sort_option: SortOption,
    ) -> Page[Task]: ...
