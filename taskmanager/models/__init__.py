"""Models package."""

from .query import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    Page,
    SortDirection,
    SortField,
    SortOption,
)
from .task import CreateTaskRequest, Task, TaskPriority, TaskReplace, TaskStatus

__all__ = [
    "TaskStatus",
    "TaskPriority",
    "CreateTaskRequest",
    "Task",
    "TaskReplace",
    "SortField",
    "SortDirection",
    "SortOption",
    "Page",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
]
