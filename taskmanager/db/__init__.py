"""Database package."""

from .client import TaskDocumentStore
from .repository import TaskRepository

__all__ = [
    "TaskDocumentStore",
    "TaskRepository",
]
