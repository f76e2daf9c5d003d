"""Sorting and paging models for task queries."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Iterable, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

MAX_PAGE_SIZE = 1000
DEFAULT_PAGE_SIZE = 10


class SortField(str, Enum):
    """Fields a task listing can be ordered by."""

    NAME = "name"
    DUE_DATE = "due_date"
    PRIORITY = "priority"
    STATUS = "status"
    CREATED_AT = "created_at"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


_FIELD_ALIASES = {
    "dueDate": SortField.DUE_DATE,
    "createdAt": SortField.CREATED_AT,
}


@dataclass(frozen=True)
class SortOption:
    """A (field, direction) pair handed to the store unmodified."""

    field: SortField = SortField.CREATED_AT
    direction: SortDirection = SortDirection.DESC

    @classmethod
    def parse(cls, raw: str | None) -> "SortOption":
        """Parse ``"field"`` or ``"field,direction"``.

        Field names may be snake_case or camelCase; direction defaults to asc.
        An empty value gives the default ordering (newest first).
        """
        if raw is None or not raw.strip():
            return cls()

        field_name, _, direction = raw.partition(",")
        field_name = field_name.strip()
        try:
            field = _FIELD_ALIASES.get(field_name) or SortField(field_name)
            order = SortDirection(direction.strip().lower() or SortDirection.ASC.value)
        except ValueError as e:
            raise ValueError(f"Invalid sort option '{raw}'") from e
        return cls(field=field, direction=order)

    def __str__(self) -> str:
        return f"{self.field.value},{self.direction.value}"


class Page(BaseModel, Generic[T]):
    """One page of a larger result set."""

    content: list[T]
    total_elements: int
    total_pages: int
    size: int
    number: int

    @classmethod
    def of(cls, content: Iterable[T], total_elements: int, page: int, size: int) -> "Page[T]":
        total_pages = math.ceil(total_elements / size) if size > 0 else 0
        return cls(
            content=list(content),
            total_elements=total_elements,
            total_pages=total_pages,
            size=size,
            number=page,
        )
