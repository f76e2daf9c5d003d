"""SQLite-backed document store for tasks.

Each task is kept as a JSON document. A handful of its fields are copied into
indexed columns so that filtering, sorting and paging stay in SQL.
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from ..models import Page, SortDirection, SortField, SortOption, Task, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    SortField.NAME: "name_folded",
    SortField.DUE_DATE: "due_date",
    SortField.PRIORITY: "priority_rank",
    SortField.STATUS: "status_rank",
    SortField.CREATED_AT: "created_at",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _sortable(value: datetime | None) -> str | None:
    """Fixed-width UTC text so that timestamps order lexically."""
    if value is None:
        return None
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class TaskDocumentStore:
    """Task collection stored in a single SQLite file.

    Every call opens its own connection, so one store can be shared between
    request threads.
    """

    def __init__(self, db_path: str | Path, timeout: float = 30.0):
        self.db_path = Path(db_path)
        self.timeout = timeout

    def get_connection(self) -> sqlite3.Connection:
        """Get a database connection with WAL mode enabled."""
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    @contextmanager
    def get_db(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections."""
        conn = self.get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_schema(self) -> None:
        """Create the task collection and its indexes."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self.get_db() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    document TEXT NOT NULL,
                    name TEXT NOT NULL,
                    name_folded TEXT NOT NULL,
                    description TEXT,
                    description_folded TEXT NOT NULL,
                    status TEXT NOT NULL,
                    status_rank INTEGER NOT NULL,
                    priority TEXT NOT NULL,
                    priority_rank INTEGER NOT NULL,
                    due_date TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            for column in ("name_folded", "status", "priority", "due_date", "created_at"):
                conn.execute(
                    f"CREATE INDEX IF NOT EXISTS idx_tasks_{column} ON tasks({column})"
                )
        logger.info("TaskDocumentStore ready db=%s", self.db_path)

    def save(self, task: Task) -> Task:
        """Insert or fully replace a task; creation time survives replacement."""
        now = _utcnow()
        with self.get_db() as conn:
            # Read and write under one write lock so concurrent first saves
            # of an id agree on created_at.
            conn.execute("BEGIN IMMEDIATE")
            row = conn.execute(
                "SELECT document FROM tasks WHERE id = ?", (task.id,)
            ).fetchone()
            if row:
                created_at = Task.model_validate_json(row["document"]).created_at
            else:
                created_at = task.created_at or now
            stored = task.model_copy(update={"created_at": created_at, "updated_at": now})
            conn.execute(
                """
                INSERT OR REPLACE INTO tasks (
                    id, document, name, name_folded, description, description_folded,
                    status, status_rank, priority, priority_rank, due_date,
                    created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    stored.id,
                    stored.model_dump_json(),
                    stored.name,
                    stored.name.casefold(),
                    stored.description,
                    (stored.description or "").casefold(),
                    stored.status.value,
                    stored.status.rank,
                    stored.priority.value,
                    stored.priority.rank,
                    _sortable(stored.due_date),
                    _sortable(stored.created_at),
                    _sortable(stored.updated_at),
                ),
            )
        logger.debug("Saved task id=%s replaced=%s", stored.id, bool(row))
        return stored

    def find_by_id(self, task_id: str) -> Task | None:
        """Get a task by ID."""
        with self.get_db() as conn:
            row = conn.execute(
                "SELECT document FROM tasks WHERE id = ?", (task_id,)
            ).fetchone()
        return Task.model_validate_json(row["document"]) if row else None

    def delete_by_id(self, task_id: str) -> None:
        """Delete a task by ID."""
        with self.get_db() as conn:
            conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        logger.debug("Deleted task id=%s", task_id)

    def find_tasks(
        self,
        search: str | None,
        status: TaskStatus | None,
        priority: TaskPriority | None,
        tag: str | None,
        page: int,
        size: int,
        sort_option: SortOption,
    ) -> Page[Task]:
        """Filter, order and page the task collection. Filters are ANDed."""
        clauses: list[str] = []
        params: list = []

        if search:
            pattern = f"%{_escape_like(search.casefold())}%"
            clauses.append(
                "(name_folded LIKE ? ESCAPE '\\' OR description_folded LIKE ? ESCAPE '\\')"
            )
            params.extend([pattern, pattern])
        if status is not None:
            clauses.append("status = ?")
            params.append(status.value)
        if priority is not None:
            clauses.append("priority = ?")
            params.append(priority.value)
        if tag is not None:
            clauses.append(
                "EXISTS (SELECT 1 FROM json_each(tasks.document, '$.tags') AS t"
                " WHERE t.value = ?)"
            )
            params.append(tag)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        direction = "DESC" if sort_option.direction is SortDirection.DESC else "ASC"
        order_by = f"{_SORT_COLUMNS[sort_option.field]} {direction}, id {direction}"

        with self.get_db() as conn:
            total = conn.execute(
                f"SELECT COUNT(*) FROM tasks {where}", params
            ).fetchone()[0]
            rows = conn.execute(
                f"SELECT document FROM tasks {where} ORDER BY {order_by} LIMIT ? OFFSET ?",
                [*params, size, page * size],
            ).fetchall()

        return Page[Task].of(
            (Task.model_validate_json(row["document"]) for row in rows),
            total_elements=total,
            page=page,
            size=size,
        )
