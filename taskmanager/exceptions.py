"""Domain errors raised by the task service."""


class TaskManagerError(Exception):
    """Base class for task manager errors."""


class InvalidTaskError(TaskManagerError):
    """A task or creation request breaks a validation rule."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class TaskNotFoundError(TaskManagerError):
    """No task is stored under the requested id."""

    def __init__(self, task_id: str):
        super().__init__(f"Task not found with id: {task_id}")
        self.task_id = task_id


class StorageFailureError(TaskManagerError):
    """Any non-domain failure raised while talking to the task store.

    The original exception is kept in ``cause`` (and chained as ``__cause__``).
    """

    def __init__(self, operation: str, cause: BaseException):
        super().__init__(f"Failed to {operation} due to storage error")
        self.operation = operation
        self.cause = cause
