"""Task API router."""

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse

from ..models import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    CreateTaskRequest,
    Page,
    SortOption,
    Task,
    TaskPriority,
    TaskReplace,
    TaskStatus,
)
from ..services import TaskService

router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


def get_task_service(request: Request) -> TaskService:
    """Return the service wired up by the application lifespan."""
    return request.app.state.task_service


@router.get("", response_model=Page[Task])
def list_tasks(
    search: str | None = None,
    status: TaskStatus | None = None,
    priority: TaskPriority | None = None,
    tag: str | None = None,
    page: int = Query(0, ge=0),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    sort: str = "createdAt,desc",
    service: TaskService = Depends(get_task_service),
):
    """List tasks matching all given filters, one page at a time."""
    try:
        sort_option = SortOption.parse(sort)
    except ValueError as e:
        return JSONResponse(status_code=400, content={"message": str(e)})
    return service.get_tasks(search, status, priority, tag, page, size, sort_option)


@router.get("/{task_id}", response_model=Task)
def get_task(task_id: str, service: TaskService = Depends(get_task_service)):
    """Get a task by ID."""
    return service.get_task_by_id(task_id)


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: CreateTaskRequest,
    service: TaskService = Depends(get_task_service),
):
    """Create a new task."""
    return service.create_task(task_data)


@router.put("/{task_id}", response_model=Task)
def update_task(
    task_id: str,
    task_data: TaskReplace,
    service: TaskService = Depends(get_task_service),
):
    """Replace a task in full."""
    return service.update_task(task_id, task_data.to_task(task_id))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: str, service: TaskService = Depends(get_task_service)):
    """Delete a task."""
    service.delete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
