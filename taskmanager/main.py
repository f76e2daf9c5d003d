"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .db import TaskDocumentStore, TaskRepository
from .exceptions import InvalidTaskError, StorageFailureError, TaskNotFoundError
from .logging_setup import setup_logging
from .routers import tasks
from .services import TaskService

logger = logging.getLogger(__name__)


async def invalid_task_handler(request: Request, exc: InvalidTaskError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": exc.reason})


async def task_not_found_handler(request: Request, exc: TaskNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"message": str(exc)})


async def storage_failure_handler(request: Request, exc: StorageFailureError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"message": str(exc)})


def create_app(
    settings: Settings | None = None,
    repository: TaskRepository | None = None,
) -> FastAPI:
    """Build the application; ``repository`` overrides the SQLite store."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize the task store on startup."""
        store = repository or TaskDocumentStore(settings.database_path)
        store.init_schema()
        app.state.task_service = TaskService(store)
        yield

    app = FastAPI(
        title="Task Manager",
        description="Task records with filtering, sorting and paging",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_exception_handler(InvalidTaskError, invalid_task_handler)
    app.add_exception_handler(TaskNotFoundError, task_not_found_handler)
    app.add_exception_handler(StorageFailureError, storage_failure_handler)

    app.include_router(tasks.router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()


def main():
    """Run the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)
    logger.info("Starting task manager on %s:%s", settings.host, settings.port)

    uvicorn.run(
        "taskmanager.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )


if __name__ == "__main__":
    main()
