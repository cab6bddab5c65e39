"""FastAPI web server for AstroTasks."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from fastapi import Depends, FastAPI, File, Form, Query, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from astrotasks import __version__
from astrotasks.config import Settings, get_settings
from astrotasks.db.database import Database
from astrotasks.db.employee_repo import EmployeeRepository
from astrotasks.db.schema import SchemaInitializer
from astrotasks.db.task_history_repo import TaskHistoryRepository
from astrotasks.db.task_repo import TaskRepository
from astrotasks.errors import AstroTasksError, StorageError
from astrotasks.models.task import DEFAULT_TASK_STATUS, Task
from astrotasks.models.task_history import TaskHistoryRecord
from astrotasks.uploads import UploadCandidate, run_upload_stages

logger = logging.getLogger(__name__)


# Request Models
class TaskCreate(BaseModel):
    """JSON body for ``POST /api/tasks``. Presence is checked by the repository."""

    model_config = ConfigDict(populate_by_name=True)

    task_name: Optional[str] = Field(default=None, alias="taskName")
    employee_name: Optional[str] = Field(default=None, alias="employeeName")
    employee_id: Optional[str] = Field(default=None, alias="employeeId")
    email: Optional[str] = None
    task_description: Optional[str] = Field(default=None, alias="taskDescription")
    allocated_date: Optional[str] = Field(default=None, alias="allocatedDate")
    deadline: Optional[str] = None
    status: Optional[str] = None


# Dependencies
def get_database(request: Request) -> Database:
    return request.app.state.db


def get_employee_repo(db: Database = Depends(get_database)) -> EmployeeRepository:
    return EmployeeRepository(db)


def get_task_repo(db: Database = Depends(get_database)) -> TaskRepository:
    return TaskRepository(db)


def get_history_repo(db: Database = Depends(get_database)) -> TaskHistoryRepository:
    return TaskHistoryRepository(db)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _inline_disposition(filename: Optional[str]) -> str:
    if not filename:
        return "inline"
    quoted = quote(filename)
    if quoted != filename:
        return f"inline; filename*=utf-8''{quoted}"
    return f'inline; filename="{filename}"'


def create_app(
    settings: Optional[Settings] = None,
    db: Optional[Database] = None,
    initializer: Optional[SchemaInitializer] = None,
) -> FastAPI:
    """
    Build the application around an explicit storage handle.

    The schema initializer runs in the lifespan hook, so the app only
    accepts requests once the tables exist.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        storage = db or Database(
            settings.database_path,
            pool_size=settings.DB_POOL_SIZE,
            pool_timeout=settings.DB_POOL_TIMEOUT,
        )
        init = initializer or SchemaInitializer(
            storage,
            max_attempts=settings.DB_INIT_RETRIES,
            delay=settings.DB_INIT_RETRY_DELAY,
        )
        init.run()

        app.state.db = storage
        app.state.initializer = init
        logger.info(f"Server ready - DB: {storage.path}")
        yield

        logger.info("Server shutting down")
        storage.close()

    app = FastAPI(
        title="AstroTasks API",
        description="Task assignment and task-document tracking",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)
    _register_routes(app, settings)
    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        # Driver detail stays in the log.
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
        return _error(exc.status_code, exc.message)

    @app.exception_handler(AstroTasksError)
    async def domain_error_handler(request: Request, exc: AstroTasksError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.debug(f"Rejected request body on {request.url.path}: {exc.errors()}")
        return _error(400, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return _error(404, "Not found")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error(500, "Internal server error")


def _register_routes(app: FastAPI, settings: Settings) -> None:
    static_dir = Path(settings.STATIC_DIR)

    def _static_page(name: str):
        page = static_dir / name
        if page.is_file():
            return FileResponse(str(page), media_type="text/html")
        return _error(404, "Not found")

    @app.get("/hr")
    def hr_page():
        """Serve the HR dashboard page."""
        return _static_page("hr.html")

    @app.get("/employee")
    def employee_page():
        """Serve the employee page."""
        return _static_page("employee.html")

    @app.get("/favicon.ico", include_in_schema=False)
    def favicon():
        return Response(status_code=204)

    @app.get("/api/health")
    def health(request: Request):
        init: SchemaInitializer = request.app.state.initializer
        return {"status": "ok", "schema": init.state.value}

    # -- Employees -------------------------------------------------------------

    @app.get("/api/employees/{emp_id}")
    def get_employee(emp_id: str, repo: EmployeeRepository = Depends(get_employee_repo)):
        return repo.get_employee(emp_id).to_dict()

    # -- Tasks -----------------------------------------------------------------

    @app.get("/api/tasks")
    def list_tasks(
        employee_id: Optional[str] = Query(default=None, alias="employeeId"),
        repo: TaskRepository = Depends(get_task_repo),
    ):
        return [t.to_dict() for t in repo.list_tasks(employee_id)]

    @app.post("/api/tasks")
    def create_task(body: TaskCreate, repo: TaskRepository = Depends(get_task_repo)):
        task = Task(
            task_name=body.task_name,
            employee_name=body.employee_name,
            employee_id=body.employee_id,
            email=body.email,
            task_description=body.task_description,
            allocated_date=body.allocated_date,
            deadline=body.deadline,
            status=body.status or DEFAULT_TASK_STATUS,
        )
        return repo.create_task(task).to_dict()

    @app.get("/api/tasks/{task_id}")
    def get_task(task_id: str, repo: TaskRepository = Depends(get_task_repo)):
        return repo.get_task(task_id).to_dict()

    # -- Task history ----------------------------------------------------------

    @app.get("/api/task-history")
    def list_task_history(
        employee_id: Optional[str] = Query(default=None, alias="employeeId"),
        repo: TaskHistoryRepository = Depends(get_history_repo),
    ):
        return [r.to_dict() for r in repo.list_history(employee_id)]

    @app.post("/api/task-history")
    def create_task_history(
        task_name: Optional[str] = Form(default=None, alias="taskName"),
        employee_name: Optional[str] = Form(default=None, alias="employeeName"),
        employee_id: Optional[str] = Form(default=None, alias="employeeId"),
        email: Optional[str] = Form(default=None),
        description: Optional[str] = Form(default=None),
        task_status: Optional[str] = Form(default=None, alias="taskStatus"),
        upload_doc: Optional[UploadFile] = File(default=None, alias="uploadDoc"),
        repo: TaskHistoryRepository = Depends(get_history_repo),
    ):
        blob: Optional[bytes] = None
        if upload_doc is not None and upload_doc.filename:
            # One byte past the ceiling is enough to reject oversize uploads.
            candidate = UploadCandidate(
                content=upload_doc.file.read(settings.MAX_UPLOAD_BYTES + 1),
                content_type=upload_doc.content_type,
                filename=upload_doc.filename,
                max_bytes=settings.MAX_UPLOAD_BYTES,
            )
            blob = run_upload_stages(candidate).content

        record = TaskHistoryRecord(
            task_name=task_name,
            employee_name=employee_name,
            employee_id=employee_id,
            email=email,
            description=description,
            task_status=task_status,
        )
        saved = repo.create_record(record, blob)
        return {
            "success": True,
            "data": saved.to_dict(),
            "message": "Task history saved successfully",
        }

    @app.get("/api/task-history/{record_id}/file")
    def get_task_history_file(
        record_id: str,
        repo: TaskHistoryRepository = Depends(get_history_repo),
    ):
        doc = repo.get_file(record_id)
        return Response(
            content=doc.content,
            media_type=doc.content_type,
            headers={"Content-Disposition": _inline_disposition(doc.filename)},
        )

    @app.get("/api/task-history/{record_id}")
    def get_task_history(
        record_id: str,
        repo: TaskHistoryRepository = Depends(get_history_repo),
    ):
        return repo.get_record(record_id).to_dict()


app = create_app()
