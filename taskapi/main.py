import logging
import time
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from . import schemas
from .config import settings
from .crud import TaskRepository
from .database import get_db, init_db
from .exceptions import NotFoundError, ValidationError
from .logging_config import setup_logging
from .models import TaskStatus
from .services import TaskService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Starting %s v%s", settings.APP_NAME, settings.APP_VERSION)
    init_db()
    yield
    logger.info("Shutting down")


app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CORS_ORIGIN],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    try:
        response = await call_next(request)
        status_code = response.status_code
    finally:
        process_time = time.time() - start_time
        logger.info(
            "%s %s - %s - %.3fs",
            request.method, request.url.path, status_code, process_time,
        )
    response.headers["X-Process-Time"] = f"{process_time:.6f}"
    return response


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Task not found"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def get_task_service(db: Session = Depends(get_db)) -> TaskService:
    return TaskService(TaskRepository(db))


router = APIRouter(prefix=settings.API_PREFIX, tags=["Tasks"])


@router.get("", response_model=List[schemas.TaskOut])
def list_tasks(
    task_status: Optional[TaskStatus] = Query(None, alias="status"),
    title: Optional[str] = Query(None),
    service: TaskService = Depends(get_task_service),
):
    if task_status is not None:
        return service.filter_by_status(task_status)
    if title is not None and title.strip():
        return service.search_by_title(title)
    return service.list_all()


@router.get("/statistics", response_model=schemas.TaskStatistics)
def task_statistics(service: TaskService = Depends(get_task_service)):
    return service.statistics()


@router.get("/{task_id}", response_model=schemas.TaskOut)
def get_task(task_id: int, service: TaskService = Depends(get_task_service)):
    task = service.find_by_id(task_id)
    if task is None:
        raise NotFoundError(task_id)
    return task


@router.post("", response_model=schemas.TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(task_in: schemas.TaskCreate, service: TaskService = Depends(get_task_service)):
    return service.create(task_in)


@router.put("/{task_id}", response_model=schemas.TaskOut)
def update_task(
    task_id: int,
    task_in: schemas.TaskUpdate,
    service: TaskService = Depends(get_task_service),
):
    return service.update(task_id, task_in)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: int, service: TaskService = Depends(get_task_service)):
    service.delete(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


app.include_router(router)


@app.get("/health")
def health_check():
    return {"status": "ok"}
