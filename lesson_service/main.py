"""Lesson Service API - FastAPI with DynamoDB lesson progress tracking"""
import logging

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse

from lesson_service.config import get_settings
from lesson_service.deps import get_db_client
from lesson_service.dynamo import DynamoDBClient
from lesson_service.errors import (
    InvalidSignError,
    LessonAlreadyExistsError,
    LessonNotFoundError,
    ProgressConflictError,
    TransientStorageError,
)
from lesson_service.routers import lesson_progress, lessons
from shared.middleware import setup_middleware

settings = get_settings()
logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Lesson Service API",
    description="Sign-language lessons and per-lesson progress tracking",
    version=settings.VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc"
)

setup_middleware(app, cors_origins=settings.CORS_ORIGINS)

# Progress routes first: /api/v1/lessons/user/progress must win over /{lesson_id}/progress
app.include_router(lesson_progress.router)
app.include_router(lessons.router)


# ============= ERROR HANDLERS =============

def _error_response(request: Request, status_code: int, detail: str, headers: dict = None) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "request_id": request_id},
        headers=headers,
    )


@app.exception_handler(LessonNotFoundError)
async def lesson_not_found_handler(request: Request, exc: LessonNotFoundError):
    return _error_response(request, status.HTTP_404_NOT_FOUND, str(exc))


@app.exception_handler(InvalidSignError)
async def invalid_sign_handler(request: Request, exc: InvalidSignError):
    return _error_response(request, status.HTTP_400_BAD_REQUEST, str(exc))


@app.exception_handler(LessonAlreadyExistsError)
async def lesson_exists_handler(request: Request, exc: LessonAlreadyExistsError):
    return _error_response(request, status.HTTP_409_CONFLICT, str(exc))


@app.exception_handler(ProgressConflictError)
async def progress_conflict_handler(request: Request, exc: ProgressConflictError):
    logger.warning(f"Progress conflict reached the API layer: {str(exc)}")
    return _error_response(request, status.HTTP_409_CONFLICT, str(exc))


@app.exception_handler(TransientStorageError)
async def transient_storage_handler(request: Request, exc: TransientStorageError):
    logger.error(f"Transient storage error: {str(exc)}")
    return _error_response(
        request,
        status.HTTP_503_SERVICE_UNAVAILABLE,
        str(exc),
        headers={"Retry-After": "1"},
    )


# ============= HEALTH =============

@app.get("/")
async def root():
    return {"service": "lesson-service", "status": "running", "version": settings.VERSION}


@app.get("/health")
async def health(db_client: DynamoDBClient = Depends(get_db_client)):
    try:
        db_client.dynamodb.meta.client.describe_table(
            TableName=db_client.settings.DYNAMODB_LESSON_PROGRESS_TABLE
        )
        return {"status": "healthy", "dynamodb": "connected"}
    except Exception as e:
        logger.warning(f"Health check DynamoDB connection failed: {str(e)}")
        # Stay healthy for load balancer checks while DynamoDB is unreachable
        return {"status": "healthy", "dynamodb": "unavailable", "warning": str(e)[:100]}
