"""
Lesson Progress Router

Endpoints for recording sign attempts and reading lesson progress.
Learners only (role "user").

- GET  /api/v1/lessons/user/progress
- POST /api/v1/lessons/{lesson_id}/progress
- GET  /api/v1/lessons/{lesson_id}/progress

The /user/progress route is declared first so "user" is never taken
for a lesson_id.
"""
from fastapi import APIRouter, Depends, HTTPException, status
import logging

from lesson_service.config import Settings, get_settings
from lesson_service.deps import get_progress_service
from lesson_service.errors import LessonServiceError
from lesson_service.schemas_progress import (
    ProgressSnapshot,
    SubmitAttemptRequest,
    UserProgressSummaryResponse,
)
from lesson_service.services.lesson_progress_service import LessonProgressService
from shared.dependencies import require_learner

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/lessons",
    tags=["Lesson Progress"]
)


@router.get("/user/progress", response_model=UserProgressSummaryResponse)
async def get_user_progress(
    user: dict = Depends(require_learner()),
    service: LessonProgressService = Depends(get_progress_service),
):
    """
    Progress overview for every lesson the current user has started.

    Returns lessons in catalog order with completion and accuracy figures.
    """
    user_id = user["user_id"]
    try:
        lessons = await service.get_user_progress_summary(user_id)
        return UserProgressSummaryResponse(
            user_id=user_id,
            lessons=lessons,
            total_lessons_started=len(lessons),
            total_lessons_completed=sum(1 for lesson in lessons if lesson.is_completed),
        )
    except (HTTPException, LessonServiceError):
        raise
    except Exception as e:
        logger.error(f"Error getting progress summary for user {user_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error retrieving user progress"
        )


@router.post("/{lesson_id}/progress", response_model=ProgressSnapshot)
async def submit_lesson_attempt(
    lesson_id: str,
    request: SubmitAttemptRequest,
    user: dict = Depends(require_learner()),
    service: LessonProgressService = Depends(get_progress_service),
    settings: Settings = Depends(get_settings),
):
    """
    Record that the current user practiced a sign.

    Errors:
    - 404 lesson not found
    - 400 sign is not part of the lesson
    - 503 storage unavailable, retry
    """
    user_id = user["user_id"]
    command = request.to_command(
        user_id=user_id,
        lesson_id=lesson_id,
        default_accuracy=settings.DEFAULT_ACCURACY,
    )
    try:
        return await service.submit_attempt(command)
    except (HTTPException, LessonServiceError):
        raise
    except Exception as e:
        logger.error(f"Error recording attempt: user={user_id}, lesson={lesson_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error updating lesson progress"
        )


@router.get("/{lesson_id}/progress", response_model=ProgressSnapshot)
async def get_lesson_progress(
    lesson_id: str,
    user: dict = Depends(require_learner()),
    service: LessonProgressService = Depends(get_progress_service),
):
    """Progress of the current user in one lesson. 404 if not started."""
    user_id = user["user_id"]
    try:
        snapshot = await service.get_lesson_progress(user_id, lesson_id)
        if snapshot is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No progress for lesson {lesson_id}"
            )
        return snapshot
    except (HTTPException, LessonServiceError):
        raise
    except Exception as e:
        logger.error(f"Error getting lesson progress: user={user_id}, lesson={lesson_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error retrieving lesson progress"
        )
