"""
Lesson Catalog Router

- GET  /api/v1/lessons               learners and instructors (admins blocked)
- GET  /api/v1/lessons/{lesson_id}   learners and instructors (admins blocked)
- POST /api/v1/lessons               admins only
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional
import logging

from lesson_service.deps import get_lesson_catalog
from lesson_service.errors import LessonServiceError
from lesson_service.schemas import Lesson, LessonCreate, LessonListResponse
from lesson_service.services.lesson_catalog import LessonCatalog
from shared.dependencies import block_roles, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/lessons",
    tags=["Lessons"]
)


@router.get("", response_model=LessonListResponse)
async def list_lessons(
    difficulty: Optional[str] = Query(None, description="Beginner, Intermediate or Advanced"),
    user: dict = Depends(block_roles(["admin"])),
    catalog: LessonCatalog = Depends(get_lesson_catalog),
):
    """List active lessons in display order."""
    try:
        lessons = await catalog.list_lessons(difficulty=difficulty)
        return LessonListResponse(lessons=lessons, total=len(lessons))
    except (HTTPException, LessonServiceError):
        raise
    except Exception as e:
        logger.error(f"Error listing lessons: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error retrieving lessons"
        )


@router.get("/{lesson_id}", response_model=Lesson)
async def get_lesson(
    lesson_id: str,
    user: dict = Depends(block_roles(["admin"])),
    catalog: LessonCatalog = Depends(get_lesson_catalog),
):
    """Get a single active lesson."""
    lesson = await catalog.get_lesson_by_id(lesson_id)
    if lesson is None or not lesson.is_active:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Lesson {lesson_id} not found"
        )
    return lesson


@router.post("", response_model=Lesson, status_code=status.HTTP_201_CREATED)
async def create_lesson(
    payload: LessonCreate,
    admin: dict = Depends(require_admin()),
    catalog: LessonCatalog = Depends(get_lesson_catalog),
):
    """Create a lesson (admin)."""
    lesson = await catalog.create_lesson(payload)
    logger.info(f"Lesson {lesson.lesson_id} created by admin {admin['user_id']}")
    return lesson
