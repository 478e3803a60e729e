"""
Lesson Progress Service

Business logic for recording sign attempts and reporting lesson progress.

- I/O methods are async, the tracker rules in logic/progress_tracker are sync
- Every submission is one read-modify-write cycle on the (user, lesson)
  record; on a version conflict the whole cycle is re-run, re-reading
  the record first
- Validation errors are raised before anything is written
"""
import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from lesson_service.config import Settings
from lesson_service.errors import (
    InvalidSignError,
    LessonNotFoundError,
    ProgressConflictError,
    TransientStorageError,
)
from lesson_service.logic import progress_tracker
from lesson_service.schemas import Lesson
from lesson_service.schemas_progress import (
    AttemptCommand,
    LessonProgressSummary,
    ProgressSnapshot,
)
from lesson_service.services.lesson_catalog import LessonCatalog
from lesson_service.services.progress_repository import LessonProgressRepository

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LessonProgressService:
    """
    Service for lesson progress tracking.

    Responsibilities:
    - Validate attempts against the lesson catalog
    - Create progress lazily on the first attempt
    - Apply attempts with optimistic locking and retry
    - Build per-lesson and per-user progress views
    """

    def __init__(
        self,
        settings: Settings,
        catalog: LessonCatalog,
        repository: LessonProgressRepository,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.catalog = catalog
        self.repository = repository
        self.max_retries = max(1, settings.PROGRESS_MAX_RETRIES)
        self.default_accuracy = settings.DEFAULT_ACCURACY
        self.clock = clock or utc_now
        logger.info(f"LessonProgressService initialized: max_retries={self.max_retries}")

    async def _get_active_lesson(self, lesson_id: str) -> Lesson:
        lesson = await self.catalog.get_lesson_by_id(lesson_id)
        if lesson is None or not lesson.is_active:
            logger.warning(f"Lesson {lesson_id} not found or inactive")
            raise LessonNotFoundError(lesson_id)
        return lesson

    # ========== ATTEMPT SUBMISSION ==========

    async def submit_attempt(self, command: AttemptCommand) -> ProgressSnapshot:
        """
        Record that a user practiced a sign in a lesson.

        Raises:
            LessonNotFoundError: lesson missing or inactive
            InvalidSignError: sign not in the lesson (nothing is written)
            TransientStorageError: storage failure or conflicts on every retry
        """
        lesson = await self._get_active_lesson(command.lesson_id)
        if command.sign not in lesson.signs:
            logger.warning(
                f"Rejected attempt: sign '{command.sign}' not in lesson {lesson.lesson_id} "
                f"(user={command.user_id})"
            )
            raise InvalidSignError(lesson.lesson_id, command.sign)

        for attempt in range(1, self.max_retries + 1):
            record = await self.repository.get(command.user_id, command.lesson_id)
            now = self.clock()
            if record is None:
                expected_version = None
                record = progress_tracker.new_progress_record(command.user_id, command.lesson_id, now)
            else:
                expected_version = record.version

            updated = progress_tracker.apply_attempt(record, lesson, command, now)

            try:
                saved = await self.repository.save(updated, expected_version)
            except ProgressConflictError:
                logger.warning(
                    f"Progress conflict for user={command.user_id}, lesson={command.lesson_id} "
                    f"(try {attempt}/{self.max_retries}), re-reading"
                )
                continue

            logger.info(
                f"Recorded attempt: user={command.user_id}, lesson={command.lesson_id}, "
                f"sign={command.sign}, accuracy={command.accuracy}, "
                f"cursor={saved.current_sign_index}, completed={saved.is_completed}"
            )
            return progress_tracker.build_snapshot(saved, lesson)

        logger.error(
            f"Giving up on attempt after {self.max_retries} conflicts: "
            f"user={command.user_id}, lesson={command.lesson_id}"
        )
        raise TransientStorageError(
            f"Progress for lesson {command.lesson_id} is being updated concurrently, please retry"
        )

    # ========== QUERIES ==========

    async def get_progress(self, user_id: str, lesson_id: str) -> float:
        """
        Progress percentage for a lesson: completed entries / lesson signs * 100.

        Returns 0 when the lesson cannot be resolved or nothing was practiced.
        """
        lesson = await self.catalog.get_lesson_by_id(lesson_id)
        if lesson is None:
            return 0.0
        record = await self.repository.get(user_id, lesson_id)
        if record is None:
            return 0.0
        progress_tracker.check_record_invariants(record)
        return progress_tracker.progress_percentage(len(record.completed_signs), len(lesson.signs))

    async def get_lesson_progress(self, user_id: str, lesson_id: str) -> Optional[ProgressSnapshot]:
        """
        Snapshot of a single lesson's progress, None if not started.

        Raises:
            LessonNotFoundError: lesson missing or inactive
        """
        lesson = await self._get_active_lesson(lesson_id)
        record = await self.repository.get(user_id, lesson_id)
        if record is None:
            return None
        return progress_tracker.build_snapshot(record, lesson)

    async def get_user_progress_summary(self, user_id: str) -> List[LessonProgressSummary]:
        """
        One summary per started lesson, in lesson display order.

        Deactivated lessons stay in the history; records whose lesson was
        removed from the catalog are left out.
        """
        records = await self.repository.list_for_user(user_id)
        lessons: Dict[str, Lesson] = {}
        rows = []

        for record in records:
            lesson = lessons.get(record.lesson_id)
            if lesson is None:
                lesson = await self.catalog.get_lesson_by_id(record.lesson_id)
                if lesson is None:
                    logger.warning(
                        f"Skipping progress for user {user_id}: lesson {record.lesson_id} no longer exists"
                    )
                    continue
                lessons[record.lesson_id] = lesson

            completed_count = progress_tracker.distinct_completed_count(record)
            rows.append((
                (lesson.order, lesson.lesson_id),
                LessonProgressSummary(
                    lesson_id=lesson.lesson_id,
                    lesson_name=lesson.name,
                    difficulty=lesson.difficulty,
                    progress_percentage=progress_tracker.progress_percentage(
                        completed_count, len(lesson.signs)
                    ),
                    is_completed=record.is_completed,
                    completed_sign_count=completed_count,
                    total_signs=len(lesson.signs),
                    average_accuracy=record.average_accuracy,
                    time_spent=record.time_spent,
                    last_accessed_at=record.last_accessed_at,
                ),
            ))

        rows.sort(key=lambda row: row[0])
        logger.info(f"Built progress summary for user {user_id}: {len(rows)} lessons")
        return [summary for _, summary in rows]
