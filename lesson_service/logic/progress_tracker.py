"""
Lesson progress tracker

Pure calculation functions (sync, no I/O) for the per-(user, lesson)
progress record:

- one CompletedSign entry per distinct sign, updated in place
- accuracy of a sign only ever improves (max of all attempts)
- cursor advances only when the next expected sign is practiced
- completion is set once, when every lesson sign has been practiced

States:
    NotStarted (no record) -> InProgress -> Completed (terminal)
"""
from datetime import datetime
from typing import List, Optional
import logging

from lesson_service.errors import InvalidSignError
from lesson_service.schemas import Lesson
from lesson_service.schemas_progress import (
    AttemptCommand,
    CompletedSign,
    ProgressRecord,
    ProgressSnapshot,
)

logger = logging.getLogger(__name__)


def new_progress_record(user_id: str, lesson_id: str, now: datetime) -> ProgressRecord:
    """Initial record for a pair that has never submitted an attempt."""
    timestamp = now.isoformat()
    return ProgressRecord(
        user_id=user_id,
        lesson_id=lesson_id,
        completed_signs=[],
        current_sign_index=0,
        last_accessed_at=timestamp,
        created_at=timestamp,
        updated_at=timestamp,
    )


def find_completed_sign(completed_signs: List[CompletedSign], sign: str) -> Optional[CompletedSign]:
    for entry in completed_signs:
        if entry.sign == sign:
            return entry
    return None


def distinct_completed_count(record: ProgressRecord) -> int:
    return len({entry.sign for entry in record.completed_signs})


def average_accuracy(completed_signs: List[CompletedSign]) -> float:
    """Mean accuracy over completed signs, not weighted by attempts."""
    if not completed_signs:
        return 0.0
    return sum(entry.accuracy for entry in completed_signs) / len(completed_signs)


def progress_percentage(completed_count: int, total_signs: int) -> float:
    """Share of lesson signs practiced, 0-100. Capped when a lesson lost signs after practice."""
    if total_signs <= 0:
        return 0.0
    return min((completed_count / total_signs) * 100, 100.0)


def check_record_invariants(record: ProgressRecord) -> None:
    """
    Validates consistency of a progress record.

    `completed_signs` must hold at most one entry per sign, so its length
    is the distinct completed count used by the percentage helpers.
    """
    distinct = distinct_completed_count(record)
    if len(record.completed_signs) != distinct:
        raise ValueError(
            f"Progress record for user {record.user_id}, lesson {record.lesson_id} "
            f"has {len(record.completed_signs)} completed entries but {distinct} distinct signs"
        )
    if record.total_attempts < len(record.completed_signs):
        raise ValueError(
            f"Progress record for user {record.user_id}, lesson {record.lesson_id} "
            f"has fewer attempts ({record.total_attempts}) than completed signs"
        )


def apply_attempt(
    record: ProgressRecord,
    lesson: Lesson,
    command: AttemptCommand,
    now: datetime,
) -> ProgressRecord:
    """
    Apply one attempt to a progress record.

    Returns an updated copy; `record` itself is never modified, so a
    rejected or retried attempt leaves no trace.

    Raises:
        InvalidSignError: the sign is not part of the lesson
    """
    if command.sign not in lesson.signs:
        raise InvalidSignError(lesson.lesson_id, command.sign)

    updated = record.model_copy(deep=True)
    timestamp = now.isoformat()

    entry = find_completed_sign(updated.completed_signs, command.sign)
    if entry is None:
        updated.completed_signs.append(
            CompletedSign(
                sign=command.sign,
                attempts=1,
                accuracy=command.accuracy,
                completed_at=timestamp,
            )
        )
    else:
        entry.attempts += 1
        entry.accuracy = max(entry.accuracy, command.accuracy)

    updated.total_attempts += 1
    updated.time_spent += command.time_spent
    updated.last_accessed_at = timestamp
    updated.updated_at = timestamp
    updated.average_accuracy = average_accuracy(updated.completed_signs)

    # Only the in-order expected sign moves the cursor
    index = updated.current_sign_index
    if index < len(lesson.signs) - 1 and lesson.signs[index] == command.sign:
        updated.current_sign_index = index + 1

    check_record_invariants(updated)

    practiced = {item.sign for item in updated.completed_signs}
    if not updated.is_completed and set(lesson.signs) <= practiced:
        updated.is_completed = True
        updated.completed_at = timestamp
        logger.info(
            f"Lesson completed: user={updated.user_id}, lesson={updated.lesson_id}, "
            f"attempts={updated.total_attempts}"
        )

    return updated


def build_snapshot(record: ProgressRecord, lesson: Lesson) -> ProgressSnapshot:
    return ProgressSnapshot(
        user_id=record.user_id,
        lesson_id=record.lesson_id,
        completed_signs=record.completed_signs,
        current_sign_index=record.current_sign_index,
        is_completed=record.is_completed,
        completed_at=record.completed_at,
        progress_percentage=progress_percentage(distinct_completed_count(record), len(lesson.signs)),
        average_accuracy=record.average_accuracy,
        total_attempts=record.total_attempts,
        time_spent=record.time_spent,
        last_accessed_at=record.last_accessed_at,
    )
