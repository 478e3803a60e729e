"""
Lesson Progress Schemas

Persisted progress record, the typed attempt command handed to the
tracker, and the API response shapes.

- Request bodies are coerced and range-checked here; the tracker only
  ever receives an AttemptCommand.
- All schemas use Pydantic v2 syntax with ConfigDict.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List


# Upper bound for a single attempt's practice time (one day)
MAX_ATTEMPT_SECONDS = 86400.0


class CompletedSign(BaseModel):
    """One entry per distinct sign the user has practiced in a lesson"""
    sign: str
    attempts: int = Field(1, ge=1)
    accuracy: float = Field(0.0, ge=0.0, le=100.0)
    completed_at: str = Field(..., description="First completion timestamp (ISO 8601)")


class ProgressRecord(BaseModel):
    """
    Stored state for a (user, lesson) pair.

    `version` is the optimistic-locking counter; it is bumped on every write.
    """
    user_id: str
    lesson_id: str
    completed_signs: List[CompletedSign] = Field(default_factory=list)
    current_sign_index: int = Field(0, ge=0)
    is_completed: bool = False
    completed_at: Optional[str] = None
    total_attempts: int = Field(0, ge=0)
    average_accuracy: float = Field(0.0, ge=0.0, le=100.0)
    time_spent: float = Field(0.0, ge=0.0, description="Accumulated practice time in seconds")
    last_accessed_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    version: int = Field(0, ge=0)

    model_config = ConfigDict(from_attributes=True)


class SubmitAttemptRequest(BaseModel):
    """
    Body of POST /api/v1/lessons/{lesson_id}/progress.

    Clients send numbers as strings often enough that lax coercion stays on
    ("85" -> 85.0). Accuracy is a percentage.
    """
    sign: str = Field(..., min_length=1, description="Sign label practiced")
    accuracy: Optional[float] = Field(
        None, ge=0.0, le=100.0, allow_inf_nan=False, description="Recognition accuracy 0-100"
    )
    time_spent: float = Field(
        0.0,
        ge=0.0,
        le=MAX_ATTEMPT_SECONDS,
        allow_inf_nan=False,
        alias="timeSpent",
        description="Seconds spent on the attempt",
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('sign')
    @classmethod
    def strip_sign(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("sign cannot be blank")
        return v

    def to_command(self, user_id: str, lesson_id: str, default_accuracy: float) -> "AttemptCommand":
        return AttemptCommand(
            user_id=user_id,
            lesson_id=lesson_id,
            sign=self.sign,
            accuracy=self.accuracy if self.accuracy is not None else default_accuracy,
            time_spent=self.time_spent,
        )


class AttemptCommand(BaseModel):
    """Validated attempt submission consumed by the progress tracker"""
    user_id: str = Field(..., min_length=1)
    lesson_id: str = Field(..., min_length=1)
    sign: str = Field(..., min_length=1)
    accuracy: float = Field(70.0, ge=0.0, le=100.0, allow_inf_nan=False)
    time_spent: float = Field(0.0, ge=0.0, le=MAX_ATTEMPT_SECONDS, allow_inf_nan=False)

    model_config = ConfigDict(frozen=True)


class ProgressSnapshot(BaseModel):
    """Progress state returned after an attempt or on lookup"""
    user_id: str
    lesson_id: str
    completed_signs: List[CompletedSign]
    current_sign_index: int
    is_completed: bool
    completed_at: Optional[str] = None
    progress_percentage: float = Field(..., ge=0.0, le=100.0)
    average_accuracy: float
    total_attempts: int
    time_spent: float
    last_accessed_at: Optional[str] = None


class LessonProgressSummary(BaseModel):
    """Per-lesson row of a user's progress overview"""
    lesson_id: str
    lesson_name: str
    difficulty: str
    progress_percentage: float
    is_completed: bool
    completed_sign_count: int
    total_signs: int
    average_accuracy: float
    time_spent: float
    last_accessed_at: Optional[str] = None


class UserProgressSummaryResponse(BaseModel):
    user_id: str
    lessons: List[LessonProgressSummary]
    total_lessons_started: int
    total_lessons_completed: int
