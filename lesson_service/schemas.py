"""
Lesson catalog schemas

A lesson is an ordered list of signs. The order of `signs` drives the
progress cursor, so it is preserved exactly as created.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List


VALID_DIFFICULTIES = ["Beginner", "Intermediate", "Advanced"]


class LessonBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="Lesson display name")
    description: str = Field(..., min_length=1, description="Lesson description")
    signs: List[str] = Field(..., min_length=1, description="Ordered signs practiced in the lesson")
    difficulty: str = Field("Beginner", description="Beginner | Intermediate | Advanced")
    order: int = Field(0, ge=0, description="Display order in the catalog")

    @field_validator('signs')
    @classmethod
    def validate_signs(cls, v: List[str]) -> List[str]:
        """Signs must be non-blank and unique within the lesson"""
        cleaned = [sign.strip() for sign in v]
        if any(not sign for sign in cleaned):
            raise ValueError("signs cannot contain blank labels")
        duplicates = sorted({sign for sign in cleaned if cleaned.count(sign) > 1})
        if duplicates:
            raise ValueError(f"signs must be unique within a lesson, duplicated: {', '.join(duplicates)}")
        return cleaned

    @field_validator('difficulty')
    @classmethod
    def validate_difficulty(cls, v: str) -> str:
        normalized = v.strip().capitalize()
        if normalized not in VALID_DIFFICULTIES:
            raise ValueError(
                f"Invalid difficulty '{v}'. Must be one of: {', '.join(VALID_DIFFICULTIES)}"
            )
        return normalized


class LessonCreate(LessonBase):
    lesson_id: str = Field(..., min_length=1, max_length=64, description="Stable lesson identifier, e.g. lesson-001")
    is_active: bool = True


class Lesson(LessonBase):
    lesson_id: str
    is_active: bool = True
    created_at: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class LessonListResponse(BaseModel):
    lessons: List[Lesson]
    total: int
