"""Default lesson catalog loaded by scripts/seed_lessons.py"""
from typing import List

from lesson_service.schemas import LessonCreate


DEFAULT_LESSONS = [
    {
        "lesson_id": "lesson-001",
        "name": "Basic Greetings",
        "description": "Learn essential greeting signs for everyday communication",
        "signs": ["Hello", "Thank You", "Please", "Good Morning", "Goodbye"],
        "difficulty": "Beginner",
        "order": 1,
    },
    {
        "lesson_id": "lesson-002",
        "name": "Alphabet A-M",
        "description": "Master the first half of the sign language alphabet",
        "signs": ["A", "B", "C", "D", "E", "F", "G", "H", "I", "J", "K", "L", "M"],
        "difficulty": "Beginner",
        "order": 2,
    },
    {
        "lesson_id": "lesson-003",
        "name": "Alphabet N-Z",
        "description": "Complete the sign language alphabet",
        "signs": ["N", "O", "P", "Q", "R", "S", "T", "U", "V", "W", "X", "Y", "Z"],
        "difficulty": "Beginner",
        "order": 3,
    },
    {
        "lesson_id": "lesson-004",
        "name": "Numbers 1-10",
        "description": "Learn basic number signs for counting and quantities",
        "signs": ["1", "2", "3", "4", "5", "6", "7", "8", "9", "10"],
        "difficulty": "Intermediate",
        "order": 4,
    },
    {
        "lesson_id": "lesson-005",
        "name": "Common Phrases",
        "description": "Essential phrases for basic conversations",
        "signs": ["How are you?", "My name is", "Nice to meet you", "I need help", "Where is"],
        "difficulty": "Intermediate",
        "order": 5,
    },
    {
        "lesson_id": "lesson-006",
        "name": "Emergency Signs",
        "description": "Critical signs for emergency situations",
        "signs": ["Help", "Doctor", "Hospital", "Police", "Danger"],
        "difficulty": "Advanced",
        "order": 6,
    },
]


def default_lessons() -> List[LessonCreate]:
    return [LessonCreate(**lesson) for lesson in DEFAULT_LESSONS]
