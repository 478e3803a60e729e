"""Domain exceptions raised by the lesson catalog and progress tracker."""


class LessonServiceError(Exception):
    """Base exception for lesson service operations"""
    pass


class LessonNotFoundError(LessonServiceError):
    """Raised when a lesson id does not resolve to an active lesson"""

    def __init__(self, lesson_id: str):
        self.lesson_id = lesson_id
        super().__init__(f"Lesson {lesson_id} not found")


class LessonAlreadyExistsError(LessonServiceError):
    """Raised when creating a lesson whose id is already taken"""

    def __init__(self, lesson_id: str):
        self.lesson_id = lesson_id
        super().__init__(f"Lesson {lesson_id} already exists")


class InvalidSignError(LessonServiceError):
    """Raised when a submitted sign is not part of the lesson"""

    def __init__(self, lesson_id: str, sign: str):
        self.lesson_id = lesson_id
        self.sign = sign
        super().__init__(f"Sign '{sign}' is not part of lesson {lesson_id}")


class ProgressConflictError(LessonServiceError):
    """Raised when a progress record changed between read and write"""

    def __init__(self, user_id: str, lesson_id: str, expected_version: int):
        self.user_id = user_id
        self.lesson_id = lesson_id
        self.expected_version = expected_version
        super().__init__(
            f"Concurrent modification of progress for user {user_id}, "
            f"lesson {lesson_id} (expected version {expected_version})"
        )


class TransientStorageError(LessonServiceError):
    """Storage unavailable or conflict retries exhausted. Safe to retry."""
    pass
