"""Lesson Catalog - Data Access Layer for lessons"""
from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
import logging

from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from lesson_service.dynamo import DynamoDBClient, dynamodb_dict, python_dict, is_conditional_check_failure
from lesson_service.errors import LessonAlreadyExistsError, TransientStorageError
from lesson_service.schemas import Lesson, LessonCreate

logger = logging.getLogger(__name__)


class LessonCatalog:
    """Read access to lessons plus admin creation and seeding."""

    def __init__(self, db_client: DynamoDBClient):
        self.db_client = db_client

    @property
    def table(self):
        return self.db_client.lessons_table

    async def get_lesson_by_id(self, lesson_id: str) -> Optional[Lesson]:
        """
        Get lesson by ID (active or not).

        Returns:
            Lesson or None if not found
        """
        try:
            response = self.table.get_item(Key={'lesson_id': lesson_id})
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error getting lesson {lesson_id}: {str(e)}")
            raise TransientStorageError(f"Could not read lesson {lesson_id}") from e

        item = response.get('Item')
        if not item:
            return None
        return Lesson(**python_dict(item))

    async def list_lessons(
        self,
        difficulty: Optional[str] = None,
        include_inactive: bool = False
    ) -> List[Lesson]:
        """
        List lessons in display order.

        Args:
            difficulty: Optional difficulty filter (Beginner, Intermediate, Advanced)
            include_inactive: Whether to include deactivated lessons
        """
        scan_kwargs: Dict[str, Any] = {}
        condition = None
        if not include_inactive:
            condition = Attr('is_active').eq(True)
        if difficulty:
            difficulty_condition = Attr('difficulty').eq(difficulty.strip().capitalize())
            condition = difficulty_condition if condition is None else condition & difficulty_condition
        if condition is not None:
            scan_kwargs['FilterExpression'] = condition

        items: List[Dict[str, Any]] = []
        try:
            while True:
                response = self.table.scan(**scan_kwargs)
                items.extend(response.get('Items', []))
                last_key = response.get('LastEvaluatedKey')
                if not last_key:
                    break
                scan_kwargs['ExclusiveStartKey'] = last_key
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error listing lessons: {str(e)}")
            raise TransientStorageError("Could not list lessons") from e

        lessons = [Lesson(**python_dict(item)) for item in items]
        lessons.sort(key=lambda lesson: (lesson.order, lesson.lesson_id))
        logger.info(f"Listed {len(lessons)} lessons (difficulty={difficulty}, include_inactive={include_inactive})")
        return lessons

    async def create_lesson(self, payload: LessonCreate) -> Lesson:
        """
        Create a lesson. The lesson_id must be unused.

        Raises:
            LessonAlreadyExistsError: lesson_id already taken
        """
        lesson = Lesson(
            **payload.model_dump(),
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        try:
            self.table.put_item(
                Item=dynamodb_dict(lesson.model_dump()),
                ConditionExpression='attribute_not_exists(lesson_id)'
            )
        except ClientError as e:
            if is_conditional_check_failure(e):
                logger.warning(f"Lesson {payload.lesson_id} already exists")
                raise LessonAlreadyExistsError(payload.lesson_id) from e
            logger.error(f"Error creating lesson {payload.lesson_id}: {str(e)}")
            raise TransientStorageError(f"Could not create lesson {payload.lesson_id}") from e
        except BotoCoreError as e:
            logger.error(f"Error creating lesson {payload.lesson_id}: {str(e)}")
            raise TransientStorageError(f"Could not create lesson {payload.lesson_id}") from e

        logger.info(f"Created lesson {lesson.lesson_id} with {len(lesson.signs)} signs")
        return lesson

    async def seed_lessons(self, lessons: List[LessonCreate]) -> Dict[str, int]:
        """
        Idempotent seed: creates missing lessons, skips existing ones.

        Returns:
            {"created": int, "skipped": int}
        """
        stats = {'created': 0, 'skipped': 0}
        for payload in lessons:
            try:
                await self.create_lesson(payload)
                stats['created'] += 1
            except LessonAlreadyExistsError:
                stats['skipped'] += 1
        logger.info(f"Seeded lessons: created={stats['created']}, skipped={stats['skipped']}")
        return stats
