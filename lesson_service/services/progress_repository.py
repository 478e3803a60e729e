"""Lesson Progress Repository - Data Access Layer"""
from typing import Optional, List, Dict, Any
import logging

from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from lesson_service.dynamo import (
    DynamoDBClient,
    LESSON_PROGRESS_SK_PREFIX,
    dynamodb_dict,
    get_progress_pk,
    get_progress_sk,
    is_conditional_check_failure,
    python_dict,
)
from lesson_service.errors import ProgressConflictError, TransientStorageError
from lesson_service.schemas_progress import ProgressRecord

logger = logging.getLogger(__name__)


class LessonProgressRepository:
    """
    Repository for lesson progress items in DynamoDB.

    Item key: PK=USER#{user_id}, SK=LESSON_PROGRESS#{lesson_id}. Writes are
    conditional on the stored `version`, so a read-modify-write cycle that
    raced with another one fails instead of overwriting it.
    """

    def __init__(self, db_client: DynamoDBClient):
        self.db_client = db_client

    @property
    def table(self):
        return self.db_client.progress_table

    async def get(self, user_id: str, lesson_id: str) -> Optional[ProgressRecord]:
        """Returns the stored record or None if the pair has no progress yet."""
        try:
            response = self.table.get_item(
                Key={'PK': get_progress_pk(user_id), 'SK': get_progress_sk(lesson_id)},
                ConsistentRead=True
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error getting lesson progress: user={user_id}, lesson={lesson_id}: {str(e)}")
            raise TransientStorageError(
                f"Could not read progress for user {user_id}, lesson {lesson_id}"
            ) from e

        item = response.get('Item')
        if not item:
            return None
        return self._to_record(item)

    async def save(self, record: ProgressRecord, expected_version: Optional[int]) -> ProgressRecord:
        """
        Persist a record with optimistic locking.

        Args:
            record: Record to write
            expected_version: Version read before modification, None when the
                record did not exist yet

        Returns:
            The stored record with its new version

        Raises:
            ProgressConflictError: another write happened since the read
            TransientStorageError: DynamoDB failure
        """
        stored = record.model_copy(update={'version': (expected_version or 0) + 1})
        item = {
            'PK': get_progress_pk(record.user_id),
            'SK': get_progress_sk(record.lesson_id),
            **stored.model_dump(),
        }

        kwargs: Dict[str, Any] = {'Item': dynamodb_dict(item)}
        if expected_version is None:
            kwargs['ConditionExpression'] = 'attribute_not_exists(PK)'
        else:
            kwargs['ConditionExpression'] = 'version = :expected_version'
            kwargs['ExpressionAttributeValues'] = {':expected_version': expected_version}

        try:
            self.table.put_item(**kwargs)
        except ClientError as e:
            if is_conditional_check_failure(e):
                logger.warning(
                    f"Version mismatch on lesson progress: user={record.user_id}, "
                    f"lesson={record.lesson_id}, expected={expected_version}"
                )
                raise ProgressConflictError(record.user_id, record.lesson_id, expected_version or 0) from e
            logger.error(f"Error saving lesson progress: {str(e)}")
            raise TransientStorageError(
                f"Could not save progress for user {record.user_id}, lesson {record.lesson_id}"
            ) from e
        except BotoCoreError as e:
            logger.error(f"Error saving lesson progress: {str(e)}")
            raise TransientStorageError(
                f"Could not save progress for user {record.user_id}, lesson {record.lesson_id}"
            ) from e

        logger.info(
            f"Saved lesson progress: user={stored.user_id}, lesson={stored.lesson_id}, "
            f"version={stored.version}, attempts={stored.total_attempts}"
        )
        return stored

    async def list_for_user(self, user_id: str) -> List[ProgressRecord]:
        """All progress records owned by a user."""
        query_kwargs: Dict[str, Any] = {
            'KeyConditionExpression': (
                Key('PK').eq(get_progress_pk(user_id)) & Key('SK').begins_with(LESSON_PROGRESS_SK_PREFIX)
            )
        }
        items: List[Dict[str, Any]] = []
        try:
            while True:
                response = self.table.query(**query_kwargs)
                items.extend(response.get('Items', []))
                last_key = response.get('LastEvaluatedKey')
                if not last_key:
                    break
                query_kwargs['ExclusiveStartKey'] = last_key
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error querying lesson progress for user {user_id}: {str(e)}")
            raise TransientStorageError(f"Could not list progress for user {user_id}") from e

        return [self._to_record(item) for item in items]

    @staticmethod
    def _to_record(item: Dict[str, Any]) -> ProgressRecord:
        data = python_dict(item)
        data.pop('PK', None)
        data.pop('SK', None)
        return ProgressRecord(**data)
