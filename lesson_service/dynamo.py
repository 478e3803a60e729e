"""
DynamoDB access for lesson-service

- Lessons table (catalog, keyed by lesson_id)
- LessonProgress table (single-table design, one item per user/lesson pair)
"""
import boto3
from botocore.exceptions import ClientError
from typing import Optional, Dict, Any, List
from decimal import Decimal
import logging

from lesson_service.config import Settings, get_settings

logger = logging.getLogger(__name__)


class DynamoDBClient:
    """DynamoDB client with lazy initialization"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._dynamodb = None
        self._lessons_table = None
        self._progress_table = None

    @property
    def dynamodb(self):
        """Lazy initialization of DynamoDB resource"""
        if self._dynamodb is None:
            kwargs = {
                'region_name': self.settings.AWS_REGION,
            }

            # Only use endpoint_url for LocalStack
            if self.settings.DYNAMODB_ENDPOINT:
                kwargs['endpoint_url'] = self.settings.DYNAMODB_ENDPOINT

            # In ECS, boto3 picks up the task IAM role on its own
            if self.settings.DYNAMODB_ENDPOINT and self.settings.AWS_ACCESS_KEY_ID:
                kwargs['aws_access_key_id'] = self.settings.AWS_ACCESS_KEY_ID
                kwargs['aws_secret_access_key'] = self.settings.AWS_SECRET_ACCESS_KEY
                logger.info("Using explicit AWS credentials (LocalStack mode)")
            else:
                logger.info("Using default AWS credential chain")

            self._dynamodb = boto3.resource('dynamodb', **kwargs)
        return self._dynamodb

    @property
    def lessons_table(self):
        if self._lessons_table is None:
            self._lessons_table = self.dynamodb.Table(self.settings.DYNAMODB_LESSONS_TABLE)
        return self._lessons_table

    @property
    def progress_table(self):
        if self._progress_table is None:
            self._progress_table = self.dynamodb.Table(self.settings.DYNAMODB_LESSON_PROGRESS_TABLE)
        return self._progress_table

    def create_tables_if_not_exist(self) -> List[str]:
        """
        Create the service tables when missing (LocalStack / tests).

        Returns:
            Names of the tables that were created
        """
        created = []
        for table_config in table_definitions(self.settings):
            table_name = table_config['TableName']
            try:
                self.dynamodb.meta.client.describe_table(TableName=table_name)
                logger.info(f"Table {table_name} already exists")
            except ClientError as e:
                if e.response['Error']['Code'] != 'ResourceNotFoundException':
                    raise
                table = self.dynamodb.create_table(**table_config)
                table.wait_until_exists()
                created.append(table_name)
                logger.info(f"Created table {table_name}")
        return created


def table_definitions(settings: Settings) -> List[Dict[str, Any]]:
    """Key schemas for every table the service owns"""
    return [
        {
            'TableName': settings.DYNAMODB_LESSONS_TABLE,
            'KeySchema': [
                {'AttributeName': 'lesson_id', 'KeyType': 'HASH'}
            ],
            'AttributeDefinitions': [
                {'AttributeName': 'lesson_id', 'AttributeType': 'S'}
            ],
            'BillingMode': 'PAY_PER_REQUEST'
        },
        {
            # PK/SK is the unique (user, lesson) constraint
            'TableName': settings.DYNAMODB_LESSON_PROGRESS_TABLE,
            'KeySchema': [
                {'AttributeName': 'PK', 'KeyType': 'HASH'},
                {'AttributeName': 'SK', 'KeyType': 'RANGE'}
            ],
            'AttributeDefinitions': [
                {'AttributeName': 'PK', 'AttributeType': 'S'},
                {'AttributeName': 'SK', 'AttributeType': 'S'}
            ],
            'BillingMode': 'PAY_PER_REQUEST'
        },
    ]


# ============= KEY HELPERS =============

LESSON_PROGRESS_SK_PREFIX = "LESSON_PROGRESS#"


def get_progress_pk(user_id: str) -> str:
    """Generate PK for lesson progress: USER#{user_id}"""
    return f"USER#{user_id}"


def get_progress_sk(lesson_id: str) -> str:
    """Generate SK for lesson progress: LESSON_PROGRESS#{lesson_id}"""
    return f"{LESSON_PROGRESS_SK_PREFIX}{lesson_id}"


def is_conditional_check_failure(error: ClientError) -> bool:
    return error.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException'


# ============= HELPER FUNCTIONS =============

def dynamodb_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """Convert Python dict to DynamoDB compatible dict (handles Decimal)"""
    return {k: dynamodb_value(v) for k, v in data.items()}


def dynamodb_value(value: Any) -> Any:
    """Convert Python value to DynamoDB compatible value"""
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    elif isinstance(value, dict):
        return {k: dynamodb_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [dynamodb_value(item) for item in value]
    return value


def python_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """Convert DynamoDB dict to Python dict (handles Decimal)"""
    return {k: python_value(v) for k, v in data.items()}


def python_value(value: Any) -> Any:
    """Convert DynamoDB value to Python value"""
    if isinstance(value, Decimal):
        return int(value) if value % 1 == 0 else float(value)
    elif isinstance(value, dict):
        return {k: python_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [python_value(item) for item in value]
    return value
