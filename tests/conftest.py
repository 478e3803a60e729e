"""
Pytest configuration for lesson-service tests

DynamoDB is mocked with moto; every test gets fresh tables.
"""
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from moto import mock_aws

from lesson_service.config import Settings
from lesson_service.dynamo import DynamoDBClient
from lesson_service.schemas import LessonCreate
from lesson_service.services.lesson_catalog import LessonCatalog
from lesson_service.services.lesson_progress_service import LessonProgressService
from lesson_service.services.progress_repository import LessonProgressRepository
from shared.auth import get_auth_config


TEST_SIGNING_KEY = "test-signing-key-for-lesson-service"


class FakeClock:
    """Deterministic clock: every call moves one second forward."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        self.current = self.current + timedelta(seconds=1)
        return self.current


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mock AWS credentials for moto"""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def auth_env(monkeypatch):
    """Signing key for tokens issued and verified during the test"""
    monkeypatch.setenv("TOKEN_SIGNING_KEY", TEST_SIGNING_KEY)
    get_auth_config.cache_clear()
    yield
    get_auth_config.cache_clear()


@pytest.fixture
def settings():
    return Settings(
        AWS_REGION="us-east-1",
        DYNAMODB_ENDPOINT=None,
        DYNAMODB_LESSONS_TABLE="test-lessons",
        DYNAMODB_LESSON_PROGRESS_TABLE="test-lesson-progress",
        PROGRESS_MAX_RETRIES=3,
        DEFAULT_ACCURACY=70.0,
    )


@pytest.fixture
def db_client(aws_credentials, settings):
    """DynamoDB client bound to freshly created mock tables"""
    with mock_aws():
        client = DynamoDBClient(settings)
        client.create_tables_if_not_exist()
        yield client


@pytest.fixture
def catalog(db_client):
    return LessonCatalog(db_client)


@pytest.fixture
def repository(db_client):
    return LessonProgressRepository(db_client)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def progress_service(settings, catalog, repository, clock):
    return LessonProgressService(
        settings=settings,
        catalog=catalog,
        repository=repository,
        clock=clock,
    )


@pytest.fixture
def greetings_payload():
    return LessonCreate(
        lesson_id="lesson-greetings",
        name="Greetings",
        description="Hello, thanks and please",
        signs=["Hello", "Thanks", "Please"],
        difficulty="Beginner",
        order=2,
    )


@pytest.fixture
def numbers_payload():
    return LessonCreate(
        lesson_id="lesson-numbers",
        name="Numbers",
        description="One to three",
        signs=["1", "2", "3"],
        difficulty="Intermediate",
        order=1,
    )


@pytest_asyncio.fixture
async def seeded_catalog(catalog, greetings_payload, numbers_payload):
    """Catalog with two active lessons and one inactive lesson"""
    await catalog.create_lesson(greetings_payload)
    await catalog.create_lesson(numbers_payload)
    await catalog.create_lesson(
        LessonCreate(
            lesson_id="lesson-retired",
            name="Retired",
            description="No longer offered",
            signs=["Old"],
            difficulty="Advanced",
            order=3,
            is_active=False,
        )
    )
    return catalog
