"""Dependency injection for routers"""
from functools import lru_cache

from fastapi import Depends

from lesson_service.config import Settings, get_settings
from lesson_service.dynamo import DynamoDBClient
from lesson_service.services.lesson_catalog import LessonCatalog
from lesson_service.services.lesson_progress_service import LessonProgressService
from lesson_service.services.progress_repository import LessonProgressRepository


@lru_cache()
def get_db_client() -> DynamoDBClient:
    """Shared DynamoDB client (singleton)"""
    return DynamoDBClient(get_settings())


def get_lesson_catalog(db_client: DynamoDBClient = Depends(get_db_client)) -> LessonCatalog:
    return LessonCatalog(db_client)


def get_progress_repository(db_client: DynamoDBClient = Depends(get_db_client)) -> LessonProgressRepository:
    return LessonProgressRepository(db_client)


def get_progress_service(
    settings: Settings = Depends(get_settings),
    catalog: LessonCatalog = Depends(get_lesson_catalog),
    repository: LessonProgressRepository = Depends(get_progress_repository),
) -> LessonProgressService:
    return LessonProgressService(settings=settings, catalog=catalog, repository=repository)
