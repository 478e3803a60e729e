#!/usr/bin/env python3
"""
Seed the default lesson catalog (idempotent: existing lessons are skipped)

Usage:
    python scripts/seed_lessons.py
"""
import asyncio
import logging

from lesson_service.config import get_settings
from lesson_service.dynamo import DynamoDBClient
from lesson_service.seed_data import default_lessons
from lesson_service.services.lesson_catalog import LessonCatalog

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


async def main():
    catalog = LessonCatalog(DynamoDBClient(get_settings()))
    stats = await catalog.seed_lessons(default_lessons())
    logger.info(f"Seed finished: {stats}")


if __name__ == "__main__":
    asyncio.run(main())
