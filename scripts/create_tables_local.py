#!/usr/bin/env python3
"""
Create DynamoDB tables in LocalStack for local development

Usage:
    DYNAMODB_ENDPOINT=http://localhost:4566 AWS_ACCESS_KEY_ID=test \
    AWS_SECRET_ACCESS_KEY=test python scripts/create_tables_local.py
"""
import logging

from lesson_service.config import get_settings
from lesson_service.dynamo import DynamoDBClient

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


def create_tables():
    """Create all DynamoDB tables for lesson-service"""
    settings = get_settings()
    if not settings.DYNAMODB_ENDPOINT:
        logger.warning("DYNAMODB_ENDPOINT not set, tables will be created in real AWS")

    created = DynamoDBClient(settings).create_tables_if_not_exist()
    logger.info(f"Tables created: {created or 'none (all existed)'}")


if __name__ == "__main__":
    create_tables()
