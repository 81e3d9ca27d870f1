"""
DynamoDB client initialization and configuration.

Provides a cached DynamoDB resource and table-name resolution for entities.
"""

import os
from functools import lru_cache

import boto3
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource

from knowbase.config import get_app_settings
from knowbase.utils.logger import logger


@lru_cache(maxsize=1)
def get_dynamodb_resource() -> DynamoDBServiceResource:
    """
    Get a cached DynamoDB resource instance.

    The region comes from AWS_REGION when set, otherwise from the app
    settings.

    Returns:
        DynamoDBServiceResource: Boto3 DynamoDB resource
    """
    region = os.getenv("AWS_REGION") or get_app_settings().aws_region

    logger.info(f"[DynamoDB Client] Initializing DynamoDB resource in region: {region}")

    return boto3.resource("dynamodb", region_name=region)


def get_table_name(entity: str) -> str:
    """
    Get the physical table name for an entity.

    Args:
        entity: Entity table suffix, e.g. "Manuals"

    Returns:
        str: The table name, e.g. "knowbase-Manuals"
    """
    return get_app_settings().table_name(entity)
