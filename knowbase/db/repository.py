"""
Generic document repository over a single DynamoDB table.

Provides the four operations every resource needs: full scan, get by key,
unconditional upsert and unconditional delete.
"""

from functools import reduce
from typing import Any

from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from knowbase.db.constants import ENTITY_KEYS, Entity
from knowbase.db.dynamodb_client import get_dynamodb_resource, get_table_name
from knowbase.db.exceptions import DocumentStoreError
from knowbase.db.models import convert_decimals, to_dynamodb_item
from knowbase.utils.logger import logger


class DocumentRepository:
    """Scan/get/put/delete against the table backing one entity."""

    def __init__(self, entity: Entity):
        """Bind the repository to the entity's table."""
        self.entity = entity
        self.key_name = ENTITY_KEYS[entity]
        self.table_name = get_table_name(entity.value)
        self.table = get_dynamodb_resource().Table(self.table_name)

    def _error(self, operation: str, e: Exception) -> DocumentStoreError:
        if isinstance(e, ClientError):
            detail = e.response.get("Error", {}).get("Message") or str(e)
        else:
            detail = str(e)
        error_msg = f"Failed to {operation} {self.table_name}: {detail}"
        logger.error(
            f"[DocumentRepository] {error_msg}",
            table=self.table_name,
            operation=operation,
        )
        return DocumentStoreError(
            error_msg,
            operation=operation,
            table_name=self.table_name,
            original_error=e,
        )

    async def scan(
        self,
        projection: list[str] | None = None,
        filter_equals: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Read every item in the table, following pagination.

        Args:
            projection: Attribute names to return (all when None)
            filter_equals: Attribute/value pairs that must all match

        Returns:
            list[dict]: Items with Decimal values converted to int/float

        Raises:
            DocumentStoreError: If the DynamoDB operation fails
        """
        kwargs: dict[str, Any] = {}
        if projection:
            placeholders = {f"#proj{i}": name for i, name in enumerate(projection)}
            kwargs["ProjectionExpression"] = ", ".join(placeholders)
            kwargs["ExpressionAttributeNames"] = placeholders
        if filter_equals:
            kwargs["FilterExpression"] = reduce(
                lambda acc, cond: acc & cond,
                [Attr(name).eq(value) for name, value in filter_equals.items()],
            )

        items: list[dict[str, Any]] = []
        try:
            while True:
                response = self.table.scan(**kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                kwargs["ExclusiveStartKey"] = last_key
        except (ClientError, BotoCoreError) as e:
            raise self._error("scan", e) from e

        logger.debug(
            f"[DocumentRepository] Scanned {self.table_name}", count=len(items)
        )
        return convert_decimals(items)

    async def get(self, key_value: str) -> dict[str, Any] | None:
        """
        Fetch one item by primary key.

        Returns:
            The item if found, None otherwise

        Raises:
            DocumentStoreError: If the DynamoDB operation fails
        """
        try:
            response = self.table.get_item(Key={self.key_name: key_value})
        except (ClientError, BotoCoreError) as e:
            raise self._error("get", e) from e

        if "Item" not in response:
            return None
        return convert_decimals(response["Item"])

    async def put(self, item: dict[str, Any]) -> dict[str, Any]:
        """
        Store or replace an item. Unset attributes are not written.

        Returns:
            The stored attributes

        Raises:
            ValueError: If the item has no primary key
            DocumentStoreError: If the DynamoDB operation fails
        """
        if not item.get(self.key_name):
            raise ValueError(f"{self.key_name} is required")

        stored = to_dynamodb_item(item)
        try:
            self.table.put_item(Item=stored)
        except (ClientError, BotoCoreError) as e:
            raise self._error("put", e) from e

        logger.info(
            f"[DocumentRepository] Stored {self.key_name}={item[self.key_name]} in {self.table_name}"
        )
        return convert_decimals(stored)

    async def delete(self, key_value: str) -> None:
        """
        Delete an item by primary key. Deleting a missing key is not an error.

        Raises:
            DocumentStoreError: If the DynamoDB operation fails
        """
        try:
            self.table.delete_item(Key={self.key_name: key_value})
        except (ClientError, BotoCoreError) as e:
            raise self._error("delete", e) from e

        logger.info(
            f"[DocumentRepository] Deleted {self.key_name}={key_value} from {self.table_name}"
        )
