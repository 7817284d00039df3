"""DynamoDB client and a per-table wrapper.

``DynamoTable`` sits on the low-level boto3 client (safe to share across the
worker threads ``asyncio.to_thread`` uses) and converts between plain Python
values and DynamoDB attribute values. All methods are blocking.
"""
from collections.abc import Mapping
from typing import Any

import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError

from tech_trends.db.exceptions import ConditionalCheckFailedError, StoreError

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def create_dynamodb_client(region_name: str, endpoint_url: str | None = None):
    """Create the shared low-level DynamoDB client."""
    return boto3.client("dynamodb", region_name=region_name, endpoint_url=endpoint_url or None)


def serialize(item: Mapping[str, Any]) -> dict[str, dict]:
    return {k: _serializer.serialize(v) for k, v in item.items()}


def deserialize(item: Mapping[str, dict]) -> dict[str, Any]:
    return {k: _deserializer.deserialize(v) for k, v in item.items()}


class DynamoTable:
    """Blocking wrapper over one DynamoDB table."""

    def __init__(self, client, table_name: str) -> None:
        self._client = client
        self.name = table_name

    def _call(self, operation: str, **kwargs: Any) -> dict[str, Any]:
        try:
            return getattr(self._client, operation)(TableName=self.name, **kwargs)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code")
            if code == "ConditionalCheckFailedException":
                raise ConditionalCheckFailedError(str(exc), code=code) from exc
            raise StoreError(f"{operation} on {self.name} failed: {exc}", code=code) from exc
        except BotoCoreError as exc:
            raise StoreError(f"{operation} on {self.name} failed: {exc}") from exc

    def get_item(self, key: Mapping[str, Any]) -> dict[str, Any] | None:
        response = self._call("get_item", Key=serialize(key))
        item = response.get("Item")
        return deserialize(item) if item else None

    def put_item(
        self,
        item: Mapping[str, Any],
        *,
        condition_expression: str | None = None,
        names: Mapping[str, str] | None = None,
    ) -> None:
        kwargs: dict[str, Any] = {"Item": serialize(item)}
        if condition_expression:
            kwargs["ConditionExpression"] = condition_expression
        if names:
            kwargs["ExpressionAttributeNames"] = dict(names)
        self._call("put_item", **kwargs)

    def delete_item(self, key: Mapping[str, Any]) -> None:
        """Unconditional delete; succeeds whether or not the item exists."""
        self._call("delete_item", Key=serialize(key))

    def update_item(
        self,
        key: Mapping[str, Any],
        update_expression: str,
        *,
        names: Mapping[str, str],
        values: Mapping[str, Any],
        condition_expression: str | None = None,
    ) -> dict[str, Any]:
        """Apply an update expression and return the item as it is after the write."""
        kwargs: dict[str, Any] = {
            "Key": serialize(key),
            "UpdateExpression": update_expression,
            "ExpressionAttributeNames": dict(names),
            "ExpressionAttributeValues": serialize(values),
            "ReturnValues": "ALL_NEW",
        }
        if condition_expression:
            kwargs["ConditionExpression"] = condition_expression
        response = self._call("update_item", **kwargs)
        return deserialize(response.get("Attributes", {}))

    def query(
        self,
        key_condition: str,
        *,
        values: Mapping[str, Any],
        names: Mapping[str, str] | None = None,
        index_name: str | None = None,
    ) -> list[dict[str, Any]]:
        """Run a query to completion, following LastEvaluatedKey."""
        kwargs: dict[str, Any] = {
            "KeyConditionExpression": key_condition,
            "ExpressionAttributeValues": serialize(values),
        }
        if names:
            kwargs["ExpressionAttributeNames"] = dict(names)
        if index_name:
            kwargs["IndexName"] = index_name
        return self._paginate("query", kwargs)

    def scan(
        self,
        *,
        limit: int | None = None,
        projection: str | None = None,
        names: Mapping[str, str] | None = None,
    ) -> list[dict[str, Any]]:
        """Scan the table; stops once ``limit`` items are collected."""
        kwargs: dict[str, Any] = {}
        if projection:
            kwargs["ProjectionExpression"] = projection
        if names:
            kwargs["ExpressionAttributeNames"] = dict(names)
        return self._paginate("scan", kwargs, limit=limit)

    def _paginate(
        self,
        operation: str,
        kwargs: dict[str, Any],
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        if limit is not None and limit <= 0:
            return items
        while True:
            if limit is not None:
                kwargs["Limit"] = limit - len(items)
            response = self._call(operation, **kwargs)
            items.extend(deserialize(i) for i in response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key or (limit is not None and len(items) >= limit):
                break
            kwargs["ExclusiveStartKey"] = last_key
        return items if limit is None else items[:limit]
