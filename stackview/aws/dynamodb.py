"""
DynamoDB proxy: tables and items.

Items cross the HTTP boundary as plain JSON documents. They are converted
to and from DynamoDB's typed attribute maps with boto3's
:class:`TypeSerializer` / :class:`TypeDeserializer`, with floats routed
through :class:`~decimal.Decimal` on the way in and numbers narrowed back
to ``int``/``float`` on the way out. Binary values leave as base64 text.
"""

from __future__ import annotations

import base64
from decimal import Decimal
from typing import Any

from boto3.dynamodb.types import Binary, TypeDeserializer, TypeSerializer

from stackview.base.exceptions import InvalidRequestError, ResourceNotFoundError
from stackview.base.reshape import reshape
from stackview.base.service import ProxyService
from stackview.base.validation import as_int, compact, parse_json, require

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def _to_dynamo_value(value: Any) -> Any:
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: _to_dynamo_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_dynamo_value(v) for v in value]
    return value


def _from_dynamo_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, Binary):
        value = value.value
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, dict):
        return {k: _from_dynamo_value(v) for k, v in value.items()}
    if isinstance(value, (list, set, frozenset)):
        return [_from_dynamo_value(v) for v in value]
    return value


def serialize_document(
    document: dict[str, Any] | None, message: str = "Document must be a JSON object"
) -> dict[str, Any] | None:
    """Plain JSON document -> DynamoDB attribute map.

    Raises:
        InvalidRequestError: *message*, if *document* is not an object or
            holds a value DynamoDB cannot store.
    """
    if document is None:
        return None
    if not isinstance(document, dict):
        raise InvalidRequestError(message)
    try:
        return {k: _serializer.serialize(_to_dynamo_value(v)) for k, v in document.items()}
    except TypeError as e:
        raise InvalidRequestError(f"{message}: {e}") from e


def deserialize_document(item: dict[str, Any] | None) -> dict[str, Any] | None:
    """DynamoDB attribute map -> plain JSON document.

    Binary (``B``/``BS``) attributes come back base64 encoded.
    """
    if item is None:
        return None
    return {k: _from_dynamo_value(_deserializer.deserialize(v)) for k, v in item.items()}


TABLE_SUMMARY_FIELDS = {
    "tableName": "TableName",
    "tableStatus": lambda t: t.get("TableStatus") or "UNKNOWN",
    "creationDateTime": "CreationDateTime",
    "itemCount": lambda t: t.get("ItemCount") or 0,
    "tableSizeBytes": lambda t: t.get("TableSizeBytes") or 0,
    "tableArn": "TableArn",
    "keySchema": "KeySchema",
}

TABLE_DETAIL_FIELDS = {
    **TABLE_SUMMARY_FIELDS,
    "tableStatus": "TableStatus",
    "attributeDefinitions": "AttributeDefinitions",
    "globalSecondaryIndexes": "GlobalSecondaryIndexes",
    "localSecondaryIndexes": "LocalSecondaryIndexes",
    "billingMode": lambda t: (t.get("BillingModeSummary") or {}).get("BillingMode"),
    "provisionedThroughput": "ProvisionedThroughput",
    "streamSpecification": "StreamSpecification",
}

KEY_MESSAGE = "Key must be a JSON object"

_ERROR_MAP = {"ResourceNotFoundException": ResourceNotFoundError}


class DynamoDBService(ProxyService):
    """Table management and document-style item access."""

    service_id = "dynamodb"
    client_attr = "dynamodb"
    _ERROR_MAP = _ERROR_MAP

    # --- Table operations ---

    def list_tables(self) -> dict[str, Any]:
        """List tables with a per-table summary.

        A table that cannot be described is reported with status
        ``UNKNOWN`` and zero counts instead of failing the listing.
        """
        resp = self._call("list_tables")
        tables = []
        for table_name in resp.get("TableNames") or []:
            described = self._call_or(None, "describe_table", TableName=table_name)
            if described is None:
                tables.append({
                    "tableName": table_name,
                    "tableStatus": "UNKNOWN",
                    "itemCount": 0,
                    "tableSizeBytes": 0,
                })
                continue
            summary = reshape(described.get("Table") or {}, TABLE_SUMMARY_FIELDS)
            summary.setdefault("tableName", table_name)
            tables.append(summary)
        return {"tables": tables}

    def create_table(
        self,
        table_name: str | None,
        attribute_definitions: list[dict[str, Any]] | None,
        key_schema: list[dict[str, Any]] | None,
        billing_mode: str | None = None,
        provisioned_throughput: dict[str, Any] | None = None,
        global_secondary_indexes: list[dict[str, Any]] | None = None,
        local_secondary_indexes: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        require(
            "Table name, attribute definitions, and key schema are required",
            table_name,
            attribute_definitions,
            key_schema,
        )
        billing_mode = billing_mode or "PAY_PER_REQUEST"
        params = compact(
            TableName=table_name,
            AttributeDefinitions=attribute_definitions,
            KeySchema=key_schema,
            BillingMode=billing_mode,
            ProvisionedThroughput=(
                provisioned_throughput if billing_mode == "PROVISIONED" else None
            ),
            GlobalSecondaryIndexes=global_secondary_indexes or None,
            LocalSecondaryIndexes=local_secondary_indexes or None,
        )
        resp = self._call("create_table", **params)
        return {
            "success": True,
            "tableName": table_name,
            "tableDescription": resp.get("TableDescription"),
        }

    def delete_table(self, table_name: str | None) -> dict[str, Any]:
        require("Table name is required", table_name)
        self._call("delete_table", TableName=table_name)
        return {"success": True}

    def describe_table(self, table_name: str | None) -> dict[str, Any]:
        require("Table name is required", table_name)
        resp = self._call("describe_table", TableName=table_name)
        return reshape(resp.get("Table") or {}, TABLE_DETAIL_FIELDS)

    def update_table(
        self,
        table_name: str | None,
        provisioned_throughput: dict[str, Any] | None = None,
        global_secondary_index_updates: list[dict[str, Any]] | None = None,
        stream_specification: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        require("Table name is required", table_name)
        params = compact(
            TableName=table_name,
            ProvisionedThroughput=provisioned_throughput or None,
            GlobalSecondaryIndexUpdates=global_secondary_index_updates or None,
            StreamSpecification=stream_specification or None,
        )
        resp = self._call("update_table", **params)
        return {"success": True, "tableDescription": resp.get("TableDescription")}

    # --- Item operations ---

    def fetch_items(
        self,
        table_name: str | None,
        operation: str | None = "scan",
        limit: Any = None,
        exclusive_start_key: Any = None,
        key_condition_expression: str | None = None,
        expression_attribute_names: Any = None,
        expression_attribute_values: Any = None,
    ) -> dict[str, Any]:
        """Scan or query a table.

        JSON-encoded arguments (start key, names, values) may be passed as
        strings straight from the query string.
        """
        require("Table name is required", table_name)
        params: dict[str, Any] = {"TableName": table_name, "Limit": as_int(limit, 50)}
        start_key = parse_json(exclusive_start_key, "Invalid JSON in exclusiveStartKey")
        if start_key:
            params["ExclusiveStartKey"] = serialize_document(
                start_key, "exclusiveStartKey must be an object"
            )

        if operation == "query":
            require(
                "Key condition expression is required for query operation",
                key_condition_expression,
            )
            params["KeyConditionExpression"] = key_condition_expression
            names = parse_json(expression_attribute_names, "Invalid JSON in expressionAttributeNames")
            values = parse_json(expression_attribute_values, "Invalid JSON in expressionAttributeValues")
            if names:
                params["ExpressionAttributeNames"] = names
            if values:
                params["ExpressionAttributeValues"] = serialize_document(
                    values, "expressionAttributeValues must be an object"
                )
            resp = self._call("query", **params)
        else:
            resp = self._call("scan", **params)

        return {
            "items": [deserialize_document(item) for item in resp.get("Items") or []],
            "count": resp.get("Count") or 0,
            "scannedCount": resp.get("ScannedCount") or 0,
            "lastEvaluatedKey": deserialize_document(resp.get("LastEvaluatedKey")),
        }

    def put_item(self, table_name: str | None, item: dict[str, Any] | None) -> dict[str, Any]:
        require("Table name and item are required", table_name, item)
        attrs = serialize_document(item, "Item must be a JSON object")
        self._call("put_item", TableName=table_name, Item=attrs)
        return {"success": True, "item": item}

    def get_item(self, table_name: str | None, key: Any) -> dict[str, Any]:
        require("Table name and key are required", table_name, key)
        key_doc = parse_json(key, "Invalid JSON in key")
        key_attrs = serialize_document(key_doc, KEY_MESSAGE)
        resp = self._call("get_item", not_found=True, TableName=table_name, Key=key_attrs)
        if not resp.get("Item"):
            raise ResourceNotFoundError("Item not found")
        return {"item": deserialize_document(resp["Item"])}

    def update_item(
        self,
        table_name: str | None,
        key: Any,
        update_expression: str | None,
        expression_attribute_names: dict[str, str] | None = None,
        expression_attribute_values: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        require(
            "Table name, key, and update expression are required",
            table_name,
            key,
            update_expression,
        )
        key_doc = parse_json(key, "Invalid JSON in key")
        params = compact(
            TableName=table_name,
            Key=serialize_document(key_doc, KEY_MESSAGE),
            UpdateExpression=update_expression,
            ReturnValues="ALL_NEW",
            ExpressionAttributeNames=expression_attribute_names or None,
            ExpressionAttributeValues=serialize_document(
                expression_attribute_values or None, "expressionAttributeValues must be an object"
            ),
        )
        resp = self._call("update_item", **params)
        return {"success": True, "item": deserialize_document(resp.get("Attributes"))}

    def delete_item(self, table_name: str | None, key: Any) -> dict[str, Any]:
        require("Table name and key are required", table_name, key)
        key_doc = parse_json(key, "Invalid JSON in key")
        key_attrs = serialize_document(key_doc, KEY_MESSAGE)
        self._call("delete_item", TableName=table_name, Key=key_attrs)
        return {"success": True}
