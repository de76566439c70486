"""DynamoDB routes: tables and items."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from stackview.api.deps import service
from stackview.aws.dynamodb import DynamoDBService

router = APIRouter()

DYNAMODB = Depends(service(DynamoDBService))


# --- Tables ---

@router.get("/tables")
async def list_tables(svc: DynamoDBService = DYNAMODB) -> dict[str, Any]:
    return await svc.alist_tables()


@router.post("/tables")
async def create_table(
    payload: dict = Body(default={}), svc: DynamoDBService = DYNAMODB
) -> dict[str, Any]:
    return await svc.acreate_table(
        payload.get("tableName"),
        payload.get("attributeDefinitions"),
        payload.get("keySchema"),
        billing_mode=payload.get("billingMode"),
        provisioned_throughput=payload.get("provisionedThroughput"),
        global_secondary_indexes=payload.get("globalSecondaryIndexes"),
        local_secondary_indexes=payload.get("localSecondaryIndexes"),
    )


@router.delete("/tables")
async def delete_table(
    table_name: Optional[str] = Query(None, alias="tableName"),
    svc: DynamoDBService = DYNAMODB,
) -> dict[str, Any]:
    return await svc.adelete_table(table_name)


@router.get("/tables/{table_name}")
async def describe_table(table_name: str, svc: DynamoDBService = DYNAMODB) -> dict[str, Any]:
    return await svc.adescribe_table(table_name)


@router.put("/tables/{table_name}")
async def update_table(
    table_name: str, payload: dict = Body(default={}), svc: DynamoDBService = DYNAMODB
) -> dict[str, Any]:
    return await svc.aupdate_table(
        table_name,
        provisioned_throughput=payload.get("provisionedThroughput"),
        global_secondary_index_updates=payload.get("globalSecondaryIndexUpdates"),
        stream_specification=payload.get("streamSpecification"),
    )


# --- Items ---

@router.get("/items")
async def fetch_items(
    table_name: Optional[str] = Query(None, alias="tableName"),
    operation: str = "scan",
    limit: Optional[str] = None,
    exclusive_start_key: Optional[str] = Query(None, alias="exclusiveStartKey"),
    key_condition_expression: Optional[str] = Query(None, alias="keyConditionExpression"),
    expression_attribute_names: Optional[str] = Query(None, alias="expressionAttributeNames"),
    expression_attribute_values: Optional[str] = Query(None, alias="expressionAttributeValues"),
    svc: DynamoDBService = DYNAMODB,
) -> dict[str, Any]:
    return await svc.afetch_items(
        table_name,
        operation,
        limit,
        exclusive_start_key,
        key_condition_expression,
        expression_attribute_names,
        expression_attribute_values,
    )


@router.post("/items")
async def put_item(payload: dict = Body(default={}), svc: DynamoDBService = DYNAMODB) -> dict[str, Any]:
    return await svc.aput_item(payload.get("tableName"), payload.get("item"))


# ``item_id`` only identifies the route; the key travels as JSON.
@router.get("/items/{item_id}")
async def get_item(
    item_id: str,
    table_name: Optional[str] = Query(None, alias="tableName"),
    key: Optional[str] = None,
    svc: DynamoDBService = DYNAMODB,
) -> dict[str, Any]:
    return await svc.aget_item(table_name, key)


@router.put("/items/{item_id}")
async def update_item(
    item_id: str, payload: dict = Body(default={}), svc: DynamoDBService = DYNAMODB
) -> dict[str, Any]:
    return await svc.aupdate_item(
        payload.get("tableName"),
        payload.get("key"),
        payload.get("updateExpression"),
        payload.get("expressionAttributeNames"),
        payload.get("expressionAttributeValues"),
    )


@router.delete("/items/{item_id}")
async def delete_item(
    item_id: str,
    table_name: Optional[str] = Query(None, alias="tableName"),
    key: Optional[str] = None,
    svc: DynamoDBService = DYNAMODB,
) -> dict[str, Any]:
    return await svc.adelete_item(table_name, key)
