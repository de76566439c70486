"""EventBridge routes: buses, rules and targets."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from stackview.api.deps import service
from stackview.aws.eventbridge import EventBridgeService

router = APIRouter()

EVENTS = Depends(service(EventBridgeService))


@router.get("/buses")
async def list_buses(svc: EventBridgeService = EVENTS) -> list[dict[str, Any]]:
    return await svc.alist_buses()


@router.post("/buses")
async def create_bus(payload: dict = Body(default={}), svc: EventBridgeService = EVENTS) -> dict[str, Any]:
    return await svc.acreate_bus(
        payload.get("name"), payload.get("description"), payload.get("tags")
    )


@router.delete("/buses")
async def delete_bus(name: Optional[str] = None, svc: EventBridgeService = EVENTS) -> dict[str, Any]:
    return await svc.adelete_bus(name)


# --- Rules ---

@router.get("/rules")
async def list_rules(
    event_bus_name: Optional[str] = Query(None, alias="eventBusName"),
    name_prefix: Optional[str] = Query(None, alias="namePrefix"),
    svc: EventBridgeService = EVENTS,
) -> list[dict[str, Any]]:
    return await svc.alist_rules(event_bus_name, name_prefix)


@router.post("/rules")
async def put_rule(payload: dict = Body(default={}), svc: EventBridgeService = EVENTS) -> dict[str, Any]:
    return await svc.aput_rule(
        payload.get("name"),
        event_pattern=payload.get("eventPattern"),
        schedule_expression=payload.get("scheduleExpression"),
        description=payload.get("description"),
        state=payload.get("state"),
        event_bus_name=payload.get("eventBusName"),
        role_arn=payload.get("roleArn"),
        tags=payload.get("tags"),
    )


@router.put("/rules")
async def set_rule_state(
    payload: dict = Body(default={}), svc: EventBridgeService = EVENTS
) -> dict[str, Any]:
    return await svc.aset_rule_state(
        payload.get("name"), payload.get("action"), payload.get("eventBusName")
    )


@router.delete("/rules")
async def delete_rule(
    name: Optional[str] = None,
    event_bus_name: Optional[str] = Query(None, alias="eventBusName"),
    svc: EventBridgeService = EVENTS,
) -> dict[str, Any]:
    return await svc.adelete_rule(name, event_bus_name)


@router.get("/rules/{name}")
async def describe_rule(
    name: str,
    event_bus_name: Optional[str] = Query(None, alias="eventBusName"),
    svc: EventBridgeService = EVENTS,
) -> dict[str, Any]:
    return await svc.adescribe_rule(name, event_bus_name)


# --- Targets ---

@router.get("/targets")
async def list_targets(
    rule: Optional[str] = None,
    event_bus_name: Optional[str] = Query(None, alias="eventBusName"),
    svc: EventBridgeService = EVENTS,
) -> list[dict[str, Any]]:
    return await svc.alist_targets(rule, event_bus_name)


@router.post("/targets")
async def put_targets(payload: dict = Body(default={}), svc: EventBridgeService = EVENTS) -> dict[str, Any]:
    return await svc.aput_targets(
        payload.get("rule"), payload.get("targets"), payload.get("eventBusName")
    )


@router.delete("/targets")
async def remove_targets(
    rule: Optional[str] = None,
    ids: Optional[str] = None,
    event_bus_name: Optional[str] = Query(None, alias="eventBusName"),
    svc: EventBridgeService = EVENTS,
) -> dict[str, Any]:
    return await svc.aremove_targets(rule, ids, event_bus_name)
