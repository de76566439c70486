"""EventBridge Scheduler routes: schedule groups and schedules."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from stackview.api.deps import service
from stackview.aws.scheduler import SchedulerService

router = APIRouter()

SCHEDULER = Depends(service(SchedulerService))


@router.get("/groups")
async def list_groups(svc: SchedulerService = SCHEDULER) -> list[dict[str, Any]]:
    return await svc.alist_groups()


@router.post("/groups")
async def create_group(payload: dict = Body(default={}), svc: SchedulerService = SCHEDULER) -> dict[str, Any]:
    return await svc.acreate_group(payload.get("name"), payload.get("tags"))


@router.delete("/groups")
async def delete_group(name: Optional[str] = None, svc: SchedulerService = SCHEDULER) -> dict[str, Any]:
    return await svc.adelete_group(name)


@router.get("/schedules")
async def list_schedules(
    group_name: Optional[str] = Query(None, alias="groupName"),
    name_prefix: Optional[str] = Query(None, alias="namePrefix"),
    svc: SchedulerService = SCHEDULER,
) -> list[dict[str, Any]]:
    return await svc.alist_schedules(group_name, name_prefix)


@router.post("/schedules")
async def create_schedule(
    payload: dict = Body(default={}), svc: SchedulerService = SCHEDULER
) -> dict[str, Any]:
    return await svc.acreate_schedule(payload)


@router.put("/schedules")
async def update_schedule(
    payload: dict = Body(default={}), svc: SchedulerService = SCHEDULER
) -> dict[str, Any]:
    return await svc.aupdate_schedule(payload)


@router.delete("/schedules")
async def delete_schedule(
    name: Optional[str] = None,
    group_name: Optional[str] = Query(None, alias="groupName"),
    svc: SchedulerService = SCHEDULER,
) -> dict[str, Any]:
    return await svc.adelete_schedule(name, group_name)


@router.get("/schedules/{name}")
async def get_schedule(
    name: str,
    group_name: Optional[str] = Query(None, alias="groupName"),
    svc: SchedulerService = SCHEDULER,
) -> dict[str, Any]:
    return await svc.aget_schedule(name, group_name)
