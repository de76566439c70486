"""CloudFormation routes: stacks, stack resources and stack events."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from stackview.api.deps import service
from stackview.aws.cloudformation import CloudFormationService

router = APIRouter()

CFN = Depends(service(CloudFormationService))


@router.get("/stacks")
async def list_stacks(svc: CloudFormationService = CFN) -> list[dict[str, Any]]:
    return await svc.alist_stacks()


@router.post("/stacks")
async def create_stack(payload: dict = Body(default={}), svc: CloudFormationService = CFN) -> dict[str, Any]:
    return await svc.acreate_stack(payload)


@router.put("/stacks")
async def update_stack(payload: dict = Body(default={}), svc: CloudFormationService = CFN) -> dict[str, Any]:
    return await svc.aupdate_stack(payload)


@router.delete("/stacks")
async def delete_stack(
    stack_name: Optional[str] = Query(None, alias="stackName"),
    retain_resources: Optional[str] = Query(None, alias="retainResources"),
    role_arn: Optional[str] = Query(None, alias="roleARN"),
    client_request_token: Optional[str] = Query(None, alias="clientRequestToken"),
    svc: CloudFormationService = CFN,
) -> dict[str, Any]:
    return await svc.adelete_stack(stack_name, retain_resources, role_arn, client_request_token)


@router.get("/stacks/{stack_name}")
async def describe_stack(
    stack_name: str, template: Optional[str] = None, svc: CloudFormationService = CFN
) -> dict[str, Any]:
    return await svc.adescribe_stack(stack_name, template)


@router.get("/resources")
async def list_resources(
    stack_name: Optional[str] = Query(None, alias="stackName"),
    logical_resource_id: Optional[str] = Query(None, alias="logicalResourceId"),
    svc: CloudFormationService = CFN,
) -> list[dict[str, Any]]:
    return await svc.alist_resources(stack_name, logical_resource_id)


@router.get("/events")
async def list_events(
    stack_name: Optional[str] = Query(None, alias="stackName"),
    svc: CloudFormationService = CFN,
) -> list[dict[str, Any]]:
    return await svc.alist_events(stack_name)
