"""API Gateway routes: REST APIs, resources, deployments and stages."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from stackview.api.deps import service
from stackview.aws.apigateway import APIGatewayService

router = APIRouter()

APIGW = Depends(service(APIGatewayService))


# --- REST APIs ---

@router.get("/apis")
async def list_apis(svc: APIGatewayService = APIGW) -> list[dict[str, Any]]:
    return await svc.alist_apis()


@router.post("/apis")
async def create_api(payload: dict = Body(default={}), svc: APIGatewayService = APIGW) -> dict[str, Any]:
    return await svc.acreate_api(payload)


@router.delete("/apis")
async def delete_api(
    rest_api_id: Optional[str] = Query(None, alias="restApiId"),
    svc: APIGatewayService = APIGW,
) -> dict[str, Any]:
    return await svc.adelete_api(rest_api_id)


@router.get("/apis/{api_id}")
async def get_api(api_id: str, svc: APIGatewayService = APIGW) -> dict[str, Any]:
    return await svc.aget_api(api_id)


@router.patch("/apis/{api_id}")
async def update_api(
    api_id: str, payload: dict = Body(default={}), svc: APIGatewayService = APIGW
) -> dict[str, Any]:
    return await svc.aupdate_api(api_id, payload.get("patchOperations"))


# --- Resources ---

@router.get("/resources")
async def list_resources(
    rest_api_id: Optional[str] = Query(None, alias="restApiId"),
    svc: APIGatewayService = APIGW,
) -> list[dict[str, Any]]:
    return await svc.alist_resources(rest_api_id)


@router.post("/resources")
async def create_resource(
    payload: dict = Body(default={}), svc: APIGatewayService = APIGW
) -> dict[str, Any]:
    return await svc.acreate_resource(
        payload.get("restApiId"), payload.get("parentId"), payload.get("pathPart")
    )


@router.delete("/resources")
async def delete_resource(
    rest_api_id: Optional[str] = Query(None, alias="restApiId"),
    resource_id: Optional[str] = Query(None, alias="resourceId"),
    svc: APIGatewayService = APIGW,
) -> dict[str, Any]:
    return await svc.adelete_resource(rest_api_id, resource_id)


# --- Deployments & stages ---

@router.get("/deployments")
async def list_deployments(
    rest_api_id: Optional[str] = Query(None, alias="restApiId"),
    kind: Optional[str] = Query(None, alias="type"),
    svc: APIGatewayService = APIGW,
) -> list[dict[str, Any]]:
    return await svc.alist_deployments(rest_api_id, kind)


@router.post("/deployments")
async def create_deployment(
    payload: dict = Body(default={}), svc: APIGatewayService = APIGW
) -> dict[str, Any]:
    return await svc.acreate_deployment(payload)


@router.delete("/deployments")
async def delete_stage(
    rest_api_id: Optional[str] = Query(None, alias="restApiId"),
    stage_name: Optional[str] = Query(None, alias="stageName"),
    svc: APIGatewayService = APIGW,
) -> dict[str, Any]:
    return await svc.adelete_stage(rest_api_id, stage_name)
