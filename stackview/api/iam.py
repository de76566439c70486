"""IAM routes: users, access keys, roles and managed policies."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from stackview.api.deps import service
from stackview.aws.iam import IAMService

router = APIRouter()

IAM = Depends(service(IAMService))


# --- Users ---

@router.get("/users")
async def list_users(svc: IAMService = IAM) -> list[dict[str, Any]]:
    return await svc.alist_users()


@router.post("/users", status_code=201)
async def create_user(payload: dict = Body(default={}), svc: IAMService = IAM) -> dict[str, Any]:
    return await svc.acreate_user(
        payload.get("userName"),
        path=payload.get("path"),
        tags=payload.get("tags"),
        permissions_boundary=payload.get("permissionsBoundary"),
    )


@router.get("/users/{user_name}")
async def get_user(user_name: str, svc: IAMService = IAM) -> dict[str, Any]:
    return await svc.aget_user(user_name)


@router.put("/users/{user_name}")
async def update_user(
    user_name: str, payload: dict = Body(default={}), svc: IAMService = IAM
) -> dict[str, Any]:
    return await svc.aupdate_user(user_name, payload.get("newUserName"), payload.get("newPath"))


@router.delete("/users/{user_name}")
async def delete_user(user_name: str, svc: IAMService = IAM) -> dict[str, Any]:
    return await svc.adelete_user(user_name)


# --- Access keys ---

@router.get("/users/{user_name}/access-keys")
async def list_access_keys(user_name: str, svc: IAMService = IAM) -> list[dict[str, Any]]:
    return await svc.alist_access_keys(user_name)


@router.post("/users/{user_name}/access-keys", status_code=201)
async def create_access_key(user_name: str, svc: IAMService = IAM) -> dict[str, Any]:
    return await svc.acreate_access_key(user_name)


@router.put("/users/{user_name}/access-keys")
async def update_access_key(
    user_name: str, payload: dict = Body(default={}), svc: IAMService = IAM
) -> dict[str, Any]:
    return await svc.aupdate_access_key(
        user_name, payload.get("accessKeyId"), payload.get("status")
    )


@router.delete("/users/{user_name}/access-keys")
async def delete_access_key(
    user_name: str,
    access_key_id: Optional[str] = Query(None, alias="accessKeyId"),
    svc: IAMService = IAM,
) -> dict[str, Any]:
    return await svc.adelete_access_key(user_name, access_key_id)


# --- Roles ---

@router.get("/roles")
async def list_roles(svc: IAMService = IAM) -> list[dict[str, Any]]:
    return await svc.alist_roles()


@router.post("/roles", status_code=201)
async def create_role(payload: dict = Body(default={}), svc: IAMService = IAM) -> dict[str, Any]:
    return await svc.acreate_role(
        payload.get("roleName"),
        payload.get("assumeRolePolicyDocument"),
        path=payload.get("path"),
        description=payload.get("description"),
        max_session_duration=payload.get("maxSessionDuration"),
        tags=payload.get("tags"),
        permissions_boundary=payload.get("permissionsBoundary"),
    )


@router.get("/roles/{role_name}")
async def get_role(role_name: str, svc: IAMService = IAM) -> dict[str, Any]:
    return await svc.aget_role(role_name)


@router.put("/roles/{role_name}")
async def update_role(
    role_name: str, payload: dict = Body(default={}), svc: IAMService = IAM
) -> dict[str, Any]:
    return await svc.aupdate_role(
        role_name,
        description=payload.get("description"),
        max_session_duration=payload.get("maxSessionDuration"),
        assume_role_policy_document=payload.get("assumeRolePolicyDocument"),
    )


@router.delete("/roles/{role_name}")
async def delete_role(role_name: str, svc: IAMService = IAM) -> dict[str, Any]:
    return await svc.adelete_role(role_name)


# --- Policies ---

@router.get("/policies")
async def list_policies(scope: Optional[str] = None, svc: IAMService = IAM) -> list[dict[str, Any]]:
    return await svc.alist_policies(scope)


@router.post("/policies", status_code=201)
async def create_policy(payload: dict = Body(default={}), svc: IAMService = IAM) -> dict[str, Any]:
    return await svc.acreate_policy(
        payload.get("policyName"),
        payload.get("policyDocument"),
        path=payload.get("path"),
        description=payload.get("description"),
        tags=payload.get("tags"),
    )


# Policy ARNs contain slashes, so the path parameter captures the rest of the path.
@router.get("/policies/{policy_arn:path}")
async def get_policy(policy_arn: str, svc: IAMService = IAM) -> dict[str, Any]:
    return await svc.aget_policy(policy_arn)


@router.put("/policies/{policy_arn:path}")
async def update_policy(
    policy_arn: str, payload: dict = Body(default={}), svc: IAMService = IAM
) -> dict[str, Any]:
    set_as_default = payload.get("setAsDefault")
    return await svc.aupdate_policy(
        policy_arn,
        payload.get("policyDocument"),
        True if set_as_default is None else bool(set_as_default),
    )


@router.delete("/policies/{policy_arn:path}")
async def delete_policy(policy_arn: str, svc: IAMService = IAM) -> dict[str, Any]:
    return await svc.adelete_policy(policy_arn)
