"""Secrets Manager routes: secrets and secret versions."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from stackview.api.deps import service
from stackview.aws.secrets_manager import SecretsManagerService
from stackview.base.validation import as_bool

router = APIRouter()

SECRETS = Depends(service(SecretsManagerService))


@router.get("/secrets")
async def list_or_describe_secret(
    secret_id: Optional[str] = Query(None, alias="secretId"),
    include_value: Optional[str] = Query(None, alias="includeValue"),
    svc: SecretsManagerService = SECRETS,
) -> dict[str, Any]:
    """List every secret, or describe one when ``secretId`` is given."""
    if secret_id:
        return await svc.adescribe_secret(secret_id, as_bool(include_value))
    return await svc.alist_secrets()


@router.post("/secrets")
async def create_secret(
    payload: dict = Body(default={}), svc: SecretsManagerService = SECRETS
) -> dict[str, Any]:
    return await svc.acreate_secret(
        payload.get("name"),
        payload.get("secretString"),
        payload.get("secretBinary"),
        payload.get("description"),
        payload.get("tags"),
    )


@router.put("/secrets")
async def put_secret_value(
    payload: dict = Body(default={}), svc: SecretsManagerService = SECRETS
) -> dict[str, Any]:
    return await svc.aput_secret_value(
        payload.get("secretId"), payload.get("secretString"), payload.get("secretBinary")
    )


@router.delete("/secrets")
async def delete_secret(
    secret_id: Optional[str] = Query(None, alias="secretId"),
    force_delete: Optional[str] = Query(None, alias="forceDelete"),
    svc: SecretsManagerService = SECRETS,
) -> dict[str, Any]:
    return await svc.adelete_secret(secret_id, as_bool(force_delete))


@router.get("/versions")
async def list_or_get_version(
    secret_id: Optional[str] = Query(None, alias="secretId"),
    version_id: Optional[str] = Query(None, alias="versionId"),
    svc: SecretsManagerService = SECRETS,
) -> dict[str, Any]:
    if version_id:
        return await svc.aget_version(secret_id, version_id)
    return await svc.alist_versions(secret_id)
