"""S3 routes: buckets and objects."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, File, Form, Query, Response, UploadFile

from stackview.api.deps import service
from stackview.aws.s3 import S3Service

router = APIRouter()

S3 = Depends(service(S3Service))


@router.get("/buckets")
async def list_buckets(svc: S3Service = S3) -> dict[str, Any]:
    return await svc.alist_buckets()


@router.post("/buckets")
async def create_bucket(payload: dict = Body(default={}), svc: S3Service = S3) -> dict[str, Any]:
    return await svc.acreate_bucket(payload.get("bucketName"))


@router.delete("/buckets")
async def delete_bucket(
    bucket_name: Optional[str] = Query(None, alias="bucketName"),
    svc: S3Service = S3,
) -> dict[str, Any]:
    return await svc.adelete_bucket(bucket_name)


@router.get("/objects")
async def list_objects(
    bucket_name: Optional[str] = Query(None, alias="bucketName"),
    prefix: Optional[str] = None,
    continuation_token: Optional[str] = Query(None, alias="continuationToken"),
    svc: S3Service = S3,
) -> dict[str, Any]:
    return await svc.alist_objects(bucket_name, prefix, continuation_token)


@router.delete("/objects")
async def delete_objects(
    bucket_name: Optional[str] = Query(None, alias="bucketName"),
    keys: Optional[list[str]] = Query(None, alias="key"),
    svc: S3Service = S3,
) -> dict[str, Any]:
    return await svc.adelete_objects(bucket_name, keys)


@router.get("/objects/download")
async def download_object(
    bucket_name: Optional[str] = Query(None, alias="bucketName"),
    key: Optional[str] = None,
    svc: S3Service = S3,
) -> Response:
    obj = await svc.adownload_object(bucket_name, key)
    return Response(
        content=obj["body"],
        media_type=obj["contentType"],
        headers={"Content-Disposition": f'attachment; filename="{obj["filename"]}"'},
    )


@router.post("/objects/upload")
async def upload_object(
    file: Optional[UploadFile] = File(None),
    bucket_name: Optional[str] = Form(None, alias="bucketName"),
    key: Optional[str] = Form(None),
    svc: S3Service = S3,
) -> dict[str, Any]:
    data = await file.read() if file is not None else None
    content_type = file.content_type if file is not None else None
    return await svc.aupload_object(bucket_name, key, data, content_type)
