"""SQS routes: queues and messages."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from stackview.api.deps import service
from stackview.aws.sqs import SQSService

router = APIRouter()

SQS = Depends(service(SQSService))


@router.get("/queues")
async def list_queues(svc: SQSService = SQS) -> dict[str, Any]:
    return await svc.alist_queues()


@router.post("/queues")
async def create_queue(payload: dict = Body(default={}), svc: SQSService = SQS) -> dict[str, Any]:
    return await svc.acreate_queue(payload.get("queueName"), payload.get("attributes"))


@router.delete("/queues")
async def delete_queue(
    queue_url: Optional[str] = Query(None, alias="queueUrl"),
    svc: SQSService = SQS,
) -> dict[str, Any]:
    return await svc.adelete_queue(queue_url)


@router.get("/queues/attributes")
async def queue_attributes(
    queue_url: Optional[str] = Query(None, alias="queueUrl"),
    svc: SQSService = SQS,
) -> dict[str, Any]:
    return await svc.aget_queue_attributes(queue_url)


@router.post("/queues/purge")
async def purge_queue(payload: dict = Body(default={}), svc: SQSService = SQS) -> dict[str, Any]:
    return await svc.apurge_queue(payload.get("queueUrl"))


@router.get("/messages")
async def receive_messages(
    queue_url: Optional[str] = Query(None, alias="queueUrl"),
    svc: SQSService = SQS,
) -> dict[str, Any]:
    return await svc.areceive_messages(queue_url)


@router.post("/messages")
async def send_message(payload: dict = Body(default={}), svc: SQSService = SQS) -> dict[str, Any]:
    return await svc.asend_message(
        payload.get("queueUrl"),
        payload.get("messageBody"),
        payload.get("messageAttributes"),
        payload.get("delaySeconds"),
    )


@router.delete("/messages")
async def delete_message(
    queue_url: Optional[str] = Query(None, alias="queueUrl"),
    receipt_handle: Optional[str] = Query(None, alias="receiptHandle"),
    svc: SQSService = SQS,
) -> dict[str, Any]:
    return await svc.adelete_message(queue_url, receipt_handle)
