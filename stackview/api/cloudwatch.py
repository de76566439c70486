"""CloudWatch routes: alarms, metrics and log groups.

Log groups live under the CloudWatch prefix but are served by
:class:`~stackview.aws.logs.LogsService`.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from stackview.api.deps import service
from stackview.aws.cloudwatch import CloudWatchService
from stackview.aws.logs import LogsService
from stackview.base.validation import as_bool

router = APIRouter()

CLOUDWATCH = Depends(service(CloudWatchService))
LOGS = Depends(service(LogsService))


# --- Alarms ---

@router.get("/alarms")
async def list_alarms(
    alarm_names: Optional[list[str]] = Query(None, alias="alarmNames"),
    alarm_name_prefix: Optional[str] = Query(None, alias="alarmNamePrefix"),
    state_value: Optional[str] = Query(None, alias="stateValue"),
    action_prefix: Optional[str] = Query(None, alias="actionPrefix"),
    max_records: Optional[str] = Query(None, alias="maxRecords"),
    next_token: Optional[str] = Query(None, alias="nextToken"),
    svc: CloudWatchService = CLOUDWATCH,
) -> dict[str, Any]:
    return await svc.alist_alarms(
        alarm_names, alarm_name_prefix, state_value, action_prefix, max_records, next_token
    )


@router.post("/alarms")
async def put_alarm(
    payload: dict = Body(default={}), svc: CloudWatchService = CLOUDWATCH
) -> dict[str, Any]:
    return await svc.aput_alarm(payload)


@router.get("/alarms/{name}")
async def get_alarm(name: str, svc: CloudWatchService = CLOUDWATCH) -> dict[str, Any]:
    return await svc.aget_alarm(name)


@router.put("/alarms/{name}")
async def update_alarm(
    name: str, payload: dict = Body(default={}), svc: CloudWatchService = CLOUDWATCH
) -> dict[str, Any]:
    return await svc.aupdate_alarm(
        name,
        payload.get("action"),
        payload.get("stateValue"),
        payload.get("stateReason"),
        payload.get("stateReasonData"),
    )


@router.delete("/alarms/{name}")
async def delete_alarm(name: str, svc: CloudWatchService = CLOUDWATCH) -> dict[str, Any]:
    return await svc.adelete_alarm(name)


@router.get("/alarms/{name}/history")
async def alarm_history(
    name: str,
    history_item_type: Optional[str] = Query(None, alias="historyItemType"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    max_records: Optional[str] = Query(None, alias="maxRecords"),
    next_token: Optional[str] = Query(None, alias="nextToken"),
    scan_by: Optional[str] = Query(None, alias="scanBy"),
    svc: CloudWatchService = CLOUDWATCH,
) -> dict[str, Any]:
    return await svc.aalarm_history(
        name, history_item_type, start_date, end_date, max_records, next_token, scan_by
    )


# --- Metrics ---

@router.get("/metrics")
async def list_metrics(
    namespace: Optional[str] = None,
    metric_name: Optional[str] = Query(None, alias="metricName"),
    dimensions: Optional[str] = None,
    next_token: Optional[str] = Query(None, alias="nextToken"),
    recently_active: Optional[str] = Query(None, alias="recentlyActive"),
    svc: CloudWatchService = CLOUDWATCH,
) -> dict[str, Any]:
    return await svc.alist_metrics(
        namespace, metric_name, dimensions, next_token, as_bool(recently_active)
    )


@router.post("/metrics")
async def put_metric_data(
    payload: dict = Body(default={}), svc: CloudWatchService = CLOUDWATCH
) -> dict[str, Any]:
    return await svc.aput_metric_data(payload.get("namespace"), payload.get("metricData"))


@router.get("/metrics/statistics")
async def get_metric_statistics(
    namespace: Optional[str] = None,
    metric_name: Optional[str] = Query(None, alias="metricName"),
    start_time: Optional[str] = Query(None, alias="startTime"),
    end_time: Optional[str] = Query(None, alias="endTime"),
    period: Optional[str] = None,
    statistics: Optional[list[str]] = Query(None),
    unit: Optional[str] = None,
    dimensions: Optional[str] = None,
    svc: CloudWatchService = CLOUDWATCH,
) -> dict[str, Any]:
    return await svc.aget_metric_statistics(
        namespace, metric_name, start_time, end_time, period, statistics, unit, dimensions
    )


@router.post("/metrics/statistics")
async def get_metric_data(
    payload: dict = Body(default={}), svc: CloudWatchService = CLOUDWATCH
) -> dict[str, Any]:
    return await svc.aget_metric_data(
        payload.get("metricDataQueries"),
        payload.get("startTime"),
        payload.get("endTime"),
        payload.get("nextToken"),
        payload.get("scanBy"),
        payload.get("maxDatapoints"),
    )


# --- Log groups ---

@router.get("/log-groups")
async def list_log_groups(
    prefix: Optional[str] = None,
    next_token: Optional[str] = Query(None, alias="nextToken"),
    limit: Optional[str] = None,
    svc: LogsService = LOGS,
) -> dict[str, Any]:
    return await svc.alist_log_groups(prefix, next_token, limit)


@router.post("/log-groups")
async def create_log_group(payload: dict = Body(default={}), svc: LogsService = LOGS) -> dict[str, Any]:
    return await svc.acreate_log_group(
        payload.get("logGroupName"),
        payload.get("kmsKeyId"),
        payload.get("tags"),
        payload.get("retentionInDays"),
    )


@router.get("/log-groups/{name:path}/streams/{stream_name}/events")
async def get_log_events(
    name: str,
    stream_name: str,
    start_time: Optional[str] = Query(None, alias="startTime"),
    end_time: Optional[str] = Query(None, alias="endTime"),
    next_token: Optional[str] = Query(None, alias="nextToken"),
    limit: Optional[str] = None,
    start_from_head: Optional[str] = Query(None, alias="startFromHead"),
    svc: LogsService = LOGS,
) -> dict[str, Any]:
    return await svc.aget_log_events(
        name, stream_name, start_time, end_time, next_token, limit, as_bool(start_from_head)
    )


@router.post("/log-groups/{name:path}/streams/{stream_name}/events")
async def put_log_events(
    name: str, stream_name: str, payload: dict = Body(default={}), svc: LogsService = LOGS
) -> dict[str, Any]:
    return await svc.aput_log_events(
        name, stream_name, payload.get("events"), payload.get("sequenceToken")
    )


@router.delete("/log-groups/{name:path}/streams/{stream_name}")
async def delete_log_stream(name: str, stream_name: str, svc: LogsService = LOGS) -> dict[str, Any]:
    return await svc.adelete_log_stream(name, stream_name)


@router.get("/log-groups/{name:path}/streams")
async def list_log_streams(
    name: str,
    prefix: Optional[str] = None,
    next_token: Optional[str] = Query(None, alias="nextToken"),
    limit: Optional[str] = None,
    order_by: Optional[str] = Query(None, alias="orderBy"),
    descending: Optional[str] = None,
    svc: LogsService = LOGS,
) -> dict[str, Any]:
    return await svc.alist_log_streams(
        name, prefix, next_token, limit, order_by, as_bool(descending)
    )


@router.post("/log-groups/{name:path}/streams")
async def create_log_stream(
    name: str, payload: dict = Body(default={}), svc: LogsService = LOGS
) -> dict[str, Any]:
    return await svc.acreate_log_stream(name, payload.get("logStreamName"))


@router.get("/log-groups/{name:path}")
async def get_log_group(name: str, svc: LogsService = LOGS) -> dict[str, Any]:
    return await svc.aget_log_group(name)


@router.put("/log-groups/{name:path}")
async def update_log_group(
    name: str, payload: dict = Body(default={}), svc: LogsService = LOGS
) -> dict[str, Any]:
    return await svc.aupdate_log_group(name, payload.get("retentionInDays"))


@router.delete("/log-groups/{name:path}")
async def delete_log_group(name: str, svc: LogsService = LOGS) -> dict[str, Any]:
    return await svc.adelete_log_group(name)
