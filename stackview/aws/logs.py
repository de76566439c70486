"""CloudWatch Logs proxy: log groups, streams and events."""

from __future__ import annotations

import time
from typing import Any

from stackview.base.exceptions import InvalidRequestError, ResourceNotFoundError
from stackview.base.service import ProxyService
from stackview.base.validation import as_int, compact, require


class LogsService(ProxyService):
    """Log group/stream management and event reads/writes.

    CloudWatch Logs already uses camelCase field names, so responses pass
    through without reshaping.
    """

    service_id = "logs"
    client_attr = "logs"
    _ERROR_MAP = {"ResourceNotFoundException": ResourceNotFoundError}

    # --- Log groups ---

    def list_log_groups(
        self, prefix: str | None = None, next_token: str | None = None, limit: Any = None
    ) -> dict[str, Any]:
        resp = self._call(
            "describe_log_groups",
            **compact(
                logGroupNamePrefix=prefix or None,
                nextToken=next_token or None,
                limit=as_int(limit, 50),
            ),
        )
        return {"logGroups": resp.get("logGroups") or [], "nextToken": resp.get("nextToken")}

    def create_log_group(
        self,
        log_group_name: str | None,
        kms_key_id: str | None = None,
        tags: dict[str, str] | None = None,
        retention_in_days: Any = None,
    ) -> dict[str, Any]:
        """Create a log group and, if requested, set its retention policy."""
        require("Log group name is required", log_group_name)
        self._call(
            "create_log_group",
            **compact(logGroupName=log_group_name, kmsKeyId=kms_key_id or None, tags=tags or None),
        )
        retention = as_int(retention_in_days)
        if retention:
            self._call("put_retention_policy", logGroupName=log_group_name, retentionInDays=retention)
        return {"message": "Log group created successfully", "logGroupName": log_group_name}

    def get_log_group(self, log_group_name: str) -> dict[str, Any]:
        # The prefix match may return siblings; only an exact name counts.
        resp = self._call(
            "describe_log_groups", not_found=True, logGroupNamePrefix=log_group_name, limit=1
        )
        for group in resp.get("logGroups") or []:
            if group.get("logGroupName") == log_group_name:
                return group
        raise ResourceNotFoundError("Log group not found")

    def update_log_group(self, log_group_name: str, retention_in_days: Any = None) -> dict[str, Any]:
        retention = as_int(retention_in_days)
        if retention is not None:
            self._call("put_retention_policy", logGroupName=log_group_name, retentionInDays=retention)
        return {"message": "Log group updated successfully", "logGroupName": log_group_name}

    def delete_log_group(self, log_group_name: str) -> dict[str, Any]:
        self._call("delete_log_group", logGroupName=log_group_name)
        return {"message": "Log group deleted successfully", "logGroupName": log_group_name}

    # --- Log streams ---

    def list_log_streams(
        self,
        log_group_name: str,
        prefix: str | None = None,
        next_token: str | None = None,
        limit: Any = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> dict[str, Any]:
        resp = self._call(
            "describe_log_streams",
            **compact(
                logGroupName=log_group_name,
                logStreamNamePrefix=prefix or None,
                nextToken=next_token or None,
                limit=as_int(limit, 50),
                orderBy=order_by or None,
                descending=descending,
            ),
        )
        return {"logStreams": resp.get("logStreams") or [], "nextToken": resp.get("nextToken")}

    def create_log_stream(self, log_group_name: str, log_stream_name: str | None) -> dict[str, Any]:
        require("Log stream name is required", log_stream_name)
        self._call("create_log_stream", logGroupName=log_group_name, logStreamName=log_stream_name)
        return {
            "message": "Log stream created successfully",
            "logGroupName": log_group_name,
            "logStreamName": log_stream_name,
        }

    def delete_log_stream(self, log_group_name: str, log_stream_name: str) -> dict[str, Any]:
        self._call("delete_log_stream", logGroupName=log_group_name, logStreamName=log_stream_name)
        return {
            "message": "Log stream deleted successfully",
            "logGroupName": log_group_name,
            "logStreamName": log_stream_name,
        }

    # --- Log events ---

    def get_log_events(
        self,
        log_group_name: str,
        log_stream_name: str,
        start_time: Any = None,
        end_time: Any = None,
        next_token: str | None = None,
        limit: Any = None,
        start_from_head: bool = False,
    ) -> dict[str, Any]:
        resp = self._call(
            "get_log_events",
            **compact(
                logGroupName=log_group_name,
                logStreamName=log_stream_name,
                startTime=as_int(start_time),
                endTime=as_int(end_time),
                nextToken=next_token or None,
                limit=as_int(limit, 100),
                startFromHead=start_from_head,
            ),
        )
        return {
            "events": resp.get("events") or [],
            "nextForwardToken": resp.get("nextForwardToken"),
            "nextBackwardToken": resp.get("nextBackwardToken"),
        }

    def put_log_events(
        self,
        log_group_name: str,
        log_stream_name: str,
        events: Any,
        sequence_token: str | None = None,
    ) -> dict[str, Any]:
        """Append events; events without a timestamp are stamped with "now"."""
        if not isinstance(events, list) or not events:
            raise InvalidRequestError("Events array is required")
        now_ms = int(time.time() * 1000)
        log_events = [
            {"timestamp": event.get("timestamp") or now_ms, "message": event.get("message")}
            for event in events
        ]
        resp = self._call(
            "put_log_events",
            **compact(
                logGroupName=log_group_name,
                logStreamName=log_stream_name,
                logEvents=log_events,
                sequenceToken=sequence_token or None,
            ),
        )
        return {
            "message": "Log events added successfully",
            "nextSequenceToken": resp.get("nextSequenceToken"),
            "rejectedLogEventsInfo": resp.get("rejectedLogEventsInfo"),
        }
