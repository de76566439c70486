"""EventBridge Scheduler proxy: schedule groups and schedules."""

from __future__ import annotations

from typing import Any

from stackview.base.reshape import pascal_keys, reshape, reshape_all, tags_in
from stackview.base.service import ProxyService
from stackview.base.validation import as_datetime, compact, require

DEFAULT_GROUP = "default"
MAX_RESULTS = 100

GROUP_FIELDS = {
    "arn": "Arn",
    "name": "Name",
    "state": "State",
    "creationDate": "CreationDate",
    "lastModificationDate": "LastModificationDate",
}

SCHEDULE_SUMMARY_FIELDS = {
    "arn": "Arn",
    "name": "Name",
    "groupName": "GroupName",
    "state": "State",
    "creationDate": "CreationDate",
    "lastModificationDate": "LastModificationDate",
    "target": "Target",
}

SCHEDULE_DETAIL_FIELDS = {
    **SCHEDULE_SUMMARY_FIELDS,
    "description": "Description",
    "scheduleExpression": "ScheduleExpression",
    "scheduleExpressionTimezone": "ScheduleExpressionTimezone",
    "startDate": "StartDate",
    "endDate": "EndDate",
    "flexibleTimeWindow": "FlexibleTimeWindow",
    "kmsKeyArn": "KmsKeyArn",
    "actionAfterCompletion": "ActionAfterCompletion",
}

_TARGET_KEYS = (
    "arn",
    "roleArn",
    "input",
    "retryPolicy",
    "deadLetterConfig",
    "kinesisParameters",
    "eventBridgeParameters",
    "sqsParameters",
)


def _target_in(target: dict[str, Any] | None) -> dict[str, Any] | None:
    if not target:
        return None
    picked = {key: target.get(key) for key in _TARGET_KEYS}
    return compact(**pascal_keys(picked, deep=False))


class SchedulerService(ProxyService):
    """Schedule groups and the schedules inside them."""

    service_id = "scheduler"
    client_attr = "scheduler"

    # --- Groups ---

    def list_groups(self) -> list[dict[str, Any]]:
        resp = self._call("list_schedule_groups", MaxResults=MAX_RESULTS)
        return reshape_all(resp.get("ScheduleGroups"), GROUP_FIELDS)

    def create_group(self, name: str | None, tags: Any = None) -> dict[str, Any]:
        require("Group name is required", name)
        resp = self._call("create_schedule_group", **compact(Name=name, Tags=tags_in(tags)))
        return {"scheduleGroupArn": resp.get("ScheduleGroupArn")}

    def delete_group(self, name: str | None) -> dict[str, Any]:
        require("Group name is required", name)
        self._call("delete_schedule_group", Name=name)
        return {"success": True}

    # --- Schedules ---

    def list_schedules(
        self, group_name: str | None = None, name_prefix: str | None = None
    ) -> list[dict[str, Any]]:
        resp = self._call(
            "list_schedules",
            **compact(
                GroupName=group_name or DEFAULT_GROUP,
                NamePrefix=name_prefix or None,
                MaxResults=MAX_RESULTS,
            ),
        )
        return reshape_all(resp.get("Schedules"), SCHEDULE_SUMMARY_FIELDS)

    def _schedule_params(self, body: dict[str, Any]) -> dict[str, Any]:
        return compact(
            Name=body.get("name"),
            GroupName=body.get("groupName") or DEFAULT_GROUP,
            Description=body.get("description"),
            ScheduleExpression=body.get("scheduleExpression"),
            ScheduleExpressionTimezone=body.get("scheduleExpressionTimezone"),
            StartDate=as_datetime(body.get("startDate")),
            EndDate=as_datetime(body.get("endDate")),
            State=body.get("state"),
            Target=_target_in(body.get("target")),
            FlexibleTimeWindow=body.get("flexibleTimeWindow"),
            KmsKeyArn=body.get("kmsKeyArn"),
            ActionAfterCompletion=body.get("actionAfterCompletion"),
        )

    def create_schedule(self, body: dict[str, Any]) -> dict[str, Any]:
        """Create a schedule; state defaults to ENABLED, flexible window to OFF."""
        require(
            "Name, schedule expression, and target are required",
            body.get("name"),
            body.get("scheduleExpression"),
            body.get("target"),
        )
        params = self._schedule_params(body)
        params.setdefault("State", "ENABLED")
        params.setdefault("FlexibleTimeWindow", {"Mode": "OFF"})
        resp = self._call("create_schedule", **params)
        return {"scheduleArn": resp.get("ScheduleArn")}

    def update_schedule(self, body: dict[str, Any]) -> dict[str, Any]:
        require("Schedule name is required", body.get("name"))
        self._call("update_schedule", **self._schedule_params(body))
        return {"success": True}

    def delete_schedule(self, name: str | None, group_name: str | None = None) -> dict[str, Any]:
        require("Schedule name is required", name)
        self._call("delete_schedule", Name=name, GroupName=group_name or DEFAULT_GROUP)
        return {"success": True}

    def get_schedule(self, name: str, group_name: str | None = None) -> dict[str, Any]:
        resp = self._call("get_schedule", Name=name, GroupName=group_name or DEFAULT_GROUP)
        return reshape(resp, SCHEDULE_DETAIL_FIELDS)
