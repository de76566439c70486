"""EventBridge proxy: event buses, rules and targets."""

from __future__ import annotations

from typing import Any

from stackview.base.exceptions import InvalidRequestError
from stackview.base.reshape import pascal_keys, reshape, reshape_all, tags_in
from stackview.base.service import ProxyService
from stackview.base.validation import as_json_text, compact, is_missing, require, split_csv

DEFAULT_BUS = "default"

BUS_FIELDS = {
    "name": "Name",
    "arn": "Arn",
    "description": "Description",
    "creationTime": "CreationTime",
    "lastModifiedTime": "LastModifiedTime",
}

RULE_FIELDS = {
    "name": "Name",
    "arn": "Arn",
    "eventPattern": "EventPattern",
    "state": "State",
    "description": "Description",
    "scheduleExpression": "ScheduleExpression",
    "roleArn": "RoleArn",
    "managedBy": "ManagedBy",
    "eventBusName": "EventBusName",
    "createdBy": "CreatedBy",
}

TARGET_FIELDS = {
    "id": "Id",
    "arn": "Arn",
    "roleArn": "RoleArn",
    "input": "Input",
    "inputPath": "InputPath",
    "inputTransformer": "InputTransformer",
    "kinesisParameters": "KinesisParameters",
    "runCommandParameters": "RunCommandParameters",
    "ecsParameters": "EcsParameters",
    "batchParameters": "BatchParameters",
    "sqsParameters": "SqsParameters",
    "httpParameters": "HttpParameters",
    "redshiftDataParameters": "RedshiftDataParameters",
    "sageMakerPipelineParameters": "SageMakerPipelineParameters",
    "deadLetterConfig": "DeadLetterConfig",
    "retryPolicy": "RetryPolicy",
}


class EventBridgeService(ProxyService):
    """Event buses, rules and rule targets."""

    service_id = "eventbridge"
    client_attr = "events"

    # --- Event buses ---

    def list_buses(self) -> list[dict[str, Any]]:
        resp = self._call("list_event_buses")
        return reshape_all(resp.get("EventBuses"), BUS_FIELDS)

    def create_bus(
        self,
        name: str | None,
        description: str | None = None,
        tags: Any = None,
    ) -> dict[str, Any]:
        require("Event bus name is required", name)
        resp = self._call(
            "create_event_bus",
            **compact(Name=name, Description=description or None, Tags=tags_in(tags)),
        )
        return compact(arn=resp.get("EventBusArn"), name=name, description=description)

    def delete_bus(self, name: str | None) -> dict[str, Any]:
        require("Event bus name is required", name)
        self._call("delete_event_bus", Name=name)
        return {"success": True}

    # --- Rules ---

    def list_rules(
        self, event_bus_name: str | None = None, name_prefix: str | None = None
    ) -> list[dict[str, Any]]:
        resp = self._call(
            "list_rules",
            **compact(EventBusName=event_bus_name or DEFAULT_BUS, NamePrefix=name_prefix or None),
        )
        return reshape_all(resp.get("Rules"), RULE_FIELDS)

    def put_rule(
        self,
        name: str | None,
        event_pattern: Any = None,
        schedule_expression: str | None = None,
        description: str | None = None,
        state: str | None = None,
        event_bus_name: str | None = None,
        role_arn: str | None = None,
        tags: Any = None,
    ) -> dict[str, Any]:
        """Create or update a rule; it needs an event pattern or a schedule."""
        require("Rule name is required", name)
        if is_missing(event_pattern) and is_missing(schedule_expression):
            raise InvalidRequestError("Either eventPattern or scheduleExpression must be provided")
        resp = self._call(
            "put_rule",
            **compact(
                Name=name,
                EventPattern=as_json_text(event_pattern) if event_pattern else None,
                ScheduleExpression=schedule_expression or None,
                Description=description or None,
                State=state or "ENABLED",
                EventBusName=event_bus_name or DEFAULT_BUS,
                RoleArn=role_arn or None,
                Tags=tags_in(tags),
            ),
        )
        return {"ruleArn": resp.get("RuleArn")}

    def set_rule_state(
        self, name: str | None, action: str | None, event_bus_name: str | None = None
    ) -> dict[str, Any]:
        require("Rule name is required", name)
        if action not in ("enable", "disable"):
            raise InvalidRequestError('Invalid action. Use "enable" or "disable"')
        operation = "enable_rule" if action == "enable" else "disable_rule"
        self._call(operation, Name=name, EventBusName=event_bus_name or DEFAULT_BUS)
        return {"success": True, "action": f"{action}d"}

    def delete_rule(self, name: str | None, event_bus_name: str | None = None) -> dict[str, Any]:
        require("Rule name is required", name)
        self._call("delete_rule", Name=name, EventBusName=event_bus_name or DEFAULT_BUS)
        return {"success": True}

    def describe_rule(self, name: str, event_bus_name: str | None = None) -> dict[str, Any]:
        resp = self._call("describe_rule", Name=name, EventBusName=event_bus_name or DEFAULT_BUS)
        return reshape(resp, RULE_FIELDS)

    # --- Targets ---

    def list_targets(self, rule: str | None, event_bus_name: str | None = None) -> list[dict[str, Any]]:
        require("Rule name is required", rule)
        resp = self._call(
            "list_targets_by_rule", Rule=rule, EventBusName=event_bus_name or DEFAULT_BUS
        )
        return reshape_all(resp.get("Targets"), TARGET_FIELDS)

    def put_targets(
        self, rule: str | None, targets: Any, event_bus_name: str | None = None
    ) -> dict[str, Any]:
        if is_missing(rule) or not isinstance(targets, list):
            raise InvalidRequestError("Rule name and targets array are required")
        resp = self._call(
            "put_targets",
            Rule=rule,
            EventBusName=event_bus_name or DEFAULT_BUS,
            Targets=[compact(**pascal_keys(target, deep=False)) for target in targets],
        )
        return {
            "failedEntryCount": resp.get("FailedEntryCount"),
            "failedEntries": resp.get("FailedEntries"),
        }

    def remove_targets(
        self, rule: str | None, ids: str | None, event_bus_name: str | None = None
    ) -> dict[str, Any]:
        require("Rule name and target IDs are required", rule, ids)
        resp = self._call(
            "remove_targets",
            Rule=rule,
            EventBusName=event_bus_name or DEFAULT_BUS,
            Ids=split_csv(ids),
        )
        return {
            "failedEntryCount": resp.get("FailedEntryCount"),
            "failedEntries": resp.get("FailedEntries"),
        }
