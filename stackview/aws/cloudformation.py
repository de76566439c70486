"""CloudFormation proxy: stacks, stack resources and stack events."""

from __future__ import annotations

from typing import Any

from stackview.base.exceptions import InvalidRequestError, ResourceNotFoundError
from stackview.base.reshape import pairs_to_tags, pascal_keys, reshape, reshape_all
from stackview.base.service import ProxyService
from stackview.base.validation import as_bool, compact, is_missing, require, split_csv

STACK_SUMMARY_FIELDS = {
    "stackId": "StackId",
    "stackName": "StackName",
    "templateDescription": "TemplateDescription",
    "creationTime": "CreationTime",
    "lastUpdatedTime": "LastUpdatedTime",
    "deletionTime": "DeletionTime",
    "stackStatus": "StackStatus",
    "stackStatusReason": "StackStatusReason",
    "parentId": "ParentId",
    "rootId": "RootId",
    "driftInformation": "DriftInformation",
}

STACK_DETAIL_FIELDS = {
    "stackId": "StackId",
    "stackName": "StackName",
    "changeSetId": "ChangeSetId",
    "description": "Description",
    "parameters": "Parameters",
    "creationTime": "CreationTime",
    "deletionTime": "DeletionTime",
    "lastUpdatedTime": "LastUpdatedTime",
    "rollbackConfiguration": "RollbackConfiguration",
    "stackStatus": "StackStatus",
    "stackStatusReason": "StackStatusReason",
    "disableRollback": "DisableRollback",
    "notificationARNs": "NotificationARNs",
    "timeoutInMinutes": "TimeoutInMinutes",
    "capabilities": "Capabilities",
    "outputs": "Outputs",
    "roleARN": "RoleARN",
    "tags": "Tags",
    "enableTerminationProtection": "EnableTerminationProtection",
    "parentId": "ParentId",
    "rootId": "RootId",
    "driftInformation": "DriftInformation",
    "retainExceptOnCreate": "RetainExceptOnCreate",
}

RESOURCE_FIELDS = {
    "stackName": "StackName",
    "stackId": "StackId",
    "logicalResourceId": "LogicalResourceId",
    "physicalResourceId": "PhysicalResourceId",
    "resourceType": "ResourceType",
    "timestamp": "Timestamp",
    "resourceStatus": "ResourceStatus",
    "resourceStatusReason": "ResourceStatusReason",
    "description": "Description",
    "driftInformation": "DriftInformation",
    "moduleInfo": "ModuleInfo",
}

RESOURCE_SUMMARY_FIELDS = {
    "logicalResourceId": "LogicalResourceId",
    "physicalResourceId": "PhysicalResourceId",
    "resourceType": "ResourceType",
    "timestamp": "LastUpdatedTimestamp",
    "resourceStatus": "ResourceStatus",
    "resourceStatusReason": "ResourceStatusReason",
    "driftInformation": "DriftInformation",
    "moduleInfo": "ModuleInfo",
}

EVENT_FIELDS = {
    "stackId": "StackId",
    "eventId": "EventId",
    "stackName": "StackName",
    "logicalResourceId": "LogicalResourceId",
    "physicalResourceId": "PhysicalResourceId",
    "resourceType": "ResourceType",
    "timestamp": "Timestamp",
    "resourceStatus": "ResourceStatus",
    "resourceStatusReason": "ResourceStatusReason",
    "resourceProperties": "ResourceProperties",
    "clientRequestToken": "ClientRequestToken",
    "hookType": "HookType",
    "hookStatus": "HookStatus",
    "hookStatusReason": "HookStatusReason",
    "hookInvocationPoint": "HookInvocationPoint",
    "hookFailureMode": "HookFailureMode",
}

# Body keys forwarded verbatim (renamed to PascalCase) on create / update.
_CREATE_KEYS = (
    "stackName",
    "templateBody",
    "templateURL",
    "disableRollback",
    "rollbackConfiguration",
    "timeoutInMinutes",
    "notificationARNs",
    "capabilities",
    "resourceTypes",
    "roleARN",
    "onFailure",
    "stackPolicyBody",
    "stackPolicyURL",
    "clientRequestToken",
    "enableTerminationProtection",
    "retainExceptOnCreate",
)

_UPDATE_KEYS = (
    "stackName",
    "templateBody",
    "templateURL",
    "usePreviousTemplate",
    "stackPolicyDuringUpdateBody",
    "stackPolicyDuringUpdateURL",
    "capabilities",
    "resourceTypes",
    "roleARN",
    "rollbackConfiguration",
    "stackPolicyBody",
    "stackPolicyURL",
    "notificationARNs",
    "disableRollback",
    "clientRequestToken",
)


def _stack_params(body: dict[str, Any], keys: tuple[str, ...]) -> dict[str, Any]:
    params = compact(**pascal_keys({key: body.get(key) for key in keys}, deep=False))
    parameters = body.get("parameters")
    if parameters:
        params["Parameters"] = [compact(**pascal_keys(p, deep=False)) for p in parameters]
    tags = body.get("tags")
    if tags:
        params["Tags"] = pairs_to_tags(tags)
    return params


class CloudFormationService(ProxyService):
    """Stack lifecycle plus read-only resource and event views."""

    service_id = "cloudformation"
    client_attr = "cloudformation"
    _ERROR_MAP = {"StackNotFoundException": ResourceNotFoundError}

    # --- Stacks ---

    def list_stacks(self) -> list[dict[str, Any]]:
        resp = self._call("list_stacks")
        return reshape_all(resp.get("StackSummaries"), STACK_SUMMARY_FIELDS)

    def create_stack(self, body: dict[str, Any]) -> dict[str, Any]:
        if is_missing(body.get("stackName")) or (
            is_missing(body.get("templateBody")) and is_missing(body.get("templateURL"))
        ):
            raise InvalidRequestError("Stack name and template (body or URL) are required")
        resp = self._call("create_stack", **_stack_params(body, _CREATE_KEYS))
        return {"stackId": resp.get("StackId")}

    def update_stack(self, body: dict[str, Any]) -> dict[str, Any]:
        require("Stack name is required", body.get("stackName"))
        resp = self._call("update_stack", **_stack_params(body, _UPDATE_KEYS))
        return {"stackId": resp.get("StackId")}

    def delete_stack(
        self,
        stack_name: str | None,
        retain_resources: str | None = None,
        role_arn: str | None = None,
        client_request_token: str | None = None,
    ) -> dict[str, Any]:
        require("Stack name is required", stack_name)
        self._call(
            "delete_stack",
            **compact(
                StackName=stack_name,
                RetainResources=split_csv(retain_resources) or None,
                RoleARN=role_arn or None,
                ClientRequestToken=client_request_token or None,
            ),
        )
        return {"success": True}

    def describe_stack(self, stack_name: str, template: Any = False) -> dict[str, Any]:
        """Describe a stack, or return its processed template when asked."""
        if as_bool(template):
            resp = self._call("get_template", StackName=stack_name, TemplateStage="Processed")
            return {
                "templateBody": resp.get("TemplateBody"),
                "stagesAvailable": resp.get("StagesAvailable"),
            }
        resp = self._call("describe_stacks", not_found=True, StackName=stack_name)
        stacks = resp.get("Stacks") or []
        if not stacks:
            raise ResourceNotFoundError("Stack not found")
        return reshape(stacks[0], STACK_DETAIL_FIELDS)

    # --- Resources & events ---

    def list_resources(
        self, stack_name: str | None, logical_resource_id: str | None = None
    ) -> list[dict[str, Any]]:
        require("Stack name is required", stack_name)
        if logical_resource_id:
            resp = self._call(
                "describe_stack_resources",
                StackName=stack_name,
                LogicalResourceId=logical_resource_id,
            )
            return reshape_all(resp.get("StackResources"), RESOURCE_FIELDS)
        resp = self._call("list_stack_resources", StackName=stack_name)
        return reshape_all(resp.get("StackResourceSummaries"), RESOURCE_SUMMARY_FIELDS)

    def list_events(self, stack_name: str | None) -> list[dict[str, Any]]:
        require("Stack name is required", stack_name)
        resp = self._call("describe_stack_events", StackName=stack_name)
        return reshape_all(resp.get("StackEvents"), EVENT_FIELDS)
