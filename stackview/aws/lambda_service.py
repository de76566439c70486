"""Lambda proxy: function listing and detail (read-only)."""

from __future__ import annotations

from typing import Any

from stackview.base.async_support import run_concurrently
from stackview.base.exceptions import ResourceNotFoundError
from stackview.base.reshape import reshape, reshape_all
from stackview.base.service import ProxyService

FUNCTION_FIELDS = {
    "functionName": "FunctionName",
    "functionArn": "FunctionArn",
    "runtime": "Runtime",
    "role": "Role",
    "handler": "Handler",
    "codeSize": "CodeSize",
    "description": "Description",
    "timeout": "Timeout",
    "memorySize": "MemorySize",
    "lastModified": "LastModified",
    "codeSha256": "CodeSha256",
    "version": "Version",
    "environment": "Environment",
    "state": "State",
    "stateReason": "StateReason",
    "stateReasonCode": "StateReasonCode",
    "vpcConfig": "VpcConfig",
    "layers": "Layers",
}

CODE_FIELDS = {"repositoryType": "RepositoryType", "location": "Location"}


def compose_function(configuration: dict[str, Any], function: dict[str, Any]) -> dict[str, Any]:
    """Merge the configuration and get-function responses into one view."""
    detail = reshape(configuration, FUNCTION_FIELDS)
    if function.get("Tags") is not None:
        detail["tags"] = function["Tags"]
    detail["code"] = reshape(function.get("Code"), CODE_FIELDS)
    if function.get("Configuration") is not None:
        detail["configuration"] = function["Configuration"]
    return detail


class LambdaService(ProxyService):
    """Read-only view of deployed Lambda functions."""

    service_id = "lambda"
    client_attr = "lambda_"
    _ERROR_MAP = {"ResourceNotFoundException": ResourceNotFoundError}

    def list_functions(self) -> dict[str, Any]:
        resp = self._call("list_functions")
        return {"functions": reshape_all(resp.get("Functions"), FUNCTION_FIELDS)}

    async def get_function(self, function_name: str) -> dict[str, Any]:
        """Fetch configuration and code location concurrently.

        Raises:
            ResourceNotFoundError: ``Function <name> not found``.
        """
        try:
            configuration, function = await run_concurrently(
                lambda: self._call(
                    "get_function_configuration", not_found=True, FunctionName=function_name
                ),
                lambda: self._call("get_function", not_found=True, FunctionName=function_name),
            )
        except ResourceNotFoundError as e:
            raise ResourceNotFoundError(f"Function {function_name} not found") from e
        return {"function": compose_function(configuration, function)}
