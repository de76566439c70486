"""API Gateway proxy: REST APIs, resources, deployments and stages.

The API Gateway SDK already speaks camelCase, so field tables here select
fields rather than rename them.
"""

from __future__ import annotations

from typing import Any

from stackview.base.exceptions import InvalidRequestError
from stackview.base.reshape import reshape, reshape_all
from stackview.base.service import ProxyService
from stackview.base.validation import compact, is_missing, require

LIMIT = 500


def _select(*names: str) -> dict[str, str]:
    return {name: name for name in names}


REST_API_FIELDS = _select(
    "id",
    "name",
    "description",
    "createdDate",
    "version",
    "warnings",
    "binaryMediaTypes",
    "minimumCompressionSize",
    "apiKeySource",
    "endpointConfiguration",
    "policy",
    "tags",
    "disableExecuteApiEndpoint",
    "rootResourceId",
)

RESOURCE_FIELDS = _select("id", "parentId", "pathPart", "path", "resourceMethods")

DEPLOYMENT_FIELDS = _select("id", "description", "createdDate", "apiSummary")

STAGE_FIELDS = _select(
    "deploymentId",
    "clientCertificateId",
    "stageName",
    "description",
    "cacheClusterEnabled",
    "cacheClusterSize",
    "cacheClusterStatus",
    "methodSettings",
    "variables",
    "documentationVersion",
    "accessLogSettings",
    "canarySettings",
    "tracingEnabled",
    "webAclArn",
    "tags",
    "createdDate",
    "lastUpdatedDate",
)

_CREATE_API_KEYS = (
    "description",
    "version",
    "cloneFrom",
    "binaryMediaTypes",
    "minimumCompressionSize",
    "apiKeySource",
    "endpointConfiguration",
    "policy",
    "tags",
    "disableExecuteApiEndpoint",
)


class APIGatewayService(ProxyService):
    """REST API management for the emulated API Gateway."""

    service_id = "apigateway"
    client_attr = "apigateway"

    # --- REST APIs ---

    def list_apis(self) -> list[dict[str, Any]]:
        resp = self._call("get_rest_apis", limit=LIMIT)
        return reshape_all(resp.get("items"), REST_API_FIELDS)

    def create_api(self, body: dict[str, Any]) -> dict[str, Any]:
        require("API name is required", body.get("name"))
        params = compact(name=body["name"], **{key: body.get(key) for key in _CREATE_API_KEYS})
        resp = self._call("create_rest_api", **params)
        return reshape(resp, REST_API_FIELDS)

    def delete_api(self, rest_api_id: str | None) -> dict[str, Any]:
        require("REST API ID is required", rest_api_id)
        self._call("delete_rest_api", restApiId=rest_api_id)
        return {"success": True}

    def get_api(self, rest_api_id: str) -> dict[str, Any]:
        resp = self._call("get_rest_api", restApiId=rest_api_id)
        return reshape(resp, REST_API_FIELDS)

    def update_api(self, rest_api_id: str, patch_operations: Any) -> dict[str, Any]:
        if not isinstance(patch_operations, list):
            raise InvalidRequestError("Patch operations are required")
        resp = self._call(
            "update_rest_api", restApiId=rest_api_id, patchOperations=patch_operations
        )
        return reshape(resp, REST_API_FIELDS)

    # --- Resources ---

    def list_resources(self, rest_api_id: str | None) -> list[dict[str, Any]]:
        require("REST API ID is required", rest_api_id)
        resp = self._call("get_resources", restApiId=rest_api_id, limit=LIMIT)
        return reshape_all(resp.get("items"), RESOURCE_FIELDS)

    def create_resource(
        self, rest_api_id: str | None, parent_id: str | None, path_part: str | None
    ) -> dict[str, Any]:
        require(
            "REST API ID, parent ID, and path part are required",
            rest_api_id,
            parent_id,
            path_part,
        )
        resp = self._call(
            "create_resource", restApiId=rest_api_id, parentId=parent_id, pathPart=path_part
        )
        return reshape(resp, RESOURCE_FIELDS)

    def delete_resource(self, rest_api_id: str | None, resource_id: str | None) -> dict[str, Any]:
        require("REST API ID and resource ID are required", rest_api_id, resource_id)
        self._call("delete_resource", restApiId=rest_api_id, resourceId=resource_id)
        return {"success": True}

    # --- Deployments & stages ---

    def list_deployments(self, rest_api_id: str | None, kind: str | None = None) -> list[dict[str, Any]]:
        """List deployments, or stages when ``kind == "stages"``."""
        require("REST API ID is required", rest_api_id)
        if kind == "stages":
            resp = self._call("get_stages", restApiId=rest_api_id)
            return reshape_all(resp.get("item"), STAGE_FIELDS)
        resp = self._call("get_deployments", restApiId=rest_api_id, limit=LIMIT)
        return reshape_all(resp.get("items"), DEPLOYMENT_FIELDS)

    def create_deployment(self, body: dict[str, Any]) -> dict[str, Any]:
        """Create a stage (``type == "stage"``) or a deployment."""
        rest_api_id = body.get("restApiId")
        require("REST API ID is required", rest_api_id)
        if body.get("type") == "stage":
            if is_missing(body.get("deploymentId")) or is_missing(body.get("stageName")):
                raise InvalidRequestError("Deployment ID and stage name are required")
            resp = self._call(
                "create_stage",
                **compact(
                    restApiId=rest_api_id,
                    deploymentId=body.get("deploymentId"),
                    stageName=body.get("stageName"),
                    description=body.get("description"),
                    variables=body.get("variables"),
                    cacheClusterEnabled=body.get("cacheClusterEnabled"),
                    cacheClusterSize=body.get("cacheClusterSize"),
                ),
            )
            return reshape(resp, STAGE_FIELDS)
        resp = self._call(
            "create_deployment",
            **compact(
                restApiId=rest_api_id,
                stageName=body.get("stageName") or None,
                stageDescription=body.get("stageDescription"),
                description=body.get("description"),
                cacheClusterEnabled=body.get("cacheClusterEnabled"),
                cacheClusterSize=body.get("cacheClusterSize"),
                variables=body.get("variables"),
                canarySettings=body.get("canarySettings"),
            ),
        )
        return reshape(resp, DEPLOYMENT_FIELDS)

    def delete_stage(self, rest_api_id: str | None, stage_name: str | None) -> dict[str, Any]:
        require("REST API ID and stage name are required", rest_api_id, stage_name)
        self._call("delete_stage", restApiId=rest_api_id, stageName=stage_name)
        return {"success": True}
