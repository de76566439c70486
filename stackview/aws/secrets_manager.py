"""Secrets Manager proxy: secrets and their versions."""

from __future__ import annotations

import base64
import binascii
from typing import Any

from stackview.base.exceptions import (
    InvalidRequestError,
    UpstreamError,
)
from stackview.base.logger import sv_logger
from stackview.base.reshape import dict_to_tags, reshape, reshape_all, tags_to_dict
from stackview.base.service import ProxyService
from stackview.base.validation import compact, is_missing, require


def _binary_out(source: dict[str, Any]) -> str | None:
    data = source.get("SecretBinary")
    if data is None:
        return None
    return base64.b64encode(data).decode("ascii")


def _binary_in(value: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidRequestError("secretBinary must be base64 encoded") from e


def _version_id(source: dict[str, Any]) -> str | None:
    stages = source.get("VersionIdsToStages")
    return next(iter(stages), None) if stages else None


def _version_stages(source: dict[str, Any]) -> list[str] | None:
    stages = source.get("VersionIdsToStages")
    if not stages:
        return None
    return [stage for values in stages.values() for stage in values]


SECRET_FIELDS = {
    "arn": "ARN",
    "name": "Name",
    "description": "Description",
    "createdDate": "CreatedDate",
    "lastChangedDate": "LastChangedDate",
    "lastAccessedDate": "LastAccessedDate",
    "tags": lambda s: tags_to_dict(s["Tags"]) if "Tags" in s else None,
}

SECRET_DETAIL_FIELDS = {
    **SECRET_FIELDS,
    "versionId": _version_id,
    "versionStages": _version_stages,
}

SECRET_VALUE_FIELDS = {
    "secretString": "SecretString",
    "secretBinary": _binary_out,
    "versionId": "VersionId",
    "versionStages": "VersionStages",
}

VERSION_VALUE_FIELDS = {
    "arn": "ARN",
    "name": "Name",
    "versionId": "VersionId",
    "secretString": "SecretString",
    "secretBinary": _binary_out,
    "versionStages": "VersionStages",
    "createdDate": "CreatedDate",
}

VERSION_FIELDS = {
    "versionId": "VersionId",
    "versionStages": "VersionStages",
    "createdDate": "CreatedDate",
}

WRITE_RESULT_FIELDS = {"arn": "ARN", "name": "Name", "versionId": "VersionId"}


class SecretsManagerService(ProxyService):
    """Secret listing, lifecycle and version browsing."""

    service_id = "secretsmanager"
    client_attr = "secretsmanager"

    # --- Secrets ---

    def list_secrets(self) -> dict[str, Any]:
        resp = self._call("list_secrets")
        return {"secrets": reshape_all(resp.get("SecretList"), SECRET_FIELDS)}

    def describe_secret(self, secret_id: str, include_value: bool = False) -> dict[str, Any]:
        """Describe a secret and optionally read its current value.

        A failed value lookup is logged and leaves ``value`` as ``None``;
        the description itself still succeeds.
        """
        described = self._call("describe_secret", SecretId=secret_id)
        value = None
        if include_value:
            try:
                resp = self._call("get_secret_value", SecretId=secret_id)
            except UpstreamError as e:
                sv_logger.warning(
                    f"Secret value unavailable: {e.message}",
                    service=self.service_id,
                    operation="get_secret_value",
                )
            else:
                value = reshape(resp, SECRET_VALUE_FIELDS)
        return {"secret": reshape(described, SECRET_DETAIL_FIELDS), "value": value}

    def create_secret(
        self,
        name: str | None,
        secret_string: str | None = None,
        secret_binary: str | None = None,
        description: str | None = None,
        tags: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if is_missing(name) or (is_missing(secret_string) and is_missing(secret_binary)):
            raise InvalidRequestError(
                "Name and either secretString or secretBinary are required"
            )
        params = compact(
            Name=name,
            Description=description,
            SecretString=secret_string or None,
            SecretBinary=_binary_in(secret_binary) if secret_binary else None,
            Tags=dict_to_tags(tags) if tags else None,
        )
        resp = self._call("create_secret", **params)
        return {"success": True, **reshape(resp, WRITE_RESULT_FIELDS)}

    def put_secret_value(
        self,
        secret_id: str | None,
        secret_string: str | None = None,
        secret_binary: str | None = None,
    ) -> dict[str, Any]:
        if is_missing(secret_id) or (is_missing(secret_string) and is_missing(secret_binary)):
            raise InvalidRequestError(
                "SecretId and either secretString or secretBinary are required"
            )
        params = compact(
            SecretId=secret_id,
            SecretString=secret_string or None,
            SecretBinary=_binary_in(secret_binary) if secret_binary else None,
        )
        resp = self._call("put_secret_value", **params)
        return {"success": True, **reshape(resp, WRITE_RESULT_FIELDS)}

    def delete_secret(self, secret_id: str | None, force_delete: bool = False) -> dict[str, Any]:
        """Delete a secret, keeping a 7-day recovery window unless forced."""
        require("SecretId is required", secret_id)
        if force_delete:
            params = {"SecretId": secret_id, "ForceDeleteWithoutRecovery": True}
        else:
            params = {"SecretId": secret_id, "RecoveryWindowInDays": 7}
        resp = self._call("delete_secret", **params)
        return {
            "success": True,
            **reshape(resp, {"arn": "ARN", "name": "Name", "deletionDate": "DeletionDate"}),
        }

    # --- Versions ---

    def list_versions(self, secret_id: str | None) -> dict[str, Any]:
        require("SecretId is required", secret_id)
        resp = self._call("list_secret_version_ids", SecretId=secret_id)
        return {"versions": reshape_all(resp.get("Versions"), VERSION_FIELDS)}

    def get_version(self, secret_id: str | None, version_id: str) -> dict[str, Any]:
        require("SecretId is required", secret_id)
        resp = self._call("get_secret_value", SecretId=secret_id, VersionId=version_id)
        return reshape(resp, VERSION_VALUE_FIELDS)

