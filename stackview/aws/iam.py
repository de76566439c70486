"""IAM proxy: users, access keys, roles and managed policies."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import unquote

from stackview.base.exceptions import InvalidRequestError, ResourceNotFoundError
from stackview.base.reshape import pairs_to_tags, reshape, reshape_all, tags_to_pairs
from stackview.base.service import ProxyService
from stackview.base.validation import as_json_text, compact, is_missing, parse_json, require


def decode_policy_document(document: Any) -> str | None:
    """Return a policy document as JSON text.

    botocore already decodes documents into dicts; emulators sometimes hand
    back the URL-encoded string instead.
    """
    if document is None:
        return None
    if isinstance(document, str):
        return unquote(document)
    return json.dumps(document)


def _validated_document(document: Any, message: str) -> str:
    parsed = parse_json(document, message)
    if not isinstance(parsed, dict):
        raise InvalidRequestError(message)
    return as_json_text(document)


def _permissions_boundary(source: dict[str, Any]) -> dict[str, Any] | None:
    boundary = source.get("PermissionsBoundary")
    if not boundary:
        return None
    return reshape(boundary, {
        "permissionsBoundaryType": "PermissionsBoundaryType",
        "permissionsBoundaryArn": "PermissionsBoundaryArn",
    })


def _tags(source: dict[str, Any]) -> list[dict[str, Any]] | None:
    return tags_to_pairs(source["Tags"]) if "Tags" in source else None


USER_FIELDS = {
    "userName": "UserName",
    "userId": "UserId",
    "arn": "Arn",
    "path": "Path",
    "createDate": "CreateDate",
    "passwordLastUsed": "PasswordLastUsed",
    "permissionsBoundary": _permissions_boundary,
    "tags": _tags,
}

ACCESS_KEY_FIELDS = {
    "accessKeyId": "AccessKeyId",
    "secretAccessKey": "SecretAccessKey",
    "userName": "UserName",
    "status": "Status",
    "createDate": "CreateDate",
}

ROLE_FIELDS = {
    "roleName": "RoleName",
    "roleId": "RoleId",
    "arn": "Arn",
    "path": "Path",
    "createDate": "CreateDate",
    "assumeRolePolicyDocument": lambda r: decode_policy_document(r.get("AssumeRolePolicyDocument")),
    "description": "Description",
    "maxSessionDuration": "MaxSessionDuration",
    "permissionsBoundary": _permissions_boundary,
    "tags": _tags,
}

POLICY_FIELDS = {
    "policyName": "PolicyName",
    "policyId": "PolicyId",
    "arn": "Arn",
    "path": "Path",
    "defaultVersionId": "DefaultVersionId",
    "attachmentCount": "AttachmentCount",
    "permissionsBoundaryUsageCount": "PermissionsBoundaryUsageCount",
    "isAttachable": "IsAttachable",
    "description": "Description",
    "createDate": "CreateDate",
    "updateDate": "UpdateDate",
    "tags": _tags,
}

POLICY_VERSION_FIELDS = {
    "versionId": "VersionId",
    "isDefaultVersion": "IsDefaultVersion",
    "createDate": "CreateDate",
}

_ERROR_MAP = {"NoSuchEntity": ResourceNotFoundError}


class IAMService(ProxyService):
    """Identity management against the emulated IAM."""

    service_id = "iam"
    client_attr = "iam"
    _ERROR_MAP = _ERROR_MAP

    # --- Users ---

    def list_users(self) -> list[dict[str, Any]]:
        """List users with counts of attached policies, groups and access keys.

        If any count lookup for a user fails, all three counts for that user
        are reported as zero.
        """
        resp = self._call("list_users")
        users = []
        for user in reshape_all(resp.get("Users"), USER_FIELDS):
            name = user.get("userName")
            policies = self._call_or(None, "list_attached_user_policies", UserName=name)
            groups = self._call_or(None, "list_groups_for_user", UserName=name)
            keys = self._call_or(None, "list_access_keys", UserName=name)
            if policies is None or groups is None or keys is None:
                counts = {"attachedPoliciesCount": 0, "groupsCount": 0, "accessKeysCount": 0}
            else:
                counts = {
                    "attachedPoliciesCount": len(policies.get("AttachedPolicies") or []),
                    "groupsCount": len(groups.get("Groups") or []),
                    "accessKeysCount": len(keys.get("AccessKeyMetadata") or []),
                }
            users.append({**user, **counts})
        return users

    def create_user(
        self,
        user_name: str | None,
        path: str | None = None,
        tags: list[dict[str, Any]] | None = None,
        permissions_boundary: str | None = None,
    ) -> dict[str, Any]:
        require("User name is required", user_name)
        resp = self._call(
            "create_user",
            **compact(
                UserName=user_name,
                Path=path or "/",
                Tags=pairs_to_tags(tags) if tags else None,
                PermissionsBoundary=permissions_boundary or None,
            ),
        )
        return reshape(resp.get("User"), USER_FIELDS)

    def get_user(self, user_name: str) -> dict[str, Any]:
        """Full user detail including policies, groups, keys and console access."""
        resp = self._call("get_user", not_found=True, UserName=user_name)
        user = resp.get("User")
        if not user:
            raise ResourceNotFoundError("User not found")
        attached = self._call("list_attached_user_policies", UserName=user_name)
        inline = self._call("list_user_policies", UserName=user_name)
        groups = self._call("list_groups_for_user", UserName=user_name)
        keys = self._call("list_access_keys", UserName=user_name)
        login_profile = self._call_or(None, "get_login_profile", UserName=user_name)
        return {
            **reshape(user, USER_FIELDS),
            "attachedPolicies": attached.get("AttachedPolicies") or [],
            "inlinePolicies": inline.get("PolicyNames") or [],
            "groups": groups.get("Groups") or [],
            "accessKeys": keys.get("AccessKeyMetadata") or [],
            "hasConsoleAccess": login_profile is not None,
        }

    def update_user(
        self,
        user_name: str,
        new_user_name: str | None = None,
        new_path: str | None = None,
    ) -> dict[str, Any]:
        self._call(
            "update_user",
            **compact(UserName=user_name, NewUserName=new_user_name, NewPath=new_path),
        )
        return {"message": "User updated successfully"}

    def delete_user(self, user_name: str) -> dict[str, Any]:
        self._call("delete_user", UserName=user_name)
        return {"message": "User deleted successfully"}

    # --- Access keys ---

    def list_access_keys(self, user_name: str) -> list[dict[str, Any]]:
        resp = self._call("list_access_keys", UserName=user_name)
        return reshape_all(resp.get("AccessKeyMetadata"), ACCESS_KEY_FIELDS)

    def create_access_key(self, user_name: str) -> dict[str, Any]:
        """Create an access key; the secret is only ever returned here."""
        resp = self._call("create_access_key", UserName=user_name)
        return reshape(resp.get("AccessKey"), ACCESS_KEY_FIELDS)

    def update_access_key(
        self, user_name: str, access_key_id: str | None, status: str | None
    ) -> dict[str, Any]:
        require("Access key ID and status are required", access_key_id, status)
        self._call(
            "update_access_key", UserName=user_name, AccessKeyId=access_key_id, Status=status
        )
        return {"message": "Access key updated successfully"}

    def delete_access_key(self, user_name: str, access_key_id: str | None) -> dict[str, Any]:
        require("Access key ID is required", access_key_id)
        self._call("delete_access_key", UserName=user_name, AccessKeyId=access_key_id)
        return {"message": "Access key deleted successfully"}

    # --- Roles ---

    def list_roles(self) -> list[dict[str, Any]]:
        resp = self._call("list_roles")
        roles = []
        for role in reshape_all(resp.get("Roles"), ROLE_FIELDS):
            attached = self._call_or(
                None, "list_attached_role_policies", RoleName=role.get("roleName")
            )
            count = len(attached.get("AttachedPolicies") or []) if attached else 0
            roles.append({**role, "attachedPoliciesCount": count})
        return roles

    def create_role(
        self,
        role_name: str | None,
        assume_role_policy_document: Any,
        path: str | None = None,
        description: str | None = None,
        max_session_duration: int | None = None,
        tags: list[dict[str, Any]] | None = None,
        permissions_boundary: str | None = None,
    ) -> dict[str, Any]:
        require(
            "Role name and assume role policy document are required",
            role_name,
            assume_role_policy_document,
        )
        document = _validated_document(
            assume_role_policy_document, "Invalid JSON in assume role policy document"
        )
        resp = self._call(
            "create_role",
            **compact(
                RoleName=role_name,
                AssumeRolePolicyDocument=document,
                Path=path or "/",
                Description=description,
                MaxSessionDuration=max_session_duration,
                PermissionsBoundary=permissions_boundary or None,
                Tags=pairs_to_tags(tags) if tags else None,
            ),
        )
        return reshape(resp.get("Role"), ROLE_FIELDS)

    def get_role(self, role_name: str) -> dict[str, Any]:
        resp = self._call("get_role", not_found=True, RoleName=role_name)
        role = resp.get("Role")
        if not role:
            raise ResourceNotFoundError("Role not found")
        attached = self._call("list_attached_role_policies", RoleName=role_name)
        inline = self._call("list_role_policies", RoleName=role_name)
        return {
            **reshape(role, ROLE_FIELDS),
            "attachedPolicies": attached.get("AttachedPolicies") or [],
            "inlinePolicies": inline.get("PolicyNames") or [],
        }

    def update_role(
        self,
        role_name: str,
        description: str | None = None,
        max_session_duration: int | None = None,
        assume_role_policy_document: Any = None,
    ) -> dict[str, Any]:
        """Update role settings and/or its trust policy.

        The trust policy is validated before either SDK call is issued.
        """
        document = None
        if not is_missing(assume_role_policy_document):
            document = _validated_document(
                assume_role_policy_document, "Invalid JSON in assume role policy document"
            )
        if description is not None or max_session_duration is not None:
            self._call(
                "update_role",
                **compact(
                    RoleName=role_name,
                    Description=description,
                    MaxSessionDuration=max_session_duration,
                ),
            )
        if document is not None:
            self._call("update_assume_role_policy", RoleName=role_name, PolicyDocument=document)
        return {"message": "Role updated successfully"}

    def delete_role(self, role_name: str) -> dict[str, Any]:
        self._call("delete_role", RoleName=role_name)
        return {"message": "Role deleted successfully"}

    # --- Managed policies ---

    def list_policies(self, scope: str | None = None) -> list[dict[str, Any]]:
        resp = self._call("list_policies", Scope=scope or "All", OnlyAttached=False)
        return reshape_all(resp.get("Policies"), POLICY_FIELDS)

    def create_policy(
        self,
        policy_name: str | None,
        policy_document: Any,
        path: str | None = None,
        description: str | None = None,
        tags: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        require("Policy name and document are required", policy_name, policy_document)
        document = _validated_document(policy_document, "Invalid JSON in policy document")
        resp = self._call(
            "create_policy",
            **compact(
                PolicyName=policy_name,
                PolicyDocument=document,
                Path=path or "/",
                Description=description,
                Tags=pairs_to_tags(tags) if tags else None,
            ),
        )
        return reshape(resp.get("Policy"), POLICY_FIELDS)

    def get_policy(self, policy_arn: str) -> dict[str, Any]:
        """Policy detail with the default version's document and the version list."""
        policy_arn = unquote(policy_arn)
        resp = self._call("get_policy", not_found=True, PolicyArn=policy_arn)
        policy = resp.get("Policy")
        if not policy:
            raise ResourceNotFoundError("Policy not found")
        version = self._call(
            "get_policy_version",
            PolicyArn=policy_arn,
            VersionId=policy.get("DefaultVersionId"),
        )
        versions = self._call("list_policy_versions", PolicyArn=policy_arn)
        return {
            **reshape(policy, POLICY_FIELDS),
            "policyDocument": decode_policy_document(
                (version.get("PolicyVersion") or {}).get("Document")
            ),
            "versions": reshape_all(versions.get("Versions"), POLICY_VERSION_FIELDS),
        }

    def update_policy(
        self, policy_arn: str, policy_document: Any, set_as_default: bool = True
    ) -> dict[str, Any]:
        """Publish a new policy version, by default making it the default one."""
        require("Policy document is required", policy_document)
        document = _validated_document(policy_document, "Invalid JSON in policy document")
        resp = self._call(
            "create_policy_version",
            PolicyArn=unquote(policy_arn),
            PolicyDocument=document,
            SetAsDefault=set_as_default,
        )
        return {
            "message": "Policy updated successfully",
            "versionId": (resp.get("PolicyVersion") or {}).get("VersionId"),
        }

    def delete_policy(self, policy_arn: str) -> dict[str, Any]:
        self._call("delete_policy", PolicyArn=unquote(policy_arn))
        return {"message": "Policy deleted successfully"}
