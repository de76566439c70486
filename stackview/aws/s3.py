"""S3 proxy: buckets and objects."""

from __future__ import annotations

from typing import Any

from stackview.base.exceptions import InvalidRequestError, ResourceNotFoundError
from stackview.base.reshape import reshape_all
from stackview.base.service import ProxyService
from stackview.base.validation import compact, is_missing, require

BUCKET_FIELDS = {"name": "Name", "creationDate": "CreationDate"}

OBJECT_FIELDS = {
    "key": "Key",
    "size": "Size",
    "lastModified": "LastModified",
    "eTag": "ETag",
    "storageClass": "StorageClass",
}

_ERROR_MAP = {
    "NoSuchBucket": ResourceNotFoundError,
    "NoSuchKey": ResourceNotFoundError,
}


class S3Service(ProxyService):
    """Bucket and object operations against the emulated S3."""

    service_id = "s3"
    client_attr = "s3"
    _ERROR_MAP = _ERROR_MAP

    # --- Bucket operations ---

    def list_buckets(self) -> dict[str, Any]:
        resp = self._call("list_buckets")
        return {"buckets": reshape_all(resp.get("Buckets"), BUCKET_FIELDS)}

    def create_bucket(self, bucket_name: str | None) -> dict[str, Any]:
        require("Bucket name is required", bucket_name)
        self._call("create_bucket", Bucket=bucket_name)
        return {"success": True, "bucketName": bucket_name}

    def delete_bucket(self, bucket_name: str | None) -> dict[str, Any]:
        require("Bucket name is required", bucket_name)
        self._call("delete_bucket", Bucket=bucket_name)
        return {"success": True}

    # --- Object operations ---

    def list_objects(
        self,
        bucket_name: str | None,
        prefix: str | None = None,
        continuation_token: str | None = None,
    ) -> dict[str, Any]:
        """List one "directory" level of a bucket.

        Uses ``/`` as the delimiter so nested keys surface as ``prefixes``.
        """
        require("Bucket name is required", bucket_name)
        resp = self._call(
            "list_objects_v2",
            **compact(
                Bucket=bucket_name,
                Prefix=prefix or "",
                Delimiter="/",
                ContinuationToken=continuation_token or None,
            ),
        )
        return {
            "objects": reshape_all(resp.get("Contents"), OBJECT_FIELDS),
            "prefixes": [p["Prefix"] for p in resp.get("CommonPrefixes") or []],
            "isTruncated": bool(resp.get("IsTruncated", False)),
            "nextContinuationToken": resp.get("NextContinuationToken"),
        }

    def delete_objects(self, bucket_name: str | None, keys: list[str] | None) -> dict[str, Any]:
        """Delete one key with ``DeleteObject`` or several with ``DeleteObjects``."""
        require("Bucket name and keys are required", bucket_name, keys)
        if len(keys) == 1:
            self._call("delete_object", Bucket=bucket_name, Key=keys[0])
        else:
            self._call(
                "delete_objects",
                Bucket=bucket_name,
                Delete={"Objects": [{"Key": key} for key in keys]},
            )
        return {"success": True}

    def download_object(self, bucket_name: str | None, key: str | None) -> dict[str, Any]:
        """Fetch an object's bytes.

        Returns:
            ``{"body", "contentType", "filename"}`` where ``filename`` is the
            last path segment of the key.

        Raises:
            ResourceNotFoundError: If the response carries no body.
        """
        require("Bucket name and key are required", bucket_name, key)
        resp = self._call("get_object", not_found=True, Bucket=bucket_name, Key=key)
        body = resp.get("Body")
        if body is None:
            raise ResourceNotFoundError("No data received")
        return {
            "body": body.read(),
            "contentType": resp.get("ContentType") or "application/octet-stream",
            "filename": key.split("/")[-1],
        }

    def upload_object(
        self,
        bucket_name: str | None,
        key: str | None,
        data: bytes | None,
        content_type: str | None = None,
    ) -> dict[str, Any]:
        if data is None or is_missing(bucket_name) or is_missing(key):
            raise InvalidRequestError("File, bucket name, and key are required")
        self._call(
            "put_object",
            **compact(Bucket=bucket_name, Key=key, Body=data, ContentType=content_type or None),
        )
        return {"success": True, "key": key}
