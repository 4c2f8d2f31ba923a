"""S3-compatible storage client implementation.

This module provides a thin wrapper around a boto3 S3 client that works with
AWS S3, MinIO, and other S3-compatible object storage services. Each method
validates its arguments, issues exactly one backend request and reshapes the
response as little as possible.

Backend errors (``botocore.exceptions.ClientError`` and friends) propagate
unchanged, except for ``NoSuchKey`` from :meth:`S3StorageClient.get`, which
is reported as ``None``.

``configure`` swaps the underlying handle without locking. Reconfiguring an
instance while other threads are issuing requests on it is the caller's
responsibility; use :meth:`S3StorageClient.create_instance` instead when
different regions or profiles are needed at the same time.

Dependencies:
    - boto3
    - botocore
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from s3kit.common.config import Settings
from s3kit.infra.storage.client import Body, ListPage, PayloadType, ValidationError

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = frozenset({"NoSuchKey", "404"})
_PAYLOAD_TYPES = frozenset({"string", "binary"})


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value)


def _require(**fields: Any) -> None:
    for name, value in fields.items():
        if _is_missing(value):
            raise ValidationError(f"{name} is required")


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


def _read_body(file: Body) -> bytes:
    """Load an upload payload fully into memory."""
    if isinstance(file, str):
        return file.encode("utf-8")
    if isinstance(file, (bytes, bytearray, memoryview)):
        return bytes(file)
    read = getattr(file, "read", None)
    if not callable(read):
        raise ValidationError("file must be bytes, str or a readable file object")
    data = read()
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class S3StorageClient:
    """S3-compatible object storage client.

    Holds one boto3 client built from a region and an optional named
    credentials profile. Endpoint and addressing style come from settings
    and are shared with instances produced by :meth:`create_instance`.
    """

    def __init__(self, *, settings: Settings | None = None) -> None:
        """Initialize the client with configuration from settings.

        Args:
            settings: S3 configuration. Defaults apply ambient credential
                and region resolution.
        """
        self._settings = settings or Settings()
        self._client: Any = None
        self.configure(
            region=self._settings.S3_REGION, profile=self._settings.S3_PROFILE
        )

    @staticmethod
    def _build_client(
        settings: Settings, *, region: str | None, profile: str | None
    ) -> Any:
        """Create a boto3 S3 client for a region and credentials profile."""
        session = boto3.session.Session(profile_name=profile, region_name=region)
        config = Config(s3={"addressing_style": settings.S3_ADDRESSING_STYLE})
        return session.client(
            "s3",
            endpoint_url=settings.S3_ENDPOINT_URL,
            config=config,
        )

    @property
    def region(self) -> str | None:
        return self._settings.S3_REGION

    @property
    def profile(self) -> str | None:
        return self._settings.S3_PROFILE

    def configure(
        self, *, region: str | None = None, profile: str | None = None
    ) -> None:
        """Rebuild the backend handle.

        With ``profile`` set, credentials come from that named profile;
        otherwise the default credential chain is used. Requests already
        issued on the previous handle are unaffected.

        Raises:
            botocore.exceptions.ProfileNotFound: If the profile does not exist.
        """
        client = self._build_client(self._settings, region=region, profile=profile)
        self._settings = replace(self._settings, S3_REGION=region, S3_PROFILE=profile)
        self._client = client
        logger.info(
            "storage_client_configured",
            extra={"region": region, "profile": profile},
        )

    def create_instance(
        self, *, region: str | None = None, profile: str | None = None
    ) -> "S3StorageClient":
        """Return a new, independently configured client."""
        settings = replace(self._settings, S3_REGION=region, S3_PROFILE=profile)
        return type(self)(settings=settings)

    def list(
        self,
        *,
        bucket: str,
        prefix: str = "",
        limit: int | None = None,
        next_token: str = "",
    ) -> ListPage:
        """List object keys starting with ``prefix``.

        ``limit`` defaults to ``S3_DEFAULT_LIST_LIMIT`` (100). An empty
        ``next_token`` starts from the first page.
        """
        _require(bucket=bucket)
        if limit is None:
            limit = self._settings.S3_DEFAULT_LIST_LIMIT
        try:
            limit = int(limit)
        except (TypeError, ValueError):
            raise ValidationError("limit must be a positive integer") from None
        if limit <= 0:
            raise ValidationError("limit must be a positive integer")

        params: dict[str, Any] = {
            "Bucket": bucket,
            "Prefix": prefix or "",
            "MaxKeys": limit,
        }
        if next_token:
            params["ContinuationToken"] = next_token

        logger.debug(
            "s3_list_objects",
            extra={"bucket": bucket, "prefix": prefix, "limit": limit},
        )
        response = self._client.list_objects_v2(**params)

        keys = [item["Key"] for item in response.get("Contents") or []]
        count = response.get("KeyCount")
        return ListPage(
            keys=keys,
            count=int(count) if count is not None else len(keys),
            next_token=response.get("NextContinuationToken") or "",
            is_truncated=bool(response.get("IsTruncated")),
            response=response,
        )

    def exists(self, *, bucket: str, key: str) -> bool:
        """Report whether any object key starts with ``key``.

        This reuses a one-item prefix listing, so ``"a/b"`` also "exists"
        when only ``"a/b.txt"`` is stored.
        """
        _require(bucket=bucket, key=key)
        page = self.list(bucket=bucket, prefix=key, limit=1)
        return page.count > 0

    def get(
        self, *, bucket: str, key: str, type: PayloadType = "string"
    ) -> str | bytes | None:
        """Fetch an object.

        Returns ``None`` when the key does not exist, the UTF-8 decoded
        content by default, or raw bytes when ``type="binary"``. Invalid
        UTF-8 sequences decode to U+FFFD; use ``type="binary"`` for archives
        and other non-text payloads.
        """
        _require(bucket=bucket, key=key)
        if type not in _PAYLOAD_TYPES:
            raise ValidationError("type must be 'string' or 'binary'")

        logger.debug("s3_get_object", extra={"bucket": bucket, "key": key})
        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
        except ClientError as exc:
            if _error_code(exc) in _NOT_FOUND_CODES:
                logger.debug("s3_object_not_found", extra={"bucket": bucket, "key": key})
                return None
            raise

        body = response["Body"]
        try:
            data = body.read()
        finally:
            body.close()

        if type == "binary":
            return data
        return data.decode("utf-8", errors="replace")

    def put(
        self,
        *,
        bucket: str,
        key: str,
        file: Body,
        metadata: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        """Store ``file`` under ``key`` with ``metadata`` attached.

        ``file`` may be bytes, a string (stored as UTF-8) or a readable
        file object, which is read fully into memory first.
        """
        _require(bucket=bucket, key=key, file=file)
        payload = _read_body(file)

        logger.debug(
            "s3_put_object",
            extra={"bucket": bucket, "key": key, "size_bytes": len(payload)},
        )
        return self._client.put_object(
            Bucket=bucket,
            Key=key,
            Body=payload,
            Metadata={str(k): str(v) for k, v in (metadata or {}).items()},
        )

    def delete(self, *, bucket: str, key: str) -> dict[str, Any]:
        """Delete an object. Deleting an absent key is not an error."""
        _require(bucket=bucket, key=key)
        logger.debug("s3_delete_object", extra={"bucket": bucket, "key": key})
        return self._client.delete_object(Bucket=bucket, Key=key)

    def copy(
        self,
        *,
        from_bucket: str,
        from_key: str,
        to_bucket: str,
        to_key: str,
    ) -> dict[str, Any]:
        """Copy an object server-side."""
        _require(
            from_bucket=from_bucket,
            from_key=from_key,
            to_bucket=to_bucket,
            to_key=to_key,
        )
        logger.debug(
            "s3_copy_object",
            extra={
                "from_bucket": from_bucket,
                "from_key": from_key,
                "to_bucket": to_bucket,
                "to_key": to_key,
            },
        )
        return self._client.copy_object(
            CopySource={"Bucket": from_bucket, "Key": from_key},
            Bucket=to_bucket,
            Key=to_key,
        )
