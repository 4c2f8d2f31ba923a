"""Storage client protocol and data types.

This module defines the interface of the object storage wrapper, the
values it returns, and the errors it raises on its own behalf.
Backend failures are not wrapped: botocore exceptions reach the caller
unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import IO, Any, Literal, Mapping, Protocol, Union

PayloadType = Literal["string", "binary"]
Body = Union[bytes, bytearray, memoryview, str, IO[bytes]]


class StorageError(RuntimeError):
    """Base class for errors raised by the storage wrapper itself."""


class ValidationError(StorageError, ValueError):
    """Raised when a required argument is missing, before any backend call."""


@dataclass(frozen=True, slots=True)
class ObjectLocation:
    """Identifies a stored object."""

    bucket: str
    key: str

    @classmethod
    def from_uri(cls, uri: str) -> "ObjectLocation":
        """Parse ``s3://bucket/key``. The key may be empty for a bucket root."""
        scheme, sep, rest = uri.partition("://")
        if not sep or scheme.lower() != "s3":
            raise ValidationError(f"not an s3:// URI: {uri!r}")
        bucket, _, key = rest.partition("/")
        if not bucket:
            raise ValidationError("bucket is required")
        return cls(bucket=bucket, key=key)

    def __str__(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


@dataclass(frozen=True, slots=True)
class ListPage:
    """One page of a prefix listing.

    ``next_token`` is an empty string when the backend reported no further
    page. ``response`` keeps the raw backend payload for callers that need
    fields this wrapper does not reshape.
    """

    keys: list[str]
    count: int
    next_token: str = ""
    is_truncated: bool = False
    response: Mapping[str, Any] = field(default_factory=dict, repr=False)


def status_code(response: Mapping[str, Any]) -> int | None:
    """Return the HTTP status of a backend acknowledgment, if present."""
    metadata = response.get("ResponseMetadata") or {}
    code = metadata.get("HTTPStatusCode")
    return int(code) if code is not None else None


class ObjectStorage(Protocol):
    """Protocol for the simplified object storage surface.

    Implementations validate required arguments and raise ValidationError
    before contacting the backend. Every operation is one backend request.
    """

    def configure(
        self, *, region: str | None = None, profile: str | None = None
    ) -> None:
        """Replace the backend connection handle.

        Args:
            region: Region name, or None for ambient resolution.
            profile: Named credentials profile, or None for the default chain.
        """
        ...

    def create_instance(
        self, *, region: str | None = None, profile: str | None = None
    ) -> "ObjectStorage":
        """Return a new, independently configured client."""
        ...

    def list(
        self,
        *,
        bucket: str,
        prefix: str = "",
        limit: int | None = None,
        next_token: str = "",
    ) -> ListPage:
        """List keys starting with ``prefix``, at most ``limit`` of them.

        A ``limit`` of None means the configured default page size.

        Raises:
            ValidationError: If bucket is missing.
        """
        ...

    def exists(self, *, bucket: str, key: str) -> bool:
        """Check whether any object key starts with ``key``.

        This is a prefix match, not an exact-key lookup.

        Raises:
            ValidationError: If bucket or key is missing.
        """
        ...

    def get(
        self, *, bucket: str, key: str, type: PayloadType = "string"
    ) -> str | bytes | None:
        """Fetch an object's content, or None if it does not exist.

        Raises:
            ValidationError: If bucket or key is missing.
        """
        ...

    def put(
        self,
        *,
        bucket: str,
        key: str,
        file: Body,
        metadata: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        """Store an object and return the backend acknowledgment.

        Raises:
            ValidationError: If bucket, key or file is missing.
        """
        ...

    def delete(self, *, bucket: str, key: str) -> dict[str, Any]:
        """Delete an object and return the backend acknowledgment.

        Raises:
            ValidationError: If bucket or key is missing.
        """
        ...

    def copy(
        self,
        *,
        from_bucket: str,
        from_key: str,
        to_bucket: str,
        to_key: str,
    ) -> dict[str, Any]:
        """Copy an object server-side and return the backend acknowledgment.

        Raises:
            ValidationError: If any of the four arguments is missing.
        """
        ...
