from s3kit.deps import get_storage_client, reset_storage_client, resolve_storage_client
from s3kit.infra.storage import (
    ListPage,
    ObjectLocation,
    ObjectStorage,
    S3StorageClient,
    StorageError,
    ValidationError,
    status_code,
)

__all__ = [
    "ListPage",
    "ObjectLocation",
    "ObjectStorage",
    "S3StorageClient",
    "StorageError",
    "ValidationError",
    "get_storage_client",
    "reset_storage_client",
    "resolve_storage_client",
    "status_code",
]
