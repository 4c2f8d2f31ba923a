"""Object storage wrapper.

This module exposes a simplified surface over S3-compatible object storage:
listing, existence checks, and get/put/delete/copy of single objects.
"""

from .client import (
    ListPage,
    ObjectLocation,
    ObjectStorage,
    StorageError,
    ValidationError,
    status_code,
)
from .s3_client import S3StorageClient

__all__ = [
    "ListPage",
    "ObjectLocation",
    "ObjectStorage",
    "S3StorageClient",
    "StorageError",
    "ValidationError",
    "status_code",
]
