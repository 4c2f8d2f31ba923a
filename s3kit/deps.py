from __future__ import annotations

from functools import lru_cache

from s3kit.common.config import get_settings
from s3kit.infra.storage.client import ObjectStorage
from s3kit.infra.storage.s3_client import S3StorageClient


@lru_cache(maxsize=1)
def get_storage_client() -> S3StorageClient:
    """Return the process-wide client, built from settings on first use."""
    return S3StorageClient(settings=get_settings())


def resolve_storage_client(client: ObjectStorage | None = None) -> ObjectStorage:
    """Prefer an injected client and fall back to the shared one."""
    return client if client is not None else get_storage_client()


def reset_storage_client() -> None:
    get_storage_client.cache_clear()
