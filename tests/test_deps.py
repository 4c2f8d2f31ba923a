from __future__ import annotations

from unittest.mock import MagicMock

from s3kit.deps import get_storage_client, reset_storage_client, resolve_storage_client
from s3kit.infra.storage.s3_client import S3StorageClient


def test_shared_client_is_built_once_from_settings(fake_s3, monkeypatch) -> None:
    monkeypatch.setenv("S3_REGION", "eu-west-1")

    client = get_storage_client()

    assert isinstance(client, S3StorageClient)
    assert client.region == "eu-west-1"
    assert get_storage_client() is client


def test_reset_builds_a_new_client(fake_s3) -> None:
    first = get_storage_client()
    reset_storage_client()
    assert get_storage_client() is not first


def test_resolve_prefers_injected_client(fake_s3) -> None:
    injected = MagicMock()
    assert resolve_storage_client(injected) is injected
    assert resolve_storage_client() is get_storage_client()
