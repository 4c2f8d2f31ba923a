from __future__ import annotations

from unittest.mock import patch

import pytest

from s3kit.common.config import Settings, get_settings
from s3kit.deps import reset_storage_client
from s3kit.infra.storage.s3_client import S3StorageClient
from tests.infra.fake_s3 import FakeS3Client

S3_ENV_VARS = (
    "S3_REGION",
    "S3_PROFILE",
    "S3_ENDPOINT_URL",
    "S3_ADDRESSING_STYLE",
    "S3_DEFAULT_LIST_LIMIT",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    for name in S3_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("s3kit.common.config.ENV_FILE", tmp_path / ".env")
    get_settings.cache_clear()  # type: ignore[attr-defined]
    reset_storage_client()
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]
    reset_storage_client()


@pytest.fixture
def fake_s3():
    """Every client built during the test talks to the same in-memory store."""
    backend = FakeS3Client()
    with patch.object(S3StorageClient, "_build_client", return_value=backend):
        yield backend


@pytest.fixture
def storage(fake_s3):
    return S3StorageClient(settings=Settings(S3_REGION="us-east-1"))
