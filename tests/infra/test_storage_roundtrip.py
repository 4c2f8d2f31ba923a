"""Behavioral tests for the storage wrapper over an in-memory backend."""

from __future__ import annotations

import io

import pytest
from botocore.exceptions import ClientError

from s3kit.infra.storage.client import status_code

BUCKET = "test-bucket"


def test_put_then_get_returns_text(storage):
    response = storage.put(bucket=BUCKET, key="k.txt", file="sample")

    assert status_code(response) == 200
    assert storage.get(bucket=BUCKET, key="k.txt") == "sample"
    assert storage.exists(bucket=BUCKET, key="k.txt") is True


def test_put_then_get_binary(storage):
    payload = bytes(range(256))
    storage.put(bucket=BUCKET, key="blob.bin", file=io.BytesIO(payload))

    assert storage.get(bucket=BUCKET, key="blob.bin", type="binary") == payload


def test_put_attaches_metadata(storage, fake_s3):
    storage.put(bucket=BUCKET, key="k.txt", file=b"x", metadata={"owner": "me"})

    assert fake_s3.objects[(BUCKET, "k.txt")]["Metadata"] == {"owner": "me"}


def test_get_never_written_key_returns_none(storage):
    assert storage.get(bucket=BUCKET, key="missing.txt") is None


def test_delete_then_get_returns_none(storage):
    storage.put(bucket=BUCKET, key="k.txt", file="sample")

    storage.delete(bucket=BUCKET, key="k.txt")

    assert storage.get(bucket=BUCKET, key="k.txt") is None
    assert storage.exists(bucket=BUCKET, key="k.txt") is False


def test_delete_absent_key_is_not_an_error(storage):
    response = storage.delete(bucket=BUCKET, key="never-written")

    assert status_code(response) == 204


def test_copy_then_get_destination(storage):
    storage.put(bucket=BUCKET, key="src.txt", file="copied", metadata={"a": "1"})

    response = storage.copy(
        from_bucket=BUCKET, from_key="src.txt", to_bucket="other-bucket", to_key="dst.txt"
    )

    assert status_code(response) == 200
    assert storage.get(bucket="other-bucket", key="dst.txt") == "copied"
    assert storage.get(bucket=BUCKET, key="src.txt") == "copied"


def test_copy_missing_source_raises_backend_error(storage):
    with pytest.raises(ClientError):
        storage.copy(
            from_bucket=BUCKET, from_key="nope", to_bucket=BUCKET, to_key="dst"
        )


def test_list_filters_by_prefix_and_respects_limit(storage):
    for key in ("logs/a", "logs/b", "logs/c", "data/x"):
        storage.put(bucket=BUCKET, key=key, file=b"1")

    page = storage.list(bucket=BUCKET, prefix="logs/", limit=2)

    assert page.keys == ["logs/a", "logs/b"]
    assert page.count == 2
    assert page.is_truncated is True
    assert all(key.startswith("logs/") for key in page.keys)


def test_list_caller_driven_pagination(storage, fake_s3):
    for i in range(5):
        storage.put(bucket=BUCKET, key=f"p/{i}", file=b"1")

    seen: list[str] = []
    token = ""
    while True:
        page = storage.list(bucket=BUCKET, prefix="p/", limit=2, next_token=token)
        seen.extend(page.keys)
        if not page.next_token:
            break
        token = page.next_token

    assert seen == [f"p/{i}" for i in range(5)]
    assert fake_s3.calls.count("list_objects_v2") == 3


def test_exists_matches_key_prefix(storage):
    """exists is a prefix check: a longer key makes its prefix 'exist'."""
    storage.put(bucket=BUCKET, key="reports/2024.csv", file=b"1")

    assert storage.exists(bucket=BUCKET, key="reports/2024") is True
    assert storage.get(bucket=BUCKET, key="reports/2024") is None


def test_list_empty_bucket(storage):
    page = storage.list(bucket=BUCKET)

    assert page.keys == []
    assert page.count == 0
    assert page.next_token == ""


def test_get_text_of_non_utf8_object_returns_string(storage):
    """Undecodable bytes read as text come back with replacement characters."""
    storage.put(bucket=BUCKET, key="blob.zip", file=b"PK\x03\x04\xff\xfe")

    text = storage.get(bucket=BUCKET, key="blob.zip")

    assert isinstance(text, str)
    assert text.startswith("PK\x03\x04")
    assert "\ufffd" in text
    assert storage.get(bucket=BUCKET, key="blob.zip", type="binary") == b"PK\x03\x04\xff\xfe"
