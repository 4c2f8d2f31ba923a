#!/usr/bin/env python3
"""Command line access to the object storage wrapper.

Usage:
  .venv/bin/python scripts/storage_cli.py ls s3://bucket/prefix --limit 10
  .venv/bin/python scripts/storage_cli.py exists s3://bucket/key
  .venv/bin/python scripts/storage_cli.py get s3://bucket/key -o out.bin
  .venv/bin/python scripts/storage_cli.py put ./local.txt s3://bucket/key -m owner=me
  .venv/bin/python scripts/storage_cli.py rm s3://bucket/key
  .venv/bin/python scripts/storage_cli.py cp s3://src/key s3://dst/key

Region and profile default to S3_REGION / S3_PROFILE and can be overridden
with --region and --profile.
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from botocore.exceptions import ClientError

from s3kit.common.config import get_settings
from s3kit.common.logging import setup_logging
from s3kit.deps import resolve_storage_client
from s3kit.infra.storage import (
    ObjectLocation,
    ObjectStorage,
    ValidationError,
    status_code,
)


def _parse_metadata(items: Sequence[str]) -> dict[str, str]:
    metadata: dict[str, str] = {}
    for item in items:
        if "=" not in item:
            raise ValidationError(f"metadata must be key=value, got {item!r}")
        key, value = item.split("=", 1)
        metadata[key.strip()] = value
    return metadata


def run(args: argparse.Namespace, storage: ObjectStorage) -> int:
    if args.command == "ls":
        loc = ObjectLocation.from_uri(args.uri)
        page = storage.list(
            bucket=loc.bucket, prefix=loc.key, limit=args.limit, next_token=args.token
        )
        for key in page.keys:
            print(key)
        if page.next_token:
            print(f"# next token: {page.next_token}", file=sys.stderr)
        return 0

    if args.command == "exists":
        loc = ObjectLocation.from_uri(args.uri)
        found = storage.exists(bucket=loc.bucket, key=loc.key)
        print("true" if found else "false")
        return 0 if found else 1

    if args.command == "get":
        loc = ObjectLocation.from_uri(args.uri)
        data = storage.get(bucket=loc.bucket, key=loc.key, type="binary")
        if data is None:
            print(f"not found: {loc}", file=sys.stderr)
            return 1
        if args.output:
            with open(args.output, "wb") as fh:
                fh.write(data)
        else:
            sys.stdout.buffer.write(data)
        return 0

    if args.command == "put":
        loc = ObjectLocation.from_uri(args.uri)
        with open(args.path, "rb") as fh:
            response = storage.put(
                bucket=loc.bucket,
                key=loc.key,
                file=fh,
                metadata=_parse_metadata(args.metadata),
            )
        print(status_code(response))
        return 0

    if args.command == "rm":
        loc = ObjectLocation.from_uri(args.uri)
        response = storage.delete(bucket=loc.bucket, key=loc.key)
        print(status_code(response))
        return 0

    if args.command == "cp":
        src = ObjectLocation.from_uri(args.source)
        dst = ObjectLocation.from_uri(args.destination)
        response = storage.copy(
            from_bucket=src.bucket,
            from_key=src.key,
            to_bucket=dst.bucket,
            to_key=dst.key,
        )
        print(status_code(response))
        return 0

    raise ValueError(f"unknown command: {args.command}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Object storage helper")
    parser.add_argument("--region", default=None, help="Override S3_REGION")
    parser.add_argument("--profile", default=None, help="Override S3_PROFILE")
    sub = parser.add_subparsers(dest="command", required=True)

    ls = sub.add_parser("ls", help="List keys under a prefix")
    ls.add_argument("uri", help="s3://bucket/prefix")
    ls.add_argument("--limit", type=int, default=None)
    ls.add_argument("--token", default="", help="Continuation token")

    exists = sub.add_parser("exists", help="Check whether a key (prefix) exists")
    exists.add_argument("uri")

    get = sub.add_parser("get", help="Download an object")
    get.add_argument("uri")
    get.add_argument("-o", "--output", default=None, help="Write to file")

    put = sub.add_parser("put", help="Upload a local file")
    put.add_argument("path")
    put.add_argument("uri")
    put.add_argument(
        "-m",
        "--metadata",
        action="append",
        default=[],
        help="Metadata entry as key=value (repeatable)",
    )

    rm = sub.add_parser("rm", help="Delete an object")
    rm.add_argument("uri")

    cp = sub.add_parser("cp", help="Server-side copy")
    cp.add_argument("source")
    cp.add_argument("destination")
    return parser


def main(
    argv: Sequence[str] | None = None, storage: ObjectStorage | None = None
) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    try:
        storage = resolve_storage_client(storage)
        if args.region is not None or args.profile is not None:
            storage = storage.create_instance(
                region=args.region or settings.S3_REGION,
                profile=args.profile or settings.S3_PROFILE,
            )
        return run(args, storage)
    except ValidationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except ClientError as exc:
        error = exc.response.get("Error", {})
        print(
            f"error: {error.get('Code', 'unknown')}: {error.get('Message', exc)}",
            file=sys.stderr,
        )
        return 3


if __name__ == "__main__":
    sys.exit(main())
