"""S3 round trip against LocalStack (skipped when it is not running)."""

from __future__ import annotations

import uuid

import pytest

from infrastructure.aws import AwsCredentials, S3Bucket

pytestmark = [pytest.mark.anyio, pytest.mark.requires_localstack]


async def test_bucket_lifecycle_round_trip(require_localstack, tmp_path):
    bucket = S3Bucket(
        bucket_name=f"connector-it-{uuid.uuid4().hex[:12]}",
        credentials=AwsCredentials(access_key="test", secret_key="test"),
        test_mode=True,
    )
    source = tmp_path / "source.txt"
    source.write_bytes(b"hello localstack")
    target = tmp_path / "target.txt"

    await bucket.create_bucket()
    try:
        await bucket.upload_file("greetings/source.txt", source)
        await bucket.download_file("greetings/source.txt", target)
        await bucket.delete_file("greetings/source.txt")
    finally:
        await bucket.delete_bucket()

    assert target.read_bytes() == b"hello localstack"
