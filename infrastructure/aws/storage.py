"""Service objects for interacting with S3 object storage."""

from __future__ import annotations

import asyncio
import logging
import shutil
from pathlib import Path
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from config.aws import LOCALSTACK_ENDPOINT
from core.exceptions import ConfigurationError, NotFoundError, ProviderError

from .clients import AwsCredentials, get_client

logger = logging.getLogger(__name__)

# us-east-1 rejects an explicit LocationConstraint
_REGION_WITHOUT_LOCATION_CONSTRAINT = "us-east-1"


def _read_local_file(file_path: str | Path) -> bytes:
    path = Path(file_path)
    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise NotFoundError(f"Local file not found: {path}", resource=str(path)) from exc


def _write_stream(body: Any, file_path: str | Path) -> None:
    with open(file_path, "wb") as handle:
        shutil.copyfileobj(body, handle)


class S3Bucket:
    """Create, fill, drain and remove a single S3 bucket."""

    def __init__(
        self,
        *,
        bucket_name: str,
        credentials: AwsCredentials | None = None,
        s3_client: Any | None = None,
        test_mode: bool = False,
    ) -> None:
        if not bucket_name:
            raise ConfigurationError("bucket_name must be provided", key="bucket_name")

        if s3_client is None:
            if credentials is None:
                raise ConfigurationError("AWS credentials or an S3 client are required", key="AWS credentials")
            s3_client = get_client(
                "s3",
                credentials,
                endpoint_url=LOCALSTACK_ENDPOINT if test_mode else None,
                path_style=test_mode,
            )

        self._s3_client = s3_client
        self._bucket_name = bucket_name
        self._region = credentials.region if credentials else ""

        logger.debug("S3Bucket initialised", extra={"bucket": self._bucket_name, "test_mode": test_mode})

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    async def create_bucket(self) -> None:
        params: dict[str, Any] = {"Bucket": self._bucket_name}
        if self._region and self._region != _REGION_WITHOUT_LOCATION_CONSTRAINT:
            params["CreateBucketConfiguration"] = {"LocationConstraint": self._region}

        await self._call("create_bucket", "create bucket", **params)
        logger.info("Bucket created: %s", self._bucket_name)

    async def upload_file(self, key: str, file_path: str | Path) -> None:
        """Read ``file_path`` fully and store it under ``key``."""

        data = await asyncio.to_thread(_read_local_file, file_path)
        await self._call(
            "put_object",
            "upload object",
            Bucket=self._bucket_name,
            Key=key,
            Body=data,
        )
        logger.info("File uploaded to s3://%s/%s", self._bucket_name, key)

    async def download_file(self, key: str, file_path: str | Path) -> None:
        """Fetch ``key`` and write its body to ``file_path``."""

        response = await self._call("get_object", "download object", Bucket=self._bucket_name, Key=key)
        body = response["Body"]
        try:
            await asyncio.to_thread(_write_stream, body, file_path)
        finally:
            body.close()
        logger.info("File downloaded to %s", file_path)

    async def delete_file(self, key: str) -> None:
        await self._call("delete_object", "delete object", Bucket=self._bucket_name, Key=key)
        logger.info("File deleted: %s", key)

    async def delete_bucket(self) -> None:
        await self._call("delete_bucket", "delete bucket", Bucket=self._bucket_name)
        logger.info("Bucket deleted: %s", self._bucket_name)

    async def _call(self, operation: str, description: str, **params: Any) -> Any:
        method = getattr(self._s3_client, operation)
        try:
            return await asyncio.to_thread(method, **params)
        except (BotoCoreError, ClientError) as exc:
            logger.exception("Failed to %s", description, extra={"bucket": self._bucket_name})
            raise ProviderError(f"Failed to {description} in S3", provider="s3", original_error=exc) from exc


__all__ = ["S3Bucket"]
