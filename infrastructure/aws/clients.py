"""Build and cache the boto3 clients used by the AWS connectors."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Tuple

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError

from config.aws import (
    CLIENT_CONNECT_TIMEOUT,
    CLIENT_MAX_ATTEMPTS,
    CLIENT_READ_TIMEOUT,
    CLIENT_RETRY_MODE,
    DEFAULT_REGION,
)
from core.exceptions import ProviderError
from core.utils.env import get_env

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AwsCredentials:
    """Static credentials and region shared by the S3 and SQS connectors."""

    access_key: str
    secret_key: str
    region: str = DEFAULT_REGION

    @classmethod
    def from_env(cls) -> "AwsCredentials":
        return cls(
            access_key=get_env("AWS_ACCESS_KEY_ID", required=True) or "",
            secret_key=get_env("AWS_SECRET_ACCESS_KEY", required=True) or "",
            region=get_env("AWS_REGION", default=DEFAULT_REGION) or DEFAULT_REGION,
        )


_ClientKey = Tuple[str, str, str, str, str | None, bool]

aws_clients: Dict[_ClientKey, Any] = {}


def _build_client(
    service_name: str,
    credentials: AwsCredentials,
    *,
    endpoint_url: str | None = None,
    path_style: bool = False,
) -> Any:
    """Return a boto3 client for ``service_name`` using static credentials."""

    boto_config = BotoConfig(
        region_name=credentials.region or DEFAULT_REGION,
        retries={"max_attempts": CLIENT_MAX_ATTEMPTS, "mode": CLIENT_RETRY_MODE},
        connect_timeout=CLIENT_CONNECT_TIMEOUT,
        read_timeout=CLIENT_READ_TIMEOUT,
        s3={"addressing_style": "path"} if path_style else None,
    )
    return boto3.client(
        service_name,
        aws_access_key_id=credentials.access_key or None,
        aws_secret_access_key=credentials.secret_key or None,
        endpoint_url=endpoint_url,
        config=boto_config,
    )


def get_client(
    service_name: str,
    credentials: AwsCredentials,
    *,
    endpoint_url: str | None = None,
    path_style: bool = False,
) -> Any:
    """Return a cached client for ``service_name`` keyed by its full configuration."""

    key: _ClientKey = (
        service_name,
        credentials.access_key,
        credentials.secret_key,
        credentials.region,
        endpoint_url,
        path_style,
    )
    client = aws_clients.get(key)
    if client is not None:
        return client

    try:
        client = _build_client(
            service_name,
            credentials,
            endpoint_url=endpoint_url,
            path_style=path_style,
        )
    except BotoCoreError as exc:
        logger.error("Error initialising AWS %s client: %s", service_name, exc)
        raise ProviderError(
            f"Failed to initialise AWS {service_name} client",
            provider=service_name,
            original_error=exc,
        ) from exc

    aws_clients[key] = client
    logger.info("Initialised AWS %s client (region=%s)", service_name, credentials.region)
    return client


def clear_clients() -> None:
    """Drop every cached client."""

    aws_clients.clear()


__all__ = ["AwsCredentials", "aws_clients", "clear_clients", "get_client"]
