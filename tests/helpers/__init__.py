"""Test helper utilities for environment and service validation."""

from __future__ import annotations

import logging
import os
import socket
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

DEFAULT_LOCALSTACK_ENDPOINT = "http://localhost:4566"


def get_localstack_endpoint() -> str:
    return os.getenv("LOCALSTACK_ENDPOINT", DEFAULT_LOCALSTACK_ENDPOINT)


def is_localstack_available(timeout: float = 0.5) -> bool:
    """Check if a LocalStack edge endpoint accepts TCP connections.

    Returns:
        True if the host/port from LOCALSTACK_ENDPOINT is reachable.
    """
    parsed = urlparse(get_localstack_endpoint())
    host = parsed.hostname or "localhost"
    port = parsed.port or 4566
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError:
        logger.debug("LocalStack not reachable at %s:%s", host, port)
        return False


def get_missing_prerequisites(service: str) -> list[str]:
    """Get list of missing prerequisites for a service.

    Args:
        service: Service name ('localstack')

    Returns:
        List of missing environment variables or configuration items.
    """
    missing = []

    if service == "localstack":
        if not is_localstack_available():
            missing.append(f"LocalStack at {get_localstack_endpoint()}")

    return missing


__all__ = [
    "DEFAULT_LOCALSTACK_ENDPOINT",
    "get_localstack_endpoint",
    "is_localstack_available",
    "get_missing_prerequisites",
]
