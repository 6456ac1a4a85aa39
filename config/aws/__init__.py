"""AWS-specific defaults for the S3 and SQS connectors."""

from __future__ import annotations

# Region used when a caller leaves it blank
DEFAULT_REGION = "us-east-1"

# LocalStack edge endpoint used by ``test_mode`` clients
LOCALSTACK_ENDPOINT = "http://localhost:4566"

# botocore client settings
CLIENT_MAX_ATTEMPTS = 3
CLIENT_RETRY_MODE = "standard"
CLIENT_CONNECT_TIMEOUT = 10
# Must stay above the longest SQS long-poll (20 s)
CLIENT_READ_TIMEOUT = 30

# Queue consumer polling defaults
CONSUMER_MAX_MESSAGES = 10
CONSUMER_WAIT_SECONDS = 10
CONSUMER_VISIBILITY_TIMEOUT = 30
CONSUMER_POLL_INTERVAL = 5.0
CONSUMER_BUFFER_SIZE = 20

__all__ = [
    "DEFAULT_REGION",
    "LOCALSTACK_ENDPOINT",
    "CLIENT_MAX_ATTEMPTS",
    "CLIENT_RETRY_MODE",
    "CLIENT_CONNECT_TIMEOUT",
    "CLIENT_READ_TIMEOUT",
    "CONSUMER_MAX_MESSAGES",
    "CONSUMER_WAIT_SECONDS",
    "CONSUMER_VISIBILITY_TIMEOUT",
    "CONSUMER_POLL_INTERVAL",
    "CONSUMER_BUFFER_SIZE",
]
