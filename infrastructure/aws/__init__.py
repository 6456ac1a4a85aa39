"""AWS infrastructure helpers (clients and services)."""

from .clients import AwsCredentials, aws_clients, clear_clients, get_client
from .consumer import ConsumerConfig, QueueConsumer
from .queue import SqsQueue
from .storage import S3Bucket

__all__ = [
    "AwsCredentials",
    "aws_clients",
    "clear_clients",
    "get_client",
    "ConsumerConfig",
    "QueueConsumer",
    "SqsQueue",
    "S3Bucket",
]
