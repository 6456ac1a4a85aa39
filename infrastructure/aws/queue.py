"""Helpers for interacting with Amazon SQS."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from typing import Any, Mapping

from botocore.exceptions import BotoCoreError, ClientError

from core.exceptions import ConfigurationError, ProviderError, ValidationError

from .clients import AwsCredentials, get_client
from .consumer import ConsumerConfig, QueueConsumer

logger = logging.getLogger(__name__)


def _encode_body(payload: bytes | str | Mapping[str, Any]) -> str:
    if isinstance(payload, str):
        return payload
    try:
        if isinstance(payload, bytes):
            return payload.decode("utf-8")
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise ValidationError("Failed to serialise SQS message body", field="payload") from exc


class SqsQueue:
    """Send messages to, and consume messages from, one SQS (FIFO) queue."""

    def __init__(
        self,
        *,
        queue_url: str,
        credentials: AwsCredentials | None = None,
        sqs_client: Any | None = None,
    ) -> None:
        if not queue_url:
            raise ConfigurationError("queue_url must be provided", key="queue_url")
        if sqs_client is None:
            if credentials is None:
                raise ConfigurationError("AWS credentials or an SQS client are required", key="AWS credentials")
            sqs_client = get_client("sqs", credentials)

        self._queue_url = queue_url
        self._sqs_client = sqs_client

    @property
    def queue_url(self) -> str:
        return self._queue_url

    async def send_message(
        self,
        payload: bytes | str | Mapping[str, Any],
        message_group_id: str,
    ) -> dict[str, Any]:
        """Send ``payload`` with a fresh deduplication id and return the SQS response."""

        params: dict[str, Any] = {
            "QueueUrl": self._queue_url,
            "MessageBody": _encode_body(payload),
            "MessageGroupId": message_group_id,
            "MessageDeduplicationId": str(uuid.uuid4()),
        }

        logger.info("Sending message to SQS", extra={"queue_url": self._queue_url, "group_id": message_group_id})

        try:
            response = await asyncio.to_thread(self._sqs_client.send_message, **params)
        except (BotoCoreError, ClientError) as exc:
            logger.exception("Failed to send message to SQS", extra={"queue_url": self._queue_url})
            raise ProviderError("Failed to send message to SQS", provider="sqs", original_error=exc) from exc

        logger.debug(
            "Message sent to SQS",
            extra={"queue_url": self._queue_url, "message_id": (response or {}).get("MessageId")},
        )
        return dict(response or {})

    async def delete_message(self, receipt_handle: str) -> None:
        """Acknowledge a consumed message."""

        try:
            await asyncio.to_thread(
                self._sqs_client.delete_message,
                QueueUrl=self._queue_url,
                ReceiptHandle=receipt_handle,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.exception("Failed to delete message from SQS", extra={"queue_url": self._queue_url})
            raise ProviderError("Failed to delete message from SQS", provider="sqs", original_error=exc) from exc

    def consume(
        self,
        config: ConsumerConfig | None = None,
        *,
        stop_event: asyncio.Event | None = None,
    ) -> QueueConsumer:
        """Start a background consumer; must be called from a running event loop."""

        consumer = QueueConsumer(self._sqs_client, self._queue_url, config, stop_event=stop_event)
        return consumer.start()


__all__ = ["SqsQueue"]
