"""Background SQS polling worker that streams received messages to a buffered queue.

One ``QueueConsumer`` owns exactly one ``asyncio`` task. The task long-polls the
queue, pushes every received message onto an ``asyncio.Queue`` of capacity
``buffer_size`` and blocks when the queue is full, so a slow reader delays the
next receive call. Receive failures are logged and retried after
``poll_interval`` for as long as the consumer runs; the only way the output
closes is a stop request (``stop()`` or the caller's ``stop_event``).

Readers either ``await consumer.get()`` until it returns ``None`` or iterate::

    consumer = queue.consume(ConsumerConfig(buffer_size=50))
    async for message in consumer:
        handle(message)
        await queue.delete_message(message["ReceiptHandle"])

Messages are the raw dicts returned by ``receive_message``; acknowledging them
is up to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Any, AsyncIterator

from botocore.exceptions import BotoCoreError, ClientError

from config.aws import (
    CONSUMER_BUFFER_SIZE,
    CONSUMER_MAX_MESSAGES,
    CONSUMER_POLL_INTERVAL,
    CONSUMER_VISIBILITY_TIMEOUT,
    CONSUMER_WAIT_SECONDS,
)

logger = logging.getLogger(__name__)


def _or_default(value: Any, default: Any) -> Any:
    if value is None or value <= 0:
        return default
    return value


@dataclass(frozen=True, slots=True)
class ConsumerConfig:
    """Polling knobs; ``None``, zero or negative fields fall back to defaults."""

    max_messages: int | None = None
    wait_seconds: int | None = None
    visibility_timeout: int | None = None
    poll_interval: float | None = None
    buffer_size: int | None = None

    def with_defaults(self) -> "ConsumerConfig":
        return replace(
            self,
            max_messages=_or_default(self.max_messages, CONSUMER_MAX_MESSAGES),
            wait_seconds=_or_default(self.wait_seconds, CONSUMER_WAIT_SECONDS),
            visibility_timeout=_or_default(self.visibility_timeout, CONSUMER_VISIBILITY_TIMEOUT),
            poll_interval=_or_default(self.poll_interval, CONSUMER_POLL_INTERVAL),
            buffer_size=_or_default(self.buffer_size, CONSUMER_BUFFER_SIZE),
        )


class QueueConsumer:
    """Explicit handle over the polling task: start, stop, join, read."""

    def __init__(
        self,
        sqs_client: Any,
        queue_url: str,
        config: ConsumerConfig | None = None,
        *,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        self._sqs_client = sqs_client
        self._queue_url = queue_url
        self._config = (config or ConsumerConfig()).with_defaults()
        self._stop_event = stop_event or asyncio.Event()
        self._messages: asyncio.Queue[dict[str, Any] | None] = asyncio.Queue(maxsize=self._config.buffer_size)
        self._closed = False
        self._task: asyncio.Task[None] | None = None
        self._watcher: asyncio.Task[None] | None = None

    @property
    def config(self) -> ConsumerConfig:
        return self._config

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> "QueueConsumer":
        """Spawn the polling task; must be called from a running event loop."""

        if self._task is not None:
            raise RuntimeError("QueueConsumer already started")

        self._task = asyncio.create_task(self._run(), name=f"sqs-consumer:{self._queue_url}")
        self._task.add_done_callback(self._on_worker_done)
        self._watcher = asyncio.create_task(self._cancel_on_stop(), name=f"sqs-consumer-stop:{self._queue_url}")
        logger.info("Consumer started for %s", self._queue_url)
        return self

    def stop(self) -> None:
        """Request shutdown; remaining messages of the current batch are dropped."""

        self._stop_event.set()

    async def join(self) -> None:
        """Wait for the polling task to finish; re-raises unexpected worker errors."""

        if self._task is None:
            return
        try:
            await self._task
        except asyncio.CancelledError:
            if not self._task.cancelled():
                raise

    async def get(self) -> dict[str, Any] | None:
        """Return the next message, or ``None`` once closed and drained."""

        if self._closed and self._messages.empty():
            return None
        message = await self._messages.get()
        if message is None:
            # Leave the sentinel in place for any other reader
            self._messages.put_nowait(None)
        return message

    def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[dict[str, Any]]:
        while True:
            message = await self.get()
            if message is None:
                return
            yield message

    async def _run(self) -> None:
        config = self._config
        while not self._stop_event.is_set():
            try:
                response = await asyncio.to_thread(
                    self._sqs_client.receive_message,
                    QueueUrl=self._queue_url,
                    MaxNumberOfMessages=config.max_messages,
                    WaitTimeSeconds=config.wait_seconds,
                    VisibilityTimeout=config.visibility_timeout,
                )
            except (BotoCoreError, ClientError) as exc:
                logger.warning(
                    "Error receiving messages from %s, retrying in %ss: %s",
                    self._queue_url,
                    config.poll_interval,
                    exc,
                )
                await asyncio.sleep(config.poll_interval)
                continue

            messages = (response or {}).get("Messages") or []
            if not messages:
                continue

            logger.debug("Received %d messages from %s", len(messages), self._queue_url)
            for message in messages:
                if self._stop_event.is_set():
                    return
                await self._messages.put(message)

    async def _cancel_on_stop(self) -> None:
        await self._stop_event.wait()
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def _on_worker_done(self, task: asyncio.Task[None]) -> None:
        self._close()
        if self._watcher is not None and not self._watcher.done():
            self._watcher.cancel()

        if task.cancelled():
            logger.info("Consumer stopped for %s", self._queue_url)
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Consumer for %s terminated unexpectedly: %s", self._queue_url, exc)
        else:
            logger.info("Consumer stopped for %s", self._queue_url)

    def _close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._messages.put_nowait(None)
        except asyncio.QueueFull:
            # Readers see ``_closed`` once they drain the buffered messages
            pass


__all__ = ["ConsumerConfig", "QueueConsumer"]
