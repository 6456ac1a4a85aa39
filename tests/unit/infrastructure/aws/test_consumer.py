"""Tests for the background SQS consumer."""

from __future__ import annotations

import asyncio
import time
from typing import Any

import pytest
from botocore.exceptions import ClientError

from infrastructure.aws.consumer import ConsumerConfig, QueueConsumer
from infrastructure.aws.queue import SqsQueue

pytestmark = pytest.mark.anyio

QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/000000000000/events.fifo"


def _message(index: int) -> dict[str, Any]:
    return {"MessageId": f"m-{index}", "ReceiptHandle": f"r-{index}", "Body": f"payload-{index}"}


class ScriptedSqsClient:
    """Returns the scripted batches in order, then empty long-polls."""

    def __init__(self, batches: list[list[dict[str, Any]]] | None = None) -> None:
        self._batches = list(batches or [])
        self.calls: list[dict[str, Any]] = []

    def receive_message(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append(kwargs)
        if self._batches:
            return {"Messages": self._batches.pop(0)}
        time.sleep(0.01)
        return {}


class FailingSqsClient:
    def __init__(self) -> None:
        self.call_times: list[float] = []

    def receive_message(self, **kwargs: Any) -> dict[str, Any]:
        self.call_times.append(time.monotonic())
        raise ClientError({"Error": {"Code": "AWS.SimpleQueueService.NonExistentQueue", "Message": "nope"}}, "ReceiveMessage")


async def _stop_and_join(consumer: QueueConsumer) -> None:
    consumer.stop()
    await asyncio.wait_for(consumer.join(), timeout=2)


def test_zero_and_negative_fields_resolve_to_defaults():
    resolved = ConsumerConfig(
        max_messages=0,
        wait_seconds=-1,
        visibility_timeout=0,
        poll_interval=-5,
        buffer_size=0,
    ).with_defaults()

    assert resolved == ConsumerConfig(
        max_messages=10,
        wait_seconds=10,
        visibility_timeout=30,
        poll_interval=5.0,
        buffer_size=20,
    )
    assert ConsumerConfig().with_defaults() == resolved


def test_explicit_fields_are_kept_independently():
    resolved = ConsumerConfig(max_messages=3, poll_interval=0.5).with_defaults()

    assert resolved.max_messages == 3
    assert resolved.poll_interval == 0.5
    assert resolved.wait_seconds == 10
    assert resolved.buffer_size == 20


async def test_stop_before_first_receive_closes_without_messages():
    client = ScriptedSqsClient([[_message(1)]])
    stop_event = asyncio.Event()
    stop_event.set()

    consumer = SqsQueue(queue_url=QUEUE_URL, sqs_client=client).consume(stop_event=stop_event)
    await asyncio.wait_for(consumer.join(), timeout=2)

    assert consumer.closed
    assert await consumer.get() is None
    assert client.calls == []


async def test_batch_is_forwarded_in_receive_order():
    client = ScriptedSqsClient([[_message(1), _message(2)]])
    consumer = SqsQueue(queue_url=QUEUE_URL, sqs_client=client).consume(ConsumerConfig(wait_seconds=1))

    first = await asyncio.wait_for(consumer.get(), timeout=2)
    second = await asyncio.wait_for(consumer.get(), timeout=2)
    await _stop_and_join(consumer)

    assert [first["MessageId"], second["MessageId"]] == ["m-1", "m-2"]
    assert client.calls[0] == {
        "QueueUrl": QUEUE_URL,
        "MaxNumberOfMessages": 10,
        "WaitTimeSeconds": 1,
        "VisibilityTimeout": 30,
    }


async def test_receive_errors_retry_until_stopped():
    client = FailingSqsClient()
    consumer = QueueConsumer(client, QUEUE_URL, ConsumerConfig(poll_interval=0.05)).start()

    await asyncio.sleep(0.3)

    assert not consumer.closed
    assert len(client.call_times) >= 2
    gaps = [later - earlier for earlier, later in zip(client.call_times, client.call_times[1:])]
    assert all(gap >= 0.04 for gap in gaps)

    await _stop_and_join(consumer)

    assert consumer.closed
    assert await consumer.get() is None


async def test_full_buffer_blocks_the_next_receive():
    client = ScriptedSqsClient([[_message(1), _message(2), _message(3)], [_message(4)]])
    consumer = QueueConsumer(client, QUEUE_URL, ConsumerConfig(buffer_size=1)).start()

    await asyncio.sleep(0.1)
    assert len(client.calls) == 1

    received = [await asyncio.wait_for(consumer.get(), timeout=2) for _ in range(4)]
    await _stop_and_join(consumer)

    assert [message["MessageId"] for message in received] == ["m-1", "m-2", "m-3", "m-4"]


async def test_stop_during_delivery_abandons_rest_of_batch():
    client = ScriptedSqsClient([[_message(1), _message(2), _message(3)]])
    consumer = QueueConsumer(client, QUEUE_URL, ConsumerConfig(buffer_size=1)).start()

    await asyncio.sleep(0.1)
    await _stop_and_join(consumer)

    assert (await consumer.get())["MessageId"] == "m-1"
    assert await consumer.get() is None
    assert len(client.calls) == 1


async def test_async_iteration_ends_when_stopped():
    client = ScriptedSqsClient([[_message(1), _message(2)]])
    consumer = QueueConsumer(client, QUEUE_URL).start()
    seen: list[str] = []

    async def _drain() -> None:
        async for message in consumer:
            seen.append(message["MessageId"])
            if len(seen) == 2:
                consumer.stop()

    await asyncio.wait_for(_drain(), timeout=2)
    await asyncio.wait_for(consumer.join(), timeout=2)

    assert seen == ["m-1", "m-2"]
    assert consumer.closed


async def test_unexpected_worker_error_closes_and_surfaces_on_join():
    class BrokenClient:
        def receive_message(self, **kwargs: Any) -> dict[str, Any]:
            raise RuntimeError("bad client")

    consumer = QueueConsumer(BrokenClient(), QUEUE_URL).start()

    with pytest.raises(RuntimeError, match="bad client"):
        await asyncio.wait_for(consumer.join(), timeout=2)

    assert consumer.closed
    assert await consumer.get() is None


async def test_start_twice_is_rejected():
    consumer = QueueConsumer(ScriptedSqsClient(), QUEUE_URL).start()
    try:
        with pytest.raises(RuntimeError):
            consumer.start()
    finally:
        await _stop_and_join(consumer)
