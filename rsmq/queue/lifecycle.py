"""
Message lifecycle engine.

Moves messages through send -> receive -> delete (or pop). Each operation
that reads and then mutates runs as one Lua script, so two consumers can
never lease the same message at the same time.
"""

import logging
import time
from collections.abc import Callable
from typing import Any

from rsmq.constants import (
    DEFAULT_ID_LENGTH,
    FIELD_HIDDENMSGS,
    FIELD_MSGS,
    FIELD_TOTALSENT,
    MessageState,
    SPAN_CHANGE_VISIBILITY,
    SPAN_DELETE_MESSAGE,
    SPAN_POP_MESSAGE,
    SPAN_RECEIVE_MESSAGE,
    SPAN_SEND_MESSAGE,
)
from rsmq.exceptions import (
    MessageNotFoundError,
    PayloadTooLargeError,
    QueueNotFoundError,
    ValidationError,
)
from rsmq.ids import make_id
from rsmq.observability.metrics import MetricsCollector, get_metrics
from rsmq.observability.tracing import create_span
from rsmq.queue.realtime import RealtimePublisher
from rsmq.queue.registry import QueueRegistry
from rsmq.store.scripts import QueueScripts
from rsmq.types.message import ReceivedMessage
from rsmq.validation import (
    message_size,
    validate_delay,
    validate_message,
    validate_message_id,
    validate_qname,
    validate_vt,
)

logger = logging.getLogger(__name__)


class MessageLifecycle:
    """
    Send, receive, pop, delete and change-visibility for one namespace.

    Implements at-least-once delivery:
    - receive leases the oldest eligible message until now + vt
    - an expired lease makes the message eligible again (rc grows)
    - delete or pop removes the message for good
    """

    def __init__(
        self,
        client: Any,
        scripts: QueueScripts,
        registry: QueueRegistry,
        id_length: int = DEFAULT_ID_LENGTH,
        realtime: RealtimePublisher | None = None,
        clock: Callable[[], float] = time.time,
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize the lifecycle engine.

        Args:
            client: The redis.asyncio.Redis instance.
            scripts: Script handles registered on the same client.
            registry: Registry of the same namespace, used for queue lookups.
            id_length: Length of generated message ids.
            realtime: Publisher to notify after each send, or None.
            clock: Returns the current time in seconds.
            metrics: Collector for message counters. Defaults to the
                process collector.
        """
        self._client = client
        self._scripts = scripts
        self._registry = registry
        self._id_length = id_length
        self._realtime = realtime
        self._clock = clock
        self._metrics = metrics or get_metrics()

    def _now(self) -> int:
        return int(self._clock())

    async def send_message(
        self,
        qname: str,
        message: str | bytes,
        delay: int | None = None,
    ) -> str:
        """
        Send a message to a queue.

        Args:
            qname: Queue name.
            message: Message body.
            delay: Seconds before the message becomes eligible.
                Defaults to the queue's delay.

        Returns:
            The new message id.

        Raises:
            ValidationError: If the name, body or delay is malformed.
            QueueNotFoundError: If the queue does not exist.
            PayloadTooLargeError: If the body exceeds the queue's maxsize.
        """
        if qname is None:
            raise ValidationError("No qname supplied", details={"field": "qname"})
        validate_message(message)

        # existence is probed before the name is validated
        attributes = await self._registry.load_attributes(qname)
        validate_qname(qname)

        size = message_size(message)
        if not attributes.unlimited and size > attributes.maxsize:
            raise PayloadTooLargeError(qname, size, attributes.maxsize)

        delay = attributes.delay if delay is None else delay
        validate_delay(delay)

        message_id = make_id(self._id_length)
        keys = self._registry.keys(qname)
        now = self._now()

        with create_span(SPAN_SEND_MESSAGE, **{"rsmq.queue": qname, "rsmq.delay": delay}):
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.zadd(keys.index, {message_id: now + delay})
                fields = {message_id: message, keys.sent_field(message_id): now}
                if isinstance(message, bytes):
                    fields[keys.binary_field(message_id)] = 1
                pipe.hset(keys.meta, mapping=fields)
                pipe.hincrby(keys.meta, FIELD_TOTALSENT, 1)
                pipe.hincrby(keys.meta, FIELD_MSGS, 1)
                if delay > 0:
                    pipe.hincrby(keys.meta, FIELD_HIDDENMSGS, 1)
                await pipe.execute()

        self._metrics.record_sent(qname)
        logger.debug(
            "Sent message",
            extra={
                "qname": qname,
                "message_id": message_id,
                "delay": delay,
                "state": MessageState.PENDING,
            },
        )

        if self._realtime is not None:
            await self._realtime.publish_depth(qname)

        return message_id

    async def receive_message(
        self,
        qname: str,
        vt: int | None = None,
    ) -> ReceivedMessage | None:
        """
        Lease the oldest eligible message of a queue.

        Args:
            qname: Queue name.
            vt: Lease duration in seconds. Defaults to the queue's vt.

        Returns:
            The leased message, or None when nothing is eligible.

        Raises:
            ValidationError: If the name or vt is malformed.
            QueueNotFoundError: If the queue does not exist.
        """
        validate_qname(qname)
        attributes = await self._registry.load_attributes(qname)
        vt = attributes.vt if vt is None else vt
        validate_vt(vt)

        keys = self._registry.keys(qname)
        now = self._now()

        with create_span(SPAN_RECEIVE_MESSAGE, **{"rsmq.queue": qname, "rsmq.vt": vt}):
            reply = await self._scripts.receive_message(
                keys=[keys.index, keys.meta],
                args=[now, now + vt],
            )

        received = ReceivedMessage.from_script(reply)
        self._metrics.record_received(qname, found=received is not None)
        if received is not None:
            logger.debug(
                "Received message",
                extra={
                    "qname": qname,
                    "message_id": received.id,
                    "rc": received.rc,
                    "state": MessageState.LEASED,
                },
            )
        return received

    async def pop_message(self, qname: str) -> ReceivedMessage | None:
        """
        Receive and delete the oldest eligible message in one step.

        Returns:
            The removed message, or None when nothing is eligible.

        Raises:
            ValidationError: If the name is malformed.
            QueueNotFoundError: If the queue does not exist.
        """
        validate_qname(qname)
        if not await self._registry.queue_exists(qname):
            raise QueueNotFoundError(qname)

        keys = self._registry.keys(qname)

        with create_span(SPAN_POP_MESSAGE, **{"rsmq.queue": qname}):
            reply = await self._scripts.pop_message(
                keys=[keys.index, keys.meta],
                args=[self._now()],
            )

        popped = ReceivedMessage.from_script(reply)
        self._metrics.record_popped(qname, found=popped is not None)
        if popped is not None:
            logger.debug(
                "Popped message",
                extra={
                    "qname": qname,
                    "message_id": popped.id,
                    "rc": popped.rc,
                    "state": MessageState.DELETED,
                },
            )
        return popped

    async def change_message_visibility(self, qname: str, message_id: str, vt: int) -> int:
        """
        Move a message's deadline to now + vt.

        Returns:
            1 if the deadline was changed, 0 if the message was removed
            concurrently.

        Raises:
            ValidationError: If the name, id or vt is malformed.
            QueueNotFoundError: If the queue does not exist.
            MessageNotFoundError: If the message does not exist.
        """
        validate_qname(qname)
        validate_message_id(message_id, self._id_length)
        validate_vt(vt)

        keys = self._registry.keys(qname)
        if not await self._registry.queue_exists(qname):
            raise QueueNotFoundError(qname)
        if not await self._client.hexists(keys.meta, message_id):
            raise MessageNotFoundError(qname, message_id)

        with create_span(SPAN_CHANGE_VISIBILITY, **{"rsmq.queue": qname, "rsmq.vt": vt}):
            changed = int(await self._scripts.change_message_visibility(
                keys=[keys.index, keys.meta],
                args=[message_id, self._now() + vt],
            ))

        if changed:
            self._metrics.record_visibility_change(qname)
        logger.debug(
            "Changed message visibility",
            extra={
                "qname": qname,
                "message_id": message_id,
                "vt": vt,
                "changed": changed,
                "state": MessageState.LEASED if vt > 0 else MessageState.PENDING,
            },
        )
        return changed

    async def delete_message(self, qname: str, message_id: str) -> int:
        """
        Delete a message.

        Returns:
            1 if the message was deleted, 0 if it was already gone.

        Raises:
            ValidationError: If the name or id is malformed.
        """
        validate_qname(qname)
        validate_message_id(message_id, self._id_length)

        keys = self._registry.keys(qname)
        with create_span(SPAN_DELETE_MESSAGE, **{"rsmq.queue": qname}):
            deleted = int(await self._scripts.delete_message(
                keys=[keys.index, keys.meta],
                args=[message_id],
            ))

        if deleted:
            self._metrics.record_deleted(qname)
        logger.debug(
            "Deleted message",
            extra={
                "qname": qname,
                "message_id": message_id,
                "deleted": deleted,
                "state": MessageState.DELETED,
            },
        )
        return deleted
