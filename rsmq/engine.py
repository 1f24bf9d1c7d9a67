"""
Queue engine facade.

RedisSMQ bundles one Redis client, its registered scripts, a queue registry
and a message lifecycle engine for a single namespace. Nothing is shared
between instances, so engines for different namespaces can run side by side.
"""

import logging
import time
from collections.abc import Callable
from typing import Any

import redis.asyncio as redis

from rsmq.config import Settings, get_settings
from rsmq.constants import DEFAULT_DELAY, DEFAULT_MAXSIZE, DEFAULT_VT
from rsmq.observability.metrics import MetricsCollector, get_metrics
from rsmq.queue.lifecycle import MessageLifecycle
from rsmq.queue.realtime import RealtimePublisher
from rsmq.queue.registry import QueueRegistry
from rsmq.store.connection import create_client
from rsmq.store.scripts import QueueScripts
from rsmq.types.message import ReceivedMessage
from rsmq.types.queue import QueueAttributes
from rsmq.validation import validate_namespace

logger = logging.getLogger(__name__)


class RedisSMQ:
    """
    Simple message queue backed by Redis.

    Usage:
        async with RedisSMQ(ns="jobs") as rsmq:
            await rsmq.create_queue("orders")
            message_id = await rsmq.send_message("orders", "hello")
            msg = await rsmq.receive_message("orders", vt=30)
            if msg is not None:
                await rsmq.delete_message("orders", msg.id)
    """

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        options: dict[str, Any] | None = None,
        client: redis.Redis | None = None,
        ns: str | None = None,
        realtime: bool | None = None,
        password: str | None = None,
        id_length: int | None = None,
        clock: Callable[[], float] = time.time,
        settings: Settings | None = None,
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize the engine.

        Args:
            host: Redis host. Defaults to settings.
            port: Redis port. Defaults to settings.
            options: Extra connection pool options.
            client: An existing redis.asyncio.Redis to use instead of
                creating one. It is not closed by quit(). Create it with
                decode_responses=False or bytes bodies that are not UTF-8
                cannot be received.
            ns: Namespace prefix for all keys.
            realtime: Publish queue depth after each send.
            password: Redis password.
            id_length: Length of generated message ids.
            clock: Returns the current time in seconds.
            settings: Settings used for every value not given explicitly.
            metrics: Collector for this engine. Defaults to the process
                collector.
        """
        settings = settings or get_settings()

        self.namespace = validate_namespace(ns or settings.namespace)
        self.realtime = settings.realtime if realtime is None else realtime
        self.id_length = id_length or settings.id_length

        self._owns_client = client is None
        self.redis = client if client is not None else create_client(
            settings, host=host, port=port, password=password, options=options
        )
        if self.redis.get_connection_kwargs().get("decode_responses"):
            logger.warning(
                "Redis client decodes responses; binary message bodies will not round-trip",
                extra={"namespace": self.namespace},
            )
        self.metrics = metrics or get_metrics()

        self._scripts = QueueScripts(self.redis)
        self.registry = QueueRegistry(self.redis, self._scripts, self.namespace, clock)
        self.messages = MessageLifecycle(
            self.redis,
            self._scripts,
            self.registry,
            id_length=self.id_length,
            realtime=(
                RealtimePublisher(self.redis, self.namespace, self.metrics)
                if self.realtime
                else None
            ),
            clock=clock,
            metrics=self.metrics,
        )

        logger.debug(
            "Queue engine initialized",
            extra={"namespace": self.namespace, "realtime": self.realtime},
        )

    async def __aenter__(self) -> "RedisSMQ":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.quit()

    async def quit(self) -> None:
        """Close the Redis connection if this engine created it."""
        if self._owns_client:
            await self.redis.aclose()
            logger.debug("Queue engine closed", extra={"namespace": self.namespace})

    close = quit

    # Queue registry

    async def create_queue(
        self,
        qname: str,
        vt: int = DEFAULT_VT,
        delay: int = DEFAULT_DELAY,
        maxsize: int = DEFAULT_MAXSIZE,
        ttl: int | None = None,
    ) -> int:
        return await self.registry.create_queue(qname, vt=vt, delay=delay, maxsize=maxsize, ttl=ttl)

    async def delete_queue(self, qname: str) -> int:
        return await self.registry.delete_queue(qname)

    async def list_queues(self) -> list[str]:
        return await self.registry.list_queues()

    async def get_queue_attributes(self, qname: str) -> QueueAttributes:
        return await self.registry.get_queue_attributes(qname)

    async def set_queue_attributes(
        self,
        qname: str,
        vt: int | None = None,
        delay: int | None = None,
        maxsize: int | None = None,
    ) -> QueueAttributes:
        return await self.registry.set_queue_attributes(qname, vt=vt, delay=delay, maxsize=maxsize)

    # Message lifecycle

    async def send_message(
        self,
        qname: str,
        message: str | bytes,
        delay: int | None = None,
    ) -> str:
        return await self.messages.send_message(qname, message, delay=delay)

    async def receive_message(self, qname: str, vt: int | None = None) -> ReceivedMessage | None:
        return await self.messages.receive_message(qname, vt=vt)

    async def pop_message(self, qname: str) -> ReceivedMessage | None:
        return await self.messages.pop_message(qname)

    async def change_message_visibility(self, qname: str, id: str, vt: int) -> int:
        return await self.messages.change_message_visibility(qname, id, vt)

    async def delete_message(self, qname: str, id: str) -> int:
        return await self.messages.delete_message(qname, id)
