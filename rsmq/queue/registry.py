"""
Queue registry.
Creates, deletes, lists and describes queues.
"""

import logging
import time
from collections.abc import Callable
from typing import Any

from rsmq.constants import (
    DEFAULT_DELAY,
    DEFAULT_MAXSIZE,
    DEFAULT_VT,
    FIELD_DELAY,
    FIELD_MAXSIZE,
    FIELD_MODIFIED,
    FIELD_VT,
    QUEUE_ATTRIBUTE_FIELDS,
    SPAN_CREATE_QUEUE,
    SPAN_DELETE_QUEUE,
    SPAN_GET_ATTRIBUTES,
    SPAN_LIST_QUEUES,
    SPAN_SET_ATTRIBUTES,
)
from rsmq.exceptions import (
    NoAttributeSuppliedError,
    QueueExistsError,
    QueueNotFoundError,
)
from rsmq.observability.tracing import create_span
from rsmq.store.keys import QueueKeys, meta_pattern, qname_from_meta_key
from rsmq.store.scripts import QueueScripts
from rsmq.types.queue import QueueAttributes
from rsmq.validation import (
    QNAME_PATTERN,
    validate_delay,
    validate_maxsize,
    validate_qname,
    validate_ttl,
    validate_vt,
)

logger = logging.getLogger(__name__)


class QueueRegistry:
    """
    Metadata CRUD for queues in one namespace.

    A queue exists exactly when its ``ns:q:Q`` hash exists.
    """

    def __init__(
        self,
        client: Any,
        scripts: QueueScripts,
        namespace: str,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the registry.

        Args:
            client: The redis.asyncio.Redis instance.
            scripts: Script handles registered on the same client.
            namespace: Key prefix isolating this engine's queues.
            clock: Returns the current time in seconds.
        """
        self._client = client
        self._scripts = scripts
        self._namespace = namespace
        self._clock = clock

    def keys(self, qname: str) -> QueueKeys:
        return QueueKeys(self._namespace, qname)

    def now(self) -> int:
        return int(self._clock())

    async def create_queue(
        self,
        qname: str,
        vt: int = DEFAULT_VT,
        delay: int = DEFAULT_DELAY,
        maxsize: int = DEFAULT_MAXSIZE,
        ttl: int | None = None,
    ) -> int:
        """
        Create a queue with all counters at zero.

        Args:
            qname: Queue name.
            vt: Default visibility timeout in seconds.
            delay: Default delivery delay in seconds.
            maxsize: Body size cap in bytes, or -1 for unlimited.
            ttl: Optional expiry of the metadata record in seconds.

        Returns:
            1 on success.

        Raises:
            ValidationError: If any argument is malformed.
            QueueExistsError: If the queue already exists.
        """
        validate_qname(qname)
        validate_vt(vt)
        validate_delay(delay)
        validate_maxsize(maxsize)
        if ttl is not None:
            validate_ttl(ttl)

        keys = self.keys(qname)
        with create_span(SPAN_CREATE_QUEUE, **{"rsmq.queue": qname}):
            created = await self._scripts.create_queue(
                keys=[keys.index, keys.meta],
                args=[vt, delay, maxsize, self.now(), "" if ttl is None else ttl],
            )

        if not int(created):
            raise QueueExistsError(qname)

        logger.info(
            "Created queue",
            extra={"qname": qname, "vt": vt, "delay": delay, "maxsize": maxsize},
        )
        return 1

    async def delete_queue(self, qname: str) -> int:
        """
        Delete a queue together with its message index.

        Deleting a missing queue is not an error.

        Returns:
            1 always.
        """
        validate_qname(qname)
        keys = self.keys(qname)
        with create_span(SPAN_DELETE_QUEUE, **{"rsmq.queue": qname}):
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.delete(keys.meta)
                pipe.delete(keys.index)
                removed, _ = await pipe.execute()

        logger.info("Deleted queue", extra={"qname": qname, "existed": bool(removed)})
        return 1

    async def list_queues(self) -> list[str]:
        """
        List the names of all queues in the namespace.

        Returns:
            Queue names, sorted.
        """
        names: set[str] = set()
        with create_span(SPAN_LIST_QUEUES, **{"rsmq.namespace": self._namespace}):
            async for key in self._client.scan_iter(match=meta_pattern(self._namespace)):
                if isinstance(key, bytes):
                    key = key.decode()
                qname = qname_from_meta_key(self._namespace, key)
                # skips keys of a longer namespace sharing this prefix
                if QNAME_PATTERN.fullmatch(qname):
                    names.add(qname)
        return sorted(names)

    async def queue_exists(self, qname: str) -> bool:
        """Check whether a queue's metadata record exists."""
        return bool(await self._client.exists(self.keys(qname).meta))

    async def load_attributes(self, qname: str) -> QueueAttributes:
        """
        Read a queue's attributes without validating its name.

        Raises:
            QueueNotFoundError: If the queue does not exist.
        """
        values = await self._client.hmget(self.keys(qname).meta, list(QUEUE_ATTRIBUTE_FIELDS))
        if values[0] is None:
            raise QueueNotFoundError(qname)
        return QueueAttributes.from_redis(values)

    async def get_queue_attributes(self, qname: str) -> QueueAttributes:
        """
        Get a queue's attributes and counters.

        Raises:
            ValidationError: If the name is malformed.
            QueueNotFoundError: If the queue does not exist.
        """
        validate_qname(qname)
        with create_span(SPAN_GET_ATTRIBUTES, **{"rsmq.queue": qname}):
            return await self.load_attributes(qname)

    async def set_queue_attributes(
        self,
        qname: str,
        vt: int | None = None,
        delay: int | None = None,
        maxsize: int | None = None,
    ) -> QueueAttributes:
        """
        Update a queue's defaults.

        Only supplied values are written; ``modified`` is always refreshed.

        Returns:
            The refreshed attributes.

        Raises:
            ValidationError: If the name or a supplied value is malformed.
            QueueNotFoundError: If the queue does not exist.
            NoAttributeSuppliedError: If vt, delay and maxsize are all None.
        """
        validate_qname(qname)
        if not await self.queue_exists(qname):
            raise QueueNotFoundError(qname)

        updates: dict[str, int] = {}
        if vt is not None:
            updates[FIELD_VT] = validate_vt(vt)
        if delay is not None:
            updates[FIELD_DELAY] = validate_delay(delay)
        if maxsize is not None:
            updates[FIELD_MAXSIZE] = validate_maxsize(maxsize)
        if not updates:
            raise NoAttributeSuppliedError(qname)
        updates[FIELD_MODIFIED] = self.now()

        with create_span(SPAN_SET_ATTRIBUTES, **{"rsmq.queue": qname}):
            await self._client.hset(self.keys(qname).meta, mapping=updates)

        logger.info("Updated queue attributes", extra={"qname": qname, **updates})
        return await self.load_attributes(qname)
