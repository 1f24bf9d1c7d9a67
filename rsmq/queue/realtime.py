"""
Realtime queue-depth notifications.

After each send the index size is published on ``{ns}rt:{qname}`` so
subscribers can wake up instead of polling. Publishing is best-effort and
runs outside the send transaction.
"""

import logging
from typing import Any

from redis.exceptions import RedisError

from rsmq.observability.metrics import MetricsCollector, get_metrics
from rsmq.store.keys import QueueKeys

logger = logging.getLogger(__name__)


class RealtimePublisher:
    """Publishes queue depth for one namespace."""

    def __init__(self, client: Any, namespace: str, metrics: MetricsCollector | None = None):
        self._client = client
        self._namespace = namespace
        self._metrics = metrics or get_metrics()

    async def publish_depth(self, qname: str) -> int | None:
        """
        Publish the current index size of a queue.

        Returns:
            The published depth, or None if publishing failed.
        """
        keys = QueueKeys(self._namespace, qname)
        try:
            depth = await self._client.zcard(keys.index)
            await self._client.publish(keys.realtime_channel, depth)
        except RedisError as e:
            # message is already stored at this point
            logger.warning(
                f"Realtime publish failed: {e}",
                extra={"qname": qname, "channel": keys.realtime_channel},
            )
            self._metrics.record_realtime_failure(qname)
            return None

        self._metrics.update_queue_depth(qname, depth)
        logger.debug("Published queue depth", extra={"qname": qname, "depth": depth})
        return depth
