"""
Queue-related type definitions.
"""

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel

from rsmq.constants import QUEUE_ATTRIBUTE_FIELDS, UNLIMITED_MAXSIZE


def to_int(value: Any) -> int:
    if value is None or value == "" or value == b"":
        return 0
    if isinstance(value, bytes):
        value = value.decode()
    return int(value)


class QueueAttributes(BaseModel):
    """
    Attributes, counters and stats of a queue.

    `vt`, `delay` and `maxsize` are the queue defaults; the remaining
    fields are maintained by the engine.
    """

    vt: int
    delay: int
    maxsize: int
    created: int
    modified: int
    msgs: int
    totalsent: int
    totalrecv: int
    hiddenmsgs: int

    @property
    def unlimited(self) -> bool:
        """True when message bodies have no size cap."""
        return self.maxsize == UNLIMITED_MAXSIZE

    @classmethod
    def from_redis(cls, values: Sequence[Any]) -> "QueueAttributes":
        """Build from an HMGET reply ordered as QUEUE_ATTRIBUTE_FIELDS."""
        return cls(**{
            field: to_int(value)
            for field, value in zip(QUEUE_ATTRIBUTE_FIELDS, values)
        })
