"""
Redis Simple Message Queue

A lightweight at-least-once message queue whose durability and atomicity
come from Redis: delayed visibility, leased delivery and receive counting
without a dedicated broker process.
"""

__version__ = "1.0.0"

from rsmq.engine import RedisSMQ  # noqa: E402
from rsmq.exceptions import (  # noqa: E402
    MessageNotFoundError,
    NoAttributeSuppliedError,
    PayloadTooLargeError,
    QueueExistsError,
    QueueNotFoundError,
    RsmqError,
    ValidationError,
)
from rsmq.types import QueueAttributes, ReceivedMessage  # noqa: E402

__all__ = [
    "RedisSMQ",
    "RsmqError",
    "ValidationError",
    "QueueNotFoundError",
    "QueueExistsError",
    "MessageNotFoundError",
    "PayloadTooLargeError",
    "NoAttributeSuppliedError",
    "QueueAttributes",
    "ReceivedMessage",
]
