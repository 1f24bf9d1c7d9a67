"""
Type definitions for the queue engine.
"""

from rsmq.types.message import ReceivedMessage
from rsmq.types.queue import QueueAttributes

__all__ = [
    "QueueAttributes",
    "ReceivedMessage",
]
