"""
Queue module.
Contains the queue registry, the message lifecycle engine and realtime
notifications.
"""

from rsmq.queue.lifecycle import MessageLifecycle
from rsmq.queue.realtime import RealtimePublisher
from rsmq.queue.registry import QueueRegistry

__all__ = [
    "MessageLifecycle",
    "QueueRegistry",
    "RealtimePublisher",
]
