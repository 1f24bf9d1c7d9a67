"""
Exception hierarchy for queue operations.

All errors raised by the engine inherit from RsmqError so callers can
catch every queue error with a single except clause. Connectivity errors
from the Redis client are not wrapped and propagate unchanged.
"""

from typing import Any


class RsmqError(Exception):
    """
    Base exception for queue operations.

    Attributes:
        kind: Stable identifier of the error kind.
        message: Human-readable error description.
        details: Additional error context (offending field, bounds).
    """

    kind = "rsmq_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(RsmqError):
    """Raised when a queue name, timeout, size, id or body is malformed."""

    kind = "validation_error"


class QueueNotFoundError(RsmqError):
    """Raised when the queue has no metadata record."""

    kind = "queue_not_found"

    def __init__(self, qname: str):
        super().__init__("Queue not found", details={"qname": qname})


class QueueExistsError(RsmqError):
    """Raised when creating a queue that already exists."""

    kind = "queue_exists"

    def __init__(self, qname: str):
        super().__init__("Queue already exists", details={"qname": qname})


class MessageNotFoundError(RsmqError):
    """Raised when a message id has no stored body in its queue."""

    kind = "message_not_found"

    def __init__(self, qname: str, message_id: str):
        super().__init__(
            "Message does not exist",
            details={"qname": qname, "id": message_id},
        )


class PayloadTooLargeError(RsmqError):
    """Raised when a message body exceeds the queue's maxsize."""

    kind = "payload_too_large"

    def __init__(self, qname: str, size: int, maxsize: int):
        super().__init__(
            "Message too long",
            details={"qname": qname, "size": size, "maxsize": maxsize},
        )


class NoAttributeSuppliedError(RsmqError):
    """Raised when set_queue_attributes is called with nothing to change."""

    kind = "no_attribute_supplied"

    def __init__(self, qname: str):
        super().__init__("No attribute was supplied", details={"qname": qname})
