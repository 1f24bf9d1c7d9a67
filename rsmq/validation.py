"""
Input validation for queue and message operations.

Every check raises ValidationError naming the offending field before any
command reaches Redis.
"""

import re
from typing import Any

from rsmq.constants import (
    DEFAULT_ID_LENGTH,
    MAX_MAXSIZE,
    MAX_TIMEOUT,
    MIN_MAXSIZE,
    MIN_TIMEOUT,
    QNAME_MAX_LENGTH,
    UNLIMITED_MAXSIZE,
)
from rsmq.exceptions import ValidationError
from rsmq.ids import id_pattern

QNAME_PATTERN = re.compile(rf"[A-Za-z0-9_-]{{1,{QNAME_MAX_LENGTH}}}")


def _is_int(value: Any) -> bool:
    # bool is an int subclass but never a valid timeout or size
    return isinstance(value, int) and not isinstance(value, bool)


def _missing(item: str) -> ValidationError:
    return ValidationError(f"No {item} supplied", details={"field": item})


def _invalid_format(item: str) -> ValidationError:
    return ValidationError(f"Invalid {item} format", details={"field": item})


def _out_of_range(item: str, minimum: int, maximum: int) -> ValidationError:
    return ValidationError(
        f"{item} must be between {minimum} and {maximum}",
        details={"field": item, "min": minimum, "max": maximum},
    )


def validate_qname(qname: Any) -> str:
    """Check a queue name against [A-Za-z0-9_-]{1,160}."""
    if qname is None or qname == "":
        raise _missing("qname")
    if not isinstance(qname, str) or not QNAME_PATTERN.fullmatch(qname):
        raise _invalid_format("qname")
    return qname


def validate_namespace(namespace: Any) -> str:
    """Check a key namespace is a non-empty string without a colon."""
    if namespace is None or namespace == "":
        raise _missing("ns")
    if not isinstance(namespace, str) or ":" in namespace:
        raise _invalid_format("ns")
    return namespace


def _validate_timeout(item: str, value: Any) -> int:
    if not _is_int(value) or not MIN_TIMEOUT <= value <= MAX_TIMEOUT:
        raise _out_of_range(item, MIN_TIMEOUT, MAX_TIMEOUT)
    return value


def validate_vt(vt: Any) -> int:
    """Check a visibility timeout is an integer in [0, 9999999]."""
    return _validate_timeout("vt", vt)


def validate_delay(delay: Any) -> int:
    """Check a delay is an integer in [0, 9999999]."""
    return _validate_timeout("delay", delay)


def validate_maxsize(maxsize: Any) -> int:
    """Check maxsize is -1 (unlimited) or an integer in [1024, 65536]."""
    if not _is_int(maxsize) or not (
        maxsize == UNLIMITED_MAXSIZE or MIN_MAXSIZE <= maxsize <= MAX_MAXSIZE
    ):
        raise _out_of_range("maxsize", MIN_MAXSIZE, MAX_MAXSIZE)
    return maxsize


def validate_ttl(ttl: Any) -> int:
    """Check a metadata expiry is a positive integer of seconds."""
    if not _is_int(ttl) or ttl <= 0:
        raise ValidationError("ttl must be a positive integer", details={"field": "ttl"})
    return ttl


def validate_message_id(message_id: Any, length: int = DEFAULT_ID_LENGTH) -> str:
    """Check a message id has the generator's alphabet and length."""
    if message_id is None or message_id == "":
        raise _missing("id")
    if not isinstance(message_id, str) or not id_pattern(length).fullmatch(message_id):
        raise _invalid_format("id")
    return message_id


def validate_message(message: Any) -> str | bytes:
    """Check a message body is textual (str or bytes)."""
    if message is None:
        raise _missing("message")
    if not isinstance(message, (str, bytes)):
        raise ValidationError("Message must be a string", details={"field": "message"})
    return message


def message_size(message: str | bytes) -> int:
    """Size of a message body in bytes as stored in Redis."""
    if isinstance(message, bytes):
        return len(message)
    return len(message.encode("utf-8"))
