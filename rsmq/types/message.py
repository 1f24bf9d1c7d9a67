"""
Message-related type definitions.
"""

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel

from rsmq.types.queue import to_int


def _text(value: str | bytes) -> str:
    return value.decode() if isinstance(value, bytes) else value


class ReceivedMessage(BaseModel):
    """
    A message handed out by receive or pop.

    `message` has the type it was sent with: bytes bodies come back as
    bytes, text bodies as str. `sent` is the send timestamp, `fr` the
    first-receive timestamp and `rc` the number of times the message has
    been received (all seconds).
    """

    id: str
    message: str | bytes
    sent: int
    fr: int
    rc: int

    @classmethod
    def from_script(cls, reply: Sequence[Any]) -> "ReceivedMessage | None":
        """
        Build from a receive/pop script reply.

        Args:
            reply: ``[id, body, rc, fr, sent, binary]`` or an empty list.

        Returns:
            The message, or None when no message was eligible.
        """
        if not reply:
            return None
        message_id, body, rc, fr, sent, binary = reply
        if to_int(binary):
            message = body.encode() if isinstance(body, str) else body
        else:
            message = _text(body)
        return cls(
            id=_text(message_id),
            message=message,
            rc=to_int(rc),
            fr=to_int(fr),
            sent=to_int(sent),
        )
