"""
Redis key schema.

For namespace ``ns`` and queue ``q``:
- ``ns:q``      sorted set, message id -> eligibility / lease deadline
- ``ns:q:Q``    hash, queue attributes plus message bodies and side-fields
- ``nsrt:q``    pub/sub channel carrying the index size after each send
"""

from dataclasses import dataclass

META_SUFFIX = ":Q"


@dataclass(frozen=True)
class QueueKeys:
    """Keys and hash fields belonging to one queue."""

    namespace: str
    qname: str

    @property
    def index(self) -> str:
        return f"{self.namespace}:{self.qname}"

    @property
    def meta(self) -> str:
        return f"{self.index}{META_SUFFIX}"

    @property
    def realtime_channel(self) -> str:
        return f"{self.namespace}rt:{self.qname}"

    @staticmethod
    def rc_field(message_id: str) -> str:
        return f"{message_id}:rc"

    @staticmethod
    def fr_field(message_id: str) -> str:
        return f"{message_id}:fr"

    @staticmethod
    def sent_field(message_id: str) -> str:
        return f"{message_id}:sent"

    @staticmethod
    def binary_field(message_id: str) -> str:
        return f"{message_id}:bin"

    def message_fields(self, message_id: str) -> tuple[str, ...]:
        """Body field and every side-field stored for a message."""
        return (
            message_id,
            self.rc_field(message_id),
            self.fr_field(message_id),
            self.sent_field(message_id),
            self.binary_field(message_id),
        )


def meta_pattern(namespace: str) -> str:
    """Glob matching every metadata record in a namespace."""
    return f"{namespace}:*{META_SUFFIX}"


def qname_from_meta_key(namespace: str, key: str) -> str:
    """Extract the queue name from a ``ns:q:Q`` key."""
    return key[len(namespace) + 1 : -len(META_SUFFIX)]
