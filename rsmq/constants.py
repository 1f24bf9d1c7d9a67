"""
Application constants.
Centralized location for all constant values used across the queue engine.
"""

from enum import StrEnum


class MessageState(StrEnum):
    """
    Message lifecycle states.

    State transitions:
    - PENDING -> LEASED (receive)
    - LEASED -> PENDING (lease deadline passed without delete)
    - LEASED -> DELETED (delete)
    - PENDING -> DELETED (pop or delete)
    """

    PENDING = "pending"
    LEASED = "leased"
    DELETED = "deleted"


# Queue defaults
DEFAULT_NAMESPACE = "rsmq"
DEFAULT_VT = 30
DEFAULT_DELAY = 0
DEFAULT_MAXSIZE = 65536

# Validation bounds
QNAME_MAX_LENGTH = 160
MIN_TIMEOUT = 0
MAX_TIMEOUT = 9_999_999
MIN_MAXSIZE = 1024
MAX_MAXSIZE = 65536
UNLIMITED_MAXSIZE = -1

# Message ids
ID_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
DEFAULT_ID_LENGTH = 22

# Metadata record fields
FIELD_VT = "vt"
FIELD_DELAY = "delay"
FIELD_MAXSIZE = "maxsize"
FIELD_CREATED = "created"
FIELD_MODIFIED = "modified"
FIELD_MSGS = "msgs"
FIELD_TOTALSENT = "totalsent"
FIELD_TOTALRECV = "totalrecv"
FIELD_HIDDENMSGS = "hiddenmsgs"

QUEUE_ATTRIBUTE_FIELDS: tuple[str, ...] = (
    FIELD_VT,
    FIELD_DELAY,
    FIELD_MAXSIZE,
    FIELD_CREATED,
    FIELD_MODIFIED,
    FIELD_MSGS,
    FIELD_TOTALSENT,
    FIELD_TOTALRECV,
    FIELD_HIDDENMSGS,
)

# Metrics names
METRIC_MESSAGES_SENT = "rsmq_messages_sent_total"
METRIC_MESSAGES_RECEIVED = "rsmq_messages_received_total"
METRIC_MESSAGES_POPPED = "rsmq_messages_popped_total"
METRIC_MESSAGES_DELETED = "rsmq_messages_deleted_total"
METRIC_VISIBILITY_CHANGES = "rsmq_visibility_changes_total"
METRIC_EMPTY_RECEIVES = "rsmq_empty_receives_total"
METRIC_REALTIME_FAILURES = "rsmq_realtime_publish_failures_total"
METRIC_QUEUE_DEPTH = "rsmq_queue_depth"

# Trace span names
SPAN_CREATE_QUEUE = "rsmq.create_queue"
SPAN_DELETE_QUEUE = "rsmq.delete_queue"
SPAN_LIST_QUEUES = "rsmq.list_queues"
SPAN_GET_ATTRIBUTES = "rsmq.get_queue_attributes"
SPAN_SET_ATTRIBUTES = "rsmq.set_queue_attributes"
SPAN_SEND_MESSAGE = "rsmq.send_message"
SPAN_RECEIVE_MESSAGE = "rsmq.receive_message"
SPAN_POP_MESSAGE = "rsmq.pop_message"
SPAN_CHANGE_VISIBILITY = "rsmq.change_message_visibility"
SPAN_DELETE_MESSAGE = "rsmq.delete_message"
