"""
Store module.
Contains the Redis connection, key schema and atomic scripts.
"""

from rsmq.store.connection import create_client
from rsmq.store.keys import QueueKeys, meta_pattern, qname_from_meta_key
from rsmq.store.scripts import QueueScripts

__all__ = [
    "create_client",
    "QueueKeys",
    "QueueScripts",
    "meta_pattern",
    "qname_from_meta_key",
]
