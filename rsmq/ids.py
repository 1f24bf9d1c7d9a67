"""
Message id generation.
"""

import re
import secrets

from rsmq.constants import DEFAULT_ID_LENGTH, ID_ALPHABET


def make_id(length: int = DEFAULT_ID_LENGTH) -> str:
    """
    Generate an opaque message id.

    Ids are random strings over the 62-character alphanumeric alphabet.
    They carry no ordering and are not unique by construction.

    Args:
        length: Number of characters in the id.

    Returns:
        The generated id.
    """
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


def id_pattern(length: int = DEFAULT_ID_LENGTH) -> re.Pattern[str]:
    """Compiled pattern matching ids produced by make_id(length)."""
    return re.compile(rf"[A-Za-z0-9]{{{length}}}")
