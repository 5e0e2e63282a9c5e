"""Identifier helpers for the hosted backing store.

Primary keys and subject ids in the hosted store are UUIDs. Values arriving
from headers, sessions or sockets are untrusted strings; anything that is not
a UUID cannot match a row and is rejected before reaching the driver.
"""

from __future__ import annotations

import uuid


def normalize_uuid(value: str | None) -> str | None:
    """Return the canonical form of a UUID string, or None if it is not one."""
    if not value:
        return None
    try:
        return str(uuid.UUID(value.strip()))
    except (ValueError, AttributeError):
        return None
