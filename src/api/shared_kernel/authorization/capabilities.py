"""Realm and capability vocabulary.

A realm is the operating mode of a tenant; it determines which platform-wide
capabilities are available. Capabilities gate entire feature areas.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType


class Realm(StrEnum):
    """Operating realm of a tenant."""

    FOUNDATION = "foundation"
    CORPORATION = "corporation"


class Capability(StrEnum):
    """Named permission unit gating a feature area."""

    CREDENTIAL_VERIFICATION = "credential_verification"
    IDENTITY_LINKING = "identity_linking"
    EDUCATION_PROGRAMS = "education_programs"
    COMMERCE = "commerce"
    SOCIAL = "social"
    MESSAGING = "messaging"
    MARKETPLACE = "marketplace"
    FILE_STORAGE = "file_storage"
    ANALYTICS = "analytics"


_FOUNDATION_CAPABILITIES = frozenset(
    {
        Capability.CREDENTIAL_VERIFICATION,
        Capability.IDENTITY_LINKING,
        Capability.EDUCATION_PROGRAMS,
    }
)

REALM_CAPABILITIES: Mapping[Realm, frozenset[Capability]] = MappingProxyType(
    {
        Realm.FOUNDATION: _FOUNDATION_CAPABILITIES,
        Realm.CORPORATION: _FOUNDATION_CAPABILITIES
        | {
            Capability.COMMERCE,
            Capability.SOCIAL,
            Capability.MESSAGING,
            Capability.MARKETPLACE,
            Capability.FILE_STORAGE,
            Capability.ANALYTICS,
        },
    }
)


def parse_realm(raw_value: str | None, default: Realm) -> Realm:
    """Parse a realm selector value, falling back to ``default``.

    Matching is case-insensitive and ignores surrounding whitespace.
    Unknown values fall back to the default rather than widening access.
    """
    if raw_value is None:
        return default
    try:
        return Realm(raw_value.strip().lower())
    except ValueError:
        return default
