"""Database infrastructure - shared engine and session primitives."""

from infrastructure.database.exceptions import translate_store_errors
from infrastructure.database.identifiers import normalize_uuid
from infrastructure.database.models import Base, CreatedAtMixin, TimestampMixin

__all__ = [
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    "normalize_uuid",
    "translate_store_errors",
]
