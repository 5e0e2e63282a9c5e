"""SQLAlchemy declarative base and shared column mixins.

The tables mapped here are owned by the hosted backend; models only describe
the columns this service reads (and, for alerts, updates). Timestamps are
filled in by the database, never by this service.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for the hosted-store ORM models."""


class CreatedAtMixin:
    """Mixin for the created_at column present on every hosted table."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


class TimestampMixin(CreatedAtMixin):
    """Mixin adding updated_at for tables with mutable metadata."""

    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
