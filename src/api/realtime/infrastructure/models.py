"""SQLAlchemy ORM models for the tables the event hub reads.

All of these tables are owned by the hosted backend. The hub reads them
and only ever updates the resolution columns of ``aethex_alerts``.
"""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
    column,
    table,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from infrastructure.database.models import Base, CreatedAtMixin


class AlertModel(Base, CreatedAtMixin):
    """ORM model for aethex_alerts table."""

    __tablename__ = "aethex_alerts"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    severity: Mapped[str] = mapped_column(String(32), nullable=False, default="info")
    is_resolved: Mapped[bool | None] = mapped_column(Boolean, default=False)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<AlertModel(id={self.id}, severity={self.severity})>"


class AchievementModel(Base):
    """ORM model for achievements table."""

    __tablename__ = "achievements"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    xp_reward: Mapped[int | None] = mapped_column(Integer, default=0)


class UserAchievementModel(Base):
    """ORM model for user_achievements table.

    One row per achievement a user has earned.
    """

    __tablename__ = "user_achievements"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True)
    user_id: Mapped[str] = mapped_column(Uuid(as_uuid=False), nullable=False, index=True)
    achievement_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("achievements.id", ondelete="CASCADE"),
        nullable=False,
    )
    earned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    achievement: Mapped[AchievementModel] = relationship(lazy="joined")


class ProfileModel(Base):
    """ORM model for profiles table (only the columns metrics aggregate)."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True)
    status: Mapped[str | None] = mapped_column(String(32))
    is_verified: Mapped[bool | None] = mapped_column(Boolean)
    total_xp: Mapped[int | None] = mapped_column(Integer)
    level: Mapped[int | None] = mapped_column(Integer)


class ApplicationModel(Base):
    """ORM model for applications table."""

    __tablename__ = "applications"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True)
    full_name: Mapped[str | None] = mapped_column(Text)
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


# Projects are only counted here; the full mapping lives with resource access.
projects_table = table("projects", column("id"))
