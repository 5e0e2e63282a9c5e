"""SQLAlchemy ORM models for the organizations and organization_members tables.

Organizations are the tenants of the platform. Both tables are owned by the
hosted backend; this service only reads them.
"""

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, CreatedAtMixin, TimestampMixin


class OrganizationModel(Base, TimestampMixin):
    """ORM model for organizations table.

    Note: slug is globally unique across the entire system.
    """

    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    owner_user_id: Mapped[str | None] = mapped_column(Uuid(as_uuid=False))
    plan: Mapped[str] = mapped_column(String(32), nullable=False, default="free")

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<OrganizationModel(id={self.id}, slug={self.slug})>"


class OrganizationMemberModel(Base, CreatedAtMixin):
    """ORM model for organization_members table.

    One row per (organization, user) pair; ``role`` is one of viewer,
    member, admin or owner.
    """

    __tablename__ = "organization_members"
    __table_args__ = (
        UniqueConstraint("organization_id", "user_id", name="uq_organization_member"),
    )

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True)
    organization_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(Uuid(as_uuid=False), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="member")

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<OrganizationMemberModel(organization_id={self.organization_id}, "
            f"user_id={self.user_id}, role={self.role})>"
        )
