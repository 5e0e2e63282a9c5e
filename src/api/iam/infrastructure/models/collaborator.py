"""SQLAlchemy ORM model for the project_collaborators table.

Direct per-project grants; owned by the hosted backend and read-only here.
"""

from sqlalchemy import String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, CreatedAtMixin


class ProjectCollaboratorModel(Base, CreatedAtMixin):
    """ORM model for project_collaborators table.

    ``role`` is one of viewer, contributor, admin or owner.
    """

    __tablename__ = "project_collaborators"
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_collaborator"),
    )

    id: Mapped[str] = mapped_column(Uuid(as_uuid=False), primary_key=True)
    project_id: Mapped[str] = mapped_column(Uuid(as_uuid=False), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(Uuid(as_uuid=False), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="viewer")

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<ProjectCollaboratorModel(project_id={self.project_id}, "
            f"user_id={self.user_id}, role={self.role})>"
        )
