"""Role assignment ORM model."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cms_authz.models.orm.base import Base, IntIdMixin


class RoleAssignmentORM(Base, IntIdMixin):
    """Binding of a role to a subject.

    ``subject_id`` points at the shared subject id space, so the row itself
    does not say whether the subject is a user or a user group.
    """

    __tablename__ = "role_assignments"

    role_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    subject_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("subjects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    limitation_identifier: Mapped[str | None] = mapped_column(String(100), nullable=True)
    limitation_values: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    # Relationships
    role: Mapped["RoleORM"] = relationship("RoleORM", back_populates="assignments")
