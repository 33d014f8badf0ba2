"""Role ORM model."""

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cms_authz.models.orm.base import Base, IntIdMixin, TimestampMixin


class RoleORM(Base, IntIdMixin, TimestampMixin):
    """Role database model."""

    __tablename__ = "roles"

    identifier: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    main_language_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    # language code -> text
    names: Mapped[dict[str, str]] = mapped_column(JSON, default=dict, nullable=False)
    descriptions: Mapped[dict[str, str]] = mapped_column(JSON, default=dict, nullable=False)

    # Relationships
    policies: Mapped[list["PolicyORM"]] = relationship(
        "PolicyORM",
        back_populates="role",
        order_by="PolicyORM.id",
        passive_deletes=True,
    )
    assignments: Mapped[list["RoleAssignmentORM"]] = relationship(
        "RoleAssignmentORM",
        back_populates="role",
        order_by="RoleAssignmentORM.id",
        passive_deletes=True,
    )
