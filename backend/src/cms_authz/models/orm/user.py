"""Subject, user and user group ORM models."""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cms_authz.models.orm.base import Base, IntIdMixin, TimestampMixin


class SubjectORM(Base, IntIdMixin):
    """Shared id space for users and user groups."""

    __tablename__ = "subjects"

    subject_type: Mapped[str] = mapped_column(String(20), nullable=False)


class UserORM(Base, TimestampMixin):
    """User database model."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("subjects.id", ondelete="CASCADE"),
        primary_key=True,
    )
    login: Mapped[str] = mapped_column(String(150), unique=True, nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Relationships
    groups: Mapped[list["UserGroupORM"]] = relationship(
        "UserGroupORM",
        secondary="user_group_memberships",
        back_populates="members",
    )


class UserGroupORM(Base, TimestampMixin):
    """User group database model."""

    __tablename__ = "user_groups"

    id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("subjects.id", ondelete="CASCADE"),
        primary_key=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_groups.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Relationships
    members: Mapped[list["UserORM"]] = relationship(
        "UserORM",
        secondary="user_group_memberships",
        back_populates="groups",
    )


class UserGroupMembershipORM(Base):
    """User-UserGroup junction table."""

    __tablename__ = "user_group_memberships"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    group_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_groups.id", ondelete="CASCADE"),
        primary_key=True,
    )
