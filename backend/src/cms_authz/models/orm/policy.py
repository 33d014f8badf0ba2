"""Policy and policy limitation ORM models."""

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cms_authz.models.orm.base import Base, IntIdMixin, TimestampMixin


class PolicyORM(Base, IntIdMixin, TimestampMixin):
    """Policy database model."""

    __tablename__ = "policies"

    role_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    module: Mapped[str] = mapped_column(String(100), nullable=False)
    function: Mapped[str] = mapped_column(String(100), nullable=False)
    # True when every limitation applies
    limitations_wildcard: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Relationships
    role: Mapped["RoleORM"] = relationship("RoleORM", back_populates="policies")
    limitations: Mapped[list["PolicyLimitationORM"]] = relationship(
        "PolicyLimitationORM",
        back_populates="policy",
        order_by="PolicyLimitationORM.id",
        passive_deletes=True,
    )


class PolicyLimitationORM(Base, IntIdMixin):
    """One limitation kind of a policy and its values."""

    __tablename__ = "policy_limitations"

    policy_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("policies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    identifier: Mapped[str] = mapped_column(String(100), nullable=False)
    limitation_values: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    # Relationships
    policy: Mapped["PolicyORM"] = relationship("PolicyORM", back_populates="limitations")
