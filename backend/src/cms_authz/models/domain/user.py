"""User and user group domain models."""

from pydantic import BaseModel


class User(BaseModel):
    """User domain model."""

    id: int
    login: str
    email: str | None = None
    name: str | None = None

    class Config:
        """Pydantic config."""

        from_attributes = True


class UserGroup(BaseModel):
    """User group domain model."""

    id: int
    name: str
    parent_id: int | None = None

    class Config:
        """Pydantic config."""

        from_attributes = True
