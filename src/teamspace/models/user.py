"""User model."""

from datetime import datetime
from uuid import UUID

from sqlmodel import Field, SQLModel

from src.teamspace.models.base import new_id, utc_now
from src.teamspace.models.enums import Role


class User(SQLModel, table=True):
    """A workspace user. Never hard-deleted; deactivation flips is_active."""

    __tablename__ = "users"

    id: UUID = Field(default_factory=new_id, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    hashed_password: str = Field(max_length=255)
    full_name: str = Field(max_length=100)
    role: str = Field(default=Role.MEMBER.value, max_length=20, index=True)
    # NULL only for super admins
    business_id: UUID | None = Field(default=None, foreign_key="businesses.id", index=True)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def role_enum(self) -> Role:
        return Role(self.role)
