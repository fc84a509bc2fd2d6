from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.teamspace.core.validators import check_password_strength


class UserRead(BaseModel):
    id: UUID
    email: EmailStr
    full_name: str
    role: str
    business_id: UUID | None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class CurrentUserRead(UserRead):
    """The caller, with the permission set their current role grants."""

    permissions: list[str]


class UserUpdate(BaseModel):
    full_name: str | None = Field(None, min_length=1, max_length=100)
    password: str | None = Field(None, min_length=8, max_length=100)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return check_password_strength(v)


class RoleChangeRequest(BaseModel):
    role: Literal["admin", "member", "client"]
