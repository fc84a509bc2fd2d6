from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.teamspace.core.validators import check_password_strength
from src.teamspace.schemas.user import UserRead


class SignupRequest(BaseModel):
    """Signup payload.

    With a token the invitation decides role and business. Without one,
    business_id is required; requested_role "admin" files an admin request.
    """

    email: EmailStr
    password: str = Field(min_length=8, max_length=100)
    full_name: str = Field(min_length=1, max_length=100)
    token: str | None = Field(default=None, min_length=16, max_length=128)
    business_id: UUID | None = None
    requested_role: Literal["admin", "member"] | None = None
    message: str | None = Field(default=None, max_length=1000)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        return check_password_strength(v)


class SignupResponse(BaseModel):
    path: str
    user: UserRead | None = None
    access_token: str | None = None
    token_type: str = "bearer"
    admin_request_id: UUID | None = None
    request_status: str | None = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead
