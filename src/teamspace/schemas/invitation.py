"""Invitation schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.teamspace.core.validators import check_password_strength


class InvitationCreateRequest(BaseModel):
    """Create an invitation. business_id defaults to the inviter's business."""

    email: EmailStr
    role: Literal["admin", "member", "client"] = "member"
    business_id: UUID | None = None


class InvitationRead(BaseModel):
    id: UUID
    email: str
    role: str
    business_id: UUID
    status: str
    expires_at: datetime
    invited_by_user_id: UUID
    created_at: datetime
    accepted_at: datetime | None = None

    model_config = {"from_attributes": True}


class InvitationIssuedResponse(InvitationRead):
    """Returned on create and resend; the only place the plaintext token appears."""

    token: str
    invitation_url: str


class InvitationValidateResponse(BaseModel):
    """Public info about a usable invitation (signup page)."""

    email: str
    role: str
    business_id: UUID
    business_name: str
    expires_at: datetime


class AcceptInvitationRequest(BaseModel):
    token: str = Field(min_length=16, max_length=128)
    password: str = Field(min_length=8, max_length=100)
    full_name: str = Field(min_length=1, max_length=100)
    email: EmailStr | None = None

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        return check_password_strength(v)
