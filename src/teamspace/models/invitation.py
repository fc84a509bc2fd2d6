"""Invitation model."""

from datetime import datetime
from uuid import UUID

from sqlmodel import Field, SQLModel

from src.teamspace.models.base import new_id, utc_now
from src.teamspace.models.enums import InvitationStatus, Role


class Invitation(SQLModel, table=True):
    """Single-use, time-limited invitation into a business.

    Only the SHA-256 hash of the token is stored. Expiry is evaluated lazily
    at read time, so a row may read PENDING after expires_at has passed.
    """

    __tablename__ = "invitations"

    id: UUID = Field(default_factory=new_id, primary_key=True)
    email: str = Field(max_length=255, index=True)
    role: str = Field(default=Role.MEMBER.value, max_length=20)
    business_id: UUID = Field(foreign_key="businesses.id", index=True)
    token_hash: str = Field(max_length=255, unique=True, index=True)
    status: str = Field(default=InvitationStatus.PENDING.value, max_length=20, index=True)
    expires_at: datetime
    invited_by_user_id: UUID = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)
    accepted_at: datetime | None = Field(default=None)
    accepted_by_user_id: UUID | None = Field(default=None, foreign_key="users.id")

    @property
    def status_enum(self) -> InvitationStatus:
        return InvitationStatus(self.status)

    def is_past_expiry(self, now: datetime) -> bool:
        return now > self.expires_at
