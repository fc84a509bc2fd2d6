"""Self-service admin access request model."""

from datetime import datetime
from uuid import UUID

from sqlmodel import Field, SQLModel

from src.teamspace.models.base import new_id, utc_now
from src.teamspace.models.enums import AdminRequestStatus


class AdminRequest(SQLModel, table=True):
    """Request for the Admin role, resolved by a human decision.

    processed_at and processed_by_user_id are written together, once,
    by the same statement that moves status out of PENDING.
    """

    __tablename__ = "admin_requests"

    id: UUID = Field(default_factory=new_id, primary_key=True)
    name: str = Field(max_length=100)
    email: str = Field(max_length=255, index=True)
    hashed_password: str = Field(max_length=255)
    business_id: UUID = Field(foreign_key="businesses.id", index=True)
    message: str | None = Field(default=None, max_length=1000)
    status: str = Field(default=AdminRequestStatus.PENDING.value, max_length=20, index=True)
    requested_at: datetime = Field(default_factory=utc_now)
    processed_at: datetime | None = Field(default=None)
    processed_by_user_id: UUID | None = Field(default=None, foreign_key="users.id")
    reason: str | None = Field(default=None, max_length=1000)

    @property
    def status_enum(self) -> AdminRequestStatus:
        return AdminRequestStatus(self.status)
