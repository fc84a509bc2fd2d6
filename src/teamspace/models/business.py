"""Business model - the tenant boundary and its quota record."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint
from sqlmodel import Field, SQLModel

from src.teamspace.models.base import new_id, utc_now


class Business(SQLModel, table=True):
    """Business with its per-role quota counters.

    current_admins / current_members always equal the number of active users
    holding that role in the business. They are only changed through
    conditional UPDATE statements (see BusinessRepository).
    """

    __tablename__ = "businesses"
    __table_args__ = (
        CheckConstraint("current_admins >= 0", name="ck_businesses_current_admins_non_negative"),
        CheckConstraint("current_members >= 0", name="ck_businesses_current_members_non_negative"),
        CheckConstraint("max_admins >= 0", name="ck_businesses_max_admins_non_negative"),
        CheckConstraint("max_members >= 0", name="ck_businesses_max_members_non_negative"),
    )

    id: UUID = Field(default_factory=new_id, primary_key=True)
    name: str = Field(max_length=100, index=True)
    max_admins: int = Field(default=20)
    max_members: int = Field(default=1000)
    current_admins: int = Field(default=0)
    current_members: int = Field(default=0)
    is_active: bool = Field(default=True)
    created_by_user_id: UUID | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
