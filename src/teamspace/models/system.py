"""System-wide state - the durable bootstrap marker."""

from datetime import datetime
from uuid import UUID

from sqlmodel import Field, SQLModel

from src.teamspace.models.base import utc_now

# The only legal primary key. A second insert violates the primary key,
# which is what makes the Uninitialized -> Initialized transition single-shot.
SYSTEM_STATE_ID = 1


class SystemState(SQLModel, table=True):
    """Presence of the row means the system is Initialized."""

    __tablename__ = "system_state"

    id: int = Field(default=SYSTEM_STATE_ID, primary_key=True)
    initialized_at: datetime = Field(default_factory=utc_now)
    first_user_id: UUID | None = Field(default=None)
