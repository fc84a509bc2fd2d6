from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field


class AdminRequestRead(BaseModel):
    id: UUID
    name: str
    email: str
    business_id: UUID
    message: str | None
    status: str
    requested_at: datetime
    processed_at: datetime | None
    processed_by_user_id: UUID | None
    reason: str | None

    model_config = {"from_attributes": True}


class AdminRequestDecision(BaseModel):
    status: Literal["approved", "rejected"]
    reason: str | None = Field(default=None, max_length=1000)
