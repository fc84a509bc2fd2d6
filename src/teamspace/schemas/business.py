from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class BusinessCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    max_admins: int | None = Field(default=None, ge=0)
    max_members: int | None = Field(default=None, ge=0)


class BusinessRead(BaseModel):
    id: UUID
    name: str
    max_admins: int
    max_members: int
    current_admins: int
    current_members: int
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class RoleQuotaRead(BaseModel):
    current: int
    limit: int | None = Field(description="Effective limit; null means unlimited")


class MemberQuotasResponse(BaseModel):
    """Read-only projection of the seat counters for one business."""

    super_admin: RoleQuotaRead
    admin: RoleQuotaRead
    member: RoleQuotaRead
    client: RoleQuotaRead
