"""Audit log model for provisioning transitions."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, Column, Index
from sqlmodel import Field, SQLModel

from src.teamspace.models.base import new_id, utc_now


class AuditAction(str, Enum):
    """Audit action types for type-safe logging."""

    SYSTEM_BOOTSTRAP = "system.bootstrap"
    USER_SIGNUP = "user.signup"
    USER_ROLE_CHANGE = "user.role_change"
    USER_DEACTIVATE = "user.deactivate"
    BUSINESS_CREATE = "business.create"
    INVITATION_CREATE = "invitation.create"
    INVITATION_ACCEPT = "invitation.accept"
    INVITATION_RESEND = "invitation.resend"
    INVITATION_REVOKE = "invitation.revoke"
    INVITATION_EXPIRE = "invitation.expire"
    ADMIN_REQUEST_SUBMIT = "admin_request.submit"
    ADMIN_REQUEST_APPROVE = "admin_request.approve"
    ADMIN_REQUEST_REJECT = "admin_request.reject"


class AuditLog(SQLModel, table=True):
    """Audit trail entry, written in the same transaction as the change it records."""

    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_business_created", "business_id", "created_at"),
        Index("ix_audit_logs_entity", "entity_type", "entity_id"),
    )

    id: UUID = Field(default_factory=new_id, primary_key=True)
    business_id: UUID | None = Field(default=None, index=True)
    user_id: UUID | None = Field(default=None, index=True)  # actor
    action: str = Field(max_length=50)
    entity_type: str = Field(max_length=50)  # "user", "business", "invitation", "admin_request"
    entity_id: UUID | None = Field(default=None)
    changes: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
    )
    request_id: str | None = Field(max_length=64, default=None)
    created_at: datetime = Field(default_factory=utc_now)
