"""Audit trail for provisioning transitions."""

from typing import Any
from uuid import UUID

from asgi_correlation_id import correlation_id
from sqlalchemy.ext.asyncio import AsyncSession

from src.teamspace.core.logging import get_logger
from src.teamspace.models import AuditAction, AuditLog
from src.teamspace.repositories import AuditLogRepository

logger = get_logger(__name__)


class AuditService:
    """Records audit entries inside the caller's transaction.

    The entry commits or rolls back together with the change it describes,
    so there is never a log line for a transition that did not happen.
    """

    def __init__(self, audit_repo: AuditLogRepository, session: AsyncSession):
        self.audit_repo = audit_repo
        self.session = session

    def record(
        self,
        action: AuditAction,
        entity_type: str,
        entity_id: UUID | None = None,
        business_id: UUID | None = None,
        user_id: UUID | None = None,
        changes: dict[str, Any] | None = None,
    ) -> AuditLog:
        """Stage an audit entry. The caller commits."""
        audit_log = AuditLog(
            business_id=business_id,
            user_id=user_id,
            action=action.value,
            entity_type=entity_type,
            entity_id=entity_id,
            changes=changes,
            request_id=correlation_id.get(),
        )
        self.audit_repo.add(audit_log)
        logger.debug(
            "Audit log staged",
            action=audit_log.action,
            entity_type=entity_type,
            entity_id=str(entity_id) if entity_id else None,
        )
        return audit_log

    async def list_logs(
        self,
        business_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        action: str | None = None,
    ) -> tuple[list[AuditLog], str | None, bool]:
        return await self.audit_repo.list_by_business(
            business_id=business_id,
            cursor=cursor,
            limit=limit,
            action=action,
        )
