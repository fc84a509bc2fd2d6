"""Repository for AuditLog entity."""

from uuid import UUID

from sqlmodel import select

from src.teamspace.models import AuditLog
from src.teamspace.repositories.base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    model = AuditLog

    async def list_by_business(
        self,
        business_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        action: str | None = None,
    ) -> tuple[list[AuditLog], str | None, bool]:
        """List audit logs for a business with cursor pagination.

        Args:
            business_id: Business to filter by
            cursor: Pagination cursor
            limit: Maximum items to return
            action: Optional action type filter

        Returns:
            Tuple of (logs, next_cursor, has_more)
        """
        query = select(AuditLog).where(AuditLog.business_id == business_id)
        if action:
            query = query.where(AuditLog.action == action)
        return await self.paginate(query, cursor, limit, AuditLog.created_at)

    async def list_by_entity(self, entity_type: str, entity_id: UUID) -> list[AuditLog]:
        result = await self.session.execute(
            select(AuditLog)
            .where(AuditLog.entity_type == entity_type, AuditLog.entity_id == entity_id)
            .order_by(AuditLog.created_at)  # type: ignore[arg-type]
        )
        return list(result.scalars().all())
