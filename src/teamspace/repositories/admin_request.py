"""Repository for AdminRequest entity."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, update
from sqlmodel import col, select

from src.teamspace.models import AdminRequest, AdminRequestStatus
from src.teamspace.repositories.base import BaseRepository, affected_rows


class AdminRequestRepository(BaseRepository[AdminRequest]):
    model = AdminRequest

    async def get_pending_for_email(self, email: str) -> AdminRequest | None:
        result = await self.session.execute(
            select(AdminRequest).where(
                func.lower(AdminRequest.email) == email.lower(),
                AdminRequest.status == AdminRequestStatus.PENDING.value,
            )
        )
        return result.scalars().first()

    async def transition(
        self,
        request_id: UUID,
        to_status: AdminRequestStatus,
        processed_by_user_id: UUID,
        processed_at: datetime,
        reason: str | None,
    ) -> bool:
        """Record a decision on a PENDING request in one statement.

        Status, processed_at and processed_by are written together; returns
        False if another decision got there first.
        """
        result = await self.session.execute(
            update(AdminRequest)
            .where(
                col(AdminRequest.id) == request_id,
                col(AdminRequest.status) == AdminRequestStatus.PENDING.value,
            )
            .values(
                status=to_status.value,
                processed_by_user_id=processed_by_user_id,
                processed_at=processed_at,
                reason=reason,
            )
            .execution_options(synchronize_session=False)
        )
        return affected_rows(result) == 1

    async def list_requests(
        self,
        status: AdminRequestStatus | None = None,
        business_id: UUID | None = None,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[AdminRequest], str | None, bool]:
        query = select(AdminRequest)
        if status:
            query = query.where(AdminRequest.status == status.value)
        if business_id:
            query = query.where(AdminRequest.business_id == business_id)
        return await self.paginate(query, cursor, limit, AdminRequest.requested_at)
