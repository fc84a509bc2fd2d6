"""Repository for Invitation entity."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, update
from sqlmodel import col, select

from src.teamspace.models import Invitation, InvitationStatus
from src.teamspace.repositories.base import BaseRepository, affected_rows


class InvitationRepository(BaseRepository[Invitation]):
    model = Invitation

    async def get_by_token_hash(self, token_hash: str) -> Invitation | None:
        """Get an invitation by token hash regardless of status."""
        result = await self.session.execute(
            select(Invitation)
            .where(Invitation.token_hash == token_hash)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_live_for_email(
        self, email: str, business_id: UUID, now: datetime
    ) -> Invitation | None:
        """Pending, unexpired invitation for an email in a business."""
        result = await self.session.execute(
            select(Invitation).where(
                func.lower(Invitation.email) == email.lower(),
                Invitation.business_id == business_id,
                Invitation.status == InvitationStatus.PENDING.value,
                Invitation.expires_at > now,
            )
        )
        return result.scalars().first()

    async def transition(
        self,
        invitation_id: UUID,
        to_status: InvitationStatus,
        **values: Any,
    ) -> bool:
        """Move a PENDING invitation to to_status.

        Returns False when the row is no longer PENDING; terminal rows are
        never touched.
        """
        result = await self.session.execute(
            update(Invitation)
            .where(
                col(Invitation.id) == invitation_id,
                col(Invitation.status) == InvitationStatus.PENDING.value,
            )
            .values(status=to_status.value, **values)
            .execution_options(synchronize_session=False)
        )
        return affected_rows(result) == 1

    async def replace_token(
        self, invitation_id: UUID, token_hash: str, expires_at: datetime
    ) -> bool:
        """Swap in a new token hash and expiry while still PENDING."""
        result = await self.session.execute(
            update(Invitation)
            .where(
                col(Invitation.id) == invitation_id,
                col(Invitation.status) == InvitationStatus.PENDING.value,
            )
            .values(token_hash=token_hash, expires_at=expires_at)
            .execution_options(synchronize_session=False)
        )
        return affected_rows(result) == 1

    async def set_accepted_by(self, invitation_id: UUID, user_id: UUID) -> None:
        await self.session.execute(
            update(Invitation)
            .where(col(Invitation.id) == invitation_id)
            .values(accepted_by_user_id=user_id)
            .execution_options(synchronize_session=False)
        )

    async def list_by_business(
        self,
        business_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        status: InvitationStatus | None = None,
    ) -> tuple[list[Invitation], str | None, bool]:
        query = select(Invitation).where(Invitation.business_id == business_id)
        if status:
            query = query.where(Invitation.status == status.value)
        return await self.paginate(query, cursor, limit, Invitation.created_at)
