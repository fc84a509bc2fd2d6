"""Repository for Business entity and its quota counters."""

from typing import Any
from uuid import UUID

from sqlalchemy import update
from sqlmodel import col

from src.teamspace.models import Business, Role
from src.teamspace.repositories.base import BaseRepository, affected_rows

# role -> (counter column, per-business maximum column)
_QUOTA_COLUMNS: dict[Role, tuple[Any, Any]] = {
    Role.ADMIN: (Business.current_admins, Business.max_admins),
    Role.MEMBER: (Business.current_members, Business.max_members),
}


def quota_columns(role: Role) -> tuple[Any, Any]:
    """Counter and maximum columns for a counted role. KeyError if uncounted."""
    return _QUOTA_COLUMNS[role]


class BusinessRepository(BaseRepository[Business]):
    """Business data access.

    Counter changes are single conditional UPDATE statements so the check and
    the write happen in one step in the database, whichever process issues them.
    """

    model = Business

    async def try_increment(self, business_id: UUID, role: Role, ceiling: int) -> bool:
        """Increment the role counter iff it is below both maximum and ceiling."""
        current, maximum = quota_columns(role)
        result = await self.session.execute(
            update(Business)
            .where(
                col(Business.id) == business_id,
                current < maximum,
                current < ceiling,
            )
            .values({current: current + 1})
            .execution_options(synchronize_session=False)
        )
        return affected_rows(result) == 1

    async def try_decrement(self, business_id: UUID, role: Role) -> bool:
        """Decrement the role counter, never below zero."""
        current, _ = quota_columns(role)
        result = await self.session.execute(
            update(Business)
            .where(col(Business.id) == business_id, current > 0)
            .values({current: current - 1})
            .execution_options(synchronize_session=False)
        )
        return affected_rows(result) == 1

    async def get_fresh(self, business_id: UUID) -> Business | None:
        return await self.get_by_id(business_id, fresh=True)
