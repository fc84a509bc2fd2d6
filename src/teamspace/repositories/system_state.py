"""Repository for the singleton SystemState row."""

from uuid import UUID

from sqlalchemy import update
from sqlmodel import col, select

from src.teamspace.models import SYSTEM_STATE_ID, SystemState
from src.teamspace.repositories.base import BaseRepository


class SystemStateRepository(BaseRepository[SystemState]):
    model = SystemState

    async def get(self) -> SystemState | None:
        result = await self.session.execute(
            select(SystemState).where(SystemState.id == SYSTEM_STATE_ID)
        )
        return result.scalar_one_or_none()

    async def insert_marker(self) -> SystemState:
        """Insert the Initialized marker and flush.

        Raises sqlalchemy IntegrityError if the marker already exists.
        """
        marker = SystemState(id=SYSTEM_STATE_ID)
        self.session.add(marker)
        await self.session.flush()
        return marker

    async def set_first_user(self, user_id: UUID) -> None:
        await self.session.execute(
            update(SystemState)
            .where(col(SystemState.id) == SYSTEM_STATE_ID)
            .values(first_user_id=user_id)
            .execution_options(synchronize_session=False)
        )
