"""First-user bootstrap.

The system moves from Uninitialized to Initialized exactly once: the first
signup inserts the singleton system_state row, and the primary key on that row
guarantees a concurrent second claim fails.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.teamspace.core.logging import get_logger
from src.teamspace.models import User
from src.teamspace.repositories import SystemStateRepository, UserRepository

logger = get_logger(__name__)


class BootstrapService:
    def __init__(
        self,
        system_state_repo: SystemStateRepository,
        user_repo: UserRepository,
        session: AsyncSession,
    ):
        self.system_state_repo = system_state_repo
        self.user_repo = user_repo
        self.session = session

    async def is_first_user(self) -> bool:
        """Read-only probe. Only claim() is authoritative."""
        if await self.system_state_repo.get() is not None:
            return False
        return await self.user_repo.count_all() == 0

    async def claim(self) -> bool:
        """Try to take the bootstrap slot inside the current transaction.

        On success the marker row is flushed but not committed; the caller
        creates the first user, calls mark_first_user() and commits. A lost
        race rolls the session back and returns False, leaving the session
        ready for the normal signup path.
        """
        if await self.user_repo.count_all() > 0:
            return False
        try:
            await self.system_state_repo.insert_marker()
        except IntegrityError:
            await self.session.rollback()
            logger.info("Bootstrap claim lost to a concurrent signup")
            return False
        logger.info("Bootstrap claim acquired")
        return True

    async def mark_first_user(self, user: User) -> None:
        await self.system_state_repo.set_first_user(user.id)
