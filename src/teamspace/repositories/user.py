"""Repository for User entity."""

from uuid import UUID

from sqlalchemy import func, update
from sqlmodel import col, select

from src.teamspace.models import Role, User
from src.teamspace.models.base import utc_now
from src.teamspace.repositories.base import BaseRepository, affected_rows


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email address (case-insensitive)."""
        result = await self.session.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        return await self.get_by_email(email) is not None

    async def count_all(self) -> int:
        """Total users system-wide, active or not."""
        result = await self.session.execute(select(func.count()).select_from(User))
        return int(result.scalar_one())

    async def count_super_admins(self) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(User)
            .where(User.role == Role.SUPER_ADMIN.value, col(User.is_active).is_(True))
        )
        return int(result.scalar_one())

    async def count_active_by_role(self, business_id: UUID) -> dict[Role, int]:
        """Ground-truth count of active users per role in a business."""
        result = await self.session.execute(
            select(User.role, func.count())
            .where(User.business_id == business_id, col(User.is_active).is_(True))
            .group_by(User.role)
        )
        counts = {role: 0 for role in (Role.ADMIN, Role.MEMBER, Role.CLIENT)}
        for role, count in result.all():
            counts[Role(role)] = int(count)
        return counts

    async def list_by_business(
        self,
        business_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        include_inactive: bool = False,
    ) -> tuple[list[User], str | None, bool]:
        query = select(User).where(User.business_id == business_id)
        if not include_inactive:
            query = query.where(col(User.is_active).is_(True))
        return await self.paginate(query, cursor, limit, User.created_at)

    async def update_role_if(self, user_id: UUID, expected_role: Role, new_role: Role) -> bool:
        """Change role only if the active user still holds expected_role."""
        result = await self.session.execute(
            update(User)
            .where(
                col(User.id) == user_id,
                col(User.role) == expected_role.value,
                col(User.is_active).is_(True),
            )
            .values(role=new_role.value, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        return affected_rows(result) == 1

    async def deactivate_if_active(self, user_id: UUID) -> bool:
        result = await self.session.execute(
            update(User)
            .where(col(User.id) == user_id, col(User.is_active).is_(True))
            .values(is_active=False, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        return affected_rows(result) == 1
