"""Per-business role quotas.

Admin and Member seats are counted; Client seats are unlimited and SuperAdmins
belong to no business. A reservation is one conditional UPDATE, so it is safe
against any number of concurrent processes. Reservations made inside a
transaction are undone by rolling that transaction back.
"""

from dataclasses import dataclass
from uuid import UUID

from src.teamspace.core.config import get_settings
from src.teamspace.core.errors import NotFound, QuotaExceeded, ValidationError
from src.teamspace.core.logging import get_logger
from src.teamspace.models import Business, Role
from src.teamspace.repositories import BusinessRepository, UserRepository
from src.teamspace.repositories.business import quota_columns

logger = get_logger(__name__)

COUNTED_ROLES = (Role.ADMIN, Role.MEMBER)


@dataclass(frozen=True)
class RoleQuota:
    current: int
    limit: int | None


class QuotaService:
    def __init__(self, business_repo: BusinessRepository, user_repo: UserRepository):
        self.business_repo = business_repo
        self.user_repo = user_repo

    @staticmethod
    def ceiling_for(role: Role) -> int:
        settings = get_settings()
        if role is Role.ADMIN:
            return settings.global_admin_ceiling
        return settings.global_member_ceiling

    def effective_limit(self, business: Business, role: Role) -> int | None:
        """min(global ceiling, business maximum) for counted roles, None if unlimited."""
        if role not in COUNTED_ROLES:
            return None
        _, maximum = quota_columns(role)
        return min(self.ceiling_for(role), getattr(business, maximum.key))

    @staticmethod
    def current_count(business: Business, role: Role) -> int:
        current, _ = quota_columns(role)
        return int(getattr(business, current.key))

    async def reserve(self, business_id: UUID, role: Role) -> None:
        """Take one seat for role, atomically.

        Raises:
            QuotaExceeded: No seat left; nothing was changed.
            NotFound: The business does not exist.
            ValidationError: SuperAdmin seats cannot be reserved.
        """
        if role is Role.SUPER_ADMIN:
            raise ValidationError("Super admins do not belong to a business")
        if role not in COUNTED_ROLES:
            return

        if await self.business_repo.try_increment(business_id, role, self.ceiling_for(role)):
            logger.info("Quota reserved", business_id=str(business_id), role=role.value)
            return

        if await self.business_repo.get_fresh(business_id) is None:
            raise NotFound("Business not found")
        logger.info("Quota exhausted", business_id=str(business_id), role=role.value)
        raise QuotaExceeded(f"No {role.value} seats left in this business")

    async def release(self, business_id: UUID, role: Role) -> None:
        """Give one seat back. Never drives a counter below zero."""
        if role not in COUNTED_ROLES:
            return
        if await self.business_repo.try_decrement(business_id, role):
            logger.info("Quota released", business_id=str(business_id), role=role.value)
        else:
            logger.warning(
                "Quota release found counter at zero",
                business_id=str(business_id),
                role=role.value,
            )

    def check_available(self, business: Business, role: Role) -> None:
        """Non-binding pre-check; the binding check is reserve()."""
        limit = self.effective_limit(business, role)
        if limit is not None and self.current_count(business, role) >= limit:
            raise QuotaExceeded(f"No {role.value} seats left in this business")

    async def get_quotas(self, business_id: UUID) -> dict[Role, RoleQuota]:
        business = await self.business_repo.get_fresh(business_id)
        if business is None:
            raise NotFound("Business not found")
        counts = await self.user_repo.count_active_by_role(business_id)
        return {
            Role.SUPER_ADMIN: RoleQuota(current=await self.user_repo.count_super_admins(), limit=1),
            Role.ADMIN: RoleQuota(
                current=business.current_admins,
                limit=self.effective_limit(business, Role.ADMIN),
            ),
            Role.MEMBER: RoleQuota(
                current=business.current_members,
                limit=self.effective_limit(business, Role.MEMBER),
            ),
            Role.CLIENT: RoleQuota(current=counts[Role.CLIENT], limit=None),
        }

    async def recount(self, business_id: UUID) -> dict[Role, int]:
        """Ground truth: active users per role, counted from the users table."""
        return await self.user_repo.count_active_by_role(business_id)
