"""Business provisioning and lookup."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.teamspace.core.config import get_settings
from src.teamspace.core.errors import NotFound, PermissionDenied
from src.teamspace.core.logging import get_logger
from src.teamspace.core.permissions import can_access_business, has_permission
from src.teamspace.models import AuditAction, Business, Permission, User
from src.teamspace.repositories import BusinessRepository
from src.teamspace.services.audit_service import AuditService

logger = get_logger(__name__)


class BusinessService:
    def __init__(
        self,
        business_repo: BusinessRepository,
        audit_service: AuditService,
        session: AsyncSession,
    ):
        self.business_repo = business_repo
        self.audit_service = audit_service
        self.session = session

    async def create_business(
        self,
        actor: User,
        name: str,
        max_admins: int | None = None,
        max_members: int | None = None,
    ) -> Business:
        """Create a business with empty seat counters. SuperAdmin only."""
        if not has_permission(actor.role, Permission.MANAGE_ADMINS):
            raise PermissionDenied("Only a super admin can create businesses")

        settings = get_settings()
        business = Business(
            name=name,
            max_admins=settings.default_max_admins if max_admins is None else max_admins,
            max_members=settings.default_max_members if max_members is None else max_members,
            created_by_user_id=actor.id,
        )
        try:
            self.business_repo.add(business)
            await self.session.flush()
            self.audit_service.record(
                AuditAction.BUSINESS_CREATE,
                "business",
                entity_id=business.id,
                business_id=business.id,
                user_id=actor.id,
                changes={
                    "name": name,
                    "max_admins": business.max_admins,
                    "max_members": business.max_members,
                },
            )
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create business", error=str(e))
            raise

        logger.info("Business created", business_id=str(business.id))
        return business

    async def get_business(self, business_id: UUID, actor: User | None = None) -> Business:
        """Fetch a business. With an actor, only their own business is visible."""
        if actor is not None and not can_access_business(
            actor.role, actor.business_id, business_id
        ):
            raise PermissionDenied()
        business = await self.business_repo.get_fresh(business_id)
        if business is None:
            raise NotFound("Business not found")
        return business

    async def require_audit_access(self, actor: User, business_id: UUID) -> Business:
        if not has_permission(actor.role, Permission.VIEW_AUDIT_LOGS):
            raise PermissionDenied()
        return await self.get_business(business_id, actor)

