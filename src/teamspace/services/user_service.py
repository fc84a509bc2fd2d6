"""Membership management - role changes and deactivation."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.teamspace.core.errors import (
    NotFound,
    PermissionDenied,
    ProvisioningError,
    ValidationError,
)
from src.teamspace.core.logging import get_logger
from src.teamspace.core.permissions import can_access_business, can_manage_role
from src.teamspace.core.security import hash_password
from src.teamspace.models import AuditAction, Role, User
from src.teamspace.models.base import utc_now
from src.teamspace.repositories import UserRepository
from src.teamspace.services.audit_service import AuditService
from src.teamspace.services.quota_service import QuotaService

logger = get_logger(__name__)


class UserService:
    """User management service.

    Every role-mutating operation moves the quota counters in the same
    transaction as the user row, so counters never drift from a recount.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        quota_service: QuotaService,
        audit_service: AuditService,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.quota_service = quota_service
        self.audit_service = audit_service
        self.session = session

    async def get_user(self, actor: User, user_id: UUID) -> User:
        user = await self.user_repo.get_by_id(user_id, fresh=True)
        if user is None:
            raise NotFound("User not found")
        if user.id != actor.id and (
            user.business_id is None
            or not can_access_business(actor.role, actor.business_id, user.business_id)
        ):
            raise NotFound("User not found")
        return user

    async def list_members(
        self,
        actor: User,
        business_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[User], str | None, bool]:
        """Active users of a business, newest first."""
        if not can_access_business(actor.role, actor.business_id, business_id):
            raise PermissionDenied()
        return await self.user_repo.list_by_business(business_id, cursor=cursor, limit=limit)

    async def update_profile(
        self,
        user: User,
        full_name: str | None = None,
        password: str | None = None,
    ) -> User:
        """Update the caller's own display name or password. Never the role."""
        if full_name is not None:
            user.full_name = full_name
        if password is not None:
            user.hashed_password = hash_password(password)
        user.updated_at = utc_now()
        try:
            self.session.add(user)
            await self.session.commit()
            await self.session.refresh(user)
        except Exception:
            await self.session.rollback()
            raise
        return user

    async def change_role(self, actor: User, user_id: UUID, new_role: Role) -> User:
        """Move a user to another role, swapping quota seats atomically.

        The new seat is reserved before the old one is released, so a full
        target role fails with QuotaExceeded and leaves the user untouched.
        """
        if user_id == actor.id:
            raise ValidationError("You cannot change your own role")
        if not can_manage_role(actor.role, new_role):
            raise PermissionDenied(f"Your role cannot assign the {new_role.value} role")

        try:
            target, business_id = await self._get_managed(actor, user_id)
            old_role = target.role_enum
            if old_role is new_role:
                return target

            await self.quota_service.reserve(business_id, new_role)
            if not await self.user_repo.update_role_if(target.id, old_role, new_role):
                raise ValidationError("User was modified by another request, try again")
            await self.quota_service.release(business_id, old_role)

            self.audit_service.record(
                AuditAction.USER_ROLE_CHANGE,
                "user",
                entity_id=target.id,
                business_id=business_id,
                user_id=actor.id,
                changes={"role": {"old": old_role.value, "new": new_role.value}},
            )
            await self.session.commit()
            await self.session.refresh(target)
        except ProvisioningError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to change role", error=str(e))
            raise

        logger.info(
            "User role changed",
            target_user_id=str(target.id),
            old_role=old_role.value,
            new_role=new_role.value,
        )
        return target

    async def deactivate(self, actor: User, user_id: UUID) -> User:
        """Deactivate a user (never hard-deleted) and free their seat."""
        if user_id == actor.id:
            raise ValidationError("You cannot deactivate your own account")

        try:
            target, business_id = await self._get_managed(actor, user_id)
            role = target.role_enum

            if not await self.user_repo.deactivate_if_active(target.id):
                raise ValidationError("User is already inactive")
            await self.quota_service.release(business_id, role)

            self.audit_service.record(
                AuditAction.USER_DEACTIVATE,
                "user",
                entity_id=target.id,
                business_id=business_id,
                user_id=actor.id,
                changes={"role": role.value},
            )
            await self.session.commit()
            await self.session.refresh(target)
        except ProvisioningError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to deactivate user", error=str(e))
            raise

        logger.info("User deactivated", target_user_id=str(target.id), role=role.value)
        return target

    async def _get_managed(self, actor: User, user_id: UUID) -> tuple[User, UUID]:
        """Target user the actor has authority over, with the target's business."""
        target = await self.user_repo.get_by_id(user_id, fresh=True)
        if target is None or target.business_id is None:
            raise NotFound("User not found")
        if not can_access_business(actor.role, actor.business_id, target.business_id):
            raise NotFound("User not found")
        if not target.is_active:
            raise ValidationError("User is inactive")
        if not can_manage_role(actor.role, target.role):
            raise PermissionDenied(f"Your role cannot manage {target.role} users")
        return target, target.business_id
