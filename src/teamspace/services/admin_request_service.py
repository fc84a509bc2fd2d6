"""Self-service requests for the Admin role, resolved by a human decision."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.teamspace.core.errors import (
    AlreadyProcessed,
    NotFound,
    PermissionDenied,
    ProvisioningError,
    ValidationError,
)
from src.teamspace.core.logging import get_logger
from src.teamspace.core.permissions import can_access_business, can_manage_role, has_permission
from src.teamspace.core.security import hash_password
from src.teamspace.models import (
    AdminRequest,
    AdminRequestStatus,
    AuditAction,
    Permission,
    Role,
    User,
)
from src.teamspace.models.base import utc_now
from src.teamspace.repositories import AdminRequestRepository, BusinessRepository, UserRepository
from src.teamspace.services.audit_service import AuditService
from src.teamspace.services.quota_service import QuotaService

logger = get_logger(__name__)

ENTITY_TYPE = "admin_request"

DECISIONS = (AdminRequestStatus.APPROVED, AdminRequestStatus.REJECTED)


class AdminRequestService:
    def __init__(
        self,
        admin_request_repo: AdminRequestRepository,
        user_repo: UserRepository,
        business_repo: BusinessRepository,
        quota_service: QuotaService,
        audit_service: AuditService,
        session: AsyncSession,
    ):
        self.admin_request_repo = admin_request_repo
        self.user_repo = user_repo
        self.business_repo = business_repo
        self.quota_service = quota_service
        self.audit_service = audit_service
        self.session = session

    async def submit(
        self,
        name: str,
        email: str,
        password: str,
        business_id: UUID,
        message: str | None = None,
    ) -> AdminRequest:
        """Record a pending request. No seat is taken until approval."""
        email = email.lower().strip()
        hashed_password = hash_password(password)

        try:
            if await self.business_repo.get_by_id(business_id) is None:
                raise NotFound("Business not found")
            if await self.user_repo.exists_by_email(email):
                raise ValidationError("A user with this email already exists")
            if await self.admin_request_repo.get_pending_for_email(email):
                raise ValidationError("An admin request for this email is already pending")

            request = AdminRequest(
                name=name,
                email=email,
                hashed_password=hashed_password,
                business_id=business_id,
                message=message,
            )
            self.admin_request_repo.add(request)
            await self.session.flush()
            self.audit_service.record(
                AuditAction.ADMIN_REQUEST_SUBMIT,
                ENTITY_TYPE,
                entity_id=request.id,
                business_id=business_id,
            )
            await self.session.commit()
        except ProvisioningError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to submit admin request", error=str(e))
            raise

        logger.info(
            "Admin request submitted",
            admin_request_id=str(request.id),
            business_id=str(business_id),
        )
        return request

    async def process(
        self,
        request_id: UUID,
        decision: AdminRequestStatus,
        actor: User,
        reason: str | None = None,
    ) -> AdminRequest:
        """Approve or reject a pending request.

        Approval re-reserves an admin seat at decision time and creates the
        Admin user in the same transaction as the status change. If no seat
        is left the call fails with QuotaExceeded and the request stays
        pending. A rejection stores reason verbatim and touches no quota.
        """
        if decision not in DECISIONS:
            raise ValidationError("Decision must be approved or rejected")
        if not has_permission(actor.role, Permission.MANAGE_MEMBERS):
            raise PermissionDenied()

        now = utc_now()
        try:
            request = await self.admin_request_repo.get_by_id(request_id, fresh=True)
            if request is None:
                raise NotFound("Admin request not found")
            if request.status_enum is not AdminRequestStatus.PENDING:
                raise AlreadyProcessed()
            if not can_access_business(actor.role, actor.business_id, request.business_id):
                raise PermissionDenied()
            if decision is AdminRequestStatus.APPROVED and not can_manage_role(
                actor.role, Role.ADMIN
            ):
                raise PermissionDenied("Only a super admin can approve admin access")

            if not await self.admin_request_repo.transition(
                request.id,
                decision,
                processed_by_user_id=actor.id,
                processed_at=now,
                reason=reason,
            ):
                raise AlreadyProcessed()

            changes: dict[str, str | None] = {"status": decision.value, "reason": reason}
            if decision is AdminRequestStatus.APPROVED:
                user = await self._provision_admin(request)
                changes["user_id"] = str(user.id)

            self.audit_service.record(
                AuditAction.ADMIN_REQUEST_APPROVE
                if decision is AdminRequestStatus.APPROVED
                else AuditAction.ADMIN_REQUEST_REJECT,
                ENTITY_TYPE,
                entity_id=request.id,
                business_id=request.business_id,
                user_id=actor.id,
                changes=changes,
            )
            await self.session.commit()
            await self.session.refresh(request)
        except ProvisioningError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to process admin request", error=str(e))
            raise

        logger.info(
            "Admin request processed",
            admin_request_id=str(request.id),
            decision=decision.value,
            processed_by=str(actor.id),
        )
        return request

    async def list_requests(
        self,
        actor: User,
        status: AdminRequestStatus | None = None,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[AdminRequest], str | None, bool]:
        """Requests newest first. Admins only see their own business."""
        if not has_permission(actor.role, Permission.MANAGE_MEMBERS):
            raise PermissionDenied()
        business_id = None if actor.role == Role.SUPER_ADMIN.value else actor.business_id
        return await self.admin_request_repo.list_requests(
            status=status, business_id=business_id, cursor=cursor, limit=limit
        )

    async def _provision_admin(self, request: AdminRequest) -> User:
        await self.quota_service.reserve(request.business_id, Role.ADMIN)
        if await self.user_repo.exists_by_email(request.email):
            raise ValidationError("A user with this email already exists")

        user = User(
            email=request.email,
            hashed_password=request.hashed_password,
            full_name=request.name,
            role=Role.ADMIN.value,
            business_id=request.business_id,
        )
        self.user_repo.add(user)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ValidationError("A user with this email already exists") from e
        return user
