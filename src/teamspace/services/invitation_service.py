"""Invitation lifecycle: create, validate, accept, resend, revoke.

An invitation leaves PENDING exactly once, always through a conditional
UPDATE on its status, and expiry is evaluated when the token is read rather
than by a background sweep.
"""

from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.teamspace.core.config import get_settings
from src.teamspace.core.errors import (
    InvalidInvitation,
    InvitationAlreadyConsumed,
    InvitationExpired,
    NotFound,
    PermissionDenied,
    ProvisioningError,
    ValidationError,
)
from src.teamspace.core.logging import get_logger
from src.teamspace.core.notifications import send_invitation_email
from src.teamspace.core.permissions import (
    can_access_business,
    can_manage_role,
    can_send_invite,
    has_permission,
)
from src.teamspace.core.security import generate_invitation_token, hash_password, hash_token
from src.teamspace.models import (
    AuditAction,
    Business,
    Invitation,
    InvitationStatus,
    Permission,
    Role,
    User,
)
from src.teamspace.models.base import utc_now
from src.teamspace.repositories import BusinessRepository, InvitationRepository, UserRepository
from src.teamspace.services.audit_service import AuditService
from src.teamspace.services.quota_service import QuotaService

logger = get_logger(__name__)

ENTITY_TYPE = "invitation"


def ensure_usable(invitation: Invitation, now: datetime) -> None:
    """Raise the error matching why an invitation cannot be used right now."""
    status = invitation.status_enum
    if status is InvitationStatus.ACCEPTED:
        raise InvitationAlreadyConsumed()
    if status is InvitationStatus.REVOKED:
        raise InvalidInvitation("Invitation has been revoked")
    if status is InvitationStatus.EXPIRED or invitation.is_past_expiry(now):
        raise InvitationExpired()


def ensure_still_pending(invitation: Invitation) -> None:
    """Stored status check for actions allowed on a pending-but-expired row."""
    status = invitation.status_enum
    if status is InvitationStatus.ACCEPTED:
        raise InvitationAlreadyConsumed()
    if status is not InvitationStatus.PENDING:
        raise InvalidInvitation(f"Invitation is {status.value}")


class InvitationService:
    def __init__(
        self,
        invitation_repo: InvitationRepository,
        user_repo: UserRepository,
        business_repo: BusinessRepository,
        quota_service: QuotaService,
        audit_service: AuditService,
        session: AsyncSession,
    ):
        self.invitation_repo = invitation_repo
        self.user_repo = user_repo
        self.business_repo = business_repo
        self.quota_service = quota_service
        self.audit_service = audit_service
        self.session = session

    async def create(
        self,
        actor: User,
        email: str,
        role: Role,
        business_id: UUID,
    ) -> tuple[Invitation, str]:
        """Create a pending invitation and email its link.

        The quota check here is advisory; the seat is reserved on accept.
        Nothing is persisted on failure.

        Returns:
            (invitation, plaintext_token). The plaintext token is never stored.
        """
        if not can_send_invite(actor.role, role):
            raise PermissionDenied(f"Your role cannot invite {role.value} users")
        if not can_access_business(actor.role, actor.business_id, business_id):
            raise PermissionDenied("You can only invite into your own business")

        settings = get_settings()
        email = email.lower().strip()
        now = utc_now()

        try:
            business = await self.business_repo.get_fresh(business_id)
            if business is None:
                raise NotFound("Business not found")
            if await self.user_repo.exists_by_email(email):
                raise ValidationError("A user with this email already exists")
            if await self.invitation_repo.get_live_for_email(email, business_id, now):
                raise ValidationError("A pending invitation already exists for this email")

            self.quota_service.check_available(business, role)

            token = generate_invitation_token()
            invitation = Invitation(
                email=email,
                role=role.value,
                business_id=business_id,
                token_hash=hash_token(token),
                status=InvitationStatus.PENDING.value,
                expires_at=now + timedelta(days=settings.invitation_expire_days),
                invited_by_user_id=actor.id,
                created_at=now,
            )
            self.invitation_repo.add(invitation)
            await self.session.flush()
            self.audit_service.record(
                AuditAction.INVITATION_CREATE,
                ENTITY_TYPE,
                entity_id=invitation.id,
                business_id=business_id,
                user_id=actor.id,
                changes={"role": role.value},
            )
            await self.session.commit()
        except ProvisioningError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create invitation", error=str(e))
            raise

        await self._dispatch(invitation, token, business, actor)
        logger.info(
            "Invitation created",
            invitation_id=str(invitation.id),
            business_id=str(business_id),
            role=role.value,
        )
        return invitation, token

    async def validate(self, token: str, business_id: UUID | None = None) -> Invitation:
        """Resolve a token to its invitation without changing anything.

        Raises:
            InvalidInvitation: Unknown token, business mismatch, or revoked.
            InvitationExpired: Expired, even if the stored status is still pending.
            InvitationAlreadyConsumed: Already accepted.
        """
        invitation = await self.invitation_repo.get_by_token_hash(hash_token(token))
        if invitation is None:
            raise InvalidInvitation()
        if business_id is not None and invitation.business_id != business_id:
            raise InvalidInvitation()
        ensure_usable(invitation, utc_now())
        return invitation

    async def accept(
        self,
        token: str,
        password: str,
        full_name: str,
        email: str | None = None,
    ) -> User:
        """Consume a token and provision its user.

        Status flip, seat reservation, user creation and audit entry commit
        together or not at all. The flip runs first so a concurrent second
        accept of the same token fails on the flip instead of on the quota.
        """
        token_hash = hash_token(token)
        hashed_password = hash_password(password)
        now = utc_now()

        try:
            invitation = await self.invitation_repo.get_by_token_hash(token_hash)
            if invitation is None:
                raise InvalidInvitation()

            pending = invitation.status_enum is InvitationStatus.PENDING
            if pending and invitation.is_past_expiry(now):
                await self._record_expiry(invitation)
                raise InvitationExpired()
            ensure_usable(invitation, now)

            if email is not None and email.lower().strip() != invitation.email.lower():
                raise ValidationError("Email does not match the invitation")
            if await self.user_repo.exists_by_email(invitation.email):
                raise ValidationError("A user with this email already exists")

            if not await self.invitation_repo.transition(
                invitation.id, InvitationStatus.ACCEPTED, accepted_at=now
            ):
                await self._raise_for_current_state(invitation.id, now)

            role = Role(invitation.role)
            await self.quota_service.reserve(invitation.business_id, role)

            user = User(
                email=invitation.email.lower(),
                hashed_password=hashed_password,
                full_name=full_name,
                role=role.value,
                business_id=invitation.business_id,
            )
            self.user_repo.add(user)
            try:
                await self.session.flush()
            except IntegrityError as e:
                raise ValidationError("A user with this email already exists") from e

            await self.invitation_repo.set_accepted_by(invitation.id, user.id)
            self.audit_service.record(
                AuditAction.INVITATION_ACCEPT,
                ENTITY_TYPE,
                entity_id=invitation.id,
                business_id=invitation.business_id,
                user_id=user.id,
                changes={"role": role.value},
            )
            await self.session.commit()
        except ProvisioningError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to accept invitation", error=str(e))
            raise

        logger.info(
            "Invitation accepted",
            invitation_id=str(invitation.id),
            user_id=str(user.id),
            business_id=str(user.business_id),
            role=user.role,
        )
        return user

    async def resend(self, invitation_id: UUID, actor: User) -> tuple[Invitation, str]:
        """Issue a new token for a pending invitation and push expiry out.

        The old token stops resolving; the invitation keeps its identity.
        """
        settings = get_settings()
        now = utc_now()

        try:
            invitation = await self._get_for_actor(invitation_id, actor)
            if not can_send_invite(actor.role, invitation.role):
                raise PermissionDenied(f"Your role cannot invite {invitation.role} users")
            ensure_still_pending(invitation)

            expires_at = now + timedelta(days=settings.invitation_expire_days)
            if expires_at <= invitation.expires_at:
                expires_at = invitation.expires_at + timedelta(seconds=1)

            token = generate_invitation_token()
            if not await self.invitation_repo.replace_token(
                invitation.id, hash_token(token), expires_at
            ):
                await self._raise_for_current_state(invitation.id, now)

            self.audit_service.record(
                AuditAction.INVITATION_RESEND,
                ENTITY_TYPE,
                entity_id=invitation.id,
                business_id=invitation.business_id,
                user_id=actor.id,
            )
            await self.session.commit()
            invitation = await self._reload(invitation.id)
            business = await self.business_repo.get_by_id(invitation.business_id)
        except ProvisioningError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to resend invitation", error=str(e))
            raise

        await self._dispatch(invitation, token, business, actor)
        logger.info("Invitation resent", invitation_id=str(invitation.id))
        return invitation, token

    async def revoke(self, invitation_id: UUID, actor: User) -> Invitation:
        """Move a pending invitation to REVOKED (terminal)."""
        try:
            invitation = await self._get_for_actor(invitation_id, actor)
            if not can_manage_role(actor.role, invitation.role):
                raise PermissionDenied(f"Your role cannot revoke {invitation.role} invitations")
            ensure_still_pending(invitation)

            if not await self.invitation_repo.transition(invitation.id, InvitationStatus.REVOKED):
                await self._raise_for_current_state(invitation.id, utc_now())

            self.audit_service.record(
                AuditAction.INVITATION_REVOKE,
                ENTITY_TYPE,
                entity_id=invitation.id,
                business_id=invitation.business_id,
                user_id=actor.id,
            )
            await self.session.commit()
            invitation = await self._reload(invitation.id)
        except ProvisioningError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to revoke invitation", error=str(e))
            raise

        logger.info("Invitation revoked", invitation_id=str(invitation.id))
        return invitation

    async def get(self, invitation_id: UUID, actor: User) -> Invitation:
        return await self._get_for_actor(invitation_id, actor)

    async def list_for_business(
        self,
        actor: User,
        business_id: UUID,
        status: InvitationStatus | None = None,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[Invitation], str | None, bool]:
        if not has_permission(actor.role, Permission.MANAGE_MEMBERS):
            raise PermissionDenied()
        if not can_access_business(actor.role, actor.business_id, business_id):
            raise PermissionDenied()
        return await self.invitation_repo.list_by_business(
            business_id, cursor=cursor, limit=limit, status=status
        )

    async def _get_for_actor(self, invitation_id: UUID, actor: User) -> Invitation:
        if not has_permission(actor.role, Permission.MANAGE_MEMBERS):
            raise PermissionDenied()
        invitation = await self.invitation_repo.get_by_id(invitation_id, fresh=True)
        if invitation is None:
            raise NotFound("Invitation not found")
        if not can_access_business(actor.role, actor.business_id, invitation.business_id):
            # Same answer as a missing row; other businesses' invitations are not disclosed
            raise NotFound("Invitation not found")
        return invitation

    async def _reload(self, invitation_id: UUID) -> Invitation:
        invitation = await self.invitation_repo.get_by_id(invitation_id, fresh=True)
        if invitation is None:
            raise NotFound("Invitation not found")
        return invitation

    async def _raise_for_current_state(self, invitation_id: UUID, now: datetime) -> None:
        """A conditional update matched nothing: report what the row became."""
        current = await self.invitation_repo.get_by_id(invitation_id, fresh=True)
        if current is None:
            raise InvalidInvitation()
        ensure_usable(current, now)
        raise InvalidInvitation()

    async def _record_expiry(self, invitation: Invitation) -> None:
        """Persist PENDING -> EXPIRED for a token found past its expiry."""
        if await self.invitation_repo.transition(invitation.id, InvitationStatus.EXPIRED):
            self.audit_service.record(
                AuditAction.INVITATION_EXPIRE,
                ENTITY_TYPE,
                entity_id=invitation.id,
                business_id=invitation.business_id,
            )
            await self.session.commit()
            logger.info("Invitation expired", invitation_id=str(invitation.id))

    async def _dispatch(
        self,
        invitation: Invitation,
        token: str,
        business: Business | None,
        actor: User,
    ) -> None:
        # Delivery outcome does not affect the invitation
        await send_invitation_email(
            to=invitation.email,
            token=token,
            business_name=business.name if business else "your team",
            inviter_name=actor.full_name,
            role=invitation.role,
        )
