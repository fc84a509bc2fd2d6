"""Authentication service - signup routing and sessions."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.teamspace.core.errors import (
    InvalidCredentials,
    NotFound,
    ProvisioningError,
    ValidationError,
)
from src.teamspace.core.logging import get_logger
from src.teamspace.core.security import (
    create_access_token,
    dummy_password_hash,
    hash_password,
    verify_password,
)
from src.teamspace.models import AdminRequest, AuditAction, Role, SignupPath, User
from src.teamspace.repositories import BusinessRepository, UserRepository
from src.teamspace.services.admin_request_service import AdminRequestService
from src.teamspace.services.audit_service import AuditService
from src.teamspace.services.bootstrap_service import BootstrapService
from src.teamspace.services.invitation_service import InvitationService
from src.teamspace.services.quota_service import QuotaService

logger = get_logger(__name__)


@dataclass
class SignupResult:
    """Outcome of a signup.

    user and access_token are None when the signup only filed an admin request.
    """

    path: SignupPath
    user: User | None = None
    access_token: str | None = None
    admin_request: AdminRequest | None = None


class AuthService:
    """Routes signups to exactly one provisioning path and issues sessions.

    Holds no role logic of its own; sessions carry identity only and the role
    is re-read from the database on every request.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        business_repo: BusinessRepository,
        bootstrap_service: BootstrapService,
        invitation_service: InvitationService,
        admin_request_service: AdminRequestService,
        quota_service: QuotaService,
        audit_service: AuditService,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.business_repo = business_repo
        self.bootstrap_service = bootstrap_service
        self.invitation_service = invitation_service
        self.admin_request_service = admin_request_service
        self.quota_service = quota_service
        self.audit_service = audit_service
        self.session = session

    async def signup(
        self,
        email: str,
        password: str,
        full_name: str,
        token: str | None = None,
        business_id: UUID | None = None,
        requested_role: Role | None = None,
        message: str | None = None,
    ) -> SignupResult:
        """Provision a new account.

        Routing, first match wins:
        1. Empty system: the bootstrap claim makes this user the SuperAdmin.
        2. Invitation token present: accept it.
        3. Admin role requested: file an admin request, no user yet.
        4. Otherwise: direct Member signup into business_id.
        """
        email = email.lower().strip()

        user = await self._try_bootstrap(email, password, full_name)
        if user is not None:
            return self._issue(SignupPath.BOOTSTRAP, user)

        if token:
            user = await self.invitation_service.accept(
                token, password=password, full_name=full_name, email=email
            )
            return self._issue(SignupPath.INVITATION, user)

        if requested_role is Role.ADMIN:
            if business_id is None:
                raise ValidationError("A business is required to request admin access")
            request = await self.admin_request_service.submit(
                name=full_name,
                email=email,
                password=password,
                business_id=business_id,
                message=message,
            )
            return SignupResult(path=SignupPath.ADMIN_REQUEST, admin_request=request)

        user = await self._direct_signup(email, password, full_name, business_id, requested_role)
        return self._issue(SignupPath.DIRECT, user)

    async def login(self, email: str, password: str) -> tuple[User, str]:
        """Verify credentials and issue a session. No role logic happens here."""
        user = await self.user_repo.get_by_email(email.lower().strip())

        # Always verify so response time does not reveal whether the email exists
        password_hash = user.hashed_password if user else dummy_password_hash()
        password_valid = verify_password(password, password_hash)

        if user is None or not password_valid or not user.is_active:
            logger.info("Login failed")
            raise InvalidCredentials("Invalid email or password")

        logger.info("User logged in", user_id=str(user.id))
        return user, create_access_token(user.id)

    async def refresh_user(self, user_id: UUID) -> User:
        """Re-read the user's current role and business from the database."""
        user = await self.user_repo.get_by_id(user_id, fresh=True)
        if user is None or not user.is_active:
            raise InvalidCredentials("Session is no longer valid")
        return user

    async def logout(self, user: User) -> None:
        """Nothing is held server side; the client discards its token."""
        logger.info("User logged out", user_id=str(user.id))

    async def _try_bootstrap(self, email: str, password: str, full_name: str) -> User | None:
        try:
            if not await self.bootstrap_service.claim():
                # End the probe transaction; each path opens its own
                await self.session.rollback()
                return None

            user = User(
                email=email,
                hashed_password=hash_password(password),
                full_name=full_name,
                role=Role.SUPER_ADMIN.value,
                business_id=None,
            )
            self.user_repo.add(user)
            await self.session.flush()
            await self.bootstrap_service.mark_first_user(user)
            self.audit_service.record(
                AuditAction.SYSTEM_BOOTSTRAP,
                "user",
                entity_id=user.id,
                user_id=user.id,
                changes={"role": Role.SUPER_ADMIN.value},
            )
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error("Bootstrap signup failed", error=str(e))
            raise

        logger.info("System initialized", user_id=str(user.id))
        return user

    async def _direct_signup(
        self,
        email: str,
        password: str,
        full_name: str,
        business_id: UUID | None,
        requested_role: Role | None,
    ) -> User:
        if requested_role not in (None, Role.MEMBER):
            raise ValidationError("Only member accounts can be created without an invitation")
        if business_id is None:
            raise ValidationError("A business is required to sign up")

        hashed_password = hash_password(password)
        try:
            if await self.business_repo.get_by_id(business_id) is None:
                raise NotFound("Business not found")
            if await self.user_repo.exists_by_email(email):
                raise ValidationError("A user with this email already exists")

            await self.quota_service.reserve(business_id, Role.MEMBER)
            user = User(
                email=email,
                hashed_password=hashed_password,
                full_name=full_name,
                role=Role.MEMBER.value,
                business_id=business_id,
            )
            self.user_repo.add(user)
            try:
                await self.session.flush()
            except IntegrityError as e:
                raise ValidationError("A user with this email already exists") from e

            self.audit_service.record(
                AuditAction.USER_SIGNUP,
                "user",
                entity_id=user.id,
                business_id=business_id,
                user_id=user.id,
                changes={"role": Role.MEMBER.value},
            )
            await self.session.commit()
        except ProvisioningError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Direct signup failed", error=str(e))
            raise

        logger.info("User signed up", user_id=str(user.id), business_id=str(business_id))
        return user

    def _issue(self, path: SignupPath, user: User) -> SignupResult:
        return SignupResult(path=path, user=user, access_token=create_access_token(user.id))
