"""Test helper functions for common data creation patterns."""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.teamspace.core.security import create_access_token
from src.teamspace.models import Business, Invitation, Role, User
from src.teamspace.repositories import (
    AdminRequestRepository,
    AuditLogRepository,
    BusinessRepository,
    InvitationRepository,
    SystemStateRepository,
    UserRepository,
)
from src.teamspace.services import (
    AdminRequestService,
    AuditService,
    AuthService,
    BootstrapService,
    BusinessService,
    InvitationService,
    QuotaService,
    UserService,
)
from src.teamspace.services.quota_service import COUNTED_ROLES
from tests.factories import BusinessFactory, InvitationFactory, UserFactory


@dataclass
class Services:
    """Every service wired to one session, the way a request gets them."""

    session: AsyncSession
    users: UserRepository
    businesses: BusinessRepository
    invitations_repo: InvitationRepository
    audit_repo: AuditLogRepository
    audit: AuditService
    quota: QuotaService
    bootstrap: BootstrapService
    invitations: InvitationService
    admin_requests: AdminRequestService
    auth: AuthService
    business: BusinessService
    user: UserService


def build_services(session: AsyncSession) -> Services:
    user_repo = UserRepository(session)
    business_repo = BusinessRepository(session)
    invitation_repo = InvitationRepository(session)
    audit_repo = AuditLogRepository(session)

    audit = AuditService(audit_repo, session)
    quota = QuotaService(business_repo, user_repo)
    bootstrap = BootstrapService(SystemStateRepository(session), user_repo, session)
    invitations = InvitationService(
        invitation_repo, user_repo, business_repo, quota, audit, session
    )
    admin_requests = AdminRequestService(
        AdminRequestRepository(session), user_repo, business_repo, quota, audit, session
    )
    auth = AuthService(
        user_repo,
        business_repo,
        bootstrap,
        invitations,
        admin_requests,
        quota,
        audit,
        session,
    )
    return Services(
        session=session,
        users=user_repo,
        businesses=business_repo,
        invitations_repo=invitation_repo,
        audit_repo=audit_repo,
        audit=audit,
        quota=quota,
        bootstrap=bootstrap,
        invitations=invitations,
        admin_requests=admin_requests,
        auth=auth,
        business=BusinessService(business_repo, audit, session),
        user=UserService(user_repo, quota, audit, session),
    )


async def create_business(
    session_factory: async_sessionmaker[AsyncSession], **kwargs
) -> Business:
    async with session_factory() as session:
        business = BusinessFactory.build(**kwargs)
        session.add(business)
        await session.commit()
    return business


async def create_user(
    session_factory: async_sessionmaker[AsyncSession],
    role: Role = Role.MEMBER,
    business: Business | None = None,
    **user_kwargs,
) -> User:
    """Insert a user, taking a real quota seat for counted roles.

    Args:
        session_factory: Factory for the test database
        role: Role of the new user (default: MEMBER)
        business: Business the user belongs to; None only for super admins
        **user_kwargs: Additional args passed to UserFactory

    Returns:
        The committed user, detached and safe to read.
    """
    async with session_factory() as session:
        if business is not None and role in COUNTED_ROLES:
            await build_services(session).quota.reserve(business.id, role)
        user = UserFactory.build(
            role=role.value,
            business_id=business.id if business else None,
            **user_kwargs,
        )
        session.add(user)
        await session.commit()
    return user


async def create_invitation(
    session_factory: async_sessionmaker[AsyncSession],
    business: Business,
    inviter: User,
    expired: bool = False,
    **kwargs,
) -> tuple[Invitation, str]:
    """Insert an invitation directly and return it with its plaintext token."""
    build = InvitationFactory.past_expiry if expired else InvitationFactory.issued
    invitation, token = build(
        business_id=business.id,
        invited_by_user_id=inviter.id,
        **kwargs,
    )
    async with session_factory() as session:
        session.add(invitation)
        await session.commit()
    return invitation, token


async def reload_business(
    session_factory: async_sessionmaker[AsyncSession], business_id
) -> Business:
    async with session_factory() as session:
        business = await BusinessRepository(session).get_fresh(business_id)
    if business is None:
        raise LookupError(business_id)
    return business


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}
