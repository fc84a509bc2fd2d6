"""Service factory dependencies.

FastAPI caches dependencies per request, so every service below shares the
request's single session and therefore its transaction.
"""

from typing import Annotated

from fastapi import Depends

from src.teamspace.api.dependencies.db import DBSession
from src.teamspace.api.dependencies.repositories import (
    AdminRequestRepo,
    AuditLogRepo,
    BusinessRepo,
    InvitationRepo,
    SystemStateRepo,
    UserRepo,
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


def get_audit_service(audit_repo: AuditLogRepo, session: DBSession) -> AuditService:
    return AuditService(audit_repo, session)


AuditServiceDep = Annotated[AuditService, Depends(get_audit_service)]


def get_quota_service(business_repo: BusinessRepo, user_repo: UserRepo) -> QuotaService:
    return QuotaService(business_repo, user_repo)


QuotaServiceDep = Annotated[QuotaService, Depends(get_quota_service)]


def get_bootstrap_service(
    system_state_repo: SystemStateRepo,
    user_repo: UserRepo,
    session: DBSession,
) -> BootstrapService:
    return BootstrapService(system_state_repo, user_repo, session)


BootstrapServiceDep = Annotated[BootstrapService, Depends(get_bootstrap_service)]


def get_invitation_service(
    invitation_repo: InvitationRepo,
    user_repo: UserRepo,
    business_repo: BusinessRepo,
    quota_service: QuotaServiceDep,
    audit_service: AuditServiceDep,
    session: DBSession,
) -> InvitationService:
    return InvitationService(
        invitation_repo, user_repo, business_repo, quota_service, audit_service, session
    )


InvitationServiceDep = Annotated[InvitationService, Depends(get_invitation_service)]


def get_admin_request_service(
    admin_request_repo: AdminRequestRepo,
    user_repo: UserRepo,
    business_repo: BusinessRepo,
    quota_service: QuotaServiceDep,
    audit_service: AuditServiceDep,
    session: DBSession,
) -> AdminRequestService:
    return AdminRequestService(
        admin_request_repo, user_repo, business_repo, quota_service, audit_service, session
    )


AdminRequestServiceDep = Annotated[AdminRequestService, Depends(get_admin_request_service)]


def get_auth_service(
    user_repo: UserRepo,
    business_repo: BusinessRepo,
    bootstrap_service: BootstrapServiceDep,
    invitation_service: InvitationServiceDep,
    admin_request_service: AdminRequestServiceDep,
    quota_service: QuotaServiceDep,
    audit_service: AuditServiceDep,
    session: DBSession,
) -> AuthService:
    return AuthService(
        user_repo,
        business_repo,
        bootstrap_service,
        invitation_service,
        admin_request_service,
        quota_service,
        audit_service,
        session,
    )


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


def get_business_service(
    business_repo: BusinessRepo,
    audit_service: AuditServiceDep,
    session: DBSession,
) -> BusinessService:
    return BusinessService(business_repo, audit_service, session)


BusinessServiceDep = Annotated[BusinessService, Depends(get_business_service)]


def get_user_service(
    user_repo: UserRepo,
    quota_service: QuotaServiceDep,
    audit_service: AuditServiceDep,
    session: DBSession,
) -> UserService:
    return UserService(user_repo, quota_service, audit_service, session)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
