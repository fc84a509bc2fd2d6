"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.teamspace.api.dependencies.db import DBSession
from src.teamspace.repositories import (
    AdminRequestRepository,
    AuditLogRepository,
    BusinessRepository,
    InvitationRepository,
    SystemStateRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_business_repository(session: DBSession) -> BusinessRepository:
    return BusinessRepository(session)


def get_invitation_repository(session: DBSession) -> InvitationRepository:
    return InvitationRepository(session)


def get_admin_request_repository(session: DBSession) -> AdminRequestRepository:
    return AdminRequestRepository(session)


def get_system_state_repository(session: DBSession) -> SystemStateRepository:
    return SystemStateRepository(session)


def get_audit_log_repository(session: DBSession) -> AuditLogRepository:
    return AuditLogRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
BusinessRepo = Annotated[BusinessRepository, Depends(get_business_repository)]
InvitationRepo = Annotated[InvitationRepository, Depends(get_invitation_repository)]
AdminRequestRepo = Annotated[AdminRequestRepository, Depends(get_admin_request_repository)]
SystemStateRepo = Annotated[SystemStateRepository, Depends(get_system_state_repository)]
AuditLogRepo = Annotated[AuditLogRepository, Depends(get_audit_log_repository)]
