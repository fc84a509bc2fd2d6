"""FastAPI dependency injection definitions."""

from src.teamspace.api.dependencies.auth import CurrentUser, get_current_user
from src.teamspace.api.dependencies.db import DBSession, get_db_session
from src.teamspace.api.dependencies.repositories import (
    AdminRequestRepo,
    AuditLogRepo,
    BusinessRepo,
    InvitationRepo,
    SystemStateRepo,
    UserRepo,
)
from src.teamspace.api.dependencies.services import (
    AdminRequestServiceDep,
    AuditServiceDep,
    AuthServiceDep,
    BootstrapServiceDep,
    BusinessServiceDep,
    InvitationServiceDep,
    QuotaServiceDep,
    UserServiceDep,
)

__all__ = [
    # Auth
    "CurrentUser",
    "get_current_user",
    # Database
    "DBSession",
    "get_db_session",
    # Repositories
    "AdminRequestRepo",
    "AuditLogRepo",
    "BusinessRepo",
    "InvitationRepo",
    "SystemStateRepo",
    "UserRepo",
    # Services
    "AdminRequestServiceDep",
    "AuditServiceDep",
    "AuthServiceDep",
    "BootstrapServiceDep",
    "BusinessServiceDep",
    "InvitationServiceDep",
    "QuotaServiceDep",
    "UserServiceDep",
]
