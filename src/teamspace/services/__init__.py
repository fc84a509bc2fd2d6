"""Service layer - business logic."""

from src.teamspace.services.admin_request_service import AdminRequestService
from src.teamspace.services.audit_service import AuditService
from src.teamspace.services.auth_service import AuthService, SignupResult
from src.teamspace.services.bootstrap_service import BootstrapService
from src.teamspace.services.business_service import BusinessService
from src.teamspace.services.invitation_service import InvitationService
from src.teamspace.services.quota_service import QuotaService, RoleQuota
from src.teamspace.services.user_service import UserService

__all__ = [
    "AdminRequestService",
    "AuditService",
    "AuthService",
    "BootstrapService",
    "BusinessService",
    "InvitationService",
    "QuotaService",
    "RoleQuota",
    "SignupResult",
    "UserService",
]
