from src.teamspace.schemas.admin_request import AdminRequestDecision, AdminRequestRead
from src.teamspace.schemas.audit import AuditLogRead
from src.teamspace.schemas.auth import (
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
)
from src.teamspace.schemas.business import (
    BusinessCreate,
    BusinessRead,
    MemberQuotasResponse,
    RoleQuotaRead,
)
from src.teamspace.schemas.invitation import (
    AcceptInvitationRequest,
    InvitationCreateRequest,
    InvitationIssuedResponse,
    InvitationRead,
    InvitationValidateResponse,
)
from src.teamspace.schemas.pagination import Page
from src.teamspace.schemas.user import (
    CurrentUserRead,
    RoleChangeRequest,
    UserRead,
    UserUpdate,
)

__all__ = [
    # Admin requests
    "AdminRequestDecision",
    "AdminRequestRead",
    # Audit
    "AuditLogRead",
    # Auth
    "LoginRequest",
    "LoginResponse",
    "SignupRequest",
    "SignupResponse",
    # Business
    "BusinessCreate",
    "BusinessRead",
    "MemberQuotasResponse",
    "RoleQuotaRead",
    # Invitations
    "AcceptInvitationRequest",
    "InvitationCreateRequest",
    "InvitationIssuedResponse",
    "InvitationRead",
    "InvitationValidateResponse",
    # Pagination
    "Page",
    # User
    "CurrentUserRead",
    "RoleChangeRequest",
    "UserRead",
    "UserUpdate",
]
