"""Model exports.

Import from here: `from src.teamspace.models import User, Business`
"""

from src.teamspace.models.admin_request import AdminRequest
from src.teamspace.models.audit import AuditAction, AuditLog
from src.teamspace.models.business import Business
from src.teamspace.models.enums import (
    AdminRequestStatus,
    InvitationStatus,
    Permission,
    Role,
    SignupPath,
)
from src.teamspace.models.invitation import Invitation
from src.teamspace.models.system import SYSTEM_STATE_ID, SystemState
from src.teamspace.models.user import User

__all__ = [
    # Enums
    "AdminRequestStatus",
    "AuditAction",
    "InvitationStatus",
    "Permission",
    "Role",
    "SignupPath",
    # Models
    "AdminRequest",
    "AuditLog",
    "Business",
    "Invitation",
    "SYSTEM_STATE_ID",
    "SystemState",
    "User",
]
