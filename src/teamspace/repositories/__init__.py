"""Repository layer - data access abstraction."""

from src.teamspace.repositories.admin_request import AdminRequestRepository
from src.teamspace.repositories.audit import AuditLogRepository
from src.teamspace.repositories.base import BaseRepository
from src.teamspace.repositories.business import BusinessRepository
from src.teamspace.repositories.invitation import InvitationRepository
from src.teamspace.repositories.system_state import SystemStateRepository
from src.teamspace.repositories.user import UserRepository

__all__ = [
    "AdminRequestRepository",
    "AuditLogRepository",
    "BaseRepository",
    "BusinessRepository",
    "InvitationRepository",
    "SystemStateRepository",
    "UserRepository",
]
