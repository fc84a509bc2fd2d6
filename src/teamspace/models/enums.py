"""Shared enums for models."""

from enum import Enum


class Role(str, Enum):
    """User role. Every user holds exactly one."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    MEMBER = "member"
    CLIENT = "client"


class Permission(str, Enum):
    """Permissions granted through the role matrix."""

    # Task
    VIEW_TASK = "view_task"
    EDIT_TASK = "edit_task"
    DELETE_TASK = "delete_task"
    ASSIGN_TASK = "assign_task"
    READ_COMMENTS = "read_comments"
    WRITE_COMMENTS = "write_comments"

    # Administrative
    MANAGE_ADMINS = "manage_admins"
    MANAGE_MEMBERS = "manage_members"
    MANAGE_ROLES = "manage_roles"
    MANAGE_PERMISSIONS = "manage_permissions"
    VIEW_AUDIT_LOGS = "view_audit_logs"


class InvitationStatus(str, Enum):
    """Invitation status. Leaves PENDING at most once."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    EXPIRED = "expired"
    REVOKED = "revoked"


class AdminRequestStatus(str, Enum):
    """Admin request status. Leaves PENDING at most once."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SignupPath(str, Enum):
    """Which provisioning path a signup was routed through."""

    BOOTSTRAP = "bootstrap"
    INVITATION = "invitation"
    ADMIN_REQUEST = "admin_request"
    DIRECT = "direct"
