"""Role and permission matrix.

Single source of truth for what each role may do. Pure lookups, no I/O.
Unknown role values fail closed: empty permission set, every check False.
"""

from uuid import UUID

from src.teamspace.models.enums import Permission, Role

_TASK_CLIENT = frozenset({Permission.VIEW_TASK, Permission.READ_COMMENTS})
_TASK_MEMBER = _TASK_CLIENT | {Permission.WRITE_COMMENTS}
_TASK_ALL = _TASK_MEMBER | {
    Permission.EDIT_TASK,
    Permission.DELETE_TASK,
    Permission.ASSIGN_TASK,
}

ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.SUPER_ADMIN: _TASK_ALL
    | {
        Permission.MANAGE_ADMINS,
        Permission.MANAGE_MEMBERS,
        Permission.MANAGE_ROLES,
        Permission.MANAGE_PERMISSIONS,
        Permission.VIEW_AUDIT_LOGS,
    },
    Role.ADMIN: _TASK_ALL | {Permission.MANAGE_MEMBERS, Permission.VIEW_AUDIT_LOGS},
    Role.MEMBER: _TASK_MEMBER,
    Role.CLIENT: _TASK_CLIENT,
}

# Roles an actor may manage (change, deactivate, revoke invitations for)
_MANAGEABLE: dict[Role, frozenset[Role]] = {
    Role.SUPER_ADMIN: frozenset({Role.ADMIN, Role.MEMBER, Role.CLIENT}),
    Role.ADMIN: frozenset({Role.MEMBER, Role.CLIENT}),
}

# Roles an actor may invite
_INVITABLE: dict[Role, frozenset[Role]] = {
    Role.SUPER_ADMIN: frozenset({Role.ADMIN, Role.MEMBER, Role.CLIENT}),
    Role.ADMIN: frozenset({Role.MEMBER, Role.CLIENT}),
}


def parse_role(value: Role | str | None) -> Role | None:
    """Coerce a stored or requested role to Role, None if unknown."""
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return None


def permissions_for(role: Role | str | None) -> frozenset[Permission]:
    """Return the fixed permission set for a role."""
    parsed = parse_role(role)
    if parsed is None:
        return frozenset()
    return ROLE_PERMISSIONS[parsed]


def has_permission(role: Role | str | None, permission: Permission) -> bool:
    return permission in permissions_for(role)


def can_manage_role(actor: Role | str | None, target: Role | str | None) -> bool:
    """SuperAdmin manages every non-SuperAdmin role; Admin manages Member and Client."""
    actor_role, target_role = parse_role(actor), parse_role(target)
    if actor_role is None or target_role is None:
        return False
    return target_role in _MANAGEABLE.get(actor_role, frozenset())


def can_send_invite(actor: Role | str | None, invite_role: Role | str | None) -> bool:
    """Only SuperAdmin invites Admins; SuperAdmin and Admin invite Members and Clients."""
    actor_role, target_role = parse_role(actor), parse_role(invite_role)
    if actor_role is None or target_role is None:
        return False
    return target_role in _INVITABLE.get(actor_role, frozenset())


def can_access_business(
    actor: Role | str | None,
    actor_business_id: UUID | None,
    business_id: UUID,
) -> bool:
    """SuperAdmin reaches every business; everyone else only their own."""
    actor_role = parse_role(actor)
    if actor_role is None:
        return False
    if actor_role is Role.SUPER_ADMIN:
        return True
    return actor_business_id is not None and actor_business_id == business_id
