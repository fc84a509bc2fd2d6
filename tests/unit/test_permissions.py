"""Tests for the role and permission matrix (src/teamspace/core/permissions.py)."""

from uuid import uuid4

import pytest
from hypothesis import given
from hypothesis import strategies as st

from src.teamspace.core.permissions import (
    ROLE_PERMISSIONS,
    can_access_business,
    can_manage_role,
    can_send_invite,
    has_permission,
    permissions_for,
)
from src.teamspace.models import Permission, Role

pytestmark = pytest.mark.unit

known_roles = st.sampled_from(list(Role))
unknown_roles = st.text(max_size=20).filter(lambda s: s not in {r.value for r in Role})


class TestPermissionMatrix:
    def test_super_admin_holds_every_permission(self):
        assert permissions_for(Role.SUPER_ADMIN) == frozenset(Permission)

    def test_admin_permissions(self):
        admin = permissions_for(Role.ADMIN)
        assert Permission.MANAGE_MEMBERS in admin
        assert Permission.VIEW_AUDIT_LOGS in admin
        assert Permission.ASSIGN_TASK in admin
        assert Permission.MANAGE_ADMINS not in admin
        assert Permission.MANAGE_ROLES not in admin
        assert Permission.MANAGE_PERMISSIONS not in admin

    def test_member_permissions(self):
        assert permissions_for(Role.MEMBER) == {
            Permission.VIEW_TASK,
            Permission.READ_COMMENTS,
            Permission.WRITE_COMMENTS,
        }

    def test_client_permissions(self):
        assert permissions_for(Role.CLIENT) == {Permission.VIEW_TASK, Permission.READ_COMMENTS}

    def test_roles_nest(self):
        """Each role holds everything the role below it holds."""
        assert permissions_for(Role.CLIENT) < permissions_for(Role.MEMBER)
        assert permissions_for(Role.MEMBER) < permissions_for(Role.ADMIN)
        assert permissions_for(Role.ADMIN) < permissions_for(Role.SUPER_ADMIN)

    def test_stored_string_roles_are_accepted(self):
        assert has_permission("admin", Permission.MANAGE_MEMBERS)
        assert not has_permission("member", Permission.MANAGE_MEMBERS)

    def test_every_role_has_an_entry(self):
        assert set(ROLE_PERMISSIONS) == set(Role)


class TestRoleAuthority:
    @pytest.mark.parametrize(
        ("actor", "target", "expected"),
        [
            (Role.SUPER_ADMIN, Role.ADMIN, True),
            (Role.SUPER_ADMIN, Role.MEMBER, True),
            (Role.SUPER_ADMIN, Role.CLIENT, True),
            (Role.SUPER_ADMIN, Role.SUPER_ADMIN, False),
            (Role.ADMIN, Role.ADMIN, False),
            (Role.ADMIN, Role.MEMBER, True),
            (Role.ADMIN, Role.CLIENT, True),
            (Role.MEMBER, Role.CLIENT, False),
            (Role.CLIENT, Role.CLIENT, False),
        ],
    )
    def test_can_manage_role(self, actor: Role, target: Role, expected: bool):
        assert can_manage_role(actor, target) is expected

    @pytest.mark.parametrize(
        ("actor", "invite_role", "expected"),
        [
            (Role.SUPER_ADMIN, Role.ADMIN, True),
            (Role.SUPER_ADMIN, Role.MEMBER, True),
            (Role.SUPER_ADMIN, Role.SUPER_ADMIN, False),
            (Role.ADMIN, Role.ADMIN, False),
            (Role.ADMIN, Role.MEMBER, True),
            (Role.ADMIN, Role.CLIENT, True),
            (Role.MEMBER, Role.MEMBER, False),
            (Role.CLIENT, Role.CLIENT, False),
        ],
    )
    def test_can_send_invite(self, actor: Role, invite_role: Role, expected: bool):
        assert can_send_invite(actor, invite_role) is expected


class TestBusinessAccess:
    def test_super_admin_reaches_any_business(self):
        assert can_access_business(Role.SUPER_ADMIN, None, uuid4())

    def test_admin_only_own_business(self):
        own, other = uuid4(), uuid4()
        assert can_access_business(Role.ADMIN, own, own)
        assert not can_access_business(Role.ADMIN, own, other)

    def test_user_without_business_reaches_nothing(self):
        assert not can_access_business(Role.MEMBER, None, uuid4())


@given(role=unknown_roles, permission=st.sampled_from(list(Permission)))
def test_unknown_role_is_denied_everything(role: str, permission: Permission):
    assert permissions_for(role) == frozenset()
    assert not has_permission(role, permission)
    assert not can_manage_role(role, Role.CLIENT)
    assert not can_send_invite(role, Role.CLIENT)
    assert not can_access_business(role, None, uuid4())


@given(actor=known_roles, target=unknown_roles)
def test_unknown_target_role_is_never_manageable(actor: Role, target: str):
    assert not can_manage_role(actor, target)
    assert not can_send_invite(actor, target)


@given(actor=known_roles, target=known_roles)
def test_manage_implies_invite(actor: Role, target: Role):
    """Whoever may manage a role may also invite into it."""
    if can_manage_role(actor, target):
        assert can_send_invite(actor, target)


@given(actor=known_roles)
def test_nobody_manages_super_admins(actor: Role):
    assert not can_manage_role(actor, Role.SUPER_ADMIN)
    assert not can_send_invite(actor, Role.SUPER_ADMIN)
