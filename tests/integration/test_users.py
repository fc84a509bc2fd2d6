"""Role changes, deactivation and profile updates."""

import pytest

from src.teamspace.core.errors import (
    InvalidCredentials,
    NotFound,
    PermissionDenied,
    QuotaExceeded,
    ValidationError,
)
from src.teamspace.models import AuditAction, Role
from tests.factories import DEFAULT_TEST_PASSWORD, utc_now
from tests.helpers import build_services, create_user, reload_business

pytestmark = pytest.mark.integration


class TestChangeRole:
    async def test_promotion_moves_seat(self, session_factory, super_admin, business, member):
        async with session_factory() as session:
            updated = await build_services(session).user.change_role(
                super_admin, member.id, Role.ADMIN
            )

        assert updated.role == Role.ADMIN.value
        refreshed = await reload_business(session_factory, business.id)
        assert (refreshed.current_admins, refreshed.current_members) == (1, 0)

        async with session_factory() as session:
            logs = await build_services(session).audit_repo.list_by_entity("user", member.id)
        assert logs[-1].action == AuditAction.USER_ROLE_CHANGE.value
        assert logs[-1].changes == {"role": {"old": "member", "new": "admin"}}
        assert logs[-1].user_id == super_admin.id

    async def test_demotion_to_client_frees_member_seat(
        self, session_factory, business, admin, member
    ):
        async with session_factory() as session:
            await build_services(session).user.change_role(admin, member.id, Role.CLIENT)

        refreshed = await reload_business(session_factory, business.id)
        assert refreshed.current_members == 0
        assert refreshed.current_admins == 1

    async def test_full_target_role_leaves_user_unchanged(
        self, session_factory, super_admin, business, admin, member
    ):
        await create_user(session_factory, Role.ADMIN, business)

        async with session_factory() as session:
            with pytest.raises(QuotaExceeded):
                await build_services(session).user.change_role(super_admin, member.id, Role.ADMIN)

        async with session_factory() as session:
            stored = await build_services(session).users.get_by_id(member.id)
        assert stored.role == Role.MEMBER.value
        refreshed = await reload_business(session_factory, business.id)
        assert (refreshed.current_admins, refreshed.current_members) == (2, 1)

    async def test_same_role_is_a_no_op(self, session_factory, business, admin, member):
        async with session_factory() as session:
            unchanged = await build_services(session).user.change_role(
                admin, member.id, Role.MEMBER
            )
        assert unchanged.role == Role.MEMBER.value
        assert (await reload_business(session_factory, business.id)).current_members == 1

    async def test_admin_cannot_promote_to_admin(self, session_factory, admin, member):
        async with session_factory() as session:
            with pytest.raises(PermissionDenied):
                await build_services(session).user.change_role(admin, member.id, Role.ADMIN)

    async def test_admin_cannot_demote_another_admin(self, session_factory, business, admin):
        peer = await create_user(session_factory, Role.ADMIN, business)
        async with session_factory() as session:
            with pytest.raises(PermissionDenied):
                await build_services(session).user.change_role(admin, peer.id, Role.MEMBER)

    async def test_member_cannot_change_roles(self, session_factory, business, member):
        client = await create_user(session_factory, Role.CLIENT, business)
        async with session_factory() as session:
            with pytest.raises(PermissionDenied):
                await build_services(session).user.change_role(member, client.id, Role.CLIENT)

    async def test_cannot_change_own_role(self, session_factory, admin):
        async with session_factory() as session:
            with pytest.raises(ValidationError):
                await build_services(session).user.change_role(admin, admin.id, Role.MEMBER)

    async def test_other_business_user_is_invisible(
        self, session_factory, admin, other_business
    ):
        stranger = await create_user(session_factory, Role.MEMBER, other_business)
        async with session_factory() as session:
            with pytest.raises(NotFound):
                await build_services(session).user.change_role(admin, stranger.id, Role.CLIENT)

    async def test_super_admin_is_never_a_target(self, session_factory, super_admin, admin):
        async with session_factory() as session:
            with pytest.raises(NotFound):
                await build_services(session).user.change_role(admin, super_admin.id, Role.MEMBER)


class TestDeactivate:
    async def test_frees_seat_and_blocks_login(self, session_factory, business, admin, member):
        async with session_factory() as session:
            gone = await build_services(session).user.deactivate(admin, member.id)

        assert gone.is_active is False
        assert (await reload_business(session_factory, business.id)).current_members == 0

        async with session_factory() as session:
            truth = await build_services(session).quota.recount(business.id)
        assert truth[Role.MEMBER] == 0

    async def test_twice_is_rejected(self, session_factory, business, admin, member):
        async with session_factory() as session:
            await build_services(session).user.deactivate(admin, member.id)
        async with session_factory() as session:
            with pytest.raises(ValidationError):
                await build_services(session).user.deactivate(admin, member.id)
        assert (await reload_business(session_factory, business.id)).current_members == 0

    async def test_cannot_deactivate_self(self, session_factory, admin):
        async with session_factory() as session:
            with pytest.raises(ValidationError):
                await build_services(session).user.deactivate(admin, admin.id)

    async def test_admin_cannot_deactivate_admin(self, session_factory, business, admin):
        peer = await create_user(session_factory, Role.ADMIN, business)
        async with session_factory() as session:
            with pytest.raises(PermissionDenied):
                await build_services(session).user.deactivate(admin, peer.id)


class TestProfileAndReads:
    async def test_update_name_and_password(self, session_factory, member):
        new_password = "Another-Strong-Passphrase-77"
        async with session_factory() as session:
            s = build_services(session)
            user = await s.users.get_by_id(member.id)
            updated = await s.user.update_profile(
                user, full_name="Renamed", password=new_password
            )
        assert updated.full_name == "Renamed"
        assert updated.role == Role.MEMBER.value

        async with session_factory() as session:
            user, _ = await build_services(session).auth.login(member.email, new_password)
        assert user.id == member.id

    async def test_old_password_stops_working(self, session_factory, member):
        async with session_factory() as session:
            s = build_services(session)
            user = await s.users.get_by_id(member.id)
            await s.user.update_profile(user, password="Another-Strong-Passphrase-77")

        async with session_factory() as session:
            with pytest.raises(InvalidCredentials):
                await build_services(session).auth.login(member.email, DEFAULT_TEST_PASSWORD)

    async def test_get_user_scoping(
        self, session_factory, super_admin, admin, member, other_business
    ):
        stranger = await create_user(session_factory, Role.MEMBER, other_business)

        async with session_factory() as session:
            s = build_services(session)
            assert (await s.user.get_user(admin, member.id)).id == member.id
            assert (await s.user.get_user(member, member.id)).id == member.id
            assert (await s.user.get_user(super_admin, stranger.id)).id == stranger.id
            with pytest.raises(NotFound):
                await s.user.get_user(admin, stranger.id)
            with pytest.raises(NotFound):
                await s.user.get_user(admin, super_admin.id)

    async def test_list_members(self, session_factory, business, admin, member, other_business):
        async with session_factory() as session:
            s = build_services(session)
            users, _, has_more = await s.user.list_members(admin, business.id)
            assert {u.id for u in users} == {admin.id, member.id}
            assert has_more is False
            with pytest.raises(PermissionDenied):
                await s.user.list_members(admin, other_business.id)


class TestMemberPages:
    async def test_pages_walk_rows_sharing_a_timestamp(self, session_factory, business, admin):
        stamp = utc_now()
        created = {
            (await create_user(session_factory, Role.CLIENT, business, created_at=stamp)).id
            for _ in range(5)
        }

        seen: list = []
        cursor = None
        async with session_factory() as session:
            s = build_services(session)
            while True:
                users, cursor, has_more = await s.user.list_members(
                    admin, business.id, cursor=cursor, limit=2
                )
                seen.extend(u.id for u in users)
                if not has_more:
                    break
                assert cursor is not None

        assert len(seen) == len(set(seen)) == 6
        assert created | {admin.id} == set(seen)

    async def test_malformed_cursor_is_rejected(self, session_factory, business, admin):
        async with session_factory() as session:
            with pytest.raises(ValidationError):
                await build_services(session).user.list_members(
                    admin, business.id, cursor="not-a-cursor"
                )
