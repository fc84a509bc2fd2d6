"""End-to-end flows over HTTP."""

import pytest
from httpx import AsyncClient

from src.teamspace.models import Role
from tests.factories import DEFAULT_TEST_PASSWORD
from tests.helpers import create_business, create_invitation, create_user

pytestmark = pytest.mark.integration


async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "healthy"


async def test_metrics_exposed(client: AsyncClient):
    await client.get("/health")
    response = await client.get("/metrics")
    assert response.status_code == 200


async def test_bootstrap_to_first_admin(client: AsyncClient):
    """Empty system -> super admin -> business -> invited admin with a session."""
    response = await client.post(
        "/api/v1/auth/signup",
        json={"email": "root@example.com", "password": DEFAULT_TEST_PASSWORD, "full_name": "Root"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["path"] == "bootstrap"
    assert body["user"]["role"] == "super_admin"
    root = {"Authorization": f"Bearer {body['access_token']}"}

    response = await client.post(
        "/api/v1/businesses", json={"name": "Acme", "max_admins": 1}, headers=root
    )
    assert response.status_code == 201
    business = response.json()
    assert business["current_admins"] == 0

    response = await client.post(
        "/api/v1/invitations",
        json={"email": "ada@example.com", "role": "admin", "business_id": business["id"]},
        headers=root,
    )
    assert response.status_code == 201
    invitation = response.json()
    token = invitation["token"]
    assert invitation["invitation_url"].endswith(f"token={token}")
    assert invitation["status"] == "pending"

    response = await client.get("/api/v1/invitations/validate", params={"token": token})
    assert response.status_code == 200
    assert response.json()["business_name"] == "Acme"
    assert response.json()["role"] == "admin"

    response = await client.post(
        "/api/v1/invitations/accept",
        json={"token": token, "password": DEFAULT_TEST_PASSWORD, "full_name": "Ada"},
    )
    assert response.status_code == 201
    ada = {"Authorization": f"Bearer {response.json()['access_token']}"}

    response = await client.get("/api/v1/users/me", headers=ada)
    assert response.status_code == 200
    me = response.json()
    assert me["role"] == "admin"
    assert me["business_id"] == business["id"]
    assert "manage_members" in me["permissions"]
    assert "manage_admins" not in me["permissions"]

    response = await client.get(
        f"/api/v1/businesses/{business['id']}/member-quotas", headers=ada
    )
    assert response.status_code == 200
    assert response.json()["admin"] == {"current": 1, "limit": 1}

    # The token is spent
    response = await client.post(
        "/api/v1/invitations/accept",
        json={"token": token, "password": DEFAULT_TEST_PASSWORD, "full_name": "Ada"},
    )
    assert response.status_code == 409
    assert response.json()["error"] == "InvitationAlreadyConsumed"


async def test_admin_request_flow(client: AsyncClient, business, super_admin_headers):
    response = await client.post(
        "/api/v1/auth/signup",
        json={
            "email": "hopeful@example.com",
            "password": DEFAULT_TEST_PASSWORD,
            "full_name": "Hopeful",
            "business_id": str(business.id),
            "requested_role": "admin",
        },
    )
    assert response.status_code == 202
    body = response.json()
    assert body["path"] == "admin_request"
    assert body["request_status"] == "pending"
    assert body["access_token"] is None

    response = await client.get(
        "/api/v1/admin-requests", params={"status": "pending"}, headers=super_admin_headers
    )
    assert [r["id"] for r in response.json()["items"]] == [body["admin_request_id"]]

    response = await client.post(
        f"/api/v1/admin-requests/{body['admin_request_id']}",
        json={"status": "approved"},
        headers=super_admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "approved"

    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "hopeful@example.com", "password": DEFAULT_TEST_PASSWORD},
    )
    assert response.status_code == 200
    assert response.json()["user"]["role"] == "admin"

    response = await client.post(
        f"/api/v1/admin-requests/{body['admin_request_id']}",
        json={"status": "rejected"},
        headers=super_admin_headers,
    )
    assert response.status_code == 409
    assert response.json()["error"] == "AlreadyProcessed"


async def test_role_change_applies_to_existing_session(
    client: AsyncClient, super_admin_headers, member, member_headers
):
    response = await client.patch(
        f"/api/v1/users/{member.id}/role", json={"role": "client"}, headers=super_admin_headers
    )
    assert response.status_code == 200

    response = await client.get("/api/v1/users/me", headers=member_headers)
    assert response.json()["role"] == "client"
    assert "write_comments" not in response.json()["permissions"]


async def test_deactivated_user_loses_session(
    client: AsyncClient, admin_headers, member, member_headers
):
    response = await client.delete(f"/api/v1/users/{member.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    response = await client.get("/api/v1/users/me", headers=member_headers)
    assert response.status_code == 401


async def test_profile_update(client: AsyncClient, member_headers):
    response = await client.patch(
        "/api/v1/users/me", json={"full_name": "Renamed"}, headers=member_headers
    )
    assert response.status_code == 200
    assert response.json()["full_name"] == "Renamed"

    response = await client.patch(
        "/api/v1/users/me", json={"password": "password123"}, headers=member_headers
    )
    assert response.status_code == 422


async def test_audit_logs_need_permission(
    client: AsyncClient, business, admin_headers, member_headers
):
    await client.post(
        "/api/v1/invitations", json={"email": "x@example.com"}, headers=admin_headers
    )

    response = await client.get(
        f"/api/v1/businesses/{business.id}/audit-logs", headers=admin_headers
    )
    assert response.status_code == 200
    actions = [log["action"] for log in response.json()["items"]]
    assert "invitation.create" in actions

    response = await client.get(
        f"/api/v1/businesses/{business.id}/audit-logs", headers=member_headers
    )
    assert response.status_code == 403
    assert response.json()["error"] == "PermissionDenied"


async def test_quota_exceeded_is_conflict(client: AsyncClient, session_factory, super_admin):
    closed = await create_business(session_factory, max_members=0)

    response = await client.post(
        "/api/v1/auth/signup",
        json={
            "email": "late@example.com",
            "password": DEFAULT_TEST_PASSWORD,
            "full_name": "Late",
            "business_id": str(closed.id),
        },
    )

    assert response.status_code == 409
    assert response.json()["error"] == "QuotaExceeded"


async def test_expired_invitation_is_gone(client: AsyncClient, session_factory, business, admin):
    _, token = await create_invitation(session_factory, business, admin, expired=True)

    response = await client.get("/api/v1/invitations/validate", params={"token": token})

    assert response.status_code == 410
    assert response.json()["error"] == "InvitationExpired"


async def test_other_business_reads_are_not_found(
    client: AsyncClient, session_factory, admin_headers, other_business
):
    stranger = await create_user(session_factory, Role.MEMBER, other_business)

    response = await client.get(f"/api/v1/users/{stranger.id}", headers=admin_headers)

    assert response.status_code == 404


class TestErrorBodies:
    async def test_missing_token(self, client: AsyncClient):
        response = await client.get("/api/v1/users/me")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        body = response.json()
        assert body["detail"]
        assert body["request_id"]

    async def test_service_error_carries_request_id(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/invitations/validate",
            params={"token": "not-a-real-token-value"},
            headers={"X-Request-ID": "5f8f3a4e6d2b4c1a9e7f0b3c2d1e4f5a"},
        )

        assert response.status_code == 400
        assert response.json() == {
            "detail": "Invalid invitation",
            "error": "InvalidInvitation",
            "request_id": "5f8f3a4e6d2b4c1a9e7f0b3c2d1e4f5a",
        }
        assert response.headers["x-request-id"] == "5f8f3a4e6d2b4c1a9e7f0b3c2d1e4f5a"

    async def test_wrong_password(self, client: AsyncClient, member):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": member.email, "password": "Wrong-Horse-Battery-42!"},
        )

        assert response.status_code == 401
        assert response.json()["error"] == "InvalidCredentials"
