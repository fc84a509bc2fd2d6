"""Integration fixtures for driving the HTTP API as a given user."""

import pytest

from src.teamspace.models import User
from tests.helpers import auth_headers


@pytest.fixture
def super_admin_headers(super_admin: User) -> dict[str, str]:
    return auth_headers(super_admin)


@pytest.fixture
def admin_headers(admin: User) -> dict[str, str]:
    return auth_headers(admin)


@pytest.fixture
def member_headers(member: User) -> dict[str, str]:
    return auth_headers(member)
