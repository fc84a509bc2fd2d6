"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, BusinessFactory, ...
"""

from tests.factories.base import BaseFactory, new_id, utc_now
from tests.factories.business import BusinessFactory
from tests.factories.invitation import InvitationFactory
from tests.factories.user import DEFAULT_TEST_PASSWORD, UserFactory

__all__ = [
    # Base
    "BaseFactory",
    "new_id",
    "utc_now",
    # Business
    "BusinessFactory",
    # User
    "UserFactory",
    "DEFAULT_TEST_PASSWORD",
    # Invitation
    "InvitationFactory",
]
