"""Business factory for test data generation."""

from polyfactory import Use

from src.teamspace.models import Business
from tests.factories.base import BaseFactory, new_id, utc_now


class BusinessFactory(BaseFactory):
    """Factory for generating Business test data.

    Counters start at zero; tests that seed users reserve seats through
    QuotaService so the counters stay truthful.
    """

    __model__ = Business

    id = Use(new_id)
    name = Use(lambda: f"Test Business {new_id().hex[-8:]}")
    max_admins = 5
    max_members = 50
    current_admins = 0
    current_members = 0
    is_active = True
    created_by_user_id = None
    created_at = Use(utc_now)

    @classmethod
    def with_limits(cls, max_admins: int, max_members: int, **kwargs):
        """Create a business with specific seat maximums."""
        return cls.build(max_admins=max_admins, max_members=max_members, **kwargs)
