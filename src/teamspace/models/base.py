"""Column helpers shared by all tables."""

from datetime import UTC, datetime
from uuid import UUID, uuid4


def utc_now() -> datetime:
    """Return current UTC time as a naive datetime.

    Columns are TIMESTAMP WITHOUT TIME ZONE; every stored time is UTC by convention.
    """
    return datetime.now(UTC).replace(tzinfo=None)


def new_id() -> UUID:
    """Primary key factory."""
    return uuid4()
