"""Keyset pagination.

A cursor names the last row of the previous page by its sort timestamp and
its id. Rows that share a timestamp are therefore neither skipped nor
repeated when the listing is walked page by page.
"""

import base64
import json
from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field

ItemT = TypeVar("ItemT")


class Page(BaseModel, Generic[ItemT]):
    """One page of a listing, newest first."""

    items: list[ItemT]
    next_cursor: str | None = Field(
        default=None,
        description="Pass back unchanged to fetch the following page; null on the last page.",
    )
    has_more: bool = False


def encode_cursor(sorted_at: datetime, row_id: UUID) -> str:
    payload = json.dumps([sorted_at.isoformat(), str(row_id)])
    return base64.urlsafe_b64encode(payload.encode()).decode()


def decode_cursor(cursor: str) -> tuple[datetime, UUID]:
    """Inverse of encode_cursor.

    Raises:
        ValueError: The cursor was not produced by encode_cursor.
    """
    try:
        sorted_at, row_id = json.loads(base64.urlsafe_b64decode(cursor.encode()))
        return datetime.fromisoformat(sorted_at), UUID(row_id)
    except (ValueError, TypeError) as e:
        raise ValueError("Invalid cursor") from e
