"""Base repository with common data access operations."""

from typing import Any, Generic, TypeVar, cast
from uuid import UUID

from sqlalchemy import and_, or_
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.teamspace.core.errors import ValidationError
from src.teamspace.schemas.pagination import decode_cursor, encode_cursor


def affected_rows(result: Any) -> int:
    """Row count of an executed UPDATE/DELETE."""
    return cast(CursorResult[Any], result).rowcount or 0


ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Base repository providing common database operations.

    Repositories handle data access only. Transaction control (commit,
    rollback) belongs to the service layer.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID, *, fresh: bool = False) -> ModelType | None:
        """Get a record by its primary key.

        Args:
            id: Primary key
            fresh: Overwrite any identity-map copy with the current row. Needed
                after conditional UPDATEs, which bypass the session.
        """
        query = select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        if fresh:
            query = query.execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    async def paginate(
        self,
        query: Any,
        cursor: str | None,
        limit: int,
        sort_column: Any,
    ) -> tuple[list[ModelType], str | None, bool]:
        """Run ``query`` as one newest-first page, keyed on (sort_column, id).

        Returns:
            Tuple of (items, next_cursor, has_more)

        Raises:
            ValidationError: The cursor is malformed.
        """
        id_column = self.model.id  # type: ignore[attr-defined]
        if cursor:
            try:
                sorted_at, last_id = decode_cursor(cursor)
            except ValueError as e:
                raise ValidationError("Invalid pagination cursor") from e
            query = query.where(
                or_(
                    sort_column < sorted_at,
                    and_(sort_column == sorted_at, id_column < last_id),
                )
            )

        query = query.order_by(sort_column.desc(), id_column.desc()).limit(limit + 1)
        result = await self.session.execute(query)
        rows = list(result.scalars().all())

        has_more = len(rows) > limit
        items = rows[:limit]
        next_cursor = None
        if has_more:
            last = items[-1]
            next_cursor = encode_cursor(
                getattr(last, sort_column.key),
                last.id,  # type: ignore[attr-defined]
            )
        return items, next_cursor, has_more
